from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .env import settings


def make_db(mongo_url: str | None = None, db_name: str | None = None) -> AsyncIOMotorDatabase:
    client = AsyncIOMotorClient(mongo_url or settings.mongo_url, serverSelectionTimeoutMS=5000)
    return client[db_name or settings.db_name]
