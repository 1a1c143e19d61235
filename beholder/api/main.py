from fastapi import APIRouter

from .progress.router import progress_router

api_router = APIRouter()

api_router.include_router(progress_router)
