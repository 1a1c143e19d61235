from types import SimpleNamespace

import pytest

from beholder.api.jobs.models import CreatorKind, JobStatus
from beholder.api.jobs.service import JobService
from beholder.errors import JobLookupError


class FakeCollection:
    """motor 컬렉션 중 JobService가 쓰는 부분만 흉내"""

    def __init__(self, docs):
        self.docs = {doc["_id"]: doc for doc in docs}
        self.updates = []

    async def find_one(self, query):
        return self.docs.get(query["_id"])

    async def update_one(self, query, update):
        self.updates.append((query, update))
        doc = self.docs.get(query["_id"])
        if doc is not None:
            doc.update(update["$set"])
            doc.setdefault("history", []).append(update["$push"]["history"])
        return SimpleNamespace(matched_count=1 if doc is not None else 0)


def make_service(docs):
    collection = FakeCollection(docs)
    return JobService({"jobs": collection}), collection


@pytest.mark.asyncio
async def test_get_job_reads_creator_fields():
    service, _ = make_service([
        {"_id": "J1", "status": "downloading", "creator": {"kind": "trello", "ref": "card-1"}},
        {"_id": "J2", "status": "queued", "creator_kind": "other"},
    ])

    j1 = await service.get_job("J1")
    j2 = await service.get_job("J2")

    assert (j1.status, j1.creator_kind, j1.creator_ref) == (JobStatus.DOWNLOADING, CreatorKind.TRELLO, "card-1")
    assert (j2.creator_kind, j2.creator_ref) == (CreatorKind.OTHER, None)


@pytest.mark.asyncio
async def test_get_job_missing_raises_lookup_error():
    service, _ = make_service([])

    with pytest.raises(JobLookupError):
        await service.get_job("nope")


@pytest.mark.asyncio
async def test_set_status_updates_and_appends_history():
    service, collection = make_service([{"_id": "J1", "status": "uploading"}])

    assert await service.set_status("J1", JobStatus.DEPLOYED) is True

    job = await service.get_job("J1")
    assert job.status == JobStatus.DEPLOYED
    assert job.history[-1].status == JobStatus.DEPLOYED
    assert job.history[-1].message == "status changed to Deployed"


@pytest.mark.asyncio
async def test_set_status_on_missing_job_reports_false():
    service, collection = make_service([])

    assert await service.set_status("ghost", JobStatus.ERRORED) is False
    assert len(collection.updates) == 1
