import pytest

from beholder.api.errors.models import FailureEvent
from beholder.api.errors.service import handle_failure
from beholder.api.events.models import NamedEvent
from beholder.api.events.service import handle_named_event


@pytest.mark.asyncio
async def test_known_error_gets_suggested_fix():
    event = FailureEvent.model_validate(
        {"job": "J1", "stage": "download", "data": {"message": "stalled", "code": "ERRDLSTALL"}}
    )

    notifications = await handle_failure(event)

    assert [n.text for n in notifications] == [
        "download: Failed: stalled",
        "Suggested fix: Try finding another source.",
    ]


@pytest.mark.asyncio
async def test_unknown_error_only_reports_failure():
    notifications = await handle_failure(FailureEvent(job_id="J1", stage="convert", message="boom", code="E1"))

    assert [n.text for n in notifications] == ["convert: Failed: boom"]


@pytest.mark.asyncio
async def test_scale_up_pending_comments_on_each_job():
    notifications = await handle_named_event(NamedEvent(event="scaleUpPending", cause=["J1", "J2"]))

    assert [(n.job_id, n.text) for n in notifications] == [
        ("J1", "**Scale up pending**"),
        ("J2", "**Scale up pending**"),
    ]


@pytest.mark.asyncio
async def test_unknown_named_event_is_ignored(caplog):
    assert await handle_named_event(NamedEvent(event="somethingElse", cause={})) == []
    assert "skipping event we dont know of: somethingElse" in caplog.text
