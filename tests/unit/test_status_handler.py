import pytest

from beholder.api.jobs.models import CreatorKind, JobStatus
from beholder.api.notify.models import NotificationKind
from beholder.api.status.models import StatusEvent
from beholder.api.status.service import StatusTransitionHandler
from beholder.config.env import Settings
from beholder.errors import ConfigMappingError


@pytest.mark.asyncio
async def test_deployed_moves_card_then_fires_hooks(jobs, settings, notifier, calls):
    jobs.add("J1", CreatorKind.TRELLO, ref="card-1")
    handler = StatusTransitionHandler(jobs, settings)

    notifications = await handler.handle_status(StatusEvent(job_id="J1", status=JobStatus.DEPLOYED))
    await notifier.deliver(notifications)

    assert calls == [
        ("set_status", "J1", JobStatus.DEPLOYED),
        ("move_card", "card-1", "list-deployed"),
        ("post_chat_message", "#media", "Job `J1` has been deployed"),
        ("refresh_media_library", "http://media.local/library/sections/all/refresh"),
    ]
    assert jobs.jobs["J1"].status == JobStatus.DEPLOYED


@pytest.mark.asyncio
async def test_unmapped_status_still_persists_and_warns(jobs, settings, notifier, calls, caplog):
    jobs.add("J1", CreatorKind.TRELLO)
    handler = StatusTransitionHandler(jobs, settings)

    notifications = await handler.handle_status(StatusEvent(job_id="J1", status=JobStatus.CONVERTING))
    await notifier.deliver(notifications)

    assert calls == [("set_status", "J1", JobStatus.CONVERTING)]
    assert "No list configured for status converting" in caplog.text


@pytest.mark.asyncio
async def test_non_tracker_job_skips_move_but_keeps_deploy_hooks(jobs, settings):
    jobs.add("J1", CreatorKind.OTHER)
    handler = StatusTransitionHandler(jobs, settings)

    notifications = await handler.handle_status(StatusEvent(job_id="J1", status=JobStatus.DEPLOYED))

    assert [n.kind for n in notifications] == [NotificationKind.CHAT, NotificationKind.REFRESH_MEDIA]


@pytest.mark.asyncio
async def test_deploy_hooks_can_be_disabled(jobs):
    jobs.add("J1", CreatorKind.TRELLO)
    handler = StatusTransitionHandler(
        jobs, Settings(status_lists={"deployed": "L"}, deploy_hooks_enabled=False)
    )

    notifications = await handler.handle_status(StatusEvent(job_id="J1", status=JobStatus.DEPLOYED))

    assert [(n.kind, n.list_id) for n in notifications] == [(NotificationKind.MOVE_CARD, "L")]


@pytest.mark.asyncio
async def test_missing_job_persists_status_and_returns_nothing(jobs, settings, calls, caplog):
    handler = StatusTransitionHandler(jobs, settings)

    notifications = await handler.handle_status(StatusEvent(job_id="ghost", status=JobStatus.DEPLOYED))

    assert notifications == []
    assert calls == [("set_status", "ghost", JobStatus.DEPLOYED)]
    assert "Job ghost not found" in caplog.text


def test_resolve_list_raises_for_unmapped_status(jobs, settings):
    handler = StatusTransitionHandler(jobs, settings)

    assert handler.resolve_list(JobStatus.DOWNLOADING) == "list-downloading"
    with pytest.raises(ConfigMappingError):
        handler.resolve_list(JobStatus.ERRORED)


def test_status_event_accepts_wire_aliases():
    event = StatusEvent.model_validate({"jobId": "J1", "status": "deployed", "host": "edge-1"})
    assert (event.job_id, event.status, event.status.label) == ("J1", JobStatus.DEPLOYED, "Deployed")
