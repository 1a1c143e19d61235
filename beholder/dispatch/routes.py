"""
토픽별 라우트 구성

각 핸들러가 상태를 먼저 갱신하고, 만들어진 알림은 NotificationService로 전달한다.
"""
from typing import Awaitable, Callable

from beholder.api.errors.models import FailureEvent
from beholder.api.errors.service import handle_failure
from beholder.api.events.models import NamedEvent
from beholder.api.events.service import handle_named_event
from beholder.api.notify.models import Notification
from beholder.api.notify.service import NotificationService
from beholder.api.progress.models import ProgressEvent
from beholder.api.progress.service import ProgressStateMachine
from beholder.api.status.models import StatusEvent
from beholder.api.status.service import StatusTransitionHandler

from .router import EventRouter, Route, Topic, json_decoder


def _deliver_after(
    handler: Callable[..., Awaitable[list[Notification]]],
    notifier: NotificationService,
) -> Callable[..., Awaitable[None]]:
    async def handle(event) -> None:
        notifications = await handler(event)
        if notifications:
            await notifier.deliver(notifications)

    return handle


def build_router(
    machine: ProgressStateMachine,
    status_handler: StatusTransitionHandler,
    notifier: NotificationService,
) -> EventRouter:
    router = EventRouter()

    progress_route = Route(json_decoder(ProgressEvent), _deliver_after(machine.handle_progress, notifier))
    status_route = Route(json_decoder(StatusEvent), _deliver_after(status_handler.handle_status, notifier))

    router.register(Topic.PROGRESS, progress_route)
    router.register(Topic.TELEMETRY_PROGRESS, progress_route)
    router.register(Topic.STATUS, status_route)
    router.register(Topic.TELEMETRY_STATUS, status_route)
    router.register(Topic.ERROR, Route(json_decoder(FailureEvent), _deliver_after(handle_failure, notifier)))
    router.register(Topic.EVENTS, Route(json_decoder(NamedEvent), _deliver_after(handle_named_event, notifier)))

    router.ensure_complete()
    return router
