from typing import Annotated

from fastapi import Depends, Request

from beholder.api.progress.service import ProgressStateMachine
from beholder.api.progress.sweep import EtaSweeper
from beholder.dispatch import EventRouter


def get_state_machine(request: Request) -> ProgressStateMachine:
    return request.app.state.machine


def get_event_router(request: Request) -> EventRouter:
    return request.app.state.router


def get_sweeper(request: Request) -> EtaSweeper:
    return request.app.state.sweeper


MachineDep = Annotated[ProgressStateMachine, Depends(get_state_machine)]
RouterDep = Annotated[EventRouter, Depends(get_event_router)]
SweeperDep = Annotated[EtaSweeper, Depends(get_sweeper)]
