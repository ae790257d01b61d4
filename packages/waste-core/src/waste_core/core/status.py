from __future__ import annotations

import logging

from waste_core.core.exceptions import InvalidTransitionError
from waste_core.core.models import ReportStatus, TaskStatus

logger = logging.getLogger(__name__)

REPORT_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.VERIFIED, ReportStatus.REJECTED}),
    ReportStatus.VERIFIED: frozenset({ReportStatus.ASSIGNED}),
    ReportStatus.ASSIGNED: frozenset({ReportStatus.IN_PROGRESS}),
    ReportStatus.IN_PROGRESS: frozenset({ReportStatus.COMPLETED}),
    ReportStatus.COMPLETED: frozenset(),
    ReportStatus.REJECTED: frozenset(),
}

TASK_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.ASSIGNED: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED}),
    TaskStatus.COMPLETED: frozenset(),
}


def is_report_transition_allowed(current: ReportStatus, target: ReportStatus) -> bool:
    return current == target or target in REPORT_TRANSITIONS[current]


def is_task_transition_allowed(current: TaskStatus, target: TaskStatus) -> bool:
    return current == target or target in TASK_TRANSITIONS[current]


def check_report_transition(current: ReportStatus, target: ReportStatus, *, enforce: bool) -> None:
    if is_report_transition_allowed(current, target):
        return
    if enforce:
        raise InvalidTransitionError(f"report cannot move from {current.value} to {target.value}")
    logger.info(
        "report_transition_outside_state_machine",
        extra={"component": "waste_core", "from_status": current.value, "to_status": target.value},
    )


def check_task_transition(current: TaskStatus, target: TaskStatus, *, enforce: bool) -> None:
    if is_task_transition_allowed(current, target):
        return
    if enforce:
        raise InvalidTransitionError(f"task cannot move from {current.value} to {target.value}")
    logger.info(
        "task_transition_outside_state_machine",
        extra={"component": "waste_core", "from_status": current.value, "to_status": target.value},
    )
