from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shared.security import Role


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    role: Role
    full_name: str = ""
    email: str = ""

    @property
    def is_citizen(self) -> bool:
        return self.role is Role.CITIZEN

    @property
    def is_municipality(self) -> bool:
        return self.role is Role.MUNICIPALITY

    @property
    def is_government(self) -> bool:
        return self.role is Role.GOVERNMENT


def report_scope(session: SessionContext) -> dict[str, Any]:
    """Column filters limiting the reports a session may see."""
    if session.is_citizen:
        return {"reporter_id": session.user_id}
    return {}


def task_scope(session: SessionContext) -> dict[str, Any] | None:
    """Column filters for the session's tasks, ``None`` when the role sees no tasks."""
    if session.is_citizen:
        return None
    if session.is_municipality:
        return {"assigned_to": session.user_id}
    return {}
