from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class ChangeType(StrEnum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    """One row-level change on a table, as delivered by the change feed."""

    table: str
    event_type: ChangeType
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)
    commit_timestamp: str = ""

    @property
    def record_id(self) -> str | None:
        source = self.old if self.event_type is ChangeType.DELETE else self.new
        value = source.get("id")
        return str(value) if value is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "eventType": self.event_type.value,
            "new": self.new,
            "old": self.old,
            "commit_timestamp": self.commit_timestamp,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ChangeEvent:
        return cls(
            table=str(payload["table"]),
            event_type=ChangeType(str(payload.get("eventType") or payload.get("event_type"))),
            new=dict(payload.get("new") or {}),
            old=dict(payload.get("old") or {}),
            commit_timestamp=str(payload.get("commit_timestamp", "")),
        )


def build_change_event(
    table: str,
    event_type: ChangeType,
    *,
    new: dict[str, Any] | None = None,
    old: dict[str, Any] | None = None,
) -> ChangeEvent:
    return ChangeEvent(
        table=table,
        event_type=event_type,
        new=dict(new or {}),
        old=dict(old or {}),
        commit_timestamp=datetime.now(timezone.utc).isoformat(),
    )
