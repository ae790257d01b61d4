from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable
import copy
from typing import Any
from uuid import uuid4

from devkit.timezone import now_utc_iso

from waste_core.core.exceptions import NotFoundError

Record = dict[str, Any]


class TableGateway(ABC):
    """Filtered, ordered reads and keyed writes against named tables.

    Every record carries a string ``id``; ``created_at``/``updated_at`` are
    maintained by the gateway.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[Record]:
        raise NotImplementedError

    @abstractmethod
    async def select_in(self, table: str, column: str, values: Iterable[Any]) -> list[Record]:
        raise NotImplementedError

    @abstractmethod
    async def get(self, table: str, record_id: str) -> Record | None:
        raise NotImplementedError

    @abstractmethod
    async def insert(self, table: str, record: Record) -> Record:
        raise NotImplementedError

    @abstractmethod
    async def update(self, table: str, record_id: str, changes: Record) -> tuple[Record, Record]:
        """Apply ``changes`` and return ``(old, new)`` rows."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> Record:
        raise NotImplementedError


class InMemoryTableGateway(TableGateway):
    def __init__(self, seed: dict[str, list[Record]] | None = None) -> None:
        self._tables: dict[str, dict[str, Record]] = defaultdict(dict)
        for table, rows in (seed or {}).items():
            for row in rows:
                stored = self._stamp(dict(row), creating=True)
                self._tables[table][stored["id"]] = stored

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[Record]:
        rows = [
            row
            for row in self._tables[table].values()
            if all(row.get(column) == value for column, value in (filters or {}).items())
        ]
        if order_by:
            # rows missing the sort column sort first ascending, last descending
            rows.sort(key=lambda row: (row.get(order_by) is not None, row.get(order_by) or ""), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(row) for row in rows]

    async def select_in(self, table: str, column: str, values: Iterable[Any]) -> list[Record]:
        wanted = set(values)
        return [copy.deepcopy(row) for row in self._tables[table].values() if row.get(column) in wanted]

    async def get(self, table: str, record_id: str) -> Record | None:
        row = self._tables[table].get(record_id)
        return copy.deepcopy(row) if row is not None else None

    async def insert(self, table: str, record: Record) -> Record:
        stored = self._stamp(dict(record), creating=True)
        self._tables[table][stored["id"]] = stored
        return copy.deepcopy(stored)

    async def update(self, table: str, record_id: str, changes: Record) -> tuple[Record, Record]:
        current = self._tables[table].get(record_id)
        if current is None:
            raise NotFoundError(f"{table} record {record_id} not found")
        old = copy.deepcopy(current)
        current.update({key: value for key, value in changes.items() if key != "id"})
        self._stamp(current, creating=False)
        return old, copy.deepcopy(current)

    async def delete(self, table: str, record_id: str) -> Record:
        removed = self._tables[table].pop(record_id, None)
        if removed is None:
            raise NotFoundError(f"{table} record {record_id} not found")
        return removed

    def _stamp(self, row: Record, *, creating: bool) -> Record:
        now = now_utc_iso()
        if creating:
            row["id"] = str(row.get("id") or uuid4())
            row.setdefault("created_at", now)
        row["updated_at"] = now
        return row
