from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any
from uuid import uuid4

from devkit.db import AsyncDatabaseManager, create_all_tables
from devkit.timezone import now_utc_iso
from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from waste_core.core.exceptions import NotFoundError, RemoteOperationError
from waste_core.store.gateway import Record, TableGateway
from waste_core.store.tables import metadata

logger = logging.getLogger(__name__)


class SqlTableGateway(TableGateway):
    def __init__(self, database: AsyncDatabaseManager) -> None:
        self._db = database
        self._ready = False

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[Record]:
        target = self._table(table)
        stmt = select(target)
        for column, value in (filters or {}).items():
            stmt = stmt.where(target.c[column].is_(None) if value is None else target.c[column] == value)
        if order_by:
            sort_column = target.c[order_by]
            stmt = stmt.order_by(sort_column.desc() if descending else sort_column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        async def _run(conn):
            rows = (await conn.execute(stmt)).mappings().all()
            return [dict(row) for row in rows]

        return await self._run(table, "select", _run)

    async def select_in(self, table: str, column: str, values: Iterable[Any]) -> list[Record]:
        wanted = list(values)
        if not wanted:
            return []
        target = self._table(table)
        stmt = select(target).where(target.c[column].in_(wanted))

        async def _run(conn):
            return [dict(row) for row in (await conn.execute(stmt)).mappings().all()]

        return await self._run(table, "select_in", _run)

    async def get(self, table: str, record_id: str) -> Record | None:
        target = self._table(table)

        async def _run(conn):
            row = (await conn.execute(select(target).where(target.c.id == record_id))).mappings().first()
            return dict(row) if row is not None else None

        return await self._run(table, "get", _run)

    async def insert(self, table: str, record: Record) -> Record:
        target = self._table(table)
        now = now_utc_iso()
        row = self._known_columns(target, record)
        row["id"] = str(row.get("id") or uuid4())
        row.setdefault("created_at", now)
        row["updated_at"] = now

        async def _run(conn):
            await conn.execute(insert(target).values(**row))
            stored = (await conn.execute(select(target).where(target.c.id == row["id"]))).mappings().one()
            return dict(stored)

        return await self._run(table, "insert", _run)

    async def update(self, table: str, record_id: str, changes: Record) -> tuple[Record, Record]:
        target = self._table(table)
        values = self._known_columns(target, changes)
        values.pop("id", None)
        values["updated_at"] = now_utc_iso()

        async def _run(conn):
            old = (await conn.execute(select(target).where(target.c.id == record_id))).mappings().first()
            if old is None:
                raise NotFoundError(f"{table} record {record_id} not found")
            await conn.execute(update(target).where(target.c.id == record_id).values(**values))
            new = (await conn.execute(select(target).where(target.c.id == record_id))).mappings().one()
            return dict(old), dict(new)

        return await self._run(table, "update", _run)

    async def delete(self, table: str, record_id: str) -> Record:
        target = self._table(table)

        async def _run(conn):
            old = (await conn.execute(select(target).where(target.c.id == record_id))).mappings().first()
            if old is None:
                raise NotFoundError(f"{table} record {record_id} not found")
            await conn.execute(delete(target).where(target.c.id == record_id))
            return dict(old)

        return await self._run(table, "delete", _run)

    async def _run(self, table: str, operation: str, fn) -> Any:
        await self._ensure_ready()
        try:
            return await self._db.run_in_transaction(fn)
        except SQLAlchemyError as exc:
            logger.exception(
                "table_gateway_failed",
                extra={"component": "waste_core", "table": table, "operation": operation},
            )
            raise RemoteOperationError(f"{operation} on {table} failed") from exc

    async def _ensure_ready(self) -> None:
        if self._ready:
            return
        await self._db.connect()
        await create_all_tables(self._db.engine, metadata)
        self._ready = True

    def _table(self, name: str) -> Table:
        try:
            return metadata.tables[name]
        except KeyError as exc:
            raise ValueError(f"unknown table: {name}") from exc

    def _known_columns(self, target: Table, record: Record) -> Record:
        return {key: value for key, value in record.items() if key in target.c}
