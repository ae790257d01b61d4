from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any

from shared.events import ChangeType, build_change_event

from waste_core.core.exceptions import RemoteOperationError
from waste_core.store.gateway import Record, TableGateway
from waste_core.sync.transport import ChangeFeedPublisher

logger = logging.getLogger(__name__)


class PublishingTableGateway(TableGateway):
    """Emits a change event for every committed write on the delegate."""

    def __init__(self, delegate: TableGateway, publisher: ChangeFeedPublisher) -> None:
        self._delegate = delegate
        self._publisher = publisher

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = "created_at",
        descending: bool = True,
        limit: int | None = None,
    ) -> list[Record]:
        return await self._delegate.select(table, filters, order_by=order_by, descending=descending, limit=limit)

    async def select_in(self, table: str, column: str, values: Iterable[Any]) -> list[Record]:
        return await self._delegate.select_in(table, column, values)

    async def get(self, table: str, record_id: str) -> Record | None:
        return await self._delegate.get(table, record_id)

    async def insert(self, table: str, record: Record) -> Record:
        stored = await self._delegate.insert(table, record)
        await self._publish(table, ChangeType.INSERT, new=stored)
        return stored

    async def update(self, table: str, record_id: str, changes: Record) -> tuple[Record, Record]:
        old, new = await self._delegate.update(table, record_id, changes)
        await self._publish(table, ChangeType.UPDATE, new=new, old=old)
        return old, new

    async def delete(self, table: str, record_id: str) -> Record:
        removed = await self._delegate.delete(table, record_id)
        await self._publish(table, ChangeType.DELETE, old=removed)
        return removed

    async def _publish(self, table: str, event_type: ChangeType, **rows: Record) -> None:
        event = build_change_event(table, event_type, **rows)
        try:
            await self._publisher.publish(event)
        except Exception as exc:
            logger.exception(
                "change_event_publish_failed",
                extra={"component": "waste_core", "table": table, "event_type": event_type.value},
            )
            raise RemoteOperationError(
                f"change event publish failed after successful write: table={table}, event_type={event_type.value}"
            ) from exc
