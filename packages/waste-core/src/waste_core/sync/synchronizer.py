"""Role-scoped, change-feed driven caches of reports and tasks.

Collections are ordered newest first after each full fetch. Live inserts are
prepended and updates replace in place without re-sorting, so inserts that
arrive out of creation order can leave the list only approximately ordered
until the next ``refetch``.
"""

from __future__ import annotations

import logging
from typing import Any

from shared.events import ChangeEvent, ChangeType

from waste_core.core.models import Report, Task
from waste_core.core.session import SessionContext, report_scope, task_scope
from waste_core.core.tables import REPORTS_TABLE, TASKS_TABLE
from waste_core.store.gateway import TableGateway
from waste_core.sync.transport import ChangeFeed, Subscription

logger = logging.getLogger(__name__)


class LiveStateSynchronizer:
    def __init__(self, session: SessionContext, gateway: TableGateway, feed: ChangeFeed) -> None:
        self._session = session
        self._gateway = gateway
        self._feed = feed
        self._reports: list[Report] = []
        self._tasks: list[Task] = []
        self._subscriptions: list[Subscription] = []
        self.loading = True

    @property
    def reports(self) -> list[Report]:
        return list(self._reports)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def tracks_tasks(self) -> bool:
        return task_scope(self._session) is not None

    @property
    def started(self) -> bool:
        return bool(self._subscriptions)

    def report_filters(self) -> dict[str, Any]:
        return report_scope(self._session)

    def task_filters(self) -> dict[str, Any]:
        return task_scope(self._session) or {}

    async def start(self) -> None:
        if self.started:
            return
        await self.refetch()
        self._subscriptions.append(self._feed.subscribe(REPORTS_TABLE, self.apply_report_change))
        if self.tracks_tasks:
            self._subscriptions.append(self._feed.subscribe(TASKS_TABLE, self.apply_task_change))
        logger.info(
            "live_sync_started",
            extra={"component": "waste_core", "user_id": self._session.user_id, "role": self._session.role.value},
        )

    def stop(self) -> None:
        for subscription in self._subscriptions:
            self._feed.unsubscribe(subscription)
        self._subscriptions.clear()

    async def refetch(self) -> None:
        # each collection keeps its previous snapshot when its own fetch fails
        self._reports = await self._fetch(REPORTS_TABLE, self.report_filters(), Report.from_record, self._reports)
        if self.tracks_tasks:
            self._tasks = await self._fetch(TASKS_TABLE, self.task_filters(), Task.from_record, self._tasks)
        self.loading = False

    async def _fetch(self, table: str, filters: dict[str, Any], parse, previous: list) -> list:
        try:
            rows = await self._gateway.select(table, filters, order_by="created_at", descending=True)
            return [parse(row) for row in rows]
        except Exception:
            logger.exception(
                "live_sync_fetch_failed",
                extra={"component": "waste_core", "user_id": self._session.user_id, "table": table},
            )
            return previous

    def apply_report_change(self, event: ChangeEvent) -> None:
        self._reports = _apply_change(self._reports, event, Report.from_record, self.report_filters())

    def apply_task_change(self, event: ChangeEvent) -> None:
        if not self.tracks_tasks:
            return
        self._tasks = _apply_change(self._tasks, event, Task.from_record, self.task_filters())


def _in_scope(row: dict[str, Any], filters: dict[str, Any]) -> bool:
    return all(row.get(column) == value for column, value in filters.items())


def _apply_change(items: list, event: ChangeEvent, parse, filters: dict[str, Any]) -> list:
    record_id = event.record_id
    if record_id is None:
        return items
    if event.event_type is ChangeType.INSERT:
        if not _in_scope(event.new, filters):
            return items
        return [parse(event.new), *items]
    if event.event_type is ChangeType.UPDATE:
        if not _in_scope(event.new, filters):
            # a row moved out of scope (e.g. reassigned task) leaves the view
            return [item for item in items if item.id != record_id]
        updated = parse(event.new)
        return [updated if item.id == record_id else item for item in items]
    return [item for item in items if item.id != record_id]
