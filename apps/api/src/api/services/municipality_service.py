from __future__ import annotations

from datetime import timedelta
import logging

from devkit.timezone import now_utc, now_utc_iso
from shared.security import Role

from waste_core.core.exceptions import NotFoundError, PermissionDeniedError
from waste_core.core.models import Municipality
from waste_core.core.presence import DEFAULT_FRESHNESS_WINDOW, is_online
from waste_core.core.session import SessionContext
from waste_core.core.tables import PROFILES_TABLE
from waste_core.matching import KeywordAddressMatcher, MunicipalityMatcher
from waste_core.store import TableGateway

logger = logging.getLogger(__name__)


class MunicipalityService:
    def __init__(
        self,
        gateway: TableGateway,
        matcher: MunicipalityMatcher | None = None,
        *,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
    ) -> None:
        self._gateway = gateway
        self._matcher = matcher or KeywordAddressMatcher()
        self._freshness_window = freshness_window

    async def list_municipalities(self) -> list[Municipality]:
        rows = await self._gateway.select(PROFILES_TABLE, {"role": Role.MUNICIPALITY.value}, order_by="full_name", descending=False)
        now = now_utc()
        municipalities = []
        for row in rows:
            last_seen = row.get("last_seen")
            municipalities.append(
                Municipality.from_profile(row).with_presence(is_online(last_seen, now, self._freshness_window), last_seen)
            )
        return municipalities

    async def best_match(self, address: str) -> Municipality | None:
        matched = self._matcher.match(address, await self.list_municipalities())
        logger.info(
            "municipality_match",
            extra={"component": "api", "matched": matched.user_id if matched else None},
        )
        return matched

    async def touch_presence(self, session: SessionContext) -> Municipality:
        """Record a presence heartbeat for the calling municipality."""
        if not session.is_municipality:
            raise PermissionDeniedError("only municipality accounts report presence")
        rows = await self._gateway.select(PROFILES_TABLE, {"user_id": session.user_id}, order_by=None, limit=1)
        if not rows:
            raise NotFoundError(f"profile for {session.user_id} not found")
        seen_at = now_utc_iso()
        _, updated = await self._gateway.update(PROFILES_TABLE, str(rows[0]["id"]), {"last_seen": seen_at})
        return Municipality.from_profile(updated).with_presence(True, seen_at)
