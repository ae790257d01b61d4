from __future__ import annotations

import logging

from devkit.timezone import now_utc_iso
from shared.security import Role

from waste_core.core.models import Municipality
from waste_core.core.session import SessionContext
from waste_core.core.tables import PRESENCE_CHANNEL, PROFILES_TABLE
from waste_core.store.gateway import TableGateway
from waste_core.sync.transport import PresenceEvent, PresenceEventType, PresenceHub, PresenceMembership

logger = logging.getLogger(__name__)


class MunicipalityPresenceTracker:
    """Keeps municipality profiles annotated with live presence.

    Every session joins the presence channel as an observer; municipality
    sessions also announce themselves so other viewers see them online.
    """

    def __init__(self, session: SessionContext, gateway: TableGateway, presence_hub: PresenceHub) -> None:
        self._session = session
        self._gateway = gateway
        self._hub = presence_hub
        self._municipalities: list[Municipality] = []
        self._membership: PresenceMembership | None = None
        self.loading = True

    @property
    def municipalities(self) -> list[Municipality]:
        return list(self._municipalities)

    @property
    def online_count(self) -> int:
        return sum(1 for municipality in self._municipalities if municipality.is_online)

    @property
    def total_count(self) -> int:
        return len(self._municipalities)

    async def start(self) -> None:
        if self._membership is not None:
            return
        await self.refresh()
        self._membership = await self._hub.join(PRESENCE_CHANNEL, self._session.user_id, self.handle_presence)
        if self._session.is_municipality:
            await self._hub.track(
                self._membership,
                {"user_id": self._session.user_id, "online_at": now_utc_iso()},
            )
        logger.info(
            "presence_tracking_started",
            extra={"component": "waste_core", "user_id": self._session.user_id, "announced": self._session.is_municipality},
        )

    async def stop(self) -> None:
        if self._membership is None:
            return
        membership, self._membership = self._membership, None
        await self._hub.leave(membership)

    async def refresh(self) -> None:
        try:
            rows = await self._gateway.select(PROFILES_TABLE, {"role": Role.MUNICIPALITY.value}, order_by="full_name", descending=False)
        except Exception:
            logger.exception("municipality_profiles_fetch_failed", extra={"component": "waste_core"})
        else:
            known = {municipality.user_id: municipality for municipality in self._municipalities}
            self._municipalities = [
                _carry_presence(Municipality.from_profile(row), known.get(str(row["user_id"]))) for row in rows
            ]
        finally:
            self.loading = False

    def handle_presence(self, event: PresenceEvent) -> None:
        if event.event_type is PresenceEventType.SYNC:
            self._municipalities = [_from_state(municipality, event.state) for municipality in self._municipalities]
        elif event.event_type is PresenceEventType.JOIN and event.key is not None:
            self._mark(event.key, online=True, last_seen=_online_at(event.state, event.key))
        elif event.event_type is PresenceEventType.LEAVE and event.key is not None:
            self._mark(event.key, online=False, last_seen=now_utc_iso())

    def _mark(self, user_id: str, *, online: bool, last_seen: str | None) -> None:
        self._municipalities = [
            municipality.with_presence(online, last_seen) if municipality.user_id == user_id else municipality
            for municipality in self._municipalities
        ]


def _online_at(state: dict[str, dict], key: str) -> str | None:
    entry = state.get(key) or {}
    value = entry.get("online_at")
    return str(value) if value else None


def _from_state(municipality: Municipality, state: dict[str, dict]) -> Municipality:
    if municipality.user_id in state:
        return municipality.with_presence(True, _online_at(state, municipality.user_id) or municipality.last_seen)
    return municipality.with_presence(False, municipality.last_seen)


def _carry_presence(fresh: Municipality, previous: Municipality | None) -> Municipality:
    if previous is None:
        return fresh
    return fresh.with_presence(previous.is_online, previous.last_seen)
