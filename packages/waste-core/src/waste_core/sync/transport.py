from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Any
from uuid import uuid4

from shared.events import ChangeEvent

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[ChangeEvent], None]


@dataclass(frozen=True)
class Subscription:
    table: str
    token: str = field(default_factory=lambda: str(uuid4()))


class ChangeFeed(ABC):
    @abstractmethod
    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        raise NotImplementedError

    @abstractmethod
    def unsubscribe(self, subscription: Subscription) -> None:
        raise NotImplementedError


class ChangeFeedPublisher(ABC):
    @abstractmethod
    async def publish(self, event: ChangeEvent) -> None:
        raise NotImplementedError


class InMemoryChangeFeed(ChangeFeed, ChangeFeedPublisher):
    """Delivers events to the table's handlers in publish order."""

    def __init__(self) -> None:
        self._handlers: dict[str, dict[str, ChangeHandler]] = defaultdict(dict)

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        subscription = Subscription(table=table)
        self._handlers[table][subscription.token] = handler
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._handlers[subscription.table].pop(subscription.token, None)

    def subscriber_count(self, table: str) -> int:
        return len(self._handlers[table])

    async def publish(self, event: ChangeEvent) -> None:
        for token, handler in list(self._handlers[event.table].items()):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "change_handler_failed",
                    extra={"component": "waste_core", "table": event.table, "subscription": token},
                )


class PresenceEventType(StrEnum):
    SYNC = "sync"
    JOIN = "join"
    LEAVE = "leave"


@dataclass(frozen=True)
class PresenceEvent:
    event_type: PresenceEventType
    state: dict[str, dict[str, Any]]
    key: str | None = None


PresenceHandler = Callable[[PresenceEvent], None]


@dataclass(frozen=True)
class PresenceMembership:
    channel: str
    key: str
    token: str = field(default_factory=lambda: str(uuid4()))


class PresenceHub(ABC):
    @abstractmethod
    async def join(self, channel: str, key: str, handler: PresenceHandler) -> PresenceMembership:
        raise NotImplementedError

    @abstractmethod
    async def track(self, membership: PresenceMembership, state: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def leave(self, membership: PresenceMembership) -> None:
        raise NotImplementedError


class InMemoryPresenceHub(PresenceHub):
    def __init__(self) -> None:
        self._members: dict[str, dict[str, tuple[PresenceMembership, PresenceHandler]]] = defaultdict(dict)
        self._state: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)

    def state(self, channel: str) -> dict[str, dict[str, Any]]:
        return dict(self._state[channel])

    async def join(self, channel: str, key: str, handler: PresenceHandler) -> PresenceMembership:
        membership = PresenceMembership(channel=channel, key=key)
        self._members[channel][membership.token] = (membership, handler)
        self._deliver(handler, PresenceEvent(PresenceEventType.SYNC, self.state(channel)))
        return membership

    async def track(self, membership: PresenceMembership, state: dict[str, Any]) -> None:
        self._state[membership.channel][membership.key] = dict(state)
        self._broadcast(membership.channel, PresenceEventType.JOIN, membership.key)

    async def leave(self, membership: PresenceMembership) -> None:
        self._members[membership.channel].pop(membership.token, None)
        still_present = any(other.key == membership.key for other, _ in self._members[membership.channel].values())
        if not still_present and self._state[membership.channel].pop(membership.key, None) is not None:
            self._broadcast(membership.channel, PresenceEventType.LEAVE, membership.key)

    def _broadcast(self, channel: str, event_type: PresenceEventType, key: str) -> None:
        snapshot = self.state(channel)
        for _, handler in list(self._members[channel].values()):
            self._deliver(handler, PresenceEvent(event_type, snapshot, key=key))
            self._deliver(handler, PresenceEvent(PresenceEventType.SYNC, snapshot))

    def _deliver(self, handler: PresenceHandler, event: PresenceEvent) -> None:
        try:
            handler(event)
        except Exception:
            logger.exception(
                "presence_handler_failed",
                extra={"component": "waste_core", "event_type": event.event_type.value},
            )
