from waste_core.sync.presence import MunicipalityPresenceTracker
from waste_core.sync.synchronizer import LiveStateSynchronizer
from waste_core.sync.transport import (
    ChangeFeed,
    ChangeFeedPublisher,
    InMemoryChangeFeed,
    InMemoryPresenceHub,
    PresenceEvent,
    PresenceEventType,
    PresenceHub,
    PresenceMembership,
    Subscription,
)

__all__ = [
    "ChangeFeed",
    "ChangeFeedPublisher",
    "InMemoryChangeFeed",
    "InMemoryPresenceHub",
    "LiveStateSynchronizer",
    "MunicipalityPresenceTracker",
    "PresenceEvent",
    "PresenceEventType",
    "PresenceHub",
    "PresenceMembership",
    "Subscription",
]
