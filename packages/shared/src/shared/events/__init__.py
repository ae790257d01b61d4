from shared.events.schema import ChangeEvent, ChangeType, build_change_event

__all__ = ["ChangeEvent", "ChangeType", "build_change_event"]
