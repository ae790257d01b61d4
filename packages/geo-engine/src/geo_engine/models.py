from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    @classmethod
    def from_optional(cls, lat: float | None, lng: float | None) -> GeoPoint | None:
        if lat is None or lng is None:
            return None
        return cls(lat=float(lat), lng=float(lng))

    def format(self) -> str:
        """Raw coordinate text used when no address can be resolved."""
        return f"{self.lat:.4f}, {self.lng:.4f}"
