from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    CITIZEN = "citizen"
    MUNICIPALITY = "municipality"
    GOVERNMENT = "government"

    @property
    def is_staff(self) -> bool:
        """Municipality workers and government officers handle reports; citizens file them."""
        return self is not Role.CITIZEN


def parse_role(value: str | None) -> Role | None:
    if value is None:
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None
