"""Free-text address to municipality matching.

The keyword matcher is a best-effort heuristic, not geocoding. Unrelated
municipalities sharing a generic word can match (false positive) and
neighbouring areas with no shared token will not (false negative). Both are
accepted outcomes; callers fall back to manual selection on ``None``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
import re

from waste_core.core.models import Municipality

ROADWAY_SUFFIXES = frozenset({"street", "avenue", "road", "lane", "drive", "boulevard"})
MIN_SIGNIFICANT_LENGTH = 4

_SPLIT_PATTERN = re.compile(r"[\s,]+")


def tokenize_address(address: str) -> list[str]:
    return [word for word in _SPLIT_PATTERN.split(address.lower()) if word]


def significant_words(address: str) -> list[str]:
    return [
        word
        for word in tokenize_address(address)
        if len(word) >= MIN_SIGNIFICANT_LENGTH and word not in ROADWAY_SUFFIXES
    ]


class MunicipalityMatcher(ABC):
    @abstractmethod
    def match(self, address: str, municipalities: Iterable[Municipality]) -> Municipality | None:
        raise NotImplementedError


class KeywordAddressMatcher(MunicipalityMatcher):
    def match(self, address: str, municipalities: Iterable[Municipality]) -> Municipality | None:
        if not address:
            return None
        wanted = significant_words(address)
        if not wanted:
            return None
        for municipality in municipalities:
            if not municipality.address:
                continue
            candidate_words = tokenize_address(municipality.address)
            if any(word in other or other in word for word in wanted for other in candidate_words):
                return municipality
        return None
