from waste_core.matching.municipalities import KeywordAddressMatcher, MunicipalityMatcher, significant_words
from waste_core.matching.workers import WorkerDistance, find_closest_worker, is_assignable, rank_workers

__all__ = [
    "KeywordAddressMatcher",
    "MunicipalityMatcher",
    "WorkerDistance",
    "find_closest_worker",
    "is_assignable",
    "rank_workers",
    "significant_words",
]
