from __future__ import annotations

from typing import Any, Mapping, Optional

from .config import LOCATION_LEVELS, LOCATION_WEIGHTS


def _level(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def weighted_location_similarity(base: Any, comp: Any,
                                 weights: Optional[Mapping[str, float]] = None) -> float:
    """Location match (0-100) over province, canton and district.

    Each level whose strings are exactly equal (case-sensitive, no trimming)
    contributes its weight; the sum is scaled to 100. No partial credit.
    """
    w = LOCATION_WEIGHTS if weights is None else weights
    score = 0.0
    for level in LOCATION_LEVELS:
        if _level(base, level) == _level(comp, level):
            score += w[level]
    return score * 100
