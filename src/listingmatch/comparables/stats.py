from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .models import PriceRange, PricingStats

logger = logging.getLogger(__name__)


def _finite(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(str(v).strip()) if isinstance(v, str) else float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def price_per_area_values(comparables: Iterable[Any]) -> List[float]:
    """Sorted ``price / size`` for every entry with a finite price and positive size.

    Entries may be ``Property`` objects or loose mappings whose values are
    strings; anything unusable is skipped.
    """
    values: List[float] = []
    skipped = 0
    for c in comparables:
        price = _finite(_field(c, 'price'))
        size = _finite(_field(c, 'size'))
        if price is None or size is None or size <= 0:
            skipped += 1
            continue
        values.append(price / size)
    if skipped:
        logger.debug("Skipped %d comparables without usable price/size", skipped)
    values.sort()
    return values


def quartile(arr: Sequence[float], q: float) -> float:
    """Percentile by linear interpolation between closest ranks.

    Same as NumPy's default ``linear`` method. ``arr`` must be sorted and
    non-empty.
    """
    n = len(arr)
    pos = (n - 1) * q
    base = math.floor(pos)
    rest = pos - base
    if base >= n - 1:
        return arr[n - 1]
    return arr[base] + (arr[base + 1] - arr[base]) * rest


def compute_pricing_stats(comparables: Iterable[Any]) -> Optional[PricingStats]:
    """Quartiles, min, max and mean of price per unit area.

    Returns ``None`` when no comparable has a usable price and size; callers
    show "not enough comparables" in that case.
    """
    s = price_per_area_values(comparables)
    if not s:
        return None
    return PricingStats(
        lower_quartile=quartile(s, 0.25),
        median=quartile(s, 0.5),
        upper_quartile=quartile(s, 0.75),
        min=s[0],
        max=s[-1],
        average=sum(s) / len(s),
        count=len(s),
    )


def suggest_price_range(stats: Optional[PricingStats], size: Any) -> Optional[PriceRange]:
    """Scale the quartile band to a total price for a property of ``size``."""
    area = _finite(size)
    if stats is None or area is None or area <= 0:
        return None
    return PriceRange(
        low=stats.lower_quartile * area,
        mid=stats.median * area,
        high=stats.upper_quartile * area,
        size=area,
    )
