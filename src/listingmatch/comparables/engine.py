from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import Evaluation, MatchResult, Property, parse_property
from .scoring import compute_key_similarity, compute_secondary_similarity
from .stats import compute_pricing_stats, suggest_price_range

logger = logging.getLogger(__name__)


def score_comparable(base: Property, comp: Property, config: Optional[ScoringConfig] = None) -> MatchResult:
    cfg = config or DEFAULT_SCORING_CONFIG
    primary = compute_key_similarity(base, comp, cfg)
    secondary = compute_secondary_similarity(base, comp, cfg)
    return MatchResult(
        listing_name=comp.listing_name,
        primary_score=primary,
        secondary_score=secondary,
        final_score=(primary + secondary) / 2,
    )


def compute_matches(base: Any, comparables: Iterable[Any],
                    config: Optional[ScoringConfig] = None) -> List[MatchResult]:
    """Score every comparable against ``base``.

    Results come back in input order, one per comparable; nothing is sorted
    or cached. Raw mappings are validated with :func:`parse_property` first,
    so a malformed record raises ``PropertyParseError`` rather than scoring
    as NaN.
    """
    cfg = config or DEFAULT_SCORING_CONFIG
    subject = parse_property(base)
    comps = [parse_property(c, index=i) for i, c in enumerate(comparables)]
    disabled = cfg.disabled_key_features()
    if disabled:
        logger.debug("Key features computed with zero weight: %s", ", ".join(disabled))
    results = [score_comparable(subject, c, cfg) for c in comps]
    logger.debug("Scored %d comparables against %r", len(results), subject.listing_name)
    return results


def rank_matches(results: Sequence[MatchResult]) -> List[MatchResult]:
    """New list ordered by final score, best first; ties keep input order."""
    return sorted(results, key=lambda r: -r.final_score)


def evaluate(base: Any, comparables: Sequence[Any], config: Optional[ScoringConfig] = None) -> Evaluation:
    """Match scores, pricing stats and the suggested price range in one call.

    The two computations are independent: pricing uses every comparable with
    a usable price and size, matching uses every comparable.
    """
    subject = parse_property(base)
    matches = compute_matches(subject, comparables, config)
    pricing = compute_pricing_stats(comparables)
    return Evaluation(
        matches=matches,
        pricing=pricing,
        price_range=suggest_price_range(pricing, subject.size),
    )
