"""Comparable listing matching and pricing.

Public API:
    compute_matches(base, comparables, config=None)
    compute_pricing_stats(comparables)
    evaluate(base, comparables, config=None)
    export_matches(matches, pricing=None, ...)
    parse_property(raw) / parse_properties(rows)
    ScoringConfig / DEFAULT_SCORING_CONFIG
"""
from .config import DEFAULT_SCORING_CONFIG, FeatureTolerance, ScoringConfig, load_scoring_config  # noqa: F401
from .engine import compute_matches, evaluate, rank_matches  # noqa: F401
from .errors import ListingMatchError, PropertyParseError, ScoringConfigError  # noqa: F401
from .export import export_matches  # noqa: F401
from .models import (  # noqa: F401
    Evaluation,
    MatchResult,
    PriceRange,
    PricingStats,
    Property,
    PropertyType,
    parse_properties,
    parse_property,
)
from .scoring import compute_key_similarity, compute_secondary_similarity  # noqa: F401
from .stats import compute_pricing_stats, quartile, suggest_price_range  # noqa: F401

__all__ = [
    "compute_matches",
    "compute_pricing_stats",
    "evaluate",
    "rank_matches",
    "export_matches",
    "parse_property",
    "parse_properties",
    "compute_key_similarity",
    "compute_secondary_similarity",
    "quartile",
    "suggest_price_range",
    "ScoringConfig",
    "FeatureTolerance",
    "DEFAULT_SCORING_CONFIG",
    "load_scoring_config",
    "Property",
    "PropertyType",
    "MatchResult",
    "PricingStats",
    "PriceRange",
    "Evaluation",
    "ListingMatchError",
    "PropertyParseError",
    "ScoringConfigError",
]
