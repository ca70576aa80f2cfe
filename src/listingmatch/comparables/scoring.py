from __future__ import annotations

from typing import Dict, Mapping, Optional

from .config import DEFAULT_SCORING_CONFIG, KEY_NUMERIC_FEATURES, SECONDARY_FEATURES, ScoringConfig
from .errors import ScoringConfigError
from .location import weighted_location_similarity
from .models import Property
from .similarity import binary_similarity, relative_similarity_score


def key_feature_similarities(base: Property, comp: Property,
                             config: Optional[ScoringConfig] = None) -> Dict[str, float]:
    """Per-feature similarities of the key group.

    All four features are computed whatever their weight, so a zero-weight
    feature still shows up here (and still fails fast on a degenerate curve).
    """
    cfg = config or DEFAULT_SCORING_CONFIG
    sims: Dict[str, float] = {}
    for name in KEY_NUMERIC_FEATURES:
        tol = cfg.key_tolerances[name]
        sims[name] = relative_similarity_score(
            getattr(base, name), getattr(comp, name), tol.tolerance_percentage, tol.max_diff_percentage
        )
    sims['location'] = weighted_location_similarity(base, comp, cfg.location_weights)
    sims['property_type'] = binary_similarity(base.property_type == comp.property_type)
    return sims


def secondary_feature_similarities(base: Property, comp: Property,
                                   config: Optional[ScoringConfig] = None) -> Dict[str, float]:
    cfg = config or DEFAULT_SCORING_CONFIG
    sims: Dict[str, float] = {}
    for name in SECONDARY_FEATURES:
        tol = cfg.secondary_tolerances[name]
        sims[name] = relative_similarity_score(
            getattr(base, name), getattr(comp, name), tol.tolerance_percentage, tol.max_diff_percentage
        )
    return sims


def weighted_mean(similarities: Mapping[str, float], weights: Mapping[str, float], group: str) -> float:
    """``sum(w * s) / sum(w)`` over ``weights``; weights need not sum to 1."""
    total_weight = sum(weights.values())
    if total_weight <= 0:
        raise ScoringConfigError(f"{group} weights sum to zero; at least one feature must carry weight")
    weighted_sum = sum(w * similarities[name] for name, w in weights.items())
    return weighted_sum / total_weight


def compute_key_similarity(base: Property, comp: Property, config: Optional[ScoringConfig] = None) -> float:
    """Key score (0-100) from bedrooms, size, location and property type."""
    cfg = config or DEFAULT_SCORING_CONFIG
    return weighted_mean(key_feature_similarities(base, comp, cfg), cfg.key_weights, "key")


def compute_secondary_similarity(base: Property, comp: Property, config: Optional[ScoringConfig] = None) -> float:
    """Secondary score (0-100) from bathrooms, parking, amenities, condition and age."""
    cfg = config or DEFAULT_SCORING_CONFIG
    return weighted_mean(secondary_feature_similarities(base, comp, cfg), cfg.secondary_weights, "secondary")
