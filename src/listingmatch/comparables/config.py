from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from .errors import ScoringConfigError

KEY_FEATURES: Sequence[str] = ("bedrooms", "size", "location", "property_type")
KEY_NUMERIC_FEATURES: Sequence[str] = ("bedrooms", "size")
SECONDARY_FEATURES: Sequence[str] = ("bathrooms", "parking_spots", "amenity_count", "condition", "age")
LOCATION_LEVELS: Sequence[str] = ("province", "canton", "district")


@dataclass(frozen=True)
class FeatureTolerance:
    """Relative tolerance curve parameters for one numeric feature.

    ``tolerance_percentage`` is the fraction of the base value inside which the
    similarity only drops smoothly; ``max_diff_percentage`` is the fraction at
    (and beyond) which the similarity is 0.
    """

    tolerance_percentage: float
    max_diff_percentage: float


# Tolerance curves. bedrooms 0.66 lets a 3-bed base accept about 2 bedrooms of
# drift before the linear fall-off; size 0.10 keeps area within 10%.
KEY_TOLERANCES: Dict[str, FeatureTolerance] = {
    'bedrooms': FeatureTolerance(0.66, 1.0),
    'size': FeatureTolerance(0.10, 0.5),
}

SECONDARY_TOLERANCES: Dict[str, FeatureTolerance] = {
    'bathrooms': FeatureTolerance(0.75, 1.0),
    'parking_spots': FeatureTolerance(0.50, 1.0),
    'amenity_count': FeatureTolerance(0.50, 1.0),
    'condition': FeatureTolerance(0.25, 1.0),
    'age': FeatureTolerance(0.75, 1.0),
}

# Only bedrooms carries weight in the shipped key table. size, location and
# property_type are still computed; see ScoringConfig.disabled_key_features().
KEY_WEIGHTS: Dict[str, float] = {
    'bedrooms': 1.0,
    'size': 0.0,
    'location': 0.0,
    'property_type': 0.0,
}

SECONDARY_WEIGHTS: Dict[str, float] = {
    'bathrooms': 0.20,
    'parking_spots': 0.20,
    'amenity_count': 0.50,
    'condition': 0.05,
    'age': 0.05,
}

LOCATION_WEIGHTS: Dict[str, float] = {
    'province': 0.45,
    'canton': 0.35,
    'district': 0.20,
}

_TOLERANCE_KEYS = {
    'tolerance_percentage': 'tolerance_percentage',
    'tolerancePercentage': 'tolerance_percentage',
    'tolerance': 'tolerance_percentage',
    'max_diff_percentage': 'max_diff_percentage',
    'maxDiffPercentage': 'max_diff_percentage',
    'max_diff': 'max_diff_percentage',
}

_CAMEL_TO_SNAKE = {
    'parkingSpots': 'parking_spots',
    'amenityCount': 'amenity_count',
    'propertyType': 'property_type',
    'keyTolerances': 'key_tolerances',
    'secondaryTolerances': 'secondary_tolerances',
    'keyWeights': 'key_weights',
    'secondaryWeights': 'secondary_weights',
    'locationWeights': 'location_weights',
}


def _snake(name: str) -> str:
    return _CAMEL_TO_SNAKE.get(name, name)


def _number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScoringConfigError(f"{label} must be a number, got {value!r}")
    f = float(value)
    if not math.isfinite(f) or f < 0:
        raise ScoringConfigError(f"{label} must be a finite non-negative number, got {value!r}")
    return f


def _check_table(table: Mapping[str, Any], expected: Sequence[str], label: str) -> None:
    missing = [k for k in expected if k not in table]
    unknown = [k for k in table if k not in expected]
    if missing:
        raise ScoringConfigError(f"{label} missing features: {', '.join(missing)}")
    if unknown:
        raise ScoringConfigError(f"{label} has unknown features: {', '.join(unknown)}")


@dataclass(frozen=True)
class ScoringConfig:
    """Tolerance curves and weight tables used by the scoring functions.

    Instances are immutable; derive a tuned copy with :meth:`with_overrides`.
    Tables are validated on construction (feature names, finite non-negative
    numbers, location weights summing to at most 1). Degenerate curves
    (tolerance equal to max diff) are reported by the scoring call.
    """

    key_tolerances: Mapping[str, FeatureTolerance] = field(default_factory=lambda: dict(KEY_TOLERANCES))
    secondary_tolerances: Mapping[str, FeatureTolerance] = field(default_factory=lambda: dict(SECONDARY_TOLERANCES))
    key_weights: Mapping[str, float] = field(default_factory=lambda: dict(KEY_WEIGHTS))
    secondary_weights: Mapping[str, float] = field(default_factory=lambda: dict(SECONDARY_WEIGHTS))
    location_weights: Mapping[str, float] = field(default_factory=lambda: dict(LOCATION_WEIGHTS))

    def __post_init__(self) -> None:
        _check_table(self.key_tolerances, KEY_NUMERIC_FEATURES, "key_tolerances")
        _check_table(self.secondary_tolerances, SECONDARY_FEATURES, "secondary_tolerances")
        _check_table(self.key_weights, KEY_FEATURES, "key_weights")
        _check_table(self.secondary_weights, SECONDARY_FEATURES, "secondary_weights")
        _check_table(self.location_weights, LOCATION_LEVELS, "location_weights")
        for label, tolerances in (("key_tolerances", self.key_tolerances),
                                  ("secondary_tolerances", self.secondary_tolerances)):
            for name, tol in tolerances.items():
                if not isinstance(tol, FeatureTolerance):
                    raise ScoringConfigError(f"{label}.{name} must be a FeatureTolerance")
                _number(tol.tolerance_percentage, f"{label}.{name}.tolerance_percentage")
                _number(tol.max_diff_percentage, f"{label}.{name}.max_diff_percentage")
        for label, weights in (("key_weights", self.key_weights),
                               ("secondary_weights", self.secondary_weights),
                               ("location_weights", self.location_weights)):
            for name, w in weights.items():
                _number(w, f"{label}.{name}")
        # location similarity is sum(weights) * 100 at most
        total = sum(self.location_weights.values())
        if total > 1 + 1e-9:
            raise ScoringConfigError(f"location_weights sum to {total:g}, must not exceed 1")

    def disabled_key_features(self) -> List[str]:
        """Key features that are computed but carry zero weight."""
        return [name for name in KEY_FEATURES if self.key_weights[name] == 0]

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "ScoringConfig":
        """Return a new config with ``overrides`` merged over this one.

        ``overrides`` is a nested mapping, e.g.::

            {"key_weights": {"size": 0.5},
             "secondary_tolerances": {"age": {"tolerance_percentage": 0.5}}}

        camelCase spellings (``keyWeights``, ``parkingSpots``,
        ``maxDiffPercentage``) are accepted.
        """
        if not overrides:
            return self
        if not isinstance(overrides, Mapping):
            raise ScoringConfigError("scoring overrides must be a mapping")
        tables: Dict[str, Dict[str, Any]] = {
            'key_tolerances': dict(self.key_tolerances),
            'secondary_tolerances': dict(self.secondary_tolerances),
            'key_weights': dict(self.key_weights),
            'secondary_weights': dict(self.secondary_weights),
            'location_weights': dict(self.location_weights),
        }
        for raw_section, values in overrides.items():
            section = _snake(raw_section)
            if section not in tables:
                raise ScoringConfigError(f"unknown scoring section: {raw_section}")
            if not isinstance(values, Mapping):
                raise ScoringConfigError(f"{section} overrides must be a mapping")
            table = tables[section]
            for raw_name, value in values.items():
                name = _snake(raw_name)
                if name not in table:
                    raise ScoringConfigError(f"{section} has unknown feature: {raw_name}")
                if section.endswith('_tolerances'):
                    table[name] = _merge_tolerance(table[name], value, f"{section}.{name}")
                else:
                    table[name] = _number(value, f"{section}.{name}")
        return ScoringConfig(**tables)

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Any] | None) -> "ScoringConfig":
        return DEFAULT_SCORING_CONFIG.with_overrides(overrides)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'key_tolerances': {k: vars(v).copy() for k, v in self.key_tolerances.items()},
            'secondary_tolerances': {k: vars(v).copy() for k, v in self.secondary_tolerances.items()},
            'key_weights': dict(self.key_weights),
            'secondary_weights': dict(self.secondary_weights),
            'location_weights': dict(self.location_weights),
        }


def _merge_tolerance(current: FeatureTolerance, value: Any, label: str) -> FeatureTolerance:
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ScoringConfigError(f"{label} expects [tolerance_percentage, max_diff_percentage]")
        return FeatureTolerance(_number(value[0], label), _number(value[1], label))
    if not isinstance(value, Mapping):
        raise ScoringConfigError(f"{label} must be a mapping or a pair")
    merged = vars(current).copy()
    for raw_key, v in value.items():
        key = _TOLERANCE_KEYS.get(raw_key)
        if key is None:
            raise ScoringConfigError(f"{label} has unknown parameter: {raw_key}")
        merged[key] = _number(v, f"{label}.{key}")
    return FeatureTolerance(**merged)


DEFAULT_SCORING_CONFIG = ScoringConfig()


def load_scoring_config(path: str | Path, base: ScoringConfig | None = None) -> ScoringConfig:
    """Read a JSON tuning file and merge it over ``base`` (defaults if omitted)."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ScoringConfigError(f"cannot read tuning file {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ScoringConfigError(f"tuning file {p} is not valid JSON: {e}") from e
    return (base or DEFAULT_SCORING_CONFIG).with_overrides(data)


def scoring_config_from_settings(settings: Any = None) -> ScoringConfig:
    if settings is None:
        from ..config.settings import get_settings
        settings = get_settings()
    if settings.TUNING_FILE:
        return load_scoring_config(settings.TUNING_FILE)
    return DEFAULT_SCORING_CONFIG
