from __future__ import annotations

from .errors import ScoringConfigError


def relative_similarity_score(base: float, comp: float, tolerance_percentage: float,
                              max_diff_percentage: float) -> float:
    """Similarity (0-100) of ``comp`` to ``base`` on a relative tolerance curve.

    ``tolerance = base * tolerance_percentage`` bounds the smooth region where
    the score follows ``100 * (1 - diff / (tolerance + diff))``. Between the
    tolerance and ``max_diff = base * max_diff_percentage`` the smooth value is
    scaled linearly down to 0, and at ``max_diff`` or beyond it is 0.

    A zero on the comparable with a positive base means the feature is missing
    there (score 0); zero on both sides is a perfect match.

    Raises :class:`ScoringConfigError` when ``base > 0`` and the two
    percentages are equal, since the fall-off interval then has no width.
    """
    if base > 0 and tolerance_percentage == max_diff_percentage:
        raise ScoringConfigError(
            f"tolerance_percentage ({tolerance_percentage}) equals max_diff_percentage "
            f"({max_diff_percentage}); the fall-off interval is empty"
        )
    if base > 0 and comp == 0:
        return 0.0
    if base == 0 and comp == 0:
        return 100.0

    diff = abs(base - comp)
    tolerance = base * tolerance_percentage
    max_diff = base * max_diff_percentage

    if diff >= max_diff:
        return 0.0
    if diff == 0:
        return 100.0

    smooth = 100 * (1 - diff / (tolerance + diff))
    if diff <= tolerance:
        return smooth
    factor = (max_diff - diff) / (max_diff - tolerance)
    return smooth * factor


def binary_similarity(match: bool) -> float:
    return 100.0 if match else 0.0
