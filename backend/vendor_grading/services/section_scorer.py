"""Section scorer - 1-5 parameter ratings -> weighted section score (0..section weight)."""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping

from vendor_grading.core.errors import InvalidSection
from vendor_grading.core.grading_catalog import (
    MAX_RATING,
    MIN_RATING,
    SECTION_WEIGHTS,
    get_parameters_for_section,
    is_valid_section,
)

_TWO_PLACES = Decimal("0.01")


def round2(value: Decimal | float) -> float:
    """Round half-up to 2 dp. Applied once per score, never per term."""
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _require_section(section: str) -> None:
    if not is_valid_section(section):
        raise InvalidSection(f"Unknown grading section: {section}", section=section)


def compute_section_score(section: str, ratings: Mapping[str, int]) -> float:
    """
    Sum of (rating / 5) * weight over every catalog parameter of the section.
    Unrated parameters count as 0, so partial ratings give a partial score.
    Input is assumed validated (1-5 integers).
    """
    _require_section(section)
    score = Decimal(0)
    for p in get_parameters_for_section(section):
        value = ratings.get(p.key) or 0
        score += Decimal(int(value)) / Decimal(MAX_RATING) * Decimal(p.weight)
    return round2(score)


def _is_rated(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and MIN_RATING <= value <= MAX_RATING


def is_section_complete(section: str, ratings: Mapping[str, int]) -> bool:
    _require_section(section)
    return all(_is_rated(ratings.get(p.key)) for p in get_parameters_for_section(section))


def section_progress(section: str, ratings: Mapping[str, int]) -> dict[str, Any]:
    """Rated count, current score and ceiling for the reviewer's section view."""
    _require_section(section)
    params = get_parameters_for_section(section)
    rated = sum(1 for p in params if _is_rated(ratings.get(p.key)))
    return {
        "section": section,
        "rated_count": rated,
        "parameter_count": len(params),
        "remaining": len(params) - rated,
        "score": compute_section_score(section, ratings),
        "max_score": SECTION_WEIGHTS[section],
        "complete": rated == len(params),
    }
