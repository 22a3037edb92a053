"""
Letter-grade bands for the 0-100 composite score.
Bands are evaluated best first; the first band whose floor the score reaches wins.
"""
from __future__ import annotations

from dataclasses import dataclass

GRADES = ("A", "B", "C", "D")


@dataclass(frozen=True)
class GradeBand:
    grade: str
    min_score: float
    category: str
    gate_note: str


GRADE_BANDS = (
    GradeBand("A", 85.0, "Strategic Vendor", "Strong financials"),
    GradeBand("B", 70.0, "Approved Vendor", "Acceptable"),
    GradeBand("C", 55.0, "Conditional Vendor", "Financial watchlist"),
    GradeBand("D", 0.0, "High-Risk Vendor", "Avoid / short-term only"),
)

_BANDS_BY_GRADE = {b.grade: b for b in GRADE_BANDS}


def score_to_grade(total_score: float) -> str:
    """Map 0-100 total to A/B/C/D."""
    for band in GRADE_BANDS[:-1]:
        if total_score >= band.min_score:
            return band.grade
    return GRADE_BANDS[-1].grade


def band_for_grade(grade: str) -> GradeBand | None:
    return _BANDS_BY_GRADE.get(grade)


def is_valid_grade(grade: str | None) -> bool:
    """Override letters: A-D, or None to clear."""
    return grade is None or grade in _BANDS_BY_GRADE
