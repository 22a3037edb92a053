"""
Composite grader - site + procurement + financial section scores -> 0-100 total -> A/B/C/D.
Pure and deterministic; recomputation with unchanged ratings gives identical output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Mapping

from vendor_grading.core.grade_bands import band_for_grade, score_to_grade
from vendor_grading.core.grading_catalog import FINANCIAL, PROCUREMENT, SITE
from vendor_grading.services.section_scorer import compute_section_score, round2


@dataclass(frozen=True)
class GradeComputation:
    site_score: float
    procurement_score: float
    financial_score: float
    total_score: float
    computed_grade: str

    @property
    def category(self) -> str:
        return band_for_grade(self.computed_grade).category

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_grade(
    site_ratings: Mapping[str, int] | None,
    procurement_ratings: Mapping[str, int] | None,
    financial_ratings: Mapping[str, int] | None,
) -> GradeComputation:
    site = compute_section_score(SITE, site_ratings or {})
    procurement = compute_section_score(PROCUREMENT, procurement_ratings or {})
    financial = compute_section_score(FINANCIAL, financial_ratings or {})
    total = round2(site + procurement + financial)
    return GradeComputation(
        site_score=site,
        procurement_score=procurement,
        financial_score=financial,
        total_score=total,
        computed_grade=score_to_grade(total),
    )


def compute_grade_by_section(ratings_by_section: Mapping[str, Mapping[str, int]]) -> GradeComputation:
    return compute_grade(
        ratings_by_section.get(SITE),
        ratings_by_section.get(PROCUREMENT),
        ratings_by_section.get(FINANCIAL),
    )
