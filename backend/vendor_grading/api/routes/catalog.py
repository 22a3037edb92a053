from fastapi import APIRouter

from vendor_grading.core.grade_bands import GRADE_BANDS
from vendor_grading.core.grading_catalog import (
    GRADING_SECTIONS,
    MAX_RATING,
    MIN_RATING,
    RATING_LABELS,
    SECTION_LABELS,
    SECTION_WEIGHTS,
    all_parameters,
    get_parameters_for_section,
)

router = APIRouter(prefix="/grading", tags=["grading"])


@router.get("/catalog")
async def get_catalog():
    """Sections, parameters and grade bands for the reviewer and admin screens."""
    return {
        "sections": [
            {
                "key": section,
                "label": SECTION_LABELS[section],
                "weight": SECTION_WEIGHTS[section],
                "parameters": [
                    {
                        "key": p.key,
                        "name": p.name,
                        "description": p.description,
                        "weight": p.weight,
                        "ordinal": p.ordinal,
                    }
                    for p in get_parameters_for_section(section)
                ],
            }
            for section in GRADING_SECTIONS
        ],
        "parameter_count": len(all_parameters()),
        "grade_bands": [
            {"grade": b.grade, "min_score": b.min_score, "category": b.category, "gate_note": b.gate_note}
            for b in GRADE_BANDS
        ],
        "rating_scale": {"min": MIN_RATING, "max": MAX_RATING, "labels": {str(k): v for k, v in RATING_LABELS.items()}},
    }
