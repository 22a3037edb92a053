"""Composite grader: worked scenarios, threshold determinism, idempotence."""
from vendor_grading.core.grade_bands import score_to_grade
from vendor_grading.core.grading_catalog import FINANCIAL, PROCUREMENT, SITE, get_parameters_for_section
from vendor_grading.services.grade_engine import compute_grade, compute_grade_by_section


def _all(section: str, value: int) -> dict:
    return {p.key: value for p in get_parameters_for_section(section)}


def test_all_site_parameters_at_max():
    site = {
        "material_timely_delivery": 5,
        "support_at_site": 5,
        "execution_time": 5,
        "safety_compliance": 5,
        "workmanship_quality": 5,
        "planning_coordination": 5,
        "responsiveness_rectification": 5,
    }
    result = compute_grade(site, None, None)
    assert result.site_score == 45.0
    assert result.total_score == 45.0
    assert result.computed_grade == "D"


def test_procurement_all_three():
    result = compute_grade(None, _all(PROCUREMENT, 3), None)
    assert result.procurement_score == 18.0


def test_financial_all_one_with_site_and_procurement():
    result = compute_grade(_all(SITE, 5), _all(PROCUREMENT, 3), _all(FINANCIAL, 1))
    assert result.financial_score == 5.0
    assert result.total_score == 68.0
    assert result.computed_grade == "C"
    assert result.category == "Conditional Vendor"


def test_all_max_is_grade_a():
    result = compute_grade(_all(SITE, 5), _all(PROCUREMENT, 5), _all(FINANCIAL, 5))
    assert result.total_score == 100.0
    assert result.computed_grade == "A"


def test_no_ratings_is_grade_d():
    result = compute_grade(None, None, None)
    assert result.to_dict() == {
        "site_score": 0.0,
        "procurement_score": 0.0,
        "financial_score": 0.0,
        "total_score": 0.0,
        "computed_grade": "D",
    }


def test_threshold_values():
    expected = [(84.99, "B"), (85.0, "A"), (69.99, "C"), (70.0, "B"), (54.99, "D"), (55.0, "C"), (0.0, "D")]
    assert [(s, score_to_grade(s)) for s, _ in expected] == expected


def test_total_bounded():
    for value in range(1, 6):
        result = compute_grade(_all(SITE, value), _all(PROCUREMENT, value), _all(FINANCIAL, value))
        assert 0 <= result.total_score <= 100
        assert result.total_score == round(value / 5 * 100, 2)


def test_recompute_is_idempotent():
    ratings = {
        SITE: {"material_timely_delivery": 4, "execution_time": 2},
        PROCUREMENT: _all(PROCUREMENT, 4),
        FINANCIAL: {"revenue_trend": 3},
    }
    first = compute_grade_by_section(ratings)
    second = compute_grade_by_section(ratings)
    assert first == second
    assert first.to_dict() == second.to_dict()
