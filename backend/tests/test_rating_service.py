"""Reviewer assignments and rating submission against a SQLite database."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from vendor_grading.core.errors import (
    AssignmentNotFound,
    InvalidRatingValue,
    InvalidReviewerEmail,
    InvalidSection,
    NotAssigned,
    UnknownParameter,
    VendorNotFound,
)
from vendor_grading.core.grading_catalog import FINANCIAL, PROCUREMENT, SITE, get_parameters_for_section
from vendor_grading.models import AuditLog, VendorRating
from vendor_grading.services import rating_service, vendor_service
from vendor_grading.services.grade_service import get_grade, resolve_section_ratings

ADMIN = "admin@example.com"
REVIEWER = "site.reviewer@example.com"


def _all(section: str, value: int) -> dict:
    return {p.key: value for p in get_parameters_for_section(section)}


@pytest.fixture
def vendor_id(run_db):
    async def _setup(db):
        vendor, _ = await vendor_service.create_vendor_form(db, "vendor@example.com")
        await rating_service.assign_reviewer(db, vendor.id, SITE, REVIEWER, assigned_by=ADMIN)
        return vendor.id

    return run_db(_setup)


def _count_ratings(run_db, vendor_id) -> int:
    async def _count(db):
        result = await db.execute(select(func.count(VendorRating.id)).where(VendorRating.vendor_id == vendor_id))
        return result.scalar_one()

    return run_db(_count)


def test_submit_ratings_recomputes_grade(run_db, vendor_id):
    grade = run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 5)))
    assert grade.site_score == 45.0
    assert grade.total_score == 45.0
    assert grade.computed_grade == "D"
    assert grade.final_grade == "D"
    assert _count_ratings(run_db, vendor_id) == 7


def test_unknown_parameter_rejects_whole_batch(run_db, vendor_id):
    ratings = {"material_timely_delivery": 5, "support_at_site": 4, "nonexistent_param": 3}
    with pytest.raises(UnknownParameter):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, ratings))
    assert _count_ratings(run_db, vendor_id) == 0
    assert run_db(lambda db: get_grade(db, vendor_id)) is None


@pytest.mark.parametrize("bad_value", [0, 6, 3.5, "4", True, None])
def test_invalid_rating_value(run_db, vendor_id, bad_value):
    ratings = {"material_timely_delivery": 5, "support_at_site": bad_value}
    with pytest.raises(InvalidRatingValue):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, ratings))
    assert _count_ratings(run_db, vendor_id) == 0


def test_not_assigned_reviewer(run_db, vendor_id):
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, PROCUREMENT, REVIEWER, _all(PROCUREMENT, 3)))
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, "other@example.com", _all(SITE, 3)))


def test_get_ratings_requires_assignment(run_db, vendor_id):
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 4)))
    assert run_db(lambda db: rating_service.get_ratings(db, vendor_id, SITE, REVIEWER)) == _all(SITE, 4)
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.get_ratings(db, vendor_id, SITE, "other@example.com"))
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.get_ratings(db, vendor_id, SITE, ADMIN))
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.get_ratings(db, vendor_id, PROCUREMENT, REVIEWER))


def test_unknown_section_and_vendor(run_db, vendor_id):
    from uuid import uuid4

    with pytest.raises(InvalidSection):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, "marketing", REVIEWER, {}))
    with pytest.raises(VendorNotFound):
        run_db(lambda db: rating_service.submit_ratings(db, uuid4(), SITE, REVIEWER, {}))


def test_resubmission_overwrites_own_ratings(run_db, vendor_id):
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 5)))
    grade = run_db(
        lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, {"material_timely_delivery": 1})
    )
    # 10 points drop to 2 on the one resubmitted parameter; the rest stay at 5
    assert grade.site_score == 37.0
    assert _count_ratings(run_db, vendor_id) == 7
    mine = run_db(lambda db: rating_service.get_ratings(db, vendor_id, SITE, REVIEWER))
    assert mine["material_timely_delivery"] == 1
    assert mine["support_at_site"] == 5


def test_reviewer_email_is_normalised(run_db, vendor_id):
    grade = run_db(
        lambda db: rating_service.submit_ratings(db, vendor_id, SITE, "  Site.Reviewer@Example.com ", _all(SITE, 3))
    )
    assert grade.site_score == 27.0


def test_empty_batch_still_recomputes(run_db, vendor_id):
    grade = run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, {}))
    assert grade.total_score == 0.0
    assert grade.computed_grade == "D"


def test_submission_is_audited(run_db, vendor_id):
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, {"execution_time": 4}))

    async def _audit(db):
        result = await db.execute(select(AuditLog).where(AuditLog.action == "RATINGS_SUBMITTED"))
        return result.scalars().all()

    entries = run_db(_audit)
    assert len(entries) == 1
    assert entries[0].actor_email == REVIEWER
    assert entries[0].diff_json == {"section": SITE, "ratings": {"execution_time": 4}}


def test_assign_reviewer_idempotent_and_validated(run_db, vendor_id):
    assignment, created = run_db(
        lambda db: rating_service.assign_reviewer(db, vendor_id, SITE, REVIEWER.upper(), assigned_by=ADMIN)
    )
    assert not created
    assert assignment.reviewer_email == REVIEWER
    with pytest.raises(InvalidReviewerEmail):
        run_db(lambda db: rating_service.assign_reviewer(db, vendor_id, SITE, "not-an-email", assigned_by=ADMIN))
    with pytest.raises(InvalidSection):
        run_db(lambda db: rating_service.assign_reviewer(db, vendor_id, "hr", REVIEWER, assigned_by=ADMIN))


def test_remove_assignment_keeps_ratings(run_db, vendor_id):
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 4)))
    assignments = run_db(lambda db: rating_service.list_vendor_assignments(db, vendor_id))
    assert len(assignments) == 1
    run_db(lambda db: rating_service.remove_assignment(db, assignments[0].id, acting_admin=ADMIN))
    assert _count_ratings(run_db, vendor_id) == 7
    with pytest.raises(NotAssigned):
        run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 5)))
    with pytest.raises(AssignmentNotFound):
        run_db(lambda db: rating_service.remove_assignment(db, assignments[0].id, acting_admin=ADMIN))


def test_list_reviewer_assignments(run_db, vendor_id):
    rows = run_db(lambda db: rating_service.list_reviewer_assignments(db, REVIEWER))
    assert len(rows) == 1
    assert rows[0]["section"] == SITE
    assert rows[0]["ratings_submitted"] is False
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 2)))
    rows = run_db(lambda db: rating_service.list_reviewer_assignments(db, REVIEWER))
    assert rows[0]["ratings_submitted"] is True
    assert rows[0]["section_complete"] is True
    assert rows[0]["vendor"]["email"] == "vendor@example.com"


def test_latest_reviewer_wins_on_shared_section(run_db, vendor_id):
    second = "second.site@example.com"
    run_db(lambda db: rating_service.assign_reviewer(db, vendor_id, SITE, second, assigned_by=ADMIN))
    run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, REVIEWER, _all(SITE, 5)))
    grade = run_db(lambda db: rating_service.submit_ratings(db, vendor_id, SITE, second, _all(SITE, 1)))
    assert grade.site_score == 9.0
    assert _count_ratings(run_db, vendor_id) == 14


def test_resolve_tie_goes_to_first_email():
    at = datetime(2026, 1, 1, 12, 0, 0)
    rows = [
        VendorRating(section=FINANCIAL, parameter_key="revenue_trend", rating=2, rated_by="b@example.com", rated_at=at),
        VendorRating(section=FINANCIAL, parameter_key="revenue_trend", rating=4, rated_by="a@example.com", rated_at=at),
        VendorRating(
            section=FINANCIAL,
            parameter_key="debt_solvency",
            rating=1,
            rated_by="a@example.com",
            rated_at=at - timedelta(days=1),
        ),
        VendorRating(section=FINANCIAL, parameter_key="debt_solvency", rating=5, rated_by="b@example.com", rated_at=at),
    ]
    resolved = resolve_section_ratings(rows)
    assert resolved[FINANCIAL] == {"revenue_trend": 4, "debt_solvency": 5}
    assert resolved[SITE] == {}
