"""Grade recompute and admin override semantics."""
import logging
from uuid import uuid4

import pytest
from sqlalchemy import select

from vendor_grading.core.errors import InvalidGrade, VendorNotFound
from vendor_grading.core.grading_catalog import FINANCIAL, PROCUREMENT, SITE, get_parameters_for_section
from vendor_grading.models import AuditLog
from vendor_grading.services import grade_service, rating_service, vendor_service

ADMIN = "admin@example.com"
REVIEWERS = {
    SITE: "site@example.com",
    PROCUREMENT: "procurement@example.com",
    FINANCIAL: "financial@example.com",
}


def _all(section: str, value: int) -> dict:
    return {p.key: value for p in get_parameters_for_section(section)}


@pytest.fixture
def graded_vendor(run_db):
    """Vendor rated site 5s, procurement 3s, financial 1s: 45 + 18 + 5 = 68 (C)."""

    async def _setup(db):
        vendor, _ = await vendor_service.create_vendor_form(db, "vendor@example.com")
        for section, reviewer in REVIEWERS.items():
            await rating_service.assign_reviewer(db, vendor.id, section, reviewer, assigned_by=ADMIN)
        await rating_service.submit_ratings(db, vendor.id, SITE, REVIEWERS[SITE], _all(SITE, 5))
        await rating_service.submit_ratings(db, vendor.id, PROCUREMENT, REVIEWERS[PROCUREMENT], _all(PROCUREMENT, 3))
        await rating_service.submit_ratings(db, vendor.id, FINANCIAL, REVIEWERS[FINANCIAL], _all(FINANCIAL, 1))
        return vendor.id

    return run_db(_setup)


def test_combined_sections_grade_c(run_db, graded_vendor):
    grade = run_db(lambda db: grade_service.get_grade(db, graded_vendor))
    snap = grade_service.grade_snapshot(grade)
    assert snap["site_score"] == 45.0
    assert snap["procurement_score"] == 18.0
    assert snap["financial_score"] == 5.0
    assert snap["total_score"] == 68.0
    assert snap["computed_grade"] == "C"
    assert snap["final_grade"] == "C"
    assert snap["category"] == "Conditional Vendor"
    assert snap["admin_override_grade"] is None


def test_override_then_clear(run_db, graded_vendor):
    final = run_db(lambda db: grade_service.override_grade(db, graded_vendor, "A", acting_admin=ADMIN))
    assert final == "A"
    grade = run_db(lambda db: grade_service.get_grade(db, graded_vendor))
    assert grade.final_grade == "A"
    assert grade.computed_grade == "C"
    assert grade.total_score == 68.0
    assert grade.overridden_by == ADMIN
    assert grade.overridden_at is not None

    final = run_db(lambda db: grade_service.override_grade(db, graded_vendor, None, acting_admin=ADMIN))
    assert final == "C"
    grade = run_db(lambda db: grade_service.get_grade(db, graded_vendor))
    assert grade.admin_override_grade is None
    assert grade.overridden_by is None
    assert grade.final_grade == "C"


def test_override_survives_new_ratings(run_db, graded_vendor):
    run_db(lambda db: grade_service.override_grade(db, graded_vendor, "A", acting_admin=ADMIN))
    grade = run_db(
        lambda db: rating_service.submit_ratings(
            db, graded_vendor, FINANCIAL, REVIEWERS[FINANCIAL], _all(FINANCIAL, 5)
        )
    )
    # financial 25 replaces 5: 45 + 18 + 25 = 88
    assert grade.total_score == 88.0
    assert grade.computed_grade == "A"
    assert grade.admin_override_grade == "A"
    assert grade.final_grade == "A"

    run_db(lambda db: grade_service.override_grade(db, graded_vendor, "D", acting_admin=ADMIN))
    grade = run_db(
        lambda db: rating_service.submit_ratings(db, graded_vendor, SITE, REVIEWERS[SITE], {"execution_time": 1})
    )
    assert grade.computed_grade == "B"
    assert grade.final_grade == "D"


def test_invalid_override_grade(run_db, graded_vendor):
    with pytest.raises(InvalidGrade):
        run_db(lambda db: grade_service.override_grade(db, graded_vendor, "E", acting_admin=ADMIN))
    grade = run_db(lambda db: grade_service.get_grade(db, graded_vendor))
    assert grade.final_grade == "C"


def test_override_without_ratings_creates_grade_row(run_db):
    async def _setup(db):
        vendor, _ = await vendor_service.create_vendor_form(db, "fresh@example.com")
        return vendor.id

    vendor_id = run_db(_setup)
    assert run_db(lambda db: grade_service.get_grade(db, vendor_id)) is None
    assert run_db(lambda db: grade_service.override_grade(db, vendor_id, "B", acting_admin=ADMIN)) == "B"
    grade = run_db(lambda db: grade_service.get_grade(db, vendor_id))
    assert grade.computed_grade == "D"
    assert grade.total_score == 0.0
    assert grade.final_grade == "B"


def test_compute_twice_is_identical(run_db, graded_vendor):
    first = grade_service.grade_snapshot(run_db(lambda db: grade_service.compute_vendor_grade(db, graded_vendor)))
    second = grade_service.grade_snapshot(run_db(lambda db: grade_service.compute_vendor_grade(db, graded_vendor)))
    first.pop("computed_at")
    second.pop("computed_at")
    assert first == second


def test_preview_does_not_persist(run_db, graded_vendor):
    preview = run_db(lambda db: grade_service.preview_vendor_grade(db, graded_vendor))
    assert preview.total_score == 68.0
    assert preview.computed_grade == "C"


def test_unknown_vendor(run_db):
    with pytest.raises(VendorNotFound):
        run_db(lambda db: grade_service.compute_vendor_grade(db, uuid4()))
    with pytest.raises(VendorNotFound):
        run_db(lambda db: grade_service.override_grade(db, uuid4(), "A", acting_admin=ADMIN))
    with pytest.raises(VendorNotFound):
        run_db(lambda db: grade_service.get_grade(db, uuid4()))


def test_override_is_audited(run_db, graded_vendor):
    run_db(lambda db: grade_service.override_grade(db, graded_vendor, "A", acting_admin=ADMIN))
    run_db(lambda db: grade_service.override_grade(db, graded_vendor, None, acting_admin=ADMIN))

    async def _actions(db):
        result = await db.execute(
            select(AuditLog.action, AuditLog.diff_json)
            .where(AuditLog.entity_type == "vendor_grade")
            .order_by(AuditLog.created_at)
        )
        return result.all()

    rows = run_db(_actions)
    assert [r[0] for r in rows] == ["GRADE_OVERRIDDEN", "GRADE_OVERRIDE_CLEARED"]
    assert rows[0][1] == {"from": None, "to": "A", "computed_grade": "C"}
    assert rows[1][1] == {"from": "A", "to": None, "computed_grade": "C"}


def test_list_grades_ordered_by_total(run_db, graded_vendor):
    async def _other(db):
        vendor, _ = await vendor_service.create_vendor_form(db, "low@example.com")
        await grade_service.compute_vendor_grade(db, vendor.id)

    run_db(_other)
    grades = run_db(lambda db: grade_service.list_grades(db))
    assert [g.total_score for g in grades] == [68.0, 0.0]


def test_override_log_events(run_db, graded_vendor, caplog):
    caplog.set_level(logging.INFO, logger="vendor_grading.services.grading_logging")
    run_db(lambda db: grade_service.override_grade(db, graded_vendor, "B", acting_admin=ADMIN))
    run_db(lambda db: grade_service.override_grade(db, graded_vendor, None, acting_admin=ADMIN))
    records = [r for r in caplog.records if r.getMessage().startswith("grade_override")]
    assert [(r.getMessage(), r.event) for r in records] == [
        ("grade_overridden", "grade_overridden"),
        ("grade_override_cleared", "grade_override_cleared"),
    ]
    assert records[1].override_grade is None
