"""
Reviewer assignments and rating ingestion.

A rating batch is all-or-nothing: every key and value is validated before the first write.
Accepted batches are upserted per (vendor, section, parameter, reviewer) and the vendor's
grade is recomputed inside the same transaction, under a per-vendor row lock.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.errors import (
    AssignmentNotFound,
    GradingError,
    InvalidRatingValue,
    InvalidReviewerEmail,
    InvalidSection,
    NotAssigned,
    UnknownParameter,
)
from vendor_grading.core.grading_catalog import MAX_RATING, MIN_RATING, is_valid_section, parameter_keys
from vendor_grading.core.roles import normalize_email
from vendor_grading.models.grading import ReviewerAssignment, VendorGrade, VendorRating
from vendor_grading.models.vendor import Vendor
from vendor_grading.services.audit import log_action
from vendor_grading.services.grade_service import recompute_vendor_grade
from vendor_grading.services.grading_logging import (
    log_ratings_submitted,
    log_rejected_submission,
    log_reviewer_assigned,
)
from vendor_grading.services.section_scorer import is_section_complete
from vendor_grading.services.vendor_service import load_vendor


def _require_section(section: str) -> None:
    if not is_valid_section(section):
        raise InvalidSection(f"Unknown grading section: {section}", section=section)


def validate_ratings(section: str, ratings: Mapping[str, Any]) -> dict[str, int]:
    """Validate a whole batch; raise on the first bad key or value, before anything is written."""
    _require_section(section)
    valid_keys = parameter_keys(section)
    clean: dict[str, int] = {}
    for key, value in ratings.items():
        if key not in valid_keys:
            raise UnknownParameter(f"Unknown parameter for {section}: {key}", parameter_key=key)
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise InvalidRatingValue(f"{key}: {value!r} is not an integer 1-5", parameter_key=key, value=value)
        clean[key] = value
    return clean


async def find_assignment(
    db: AsyncSession, vendor_id: UUID, section: str, reviewer_email: str
) -> ReviewerAssignment | None:
    result = await db.execute(
        select(ReviewerAssignment).where(
            ReviewerAssignment.vendor_id == vendor_id,
            ReviewerAssignment.section == section,
            ReviewerAssignment.reviewer_email == normalize_email(reviewer_email),
        )
    )
    return result.scalar_one_or_none()


async def _require_assignment(db: AsyncSession, vendor_id: UUID, section: str, reviewer_email: str) -> None:
    if not await find_assignment(db, vendor_id, section, reviewer_email):
        raise NotAssigned(
            f"{reviewer_email} is not assigned to {section} for vendor {vendor_id}",
            vendor_id=str(vendor_id),
            section=section,
        )


async def assign_reviewer(
    db: AsyncSession,
    vendor_id: UUID,
    section: str,
    reviewer_email: str,
    assigned_by: str,
) -> tuple[ReviewerAssignment, bool]:
    """Create the assignment, or return the existing one. Second item: created."""
    _require_section(section)
    email = normalize_email(reviewer_email)
    if not email or "@" not in email:
        raise InvalidReviewerEmail(f"Invalid reviewer email: {reviewer_email!r}")
    await load_vendor(db, vendor_id)
    existing = await find_assignment(db, vendor_id, section, email)
    if existing:
        return existing, False
    assignment = ReviewerAssignment(
        vendor_id=vendor_id,
        section=section,
        reviewer_email=email,
        assigned_by=normalize_email(assigned_by),
        assigned_at=datetime.utcnow(),
    )
    db.add(assignment)
    await db.flush()
    await log_action(
        db,
        normalize_email(assigned_by),
        "REVIEWER_ASSIGNED",
        "reviewer_assignment",
        assignment.id,
        {"vendor_id": str(vendor_id), "section": section, "reviewer_email": email},
    )
    log_reviewer_assigned(str(vendor_id), section, email, normalize_email(assigned_by))
    return assignment, True


async def remove_assignment(db: AsyncSession, assignment_id: UUID, acting_admin: str) -> None:
    """Delete an assignment. Ratings already given by that reviewer stay on record."""
    result = await db.execute(select(ReviewerAssignment).where(ReviewerAssignment.id == assignment_id))
    assignment = result.scalar_one_or_none()
    if not assignment:
        raise AssignmentNotFound(f"Assignment {assignment_id} not found")
    diff = {
        "vendor_id": str(assignment.vendor_id),
        "section": assignment.section,
        "reviewer_email": assignment.reviewer_email,
    }
    await db.delete(assignment)
    await db.flush()
    await log_action(db, normalize_email(acting_admin), "REVIEWER_UNASSIGNED", "reviewer_assignment", assignment_id, diff)


async def list_vendor_assignments(db: AsyncSession, vendor_id: UUID) -> list[ReviewerAssignment]:
    await load_vendor(db, vendor_id)
    result = await db.execute(
        select(ReviewerAssignment)
        .where(ReviewerAssignment.vendor_id == vendor_id)
        .order_by(ReviewerAssignment.section, ReviewerAssignment.assigned_at)
    )
    return list(result.scalars().all())


async def list_reviewer_assignments(db: AsyncSession, reviewer_email: str) -> list[dict[str, Any]]:
    """A reviewer's assignments with vendor summary and whether their ratings are in / complete."""
    email = normalize_email(reviewer_email)
    result = await db.execute(
        select(ReviewerAssignment, Vendor)
        .join(Vendor, Vendor.id == ReviewerAssignment.vendor_id)
        .where(ReviewerAssignment.reviewer_email == email)
        .order_by(ReviewerAssignment.assigned_at.desc())
    )
    rows = result.all()
    ratings_result = await db.execute(select(VendorRating).where(VendorRating.rated_by == email))
    mine: dict[tuple[UUID, str], dict[str, int]] = {}
    for r in ratings_result.scalars().all():
        mine.setdefault((r.vendor_id, r.section), {})[r.parameter_key] = r.rating
    out = []
    for assignment, vendor in rows:
        own = mine.get((assignment.vendor_id, assignment.section), {})
        out.append(
            {
                "id": str(assignment.id),
                "vendor_id": str(assignment.vendor_id),
                "section": assignment.section,
                "assigned_at": assignment.assigned_at.isoformat() if assignment.assigned_at else None,
                "vendor": {
                    "company_name": vendor.company_name or "",
                    "email": vendor.email,
                    "completion_percentage": vendor.completion_percentage,
                    "submitted": bool(vendor.submitted),
                },
                "ratings_submitted": bool(own),
                "section_complete": is_section_complete(assignment.section, own),
            }
        )
    return out


async def get_ratings(db: AsyncSession, vendor_id: UUID, section: str, reviewer_email: str) -> dict[str, int]:
    """The reviewer's own ratings for a section, for resuming a draft."""
    _require_section(section)
    await load_vendor(db, vendor_id)
    await _require_assignment(db, vendor_id, section, reviewer_email)
    result = await db.execute(
        select(VendorRating).where(
            VendorRating.vendor_id == vendor_id,
            VendorRating.section == section,
            VendorRating.rated_by == normalize_email(reviewer_email),
        )
    )
    return {r.parameter_key: r.rating for r in result.scalars().all()}


async def submit_ratings(
    db: AsyncSession,
    vendor_id: UUID,
    section: str,
    reviewer_email: str,
    ratings: Mapping[str, Any],
) -> VendorGrade:
    """Validate, upsert and recompute. Returns the refreshed grade row."""
    email = normalize_email(reviewer_email)
    try:
        _require_section(section)
        await load_vendor(db, vendor_id, for_update=True)
        await _require_assignment(db, vendor_id, section, email)
        clean = validate_ratings(section, ratings)
    except GradingError as e:
        log_rejected_submission(str(vendor_id), section, email, e.code)
        raise

    existing_result = await db.execute(
        select(VendorRating).where(
            VendorRating.vendor_id == vendor_id,
            VendorRating.section == section,
            VendorRating.rated_by == email,
        )
    )
    existing = {r.parameter_key: r for r in existing_result.scalars().all()}
    now = datetime.utcnow()
    for key, value in clean.items():
        row = existing.get(key)
        if row:
            row.rating = value
            row.rated_at = now
        else:
            db.add(
                VendorRating(
                    vendor_id=vendor_id,
                    section=section,
                    parameter_key=key,
                    rating=value,
                    rated_by=email,
                    rated_at=now,
                )
            )
    await db.flush()
    grade = await recompute_vendor_grade(db, vendor_id)
    await log_action(db, email, "RATINGS_SUBMITTED", "vendor", vendor_id, {"section": section, "ratings": clean})
    log_ratings_submitted(str(vendor_id), section, email, len(clean), total_score=float(grade.total_score))
    return grade


async def list_vendor_ratings(db: AsyncSession, vendor_id: UUID) -> list[VendorRating]:
    """Every rating row for a vendor, all reviewers (admin read-only view)."""
    await load_vendor(db, vendor_id)
    result = await db.execute(
        select(VendorRating)
        .where(VendorRating.vendor_id == vendor_id)
        .order_by(VendorRating.section, VendorRating.parameter_key, VendorRating.rated_by)
    )
    return list(result.scalars().all())
