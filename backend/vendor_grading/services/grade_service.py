"""
Grade recompute and admin override for the cached VendorGrade row.

Recompute writes only scores, computed_grade and computed_at; override writes only
admin_override_grade, overridden_by and overridden_at. final_grade is always
admin_override_grade or computed_grade, re-derived by whichever side writes.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.errors import InvalidGrade
from vendor_grading.core.grade_bands import band_for_grade, is_valid_grade
from vendor_grading.core.grading_catalog import GRADING_SECTIONS
from vendor_grading.core.roles import normalize_email
from vendor_grading.models.grading import VendorGrade, VendorRating
from vendor_grading.services.audit import log_action
from vendor_grading.services.grade_engine import GradeComputation, compute_grade_by_section
from vendor_grading.services.grading_logging import log_grade_overridden, log_grade_recomputed
from vendor_grading.services.vendor_service import load_vendor


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def resolve_section_ratings(rows: Iterable[VendorRating]) -> dict[str, dict[str, int]]:
    """
    Collapse rating rows to one value per (section, parameter).
    With several reviewers on a section, the latest rated_at wins; equal timestamps
    fall back to the alphabetically first reviewer email.
    """
    winners: dict[tuple[str, str], VendorRating] = {}
    for row in rows:
        key = (row.section, row.parameter_key)
        current = winners.get(key)
        if current is None:
            winners[key] = row
            continue
        row_at, current_at = _naive_utc(row.rated_at), _naive_utc(current.rated_at)
        if row_at > current_at or (row_at == current_at and row.rated_by < current.rated_by):
            winners[key] = row
    by_section: dict[str, dict[str, int]] = {s: {} for s in GRADING_SECTIONS}
    for (section, param), row in winners.items():
        if section in by_section:
            by_section[section][param] = int(row.rating)
    return by_section


async def load_section_ratings(db: AsyncSession, vendor_id: UUID) -> dict[str, dict[str, int]]:
    result = await db.execute(select(VendorRating).where(VendorRating.vendor_id == vendor_id))
    return resolve_section_ratings(result.scalars().all())


async def _grade_row(db: AsyncSession, vendor_id: UUID) -> VendorGrade | None:
    result = await db.execute(select(VendorGrade).where(VendorGrade.vendor_id == vendor_id))
    return result.scalar_one_or_none()


async def recompute_vendor_grade(db: AsyncSession, vendor_id: UUID) -> VendorGrade:
    """Recompute from the latest rating rows and upsert the grade row, keeping any override."""
    section_ratings = await load_section_ratings(db, vendor_id)
    computation = compute_grade_by_section(section_ratings)
    grade = await _grade_row(db, vendor_id)
    if grade is None:
        grade = VendorGrade(vendor_id=vendor_id)
        db.add(grade)
    grade.site_score = computation.site_score
    grade.procurement_score = computation.procurement_score
    grade.financial_score = computation.financial_score
    grade.total_score = computation.total_score
    grade.computed_grade = computation.computed_grade
    grade.computed_at = datetime.utcnow()
    grade.final_grade = grade.admin_override_grade or computation.computed_grade
    await db.flush()
    log_grade_recomputed(str(vendor_id), computation.total_score, computation.computed_grade, grade.final_grade)
    return grade


async def compute_vendor_grade(db: AsyncSession, vendor_id: UUID) -> VendorGrade:
    """On-demand recompute (admin action). Raises VendorNotFound."""
    await load_vendor(db, vendor_id, for_update=True)
    return await recompute_vendor_grade(db, vendor_id)


async def preview_vendor_grade(db: AsyncSession, vendor_id: UUID) -> GradeComputation:
    """Compute without persisting."""
    await load_vendor(db, vendor_id)
    return compute_grade_by_section(await load_section_ratings(db, vendor_id))


async def override_grade(
    db: AsyncSession,
    vendor_id: UUID,
    grade: str | None,
    acting_admin: str,
) -> str:
    """Set (A-D) or clear (None) the admin override; returns the final grade."""
    if not is_valid_grade(grade):
        raise InvalidGrade(f"Invalid grade: {grade!r}", grade=grade)
    await load_vendor(db, vendor_id, for_update=True)
    row = await _grade_row(db, vendor_id)
    if row is None:
        row = await recompute_vendor_grade(db, vendor_id)
    admin = normalize_email(acting_admin)
    previous = row.admin_override_grade
    if grade:
        row.admin_override_grade = grade
        row.overridden_by = admin
        row.overridden_at = datetime.utcnow()
        row.final_grade = grade
    else:
        row.admin_override_grade = None
        row.overridden_by = None
        row.overridden_at = None
        row.final_grade = row.computed_grade
    await db.flush()
    await log_action(
        db,
        admin,
        "GRADE_OVERRIDDEN" if grade else "GRADE_OVERRIDE_CLEARED",
        "vendor_grade",
        row.id,
        {"from": previous, "to": grade, "computed_grade": row.computed_grade},
    )
    log_grade_overridden(str(vendor_id), grade, admin)
    return row.final_grade


async def get_grade(db: AsyncSession, vendor_id: UUID) -> VendorGrade | None:
    await load_vendor(db, vendor_id)
    return await _grade_row(db, vendor_id)


async def list_grades(db: AsyncSession) -> list[VendorGrade]:
    result = await db.execute(select(VendorGrade).order_by(VendorGrade.total_score.desc()))
    return list(result.scalars().all())


def grade_snapshot(grade: VendorGrade) -> dict[str, Any]:
    band = band_for_grade(grade.final_grade) if grade.final_grade else None
    return {
        "vendor_id": str(grade.vendor_id),
        "site_score": float(grade.site_score or 0),
        "procurement_score": float(grade.procurement_score or 0),
        "financial_score": float(grade.financial_score or 0),
        "total_score": float(grade.total_score or 0),
        "computed_grade": grade.computed_grade,
        "admin_override_grade": grade.admin_override_grade,
        "final_grade": grade.final_grade,
        "category": band.category if band else None,
        "gate_note": band.gate_note if band else None,
        "computed_at": grade.computed_at.isoformat() if grade.computed_at else None,
        "overridden_by": grade.overridden_by,
        "overridden_at": grade.overridden_at.isoformat() if grade.overridden_at else None,
    }
