"""
Due-diligence verification of a vendor's submitted form.

An admin assigns the verification (status in_progress); a verifier then marks each
form area verified with an optional comment and sets the overall status. Verified and
rejected are completing statuses and stamp completed_at.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.errors import InvalidVerificationStatus
from vendor_grading.core.roles import normalize_email
from vendor_grading.models.classification import DueDiligenceVerification
from vendor_grading.models.vendor import Vendor
from vendor_grading.services.audit import log_action
from vendor_grading.services.classification_service import get_classification
from vendor_grading.services.grading_logging import log_due_diligence_assigned, log_verification_updated
from vendor_grading.services.vendor_service import load_vendor, vendor_summary

VERIFICATION_STATUSES = ("in_progress", "pending", "verified", "rejected")
COMPLETING_STATUSES = ("verified", "rejected")
VERIFICATION_AREAS = ("company_details", "financial_details", "bank_details", "references", "documents")


def verification_snapshot(v: DueDiligenceVerification) -> dict[str, Any]:
    snapshot: dict[str, Any] = {"vendor_id": str(v.vendor_id)}
    for area in VERIFICATION_AREAS:
        snapshot[area] = {
            "verified": bool(getattr(v, f"{area}_verified")),
            "comment": getattr(v, f"{area}_comment"),
        }
    snapshot.update(
        {
            "overall_status": v.overall_status,
            "assigned_at": v.assigned_at.isoformat() if v.assigned_at else None,
            "completed_at": v.completed_at.isoformat() if v.completed_at else None,
            "verified_by": v.verified_by,
            "updated_at": v.updated_at.isoformat() if v.updated_at else None,
        }
    )
    return snapshot


async def get_verification(db: AsyncSession, vendor_id: UUID) -> DueDiligenceVerification | None:
    result = await db.execute(
        select(DueDiligenceVerification).where(DueDiligenceVerification.vendor_id == vendor_id)
    )
    return result.scalar_one_or_none()


async def list_verifications(db: AsyncSession) -> list[dict[str, Any]]:
    """Open work first: in_progress, pending, verified, rejected; newest update first within a status."""
    status_rank = case(
        {status: idx for idx, status in enumerate(VERIFICATION_STATUSES)},
        value=DueDiligenceVerification.overall_status,
        else_=len(VERIFICATION_STATUSES),
    )
    result = await db.execute(
        select(DueDiligenceVerification, Vendor)
        .join(Vendor, Vendor.id == DueDiligenceVerification.vendor_id)
        .order_by(status_rank, DueDiligenceVerification.updated_at.desc())
    )
    return [{**verification_snapshot(v), "vendor": vendor_summary(vendor)} for v, vendor in result.all()]


async def assign_due_diligence(db: AsyncSession, vendor_id: UUID, acting_admin: str) -> DueDiligenceVerification:
    """
    Open (or reopen) the verification: status in_progress, completion cleared.
    Area flags from an earlier round are kept. An existing classification is marked as sent.
    """
    admin = normalize_email(acting_admin)
    await load_vendor(db, vendor_id, for_update=True)
    now = datetime.utcnow()
    verification = await get_verification(db, vendor_id)
    if verification is None:
        verification = DueDiligenceVerification(vendor_id=vendor_id)
        db.add(verification)
    previous = verification.overall_status
    verification.overall_status = "in_progress"
    verification.assigned_at = now
    verification.completed_at = None
    verification.verified_by = None
    verification.touch()

    classification = await get_classification(db, vendor_id)
    if classification is not None:
        classification.due_diligence_sent = True
        classification.due_diligence_date = now
        classification.touch()
    await db.flush()

    await log_action(
        db,
        admin,
        "DUE_DILIGENCE_ASSIGNED",
        "due_diligence_verification",
        vendor_id,
        {"from": previous, "to": "in_progress"},
    )
    log_due_diligence_assigned(str(vendor_id), admin)
    return verification


async def save_verification(
    db: AsyncSession,
    vendor_id: UUID,
    areas: Mapping[str, Mapping[str, Any] | None],
    overall_status: str | None,
    verified_by: str,
) -> DueDiligenceVerification:
    """
    Replace the area flags and overall status. A missing status means in_progress;
    an area left out is stored as unverified without a comment.
    """
    status = overall_status or "in_progress"
    if status not in VERIFICATION_STATUSES:
        raise InvalidVerificationStatus(f"Invalid overall status: {overall_status!r}", overall_status=overall_status)
    verifier = normalize_email(verified_by)
    await load_vendor(db, vendor_id, for_update=True)
    now = datetime.utcnow()
    verification = await get_verification(db, vendor_id)
    if verification is None:
        verification = DueDiligenceVerification(vendor_id=vendor_id, assigned_at=now)
        db.add(verification)
    previous = verification.overall_status

    for area in VERIFICATION_AREAS:
        entry = areas.get(area) or {}
        comment = entry.get("comment")
        setattr(verification, f"{area}_verified", bool(entry.get("verified")))
        setattr(verification, f"{area}_comment", str(comment) if comment else None)
    verification.overall_status = status
    verification.completed_at = now if status in COMPLETING_STATUSES else None
    verification.verified_by = verifier
    verification.touch()
    await db.flush()

    await log_action(
        db,
        verifier,
        "DUE_DILIGENCE_UPDATED",
        "due_diligence_verification",
        vendor_id,
        {"from": previous, "to": status},
    )
    log_verification_updated(str(vendor_id), status, verifier)
    return verification
