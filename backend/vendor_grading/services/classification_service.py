"""
Admin classification of vendors: capex/opex type, sub-type and capex spend band.
The list is ordered by the vendor's grade total (ungraded as 0), then most recently updated.
"""
from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.errors import InvalidClassification
from vendor_grading.core.roles import normalize_email
from vendor_grading.models.classification import VendorClassification
from vendor_grading.models.grading import VendorGrade
from vendor_grading.models.vendor import Vendor
from vendor_grading.services.audit import log_action
from vendor_grading.services.vendor_service import load_vendor

VENDOR_TYPES = ("capex", "opex")
OPEX_SUB_TYPES = ("raw_material", "consumables", "service")
CAPEX_SUB_TYPES = ("civil", "plant_machinery", "utilities", "service")
CAPEX_BANDS = (
    "less_than_1L",
    "1L_to_5L",
    "5L_to_10L",
    "10L_to_20L",
    "20L_to_50L",
    "50L_to_1Cr",
    "1Cr_to_5Cr",
    "5Cr_to_10Cr",
    "10Cr_to_25Cr",
    "25Cr_to_50Cr",
    "50Cr_to_100Cr",
    "more_than_100Cr",
)

_ALLOWED = {
    "vendor_type": VENDOR_TYPES,
    "opex_sub_type": OPEX_SUB_TYPES,
    "capex_sub_type": CAPEX_SUB_TYPES,
    "capex_band": CAPEX_BANDS,
}


def _clean(field: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    if value not in _ALLOWED[field]:
        raise InvalidClassification(f"Invalid {field}: {value!r}", field=field)
    return value


def validate_classification(data: Mapping[str, Any]) -> dict[str, Any]:
    """Blank values clear a field; anything else must be one of the known choices."""
    cleaned: dict[str, Any] = {field: _clean(field, data.get(field)) for field in _ALLOWED}
    notes = data.get("notes")
    cleaned["notes"] = str(notes) if notes else None
    return cleaned


def classification_snapshot(c: VendorClassification, grade: VendorGrade | None = None) -> dict[str, Any]:
    return {
        "vendor_id": str(c.vendor_id),
        "vendor_type": c.vendor_type,
        "opex_sub_type": c.opex_sub_type,
        "capex_sub_type": c.capex_sub_type,
        "capex_band": c.capex_band,
        "notes": c.notes,
        "due_diligence_sent": bool(c.due_diligence_sent),
        "due_diligence_date": c.due_diligence_date.isoformat() if c.due_diligence_date else None,
        "info_request_sent": bool(c.info_request_sent),
        "info_request_date": c.info_request_date.isoformat() if c.info_request_date else None,
        "total_score": float(grade.total_score or 0) if grade else 0.0,
        "final_grade": grade.final_grade if grade else None,
        "updated_at": c.updated_at.isoformat() if c.updated_at else None,
    }


async def get_classification(db: AsyncSession, vendor_id: UUID) -> VendorClassification | None:
    result = await db.execute(select(VendorClassification).where(VendorClassification.vendor_id == vendor_id))
    return result.scalar_one_or_none()


async def list_classifications(db: AsyncSession) -> list[dict[str, Any]]:
    total = func.coalesce(VendorGrade.total_score, 0)
    result = await db.execute(
        select(VendorClassification, VendorGrade, Vendor)
        .join(Vendor, Vendor.id == VendorClassification.vendor_id)
        .outerjoin(VendorGrade, VendorGrade.vendor_id == VendorClassification.vendor_id)
        .order_by(total.desc(), VendorClassification.updated_at.desc())
    )
    return [
        {**classification_snapshot(c, g), "company_name": v.company_name or "", "email": v.email}
        for c, g, v in result.all()
    ]


async def save_classification(
    db: AsyncSession,
    vendor_id: UUID,
    data: Mapping[str, Any],
    acting_admin: str,
) -> VendorClassification:
    """Upsert the editable fields. Due-diligence flags are left to the assign action."""
    cleaned = validate_classification(data)
    await load_vendor(db, vendor_id)
    classification = await get_classification(db, vendor_id)
    created = classification is None
    if created:
        classification = VendorClassification(vendor_id=vendor_id, due_diligence_sent=False, info_request_sent=False)
        db.add(classification)
    before = {field: getattr(classification, field) for field in cleaned} if not created else {}
    for field, value in cleaned.items():
        setattr(classification, field, value)
    classification.touch()
    await db.flush()
    await log_action(
        db,
        normalize_email(acting_admin),
        "CLASSIFICATION_SAVED",
        "vendor_classification",
        vendor_id,
        {"from": before, "to": cleaned},
    )
    return classification
