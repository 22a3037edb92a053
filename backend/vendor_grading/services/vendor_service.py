"""
Vendor form persistence: create, save (auto-save) and terminal submit.
Completion is recomputed on every save; submit pins it to 100 and locks the form for the vendor.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.errors import Forbidden, VendorFormLocked, VendorNotFound
from vendor_grading.core.roles import normalize_email
from vendor_grading.models.vendor import Vendor
from vendor_grading.schemas.vendor_form import VendorFormData, empty_vendor_form
from vendor_grading.services.audit import log_action
from vendor_grading.services.completion import compute_completion

log = logging.getLogger(__name__)


async def load_vendor(db: AsyncSession, vendor_id: UUID, for_update: bool = False) -> Vendor:
    """Fetch a vendor or raise VendorNotFound. for_update serialises per-vendor writers."""
    q = select(Vendor).where(Vendor.id == vendor_id)
    if for_update:
        q = q.with_for_update()
    result = await db.execute(q)
    vendor = result.scalar_one_or_none()
    if not vendor:
        raise VendorNotFound(f"Vendor {vendor_id} not found", vendor_id=str(vendor_id))
    return vendor


def vendor_form(vendor: Vendor) -> VendorFormData:
    form = VendorFormData.model_validate(vendor.form_json or {})
    form.id = str(vendor.id)
    form.email = vendor.email
    form.completion_percentage = vendor.completion_percentage
    return form


def vendor_summary(vendor: Vendor) -> dict[str, Any]:
    return {
        "vendor_id": str(vendor.id),
        "email": vendor.email,
        "company_name": vendor.company_name or "",
        "completion_percentage": vendor.completion_percentage,
        "submitted": bool(vendor.submitted),
        "submitted_at": vendor.submitted_at.isoformat() if vendor.submitted_at else None,
        "created_at": vendor.created_at.isoformat() if vendor.created_at else None,
        "updated_at": vendor.updated_at.isoformat() if vendor.updated_at else None,
    }


async def get_vendor_by_email(db: AsyncSession, email: str) -> Vendor | None:
    result = await db.execute(
        select(Vendor).where(Vendor.email == normalize_email(email)).order_by(Vendor.created_at).limit(1)
    )
    return result.scalar_one_or_none()


async def create_vendor_form(db: AsyncSession, email: str) -> tuple[Vendor, bool]:
    """Return the vendor's existing form, or create an empty one. Second item: created."""
    email = normalize_email(email)
    existing = await get_vendor_by_email(db, email)
    if existing:
        return existing, False
    vendor = Vendor(email=email, company_name="", submitted=False)
    db.add(vendor)
    await db.flush()
    form = empty_vendor_form(email, str(vendor.id))
    vendor.completion_percentage = compute_completion(form)
    form.completion_percentage = vendor.completion_percentage
    vendor.form_json = form.to_json()
    await db.flush()
    log.info("vendor_form_created", extra={"vendor_id": str(vendor.id), "event": "vendor_form_created"})
    return vendor, True


def _check_can_edit(vendor: Vendor, actor_email: str, is_admin: bool) -> None:
    if is_admin:
        return
    if normalize_email(actor_email) != vendor.email:
        raise Forbidden("Cannot modify another vendor's form", vendor_id=str(vendor.id))
    if vendor.submitted:
        raise VendorFormLocked("Form already submitted", vendor_id=str(vendor.id))


def _apply_form(vendor: Vendor, form: VendorFormData) -> None:
    form.id = str(vendor.id)
    form.email = vendor.email
    vendor.company_name = form.company_details.company_name.strip()
    vendor.form_json = form.to_json()
    vendor.touch()


async def save_vendor_form(
    db: AsyncSession,
    vendor_id: UUID,
    form: VendorFormData | Mapping[str, Any],
    actor_email: str,
    is_admin: bool = False,
) -> Vendor:
    vendor = await load_vendor(db, vendor_id, for_update=True)
    _check_can_edit(vendor, actor_email, is_admin)
    if not isinstance(form, VendorFormData):
        form = VendorFormData.model_validate(dict(form))
    if not vendor.submitted:
        form.completion_percentage = compute_completion(form)
    else:
        form.completion_percentage = 100
    vendor.completion_percentage = form.completion_percentage
    _apply_form(vendor, form)
    await db.flush()
    log.info(
        "vendor_form_saved",
        extra={
            "vendor_id": str(vendor.id),
            "completion_percentage": vendor.completion_percentage,
            "event": "vendor_form_saved",
        },
    )
    return vendor


async def submit_vendor_form(
    db: AsyncSession,
    vendor_id: UUID,
    form: VendorFormData | Mapping[str, Any] | None,
    actor_email: str,
    is_admin: bool = False,
) -> Vendor:
    """Terminal submit: completion forced to exactly 100, form locked for the vendor."""
    vendor = await load_vendor(db, vendor_id, for_update=True)
    _check_can_edit(vendor, actor_email, is_admin)
    if form is None:
        form = vendor_form(vendor)
    elif not isinstance(form, VendorFormData):
        form = VendorFormData.model_validate(dict(form))
    now = datetime.utcnow()
    form.completion_percentage = 100
    vendor.completion_percentage = 100
    vendor.submitted = True
    vendor.submitted_at = now
    _apply_form(vendor, form)
    await db.flush()
    await log_action(db, normalize_email(actor_email), "VENDOR_SUBMITTED", "vendor", vendor.id)
    log.info("vendor_form_submitted", extra={"vendor_id": str(vendor.id), "event": "vendor_form_submitted"})
    return vendor


async def list_vendors(db: AsyncSession) -> list[Vendor]:
    result = await db.execute(select(Vendor).order_by(Vendor.updated_at.desc()))
    return list(result.scalars().all())
