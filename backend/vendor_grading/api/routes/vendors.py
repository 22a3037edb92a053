from typing import Any
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.db.session import get_db
from vendor_grading.api.deps import get_current_email, get_role_resolver
from vendor_grading.core.roles import RoleResolver
from vendor_grading.schemas.vendor_form import VendorFormData
from vendor_grading.services.completion import completion_counts, completion_percentage
from vendor_grading.services import vendor_service

router = APIRouter(prefix="/vendors", tags=["vendors"])


def _form_response(vendor) -> dict[str, Any]:
    return {
        **vendor_service.vendor_summary(vendor),
        "form": vendor_service.vendor_form(vendor).to_json(),
    }


@router.post("")
async def create_vendor(
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    vendor, created = await vendor_service.create_vendor_form(db, email)
    return {**_form_response(vendor), "created": created}


@router.get("/me")
async def get_my_vendor(
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
):
    vendor = await vendor_service.get_vendor_by_email(db, email)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No vendor form for this account")
    return _form_response(vendor)


@router.post("/completion")
async def preview_completion(data: VendorFormData):
    filled, total = completion_counts(data)
    return {"filled": filled, "total": total, "completion_percentage": completion_percentage(filled, total)}


@router.put("/{vendor_id}")
async def save_vendor(
    vendor_id: UUID,
    data: VendorFormData,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
    roles: RoleResolver = Depends(get_role_resolver),
):
    vendor = await vendor_service.save_vendor_form(db, vendor_id, data, email, is_admin=roles.is_admin(email))
    return _form_response(vendor)


@router.post("/{vendor_id}/submit")
async def submit_vendor(
    vendor_id: UUID,
    data: VendorFormData | None = None,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(get_current_email),
    roles: RoleResolver = Depends(get_role_resolver),
):
    vendor = await vendor_service.submit_vendor_form(db, vendor_id, data, email, is_admin=roles.is_admin(email))
    return _form_response(vendor)
