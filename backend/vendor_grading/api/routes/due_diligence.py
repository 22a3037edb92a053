from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from vendor_grading.db.session import get_db
from vendor_grading.api.deps import require_due_diligence
from vendor_grading.services import due_diligence_service, vendor_service

router = APIRouter(prefix="/due-diligence", tags=["due-diligence"])


class AreaVerification(BaseModel):
    verified: bool = False
    comment: str | None = None


class VerificationRequest(BaseModel):
    company_details: AreaVerification | None = None
    financial_details: AreaVerification | None = None
    bank_details: AreaVerification | None = None
    references: AreaVerification | None = None
    documents: AreaVerification | None = None
    overall_status: str | None = None


@router.get("/list")
async def list_verifications(
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_due_diligence),
):
    return await due_diligence_service.list_verifications(db)


@router.get("/{vendor_id}")
async def get_verification(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_due_diligence),
):
    """The verification (or null) alongside the vendor's form, which is what gets verified."""
    vendor = await vendor_service.load_vendor(db, vendor_id)
    verification = await due_diligence_service.get_verification(db, vendor_id)
    return {
        **vendor_service.vendor_summary(vendor),
        "form": vendor_service.vendor_form(vendor).to_json(),
        "verification": due_diligence_service.verification_snapshot(verification) if verification else None,
    }


@router.put("/{vendor_id}")
async def save_verification(
    vendor_id: UUID,
    data: VerificationRequest,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_due_diligence),
):
    areas = data.model_dump(exclude={"overall_status"})
    verification = await due_diligence_service.save_verification(
        db, vendor_id, areas, data.overall_status, verified_by=email
    )
    return {"ok": True, "verification": due_diligence_service.verification_snapshot(verification)}
