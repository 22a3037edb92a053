from typing import Any
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field

from vendor_grading.db.session import get_db
from vendor_grading.api.deps import get_role_resolver, require_reviewer
from vendor_grading.core.errors import NotAssigned
from vendor_grading.core.grading_catalog import GRADING_SECTIONS
from vendor_grading.core.roles import RoleResolver
from vendor_grading.services import grade_service, rating_service, vendor_service
from vendor_grading.services.section_scorer import section_progress

router = APIRouter(prefix="/reviewer", tags=["reviewer"])


class RateRequest(BaseModel):
    vendor_id: UUID
    section: str
    # Values are checked by the rating service so strings, floats and bools surface as INVALID_RATING_VALUE.
    ratings: dict[str, Any] = Field(default_factory=dict)


@router.get("/assignments")
async def my_assignments(
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_reviewer),
):
    return await rating_service.list_reviewer_assignments(db, email)


@router.get("/vendors/{vendor_id}")
async def get_vendor_for_review(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_reviewer),
    roles: RoleResolver = Depends(get_role_resolver),
):
    vendor = await vendor_service.load_vendor(db, vendor_id)
    assignments = await rating_service.list_vendor_assignments(db, vendor_id)
    if roles.is_admin(email):
        sections = list(GRADING_SECTIONS)
    else:
        sections = sorted({a.section for a in assignments if a.reviewer_email == email})
    if not sections:
        raise NotAssigned(f"{email} has no assignment for vendor {vendor_id}", vendor_id=str(vendor_id))
    return {
        **vendor_service.vendor_summary(vendor),
        "form": vendor_service.vendor_form(vendor).to_json(),
        "assigned_sections": sections,
    }


@router.get("/ratings/{vendor_id}/{section}")
async def get_my_ratings(
    vendor_id: UUID,
    section: str,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_reviewer),
):
    ratings = await rating_service.get_ratings(db, vendor_id, section, email)
    return {"ratings": ratings, "progress": section_progress(section, ratings)}


@router.post("/rate")
async def rate_vendor(
    data: RateRequest,
    db: AsyncSession = Depends(get_db),
    email: str = Depends(require_reviewer),
):
    grade = await rating_service.submit_ratings(db, data.vendor_id, data.section, email, data.ratings)
    return {"ok": True, "grade": grade_service.grade_snapshot(grade)}
