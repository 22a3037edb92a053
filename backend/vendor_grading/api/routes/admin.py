from datetime import datetime
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from vendor_grading.db.session import get_db
from vendor_grading.api.deps import require_admin
from vendor_grading.services import (
    audit,
    classification_service,
    due_diligence_service,
    grade_service,
    rating_service,
    vendor_service,
)

router = APIRouter(prefix="/admin", tags=["admin"])


class AssignReviewerRequest(BaseModel):
    vendor_id: UUID
    section: str
    reviewer_email: str


class AssignmentResponse(BaseModel):
    id: UUID
    vendor_id: UUID
    section: str
    reviewer_email: str
    assigned_by: str | None
    assigned_at: datetime | None

    class Config:
        from_attributes = True


class RatingResponse(BaseModel):
    id: UUID
    section: str
    parameter_key: str
    rating: int
    rated_by: str
    rated_at: datetime | None

    class Config:
        from_attributes = True


class OverrideRequest(BaseModel):
    grade: str | None = None


class ClassificationRequest(BaseModel):
    vendor_type: str | None = None
    opex_sub_type: str | None = None
    capex_sub_type: str | None = None
    capex_band: str | None = None
    notes: str | None = None


class DueDiligenceAssignRequest(BaseModel):
    vendor_id: UUID


@router.get("/vendors")
async def list_vendors(
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    vendors = await vendor_service.list_vendors(db)
    return [vendor_service.vendor_summary(v) for v in vendors]


@router.get("/vendors/{vendor_id}")
async def get_vendor(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    vendor = await vendor_service.load_vendor(db, vendor_id)
    return {**vendor_service.vendor_summary(vendor), "form": vendor_service.vendor_form(vendor).to_json()}


@router.post("/reviewers/assign")
async def assign_reviewer(
    data: AssignReviewerRequest,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    assignment, created = await rating_service.assign_reviewer(
        db, data.vendor_id, data.section, data.reviewer_email, assigned_by=admin
    )
    return {"ok": True, "created": created, "assignment": AssignmentResponse.model_validate(assignment)}


@router.delete("/reviewers/{assignment_id}")
async def remove_reviewer(
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    await rating_service.remove_assignment(db, assignment_id, acting_admin=admin)
    return {"ok": True}


@router.get("/reviewers/{vendor_id}", response_model=list[AssignmentResponse])
async def list_assignments(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    assignments = await rating_service.list_vendor_assignments(db, vendor_id)
    return [AssignmentResponse.model_validate(a) for a in assignments]


@router.get("/ratings/{vendor_id}", response_model=list[RatingResponse])
async def list_ratings(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    ratings = await rating_service.list_vendor_ratings(db, vendor_id)
    return [RatingResponse.model_validate(r) for r in ratings]


@router.get("/grades")
async def list_grades(
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    grades = await grade_service.list_grades(db)
    return [grade_service.grade_snapshot(g) for g in grades]


@router.get("/grades/{vendor_id}")
async def get_grade(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    grade = await grade_service.get_grade(db, vendor_id)
    return {"vendor_id": str(vendor_id), "grade": grade_service.grade_snapshot(grade) if grade else None}


@router.get("/grades/{vendor_id}/preview")
async def preview_grade(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    computation = await grade_service.preview_vendor_grade(db, vendor_id)
    return {**computation.to_dict(), "category": computation.category}


@router.post("/grades/{vendor_id}/compute")
async def compute_grade(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    grade = await grade_service.compute_vendor_grade(db, vendor_id)
    return {"ok": True, "grade": grade_service.grade_snapshot(grade)}


@router.put("/grades/{vendor_id}/override")
async def override_grade(
    vendor_id: UUID,
    data: OverrideRequest,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    final_grade = await grade_service.override_grade(db, vendor_id, data.grade, acting_admin=admin)
    return {"ok": True, "final_grade": final_grade}


@router.get("/audit")
async def list_audit(
    entity_id: UUID | None = Query(None),
    action: str | None = Query(None),
    limit: int = Query(200, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    return await audit.list_actions(db, entity_id=entity_id, action=action, limit=limit)


@router.get("/classifications")
async def list_classifications(
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    return await classification_service.list_classifications(db)


@router.get("/classifications/{vendor_id}")
async def get_classification(
    vendor_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    classification = await classification_service.get_classification(db, vendor_id)
    return {
        "vendor_id": str(vendor_id),
        "classification": classification_service.classification_snapshot(classification) if classification else None,
    }


@router.put("/classifications/{vendor_id}")
async def save_classification(
    vendor_id: UUID,
    data: ClassificationRequest,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    classification = await classification_service.save_classification(
        db, vendor_id, data.model_dump(), acting_admin=admin
    )
    return {"ok": True, "classification": classification_service.classification_snapshot(classification)}


@router.post("/due-diligence/assign")
async def assign_due_diligence(
    data: DueDiligenceAssignRequest,
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    verification = await due_diligence_service.assign_due_diligence(db, data.vendor_id, acting_admin=admin)
    return {"ok": True, "verification": due_diligence_service.verification_snapshot(verification)}
