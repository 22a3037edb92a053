from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.db.session import get_db
from vendor_grading.api.deps import require_admin
from vendor_grading.services.ranking_service import grade_distribution, list_rankings
from vendor_grading.services.rankings_export import build_rankings_workbook

router = APIRouter(prefix="/admin/rankings", tags=["rankings"])


@router.get("")
async def get_rankings(
    search: str | None = Query(None),
    grade: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    return await list_rankings(db, search=search, grade=grade)


@router.get("/summary")
async def get_rankings_summary(
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    rankings = await list_rankings(db)
    return {"distribution": grade_distribution(rankings), "top": rankings[:5]}


@router.get("/export")
async def export_rankings(
    search: str | None = Query(None),
    grade: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: str = Depends(require_admin),
):
    rankings = await list_rankings(db, search=search, grade=grade)
    buf = build_rankings_workbook(rankings)
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=vendor-rankings.xlsx"},
    )
