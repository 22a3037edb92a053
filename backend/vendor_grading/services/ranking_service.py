"""
Vendor rankings for sourcing decisions.
Order: total_score desc, then most recently updated vendor, then id; ungraded vendors rank as 0.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.core.grade_bands import GRADES, band_for_grade
from vendor_grading.models.grading import VendorGrade
from vendor_grading.models.vendor import Vendor


async def list_rankings(
    db: AsyncSession,
    search: str | None = None,
    grade: str | None = None,
) -> list[dict[str, Any]]:
    total = func.coalesce(VendorGrade.total_score, 0)
    result = await db.execute(
        select(Vendor, VendorGrade)
        .outerjoin(VendorGrade, VendorGrade.vendor_id == Vendor.id)
        .order_by(total.desc(), Vendor.updated_at.desc(), Vendor.id)
    )
    rankings = []
    for idx, (vendor, g) in enumerate(result.all()):
        final = g.final_grade if g else None
        band = band_for_grade(final) if final else None
        rankings.append(
            {
                "rank": idx + 1,
                "vendor_id": str(vendor.id),
                "email": vendor.email,
                "company_name": vendor.company_name or "",
                "completion_percentage": vendor.completion_percentage,
                "submitted": bool(vendor.submitted),
                "submitted_at": vendor.submitted_at.isoformat() if vendor.submitted_at else None,
                "site_score": float(g.site_score or 0) if g else 0.0,
                "procurement_score": float(g.procurement_score or 0) if g else 0.0,
                "financial_score": float(g.financial_score or 0) if g else 0.0,
                "total_score": float(g.total_score or 0) if g else 0.0,
                "computed_grade": g.computed_grade if g else None,
                "admin_override_grade": g.admin_override_grade if g else None,
                "final_grade": final,
                "category": band.category if band else None,
            }
        )
    return filter_rankings(rankings, search=search, grade=grade)


def filter_rankings(
    rankings: list[dict[str, Any]],
    search: str | None = None,
    grade: str | None = None,
) -> list[dict[str, Any]]:
    """Filters keep the rank numbers assigned over the full list."""
    out = rankings
    if search:
        q = search.strip().lower()
        out = [r for r in out if q in r["company_name"].lower() or q in r["email"].lower()]
    if grade:
        out = [r for r in out if r["final_grade"] == grade]
    return out


def grade_distribution(rankings: list[dict[str, Any]]) -> dict[str, int]:
    counts = {g: 0 for g in GRADES}
    counts["ungraded"] = 0
    for r in rankings:
        if r["final_grade"] in counts:
            counts[r["final_grade"]] += 1
        else:
            counts["ungraded"] += 1
    counts["total"] = len(rankings)
    return counts
