"""
Role resolution, injected into the API layer.
Admins and due-diligence verifiers come from configuration; reviewers are whoever holds a reviewer assignment.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.models.grading import ReviewerAssignment


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class RoleResolver:
    def __init__(
        self,
        admin_emails: list[str] | tuple[str, ...] = (),
        due_diligence_emails: list[str] | tuple[str, ...] = (),
    ):
        self._admins = frozenset(normalize_email(e) for e in admin_emails if e)
        self._due_diligence = frozenset(normalize_email(e) for e in due_diligence_emails if e)

    def is_admin(self, email: str) -> bool:
        return normalize_email(email) in self._admins

    def is_due_diligence(self, email: str) -> bool:
        return normalize_email(email) in self._due_diligence

    async def is_reviewer(self, db: AsyncSession, email: str) -> bool:
        result = await db.execute(
            select(ReviewerAssignment.id)
            .where(ReviewerAssignment.reviewer_email == normalize_email(email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
