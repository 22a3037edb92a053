"""
Audit logging: who assigned which reviewer, who rated, who overrode which grade.
Immutable audit trail; the computed scores stay untouched by overrides.
"""
from uuid import UUID
from typing import Any
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.models.audit import AuditLog


async def log_action(
    db: AsyncSession,
    actor_email: str | None,
    action: str,
    entity_type: str,
    entity_id: UUID | None = None,
    diff: dict[str, Any] | None = None,
) -> None:
    entry = AuditLog(
        actor_email=actor_email,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        diff_json=diff or {},
    )
    db.add(entry)
    await db.flush()


async def list_actions(
    db: AsyncSession,
    entity_id: UUID | None = None,
    action: str | None = None,
    limit: int = 200,
) -> list[dict[str, Any]]:
    """Newest first. Grade overrides are keyed by the grade row; rating and submit entries by the vendor."""
    q = select(AuditLog)
    if entity_id is not None:
        q = q.where(AuditLog.entity_id == entity_id)
    if action:
        q = q.where(AuditLog.action == action)
    result = await db.execute(q.order_by(AuditLog.created_at.desc()).limit(limit))
    return [
        {
            "id": str(e.id),
            "actor_email": e.actor_email,
            "action": e.action,
            "entity_type": e.entity_type,
            "entity_id": str(e.entity_id) if e.entity_id else None,
            "diff": e.diff_json or {},
            "created_at": e.created_at.isoformat() if e.created_at else None,
        }
        for e in result.scalars().all()
    ]
