"""
Structured logging for grading and due-diligence events.
"""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def log_ratings_submitted(vendor_id: str, section: str, reviewer: str, count: int, **extra: Any) -> None:
    logger.info(
        "ratings_submitted",
        extra={
            "vendor_id": vendor_id,
            "section": section,
            "reviewer": reviewer,
            "rating_count": count,
            "event": "ratings_submitted",
            **extra,
        },
    )


def log_grade_recomputed(
    vendor_id: str,
    total_score: float,
    computed_grade: str,
    final_grade: str | None,
    **extra: Any,
) -> None:
    logger.info(
        "grade_recomputed",
        extra={
            "vendor_id": vendor_id,
            "total_score": total_score,
            "computed_grade": computed_grade,
            "final_grade": final_grade,
            "event": "grade_recomputed",
            **extra,
        },
    )


def log_grade_overridden(vendor_id: str, grade: str | None, admin: str, **extra: Any) -> None:
    event = "grade_overridden" if grade else "grade_override_cleared"
    logger.info(
        event,
        extra={
            "vendor_id": vendor_id,
            "override_grade": grade,
            "admin": admin,
            "event": event,
            **extra,
        },
    )


def log_rejected_submission(vendor_id: str, section: str, reviewer: str, error: str, **extra: Any) -> None:
    logger.warning(
        "ratings_rejected",
        extra={
            "vendor_id": vendor_id,
            "section": section,
            "reviewer": reviewer,
            "error": error[:500],
            "event": "ratings_rejected",
            **extra,
        },
    )


def log_reviewer_assigned(vendor_id: str, section: str, reviewer: str, admin: str, **extra: Any) -> None:
    logger.info(
        "reviewer_assigned",
        extra={
            "vendor_id": vendor_id,
            "section": section,
            "reviewer": reviewer,
            "admin": admin,
            "event": "reviewer_assigned",
            **extra,
        },
    )


def log_due_diligence_assigned(vendor_id: str, admin: str, **extra: Any) -> None:
    logger.info(
        "due_diligence_assigned",
        extra={"vendor_id": vendor_id, "admin": admin, "event": "due_diligence_assigned", **extra},
    )


def log_verification_updated(vendor_id: str, status: str, verifier: str, **extra: Any) -> None:
    logger.info(
        "verification_updated",
        extra={
            "vendor_id": vendor_id,
            "overall_status": status,
            "verifier": verifier,
            "event": "verification_updated",
            **extra,
        },
    )
