"""
Grading error taxonomy.
All errors are terminal for the caller: permission and validation failures do not succeed on retry.
"""
from __future__ import annotations


class GradingError(Exception):
    code = "GRADING_ERROR"
    status_code = 400

    def __init__(self, message: str | None = None, **details):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details


class NotAssigned(GradingError):
    code = "NOT_ASSIGNED"
    status_code = 403


class UnknownParameter(GradingError):
    code = "UNKNOWN_PARAMETER"


class InvalidRatingValue(GradingError):
    code = "INVALID_RATING_VALUE"


class InvalidGrade(GradingError):
    code = "INVALID_GRADE"


class InvalidSection(GradingError):
    code = "INVALID_SECTION"


class InvalidReviewerEmail(GradingError):
    code = "INVALID_REVIEWER_EMAIL"


class VendorNotFound(GradingError):
    code = "VENDOR_NOT_FOUND"
    status_code = 404


class AssignmentNotFound(GradingError):
    code = "ASSIGNMENT_NOT_FOUND"
    status_code = 404


class VendorFormLocked(GradingError):
    code = "VENDOR_FORM_LOCKED"
    status_code = 409


class Forbidden(GradingError):
    code = "FORBIDDEN"
    status_code = 403


class InvalidClassification(GradingError):
    code = "INVALID_CLASSIFICATION"


class InvalidVerificationStatus(GradingError):
    code = "INVALID_OVERALL_STATUS"
