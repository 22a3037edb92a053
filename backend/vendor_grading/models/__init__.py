from vendor_grading.db.session import Base
from vendor_grading.models.vendor import Vendor
from vendor_grading.models.grading import ReviewerAssignment, VendorRating, VendorGrade
from vendor_grading.models.classification import VendorClassification, DueDiligenceVerification
from vendor_grading.models.audit import AuditLog

__all__ = [
    "Base",
    "Vendor",
    "ReviewerAssignment",
    "VendorRating",
    "VendorGrade",
    "VendorClassification",
    "DueDiligenceVerification",
    "AuditLog",
]
