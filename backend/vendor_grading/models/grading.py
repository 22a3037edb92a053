from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Numeric,
    ForeignKey,
    Uuid,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from vendor_grading.db.base_class import BaseModel
from vendor_grading.db.session import Base


class ReviewerAssignment(Base, BaseModel):
    __tablename__ = "reviewer_assignments"
    __table_args__ = (
        UniqueConstraint("vendor_id", "section", "reviewer_email", name="uq_reviewer_assignment"),
    )
    vendor_id = Column(Uuid(as_uuid=True), ForeignKey("vendors.id"), nullable=False, index=True)
    section = Column(String(32), nullable=False)  # site, procurement, financial
    reviewer_email = Column(String(320), nullable=False, index=True)
    assigned_by = Column(String(320), nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=False)
    vendor = relationship("Vendor", back_populates="assignments")


class VendorRating(Base, BaseModel):
    __tablename__ = "vendor_ratings"
    __table_args__ = (
        UniqueConstraint("vendor_id", "section", "parameter_key", "rated_by", name="uq_vendor_rating"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_vendor_rating_range"),
    )
    vendor_id = Column(Uuid(as_uuid=True), ForeignKey("vendors.id"), nullable=False, index=True)
    section = Column(String(32), nullable=False)
    parameter_key = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)
    rated_by = Column(String(320), nullable=False, index=True)
    rated_at = Column(DateTime(timezone=True), nullable=False)
    vendor = relationship("Vendor", back_populates="ratings")


class VendorGrade(Base, BaseModel):
    __tablename__ = "vendor_grades"
    vendor_id = Column(Uuid(as_uuid=True), ForeignKey("vendors.id"), nullable=False, unique=True)
    site_score = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    procurement_score = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    financial_score = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    total_score = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0, index=True)
    computed_grade = Column(String(1), nullable=True)
    # Written only by the override action
    admin_override_grade = Column(String(1), nullable=True)
    overridden_by = Column(String(320), nullable=True)
    overridden_at = Column(DateTime(timezone=True), nullable=True)
    final_grade = Column(String(1), nullable=True, index=True)
    computed_at = Column(DateTime(timezone=True), nullable=True)
    vendor = relationship("Vendor", back_populates="grade")
