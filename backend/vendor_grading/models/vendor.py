from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from vendor_grading.db.base_class import BaseModel
from vendor_grading.db.session import Base


class Vendor(Base, BaseModel):
    __tablename__ = "vendors"
    email = Column(String(320), nullable=False, index=True)
    company_name = Column(String(512), nullable=True)
    completion_percentage = Column(Integer, nullable=False, default=0)
    submitted = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    form_json = Column(JSON().with_variant(JSONB, "postgresql"), default=dict)
    assignments = relationship("ReviewerAssignment", back_populates="vendor", cascade="all, delete-orphan")
    ratings = relationship("VendorRating", back_populates="vendor", cascade="all, delete-orphan")
    grade = relationship("VendorGrade", back_populates="vendor", uselist=False, cascade="all, delete-orphan")
    classification = relationship(
        "VendorClassification", back_populates="vendor", uselist=False, cascade="all, delete-orphan"
    )
    verification = relationship(
        "DueDiligenceVerification", back_populates="vendor", uselist=False, cascade="all, delete-orphan"
    )
