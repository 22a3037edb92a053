from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from vendor_grading.db.base_class import BaseModel
from vendor_grading.db.session import Base


class VendorClassification(Base, BaseModel):
    __tablename__ = "vendor_classifications"
    vendor_id = Column(Uuid(as_uuid=True), ForeignKey("vendors.id"), nullable=False, unique=True)
    vendor_type = Column(String(16), nullable=True)  # capex, opex
    opex_sub_type = Column(String(32), nullable=True)
    capex_sub_type = Column(String(32), nullable=True)
    capex_band = Column(String(32), nullable=True)
    notes = Column(Text, nullable=True)
    # Set by the due-diligence assign action
    due_diligence_sent = Column(Boolean, nullable=False, default=False)
    due_diligence_date = Column(DateTime(timezone=True), nullable=True)
    info_request_sent = Column(Boolean, nullable=False, default=False)
    info_request_date = Column(DateTime(timezone=True), nullable=True)
    vendor = relationship("Vendor", back_populates="classification")


class DueDiligenceVerification(Base, BaseModel):
    __tablename__ = "due_diligence_verifications"
    vendor_id = Column(Uuid(as_uuid=True), ForeignKey("vendors.id"), nullable=False, unique=True)
    company_details_verified = Column(Boolean, nullable=False, default=False)
    company_details_comment = Column(Text, nullable=True)
    financial_details_verified = Column(Boolean, nullable=False, default=False)
    financial_details_comment = Column(Text, nullable=True)
    bank_details_verified = Column(Boolean, nullable=False, default=False)
    bank_details_comment = Column(Text, nullable=True)
    references_verified = Column(Boolean, nullable=False, default=False)
    references_comment = Column(Text, nullable=True)
    documents_verified = Column(Boolean, nullable=False, default=False)
    documents_comment = Column(Text, nullable=True)
    overall_status = Column(String(16), nullable=False, default="pending", index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    verified_by = Column(String(320), nullable=True)
    vendor = relationship("Vendor", back_populates="verification")
