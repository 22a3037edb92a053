from sqlalchemy import Column, String, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from vendor_grading.db.base_class import BaseModel
from vendor_grading.db.session import Base


class AuditLog(Base, BaseModel):
    __tablename__ = "audit_log"
    actor_email = Column(String(320), nullable=True)
    action = Column(String(100), nullable=False)
    entity_type = Column(String(100), nullable=False)
    entity_id = Column(Uuid(as_uuid=True), nullable=True)
    diff_json = Column(JSON().with_variant(JSONB, "postgresql"), default=dict)
