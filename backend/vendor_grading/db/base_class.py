from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_mixin


@declarative_mixin
class BaseModel:
    # Uuid/DateTime stay portable so the same models run on Postgres and SQLite
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    def touch(self) -> None:
        """Bump updated_at explicitly; ranking ties are broken on it."""
        self.updated_at = datetime.utcnow()
