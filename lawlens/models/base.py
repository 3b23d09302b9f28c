"""
Base Model
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from lawlens.config.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Shared columns: string UUID primary key and timestamps"""

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=_new_id, comment="UUID")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True, comment="Created at")
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False, comment="Updated at")
