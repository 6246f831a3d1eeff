from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, Uuid

from app.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Общие колонки: uuid и временные метки"""
    __abstract__ = True

    uuid = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
