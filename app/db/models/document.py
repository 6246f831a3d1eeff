from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, UniqueConstraint

from app.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(120), nullable=False)
    content = Column(Text, nullable=False, default="")
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False, index=True)

    # Публичная ссылка (только чтение)
    is_public = Column(Boolean, nullable=False, default=False)
    public_token = Column(String(64), unique=True, index=True, nullable=True)

    # Блокировка редактирования
    locked_by = Column(Uuid(as_uuid=True), ForeignKey("users.uuid", ondelete="SET NULL"), nullable=True)
    locked_at = Column(DateTime(timezone=True), nullable=True)


class DocumentEditor(BaseModel):
    __tablename__ = "document_editors"
    __table_args__ = (UniqueConstraint("document_id", "user_id", name="uq_document_editor"),)

    document_id = Column(Uuid(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False, index=True)
