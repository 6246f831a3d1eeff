from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator
from typing import Optional, List
import uuid
from datetime import datetime

from app.core.schemas import CamelModel


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(..., min_length=1, max_length=120)
    content: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class DocumentUpdate(BaseModel):
    """Схема для обновления документа"""
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    content: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v


class DocumentResponse(CamelModel):
    """Полный документ для владельца и редакторов"""
    id: uuid.UUID
    title: str
    content: str
    owner_id: uuid.UUID
    editor_ids: List[uuid.UUID]
    is_public: bool
    public_token: Optional[str] = None
    locked_by: Optional[uuid.UUID] = None
    locked_at: Optional[datetime] = None
    is_locked: bool
    created_at: datetime
    updated_at: datetime


class DocumentSummary(CamelModel):
    """Элемент списка документов"""
    id: uuid.UUID
    title: str
    owner_id: uuid.UUID
    is_public: bool
    public_token: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PublicDocumentResponse(CamelModel):
    """Документ по публичной ссылке: без владельца и редакторов"""
    id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


class ShareRequest(CamelModel):
    is_public: StrictBool


class ShareResponse(CamelModel):
    is_public: bool
    public_token: Optional[str] = None


class EditorAddRequest(BaseModel):
    email: EmailStr


class EditorsResponse(CamelModel):
    ok: bool = True
    editor_ids: List[uuid.UUID]


class LockResponse(CamelModel):
    ok: bool = True
    is_locked: bool
    locked_by: Optional[uuid.UUID] = None
    locked_at: Optional[datetime] = None


class OkResponse(BaseModel):
    ok: bool = True
