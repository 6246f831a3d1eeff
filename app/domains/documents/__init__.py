from app.domains.documents.entities import Document, Role, LockState, DEFAULT_LOCK_TTL
from app.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentSummary,
    PublicDocumentResponse, ShareRequest, ShareResponse, EditorAddRequest,
    EditorsResponse, LockResponse, OkResponse
)
from app.domains.documents.services import DocumentService

__all__ = [
    "Document", "Role", "LockState", "DEFAULT_LOCK_TTL",
    "DocumentCreate", "DocumentUpdate", "DocumentResponse", "DocumentSummary",
    "PublicDocumentResponse", "ShareRequest", "ShareResponse", "EditorAddRequest",
    "EditorsResponse", "LockResponse", "OkResponse",
    "DocumentService"
]
