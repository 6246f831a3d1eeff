from fastapi import APIRouter, Depends

from app.api.deps import get_document_service
from app.domains.documents.schemas import PublicDocumentResponse
from app.domains.documents.services import DocumentService

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/{public_token}", response_model=PublicDocumentResponse)
async def get_public_document(
    public_token: str,
    document_service: DocumentService = Depends(get_document_service)
):
    """Просмотр документа по публичной ссылке (только чтение, без авторизации)"""
    document = await document_service.get_public_document(public_token)

    return PublicDocumentResponse(
        id=document.uuid,
        title=document.title,
        content=document.content,
        created_at=document.created_at,
        updated_at=document.updated_at
    )
