from fastapi import APIRouter, Depends, status
from typing import List

from app.api.deps import get_current_user, get_document_service, parse_id
from app.domains.documents.entities import Document
from app.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentSummary,
    ShareRequest, ShareResponse, EditorAddRequest, EditorsResponse,
    LockResponse, OkResponse
)
from app.domains.documents.services import DocumentService
from app.domains.identity.entities import User

router = APIRouter(prefix="/docs", tags=["documents"])


def _document_response(document: Document, document_service: DocumentService) -> DocumentResponse:
    return DocumentResponse(
        id=document.uuid,
        title=document.title,
        content=document.content,
        owner_id=document.owner_id,
        editor_ids=document.editor_ids,
        is_public=document.is_public,
        public_token=document.public_token,
        locked_by=document.locked_by,
        locked_at=document.locked_at,
        is_locked=document_service.lock_state(document) is not None,
        created_at=document.created_at,
        updated_at=document.updated_at
    )


def _lock_response(document: Document, document_service: DocumentService) -> LockResponse:
    lock = document_service.lock_state(document)
    if lock is None:
        return LockResponse(is_locked=False)
    return LockResponse(is_locked=True, locked_by=lock.holder, locked_at=lock.since)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Создание нового документа"""
    document = await document_service.create_document(document_data, current_user.uuid)
    return _document_response(document, document_service)


@router.get("", response_model=List[DocumentSummary])
async def list_documents(
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Документы, где пользователь владелец или редактор"""
    documents = await document_service.list_documents(current_user.uuid)

    return [
        DocumentSummary(
            id=doc.uuid,
            title=doc.title,
            owner_id=doc.owner_id,
            is_public=doc.is_public,
            public_token=doc.public_token,
            created_at=doc.created_at,
            updated_at=doc.updated_at
        )
        for doc in documents
    ]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение документа"""
    document = await document_service.get_document(parse_id(document_id), current_user.uuid)
    return _document_response(document, document_service)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    update_data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Обновление документа (409, если заблокирован другим пользователем)"""
    document = await document_service.update_document(parse_id(document_id), update_data, current_user.uuid)
    return _document_response(document, document_service)


@router.delete("/{document_id}", response_model=OkResponse)
async def delete_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Удаление документа"""
    await document_service.delete_document(parse_id(document_id), current_user.uuid)
    return OkResponse()


@router.post("/{document_id}/share", response_model=ShareResponse)
async def share_document(
    document_id: str,
    share_request: ShareRequest,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Публичная ссылка только для чтения"""
    is_public, public_token = await document_service.set_public(
        parse_id(document_id),
        current_user.uuid,
        share_request.is_public
    )
    return ShareResponse(is_public=is_public, public_token=public_token)


@router.post("/{document_id}/editors", response_model=EditorsResponse)
async def add_editor(
    document_id: str,
    editor_request: EditorAddRequest,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Добавление редактора по email"""
    editor_ids = await document_service.add_editor(
        parse_id(document_id),
        current_user.uuid,
        editor_request.email
    )
    return EditorsResponse(editor_ids=editor_ids)


@router.delete("/{document_id}/editors/{editor_id}", response_model=EditorsResponse)
async def remove_editor(
    document_id: str,
    editor_id: str,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Удаление редактора"""
    editor_ids = await document_service.remove_editor(
        parse_id(document_id),
        current_user.uuid,
        parse_id(editor_id)
    )
    return EditorsResponse(editor_ids=editor_ids)


@router.post("/{document_id}/lock", response_model=LockResponse)
async def lock_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Захват блокировки редактирования"""
    document = await document_service.acquire_lock(parse_id(document_id), current_user.uuid)
    return _lock_response(document, document_service)


@router.post("/{document_id}/unlock", response_model=LockResponse)
async def unlock_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Снятие блокировки"""
    document = await document_service.release_lock(parse_id(document_id), current_user.uuid)
    return _lock_response(document, document_service)
