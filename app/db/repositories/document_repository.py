from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
import uuid

from app.core.exceptions import NotFoundError
from app.db.models.document import Document as DocumentModel, DocumentEditor as DocumentEditorModel

if TYPE_CHECKING:
    from app.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с документами и их редакторами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=document.uuid,
            title=document.title,
            content=document.content,
            owner_id=document.owner_id,
            is_public=document.is_public,
            public_token=document.public_token,
            locked_by=document.locked_by,
            locked_at=document.locked_at,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        await self.session.commit()
        await self.session.refresh(db_document)
        return self._to_domain(db_document, [])

    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional["Document"]:
        """Получение документа по UUID вместе со списком редакторов"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid == document_uuid)
            .execution_options(populate_existing=True)
        )
        db_document = result.scalar_one_or_none()
        if not db_document:
            return None
        return self._to_domain(db_document, await self._get_editor_ids(document_uuid))

    async def get_by_public_token(self, public_token: str) -> Optional["Document"]:
        """Документ по публичной ссылке, только если он сейчас публичный"""
        result = await self.session.execute(
            select(DocumentModel).where(
                DocumentModel.public_token == public_token,
                DocumentModel.is_public.is_(True)
            )
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document, []) if db_document else None

    async def get_accessible(self, user_id: uuid.UUID) -> List["Document"]:
        """Документы, где пользователь владелец или редактор; свежие первыми"""
        editor_of = select(DocumentEditorModel.document_id).where(DocumentEditorModel.user_id == user_id)
        result = await self.session.execute(
            select(DocumentModel)
            .where(or_(DocumentModel.owner_id == user_id, DocumentModel.uuid.in_(editor_of)))
            .order_by(DocumentModel.updated_at.desc())
        )
        return [self._to_domain(doc, []) for doc in result.scalars().all()]

    async def update(self, document: "Document") -> "Document":
        """Сохранение документа и синхронизация набора редакторов одной транзакцией"""
        result = await self.session.execute(
            update(DocumentModel)
            .where(DocumentModel.uuid == document.uuid)
            .values(
                title=document.title,
                content=document.content,
                is_public=document.is_public,
                public_token=document.public_token,
                locked_by=document.locked_by,
                locked_at=document.locked_at,
                updated_at=document.updated_at
            )
        )
        if result.rowcount == 0:
            # Документ удален параллельным запросом
            await self.session.rollback()
            raise NotFoundError("Document not found")

        current = await self._get_editor_ids(document.uuid)
        removed = [editor_id for editor_id in current if editor_id not in document.editor_ids]
        if removed:
            await self.session.execute(
                delete(DocumentEditorModel).where(
                    DocumentEditorModel.document_id == document.uuid,
                    DocumentEditorModel.user_id.in_(removed)
                )
            )
        for editor_id in document.editor_ids:
            if editor_id not in current:
                self.session.add(DocumentEditorModel(document_id=document.uuid, user_id=editor_id))

        await self.session.commit()

        stored = await self.get_by_uuid(document.uuid)
        if stored is None:
            raise NotFoundError("Document not found")
        return stored

    async def delete(self, document_uuid: uuid.UUID) -> bool:
        """Удаление документа (без корзины)"""
        await self.session.execute(
            delete(DocumentEditorModel).where(DocumentEditorModel.document_id == document_uuid)
        )
        result = await self.session.execute(
            delete(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def _get_editor_ids(self, document_uuid: uuid.UUID) -> List[uuid.UUID]:
        result = await self.session.execute(
            select(DocumentEditorModel.user_id)
            .where(DocumentEditorModel.document_id == document_uuid)
            .order_by(DocumentEditorModel.created_at)
        )
        return list(result.scalars().all())

    def _to_domain(self, db_document: DocumentModel, editor_ids: List[uuid.UUID]) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.documents.entities import Document

        return Document(
            uuid=db_document.uuid,
            title=db_document.title,
            content=db_document.content,
            owner_id=db_document.owner_id,
            editor_ids=editor_ids,
            is_public=db_document.is_public,
            public_token=db_document.public_token,
            locked_by=db_document.locked_by,
            locked_at=db_document.locked_at,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
