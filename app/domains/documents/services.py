from datetime import timedelta
from typing import Callable, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from app.core.clock import SystemClock, system_clock
from app.core.config import settings
from app.core.exceptions import LockConflictError, NotFoundError
from app.core.security import generate_public_token
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.documents.entities import Document, LockState
from app.domains.documents.schemas import DocumentCreate, DocumentUpdate

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами.

    Каждая операция загружает документ, проверяет права и блокировку
    в доменной сущности и только потом сохраняет изменения одним коммитом.
    Ошибка на любом шаге оставляет документ без изменений.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: SystemClock = system_clock,
        lock_ttl: Optional[timedelta] = None,
        token_factory: Callable[[], str] = generate_public_token
    ):
        self.session = session
        self.clock = clock
        self.lock_ttl = lock_ttl or timedelta(seconds=settings.lock_ttl_seconds)
        self.token_factory = token_factory
        self.document_repository = DocumentRepository(session)
        self.user_repository = UserRepository(session)

    async def _load(self, document_uuid: uuid.UUID) -> Document:
        document = await self.document_repository.get_by_uuid(document_uuid)
        if not document:
            raise NotFoundError("Document not found")
        return document

    def lock_state(self, document: Document) -> Optional[LockState]:
        """Активная блокировка на текущий момент"""
        return document.lock_state(self.clock.now(), self.lock_ttl)

    async def create_document(self, document_data: DocumentCreate, owner_id: uuid.UUID) -> Document:
        """Создание нового документа"""
        document = Document.create_document(
            title=document_data.title,
            owner_id=owner_id,
            now=self.clock.now(),
            content=document_data.content or ""
        )
        document = await self.document_repository.create(document)
        logger.info(f"User {owner_id} created document {document.uuid}")
        return document

    async def list_documents(self, user_id: uuid.UUID) -> List[Document]:
        """Документы пользователя (владелец или редактор)"""
        return await self.document_repository.get_accessible(user_id)

    async def get_document(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> Document:
        """Получение документа с проверкой доступа"""
        document = await self._load(document_uuid)
        document.require_access(user_id)
        return document

    async def update_document(
        self,
        document_uuid: uuid.UUID,
        update_data: DocumentUpdate,
        user_id: uuid.UUID
    ) -> Document:
        """Обновление заголовка и/или содержимого"""
        document = await self._load(document_uuid)

        try:
            document.apply_changes(
                user_id,
                self.clock.now(),
                self.lock_ttl,
                title=update_data.title,
                content=update_data.content
            )
        except LockConflictError as e:
            logger.warning(f"User {user_id} blocked from editing {document_uuid}: locked by {e.locked_by}")
            raise

        return await self.document_repository.update(document)

    async def delete_document(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> None:
        """Удаление документа (только владелец)"""
        document = await self._load(document_uuid)
        document.ensure_can_delete(user_id)

        await self.document_repository.delete(document_uuid)
        logger.info(f"User {user_id} deleted document {document_uuid}")

    async def set_public(
        self,
        document_uuid: uuid.UUID,
        user_id: uuid.UUID,
        make_public: bool
    ) -> Tuple[bool, Optional[str]]:
        """Включение/выключение публичной ссылки"""
        document = await self._load(document_uuid)
        is_public, public_token = document.set_public(user_id, make_public, self.token_factory, self.clock.now())

        await self.document_repository.update(document)
        logger.info(f"Document {document_uuid} public={is_public}")
        return is_public, public_token

    async def add_editor(self, document_uuid: uuid.UUID, user_id: uuid.UUID, email: str) -> List[uuid.UUID]:
        """Выдача прав редактора по email"""
        document = await self._load(document_uuid)
        document.require_owner(user_id, "manage editors")

        target = await self.user_repository.get_by_email(email)
        if not target:
            raise NotFoundError("User not found")

        editor_ids = document.add_editor(user_id, target.uuid, self.clock.now())
        await self.document_repository.update(document)
        logger.info(f"User {target.uuid} is now an editor of {document_uuid}")
        return editor_ids

    async def remove_editor(self, document_uuid: uuid.UUID, user_id: uuid.UUID, editor_id: uuid.UUID) -> List[uuid.UUID]:
        """Отзыв прав редактора"""
        document = await self._load(document_uuid)
        editor_ids = document.remove_editor(user_id, editor_id, self.clock.now())

        await self.document_repository.update(document)
        logger.info(f"User {editor_id} removed from editors of {document_uuid}")
        return editor_ids

    async def acquire_lock(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> Document:
        """Захват блокировки редактирования"""
        document = await self._load(document_uuid)

        try:
            document.acquire_lock(user_id, self.clock.now(), self.lock_ttl)
        except LockConflictError as e:
            logger.warning(f"Lock conflict on {document_uuid}: requested by {user_id}, held by {e.locked_by}")
            raise

        document = await self.document_repository.update(document)
        logger.info(f"User {user_id} locked document {document_uuid}")
        return document

    async def release_lock(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> Document:
        """Снятие блокировки"""
        document = await self._load(document_uuid)
        if not document.release_lock(user_id, self.clock.now()):
            return document

        document = await self.document_repository.update(document)
        logger.info(f"User {user_id} unlocked document {document_uuid}")
        return document

    async def get_public_document(self, public_token: str) -> Document:
        """Чтение по публичной ссылке без аутентификации"""
        document = await self.document_repository.get_by_public_token(public_token)
        if not document or not document.is_publicly_readable(public_token):
            raise NotFoundError("Not found")
        return document
