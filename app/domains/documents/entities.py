import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from app.core.clock import as_utc
from app.core.exceptions import BadRequestError, ForbiddenError, LockConflictError

DEFAULT_LOCK_TTL = timedelta(minutes=10)


class Role(enum.Enum):
    """Роль пользователя по отношению к документу"""
    NONE = "none"
    EDITOR = "editor"
    OWNER = "owner"


@dataclass(frozen=True)
class LockState:
    """Активная блокировка: кто и с какого момента"""
    holder: uuid.UUID
    since: datetime


class Document:
    """Сущность документа домена Documents.

    Вся логика доступа и блокировки редактирования живет здесь; сервис
    только загружает и сохраняет сущность. Текущее время всегда передается
    снаружи, поэтому истечение блокировки вычисляется лениво при каждой
    проверке, а устаревшие поля locked_by/locked_at не доверяются.
    """

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        owner_id: uuid.UUID,
        content: str = "",
        editor_ids: Optional[List[uuid.UUID]] = None,
        is_public: bool = False,
        public_token: Optional[str] = None,
        locked_by: Optional[uuid.UUID] = None,
        locked_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.owner_id = owner_id
        self.content = content
        self.editor_ids = list(editor_ids or [])
        self.is_public = is_public
        self.public_token = public_token
        self.locked_by = locked_by
        self.locked_at = as_utc(locked_at) if locked_at else None
        self.created_at = as_utc(created_at) if created_at else datetime.now(timezone.utc)
        self.updated_at = as_utc(updated_at) if updated_at else self.created_at

    @classmethod
    def create_document(
        cls,
        title: str,
        owner_id: uuid.UUID,
        now: datetime,
        content: str = ""
    ) -> "Document":
        """Новый документ: без редакторов, приватный, не заблокирован"""
        return cls(
            uuid=uuid.uuid4(),
            title=title,
            owner_id=owner_id,
            content=content,
            created_at=now,
            updated_at=now
        )

    # Доступ

    def role_of(self, user_id: uuid.UUID) -> Role:
        if user_id == self.owner_id:
            return Role.OWNER
        if user_id in self.editor_ids:
            return Role.EDITOR
        return Role.NONE

    def require_access(self, user_id: uuid.UUID) -> Role:
        """Владелец или редактор, иначе Forbidden"""
        role = self.role_of(user_id)
        if role is Role.NONE:
            raise ForbiddenError("No access")
        return role

    def require_owner(self, user_id: uuid.UUID, action: str = "manage this document") -> None:
        if self.role_of(user_id) is not Role.OWNER:
            raise ForbiddenError(f"Only owner can {action}")

    # Блокировка

    def lock_state(self, now: datetime, ttl: timedelta = DEFAULT_LOCK_TTL) -> Optional[LockState]:
        """Активная блокировка или None (истекшая считается отсутствующей)"""
        if self.locked_by is None or self.locked_at is None:
            return None
        if as_utc(now) - self.locked_at > ttl:
            return None
        return LockState(holder=self.locked_by, since=self.locked_at)

    def is_locked(self, now: datetime, ttl: timedelta = DEFAULT_LOCK_TTL) -> bool:
        return self.lock_state(now, ttl) is not None

    def _check_lock(self, user_id: uuid.UUID, now: datetime, ttl: timedelta) -> None:
        lock = self.lock_state(now, ttl)
        if lock is not None and lock.holder != user_id:
            raise LockConflictError(lock.holder, lock.since)

    def _clear_lock(self) -> None:
        self.locked_by = None
        self.locked_at = None

    def acquire_lock(self, user_id: uuid.UUID, now: datetime, ttl: timedelta = DEFAULT_LOCK_TTL) -> LockState:
        """Захват блокировки; повторный захват тем же пользователем продлевает ее"""
        self.require_access(user_id)
        self._check_lock(user_id, now, ttl)

        self.locked_by = user_id
        self.locked_at = as_utc(now)
        self.updated_at = self.locked_at
        return LockState(holder=user_id, since=self.locked_at)

    def release_lock(self, user_id: uuid.UUID, now: datetime) -> bool:
        """Снятие блокировки владельцем или тем, кто ее ставил.

        Держатель определяется по сохраненному locked_by, даже если срок
        блокировки уже истек. Возвращает True, если что-то было снято.
        """
        if self.role_of(user_id) is not Role.OWNER and self.locked_by != user_id:
            raise ForbiddenError("No permission to unlock")

        if self.locked_by is None and self.locked_at is None:
            return False

        self._clear_lock()
        self.updated_at = as_utc(now)
        return True

    # Изменения

    def apply_changes(
        self,
        user_id: uuid.UUID,
        now: datetime,
        ttl: timedelta = DEFAULT_LOCK_TTL,
        title: Optional[str] = None,
        content: Optional[str] = None
    ) -> None:
        """Запись заголовка/содержимого; блокировку не захватывает"""
        self.require_access(user_id)
        self._check_lock(user_id, now, ttl)

        if self.locked_by is not None and self.lock_state(now, ttl) is None:
            self._clear_lock()

        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        self.updated_at = as_utc(now)

    def ensure_can_delete(self, user_id: uuid.UUID) -> None:
        self.require_access(user_id)
        self.require_owner(user_id, "delete")

    # Публичная ссылка

    def set_public(
        self,
        user_id: uuid.UUID,
        make_public: bool,
        token_factory: Callable[[], str],
        now: datetime
    ) -> Tuple[bool, Optional[str]]:
        """Переключение публичного доступа.

        Токен создается один раз при первой публикации и больше не меняется:
        повторное включение возвращает прежнюю ссылку.
        """
        self.require_access(user_id)
        self.require_owner(user_id, "share")

        self.is_public = make_public
        if make_public and not self.public_token:
            self.public_token = token_factory()
        self.updated_at = as_utc(now)
        return self.is_public, self.public_token

    def is_publicly_readable(self, token: str) -> bool:
        return self.is_public and self.public_token is not None and self.public_token == token

    # Редакторы

    def add_editor(self, user_id: uuid.UUID, editor_id: uuid.UUID, now: datetime) -> List[uuid.UUID]:
        self.require_access(user_id)
        self.require_owner(user_id, "manage editors")

        if editor_id == self.owner_id:
            raise BadRequestError("Owner already has access")
        if editor_id not in self.editor_ids:
            self.editor_ids.append(editor_id)
            self.updated_at = as_utc(now)
        return list(self.editor_ids)

    def remove_editor(self, user_id: uuid.UUID, editor_id: uuid.UUID, now: datetime) -> List[uuid.UUID]:
        self.require_access(user_id)
        self.require_owner(user_id, "manage editors")

        if editor_id in self.editor_ids:
            self.editor_ids.remove(editor_id)
            self.updated_at = as_utc(now)
        return list(self.editor_ids)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title}, owner_id={self.owner_id})"
