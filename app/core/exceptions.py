from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from fastapi import status


class DocShareError(Exception):
    """Базовая ошибка домена; обработчик в app.main превращает её в JSON-ответ"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.detail, **self.extra}


class BadRequestError(DocShareError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(DocShareError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(DocShareError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DocShareError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DocShareError):
    status_code = status.HTTP_409_CONFLICT


class LockConflictError(ConflictError):
    """Документ заблокирован другим пользователем"""

    def __init__(self, locked_by: uuid.UUID, locked_at: datetime):
        super().__init__(
            "Document is being edited by another user",
            lockedBy=str(locked_by),
            lockedAt=locked_at.isoformat(),
        )
        self.locked_by = locked_by
        self.locked_at = locked_at
