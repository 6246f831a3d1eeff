from typing import Optional
import uuid

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import SystemClock, get_clock
from app.core.db import get_db
from app.core.exceptions import BadRequestError, UnauthorizedError
from app.domains.documents.services import DocumentService
from app.domains.identity.entities import User
from app.domains.identity.services import IdentityService

# auto_error=False: отсутствие заголовка даёт 401, а не 403 по умолчанию
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя"""
    if credentials is None:
        raise UnauthorizedError("Missing Authorization header")

    identity_service = IdentityService(db)
    user = await identity_service.get_current_user_from_token(credentials.credentials)

    if not user:
        raise UnauthorizedError("Invalid or expired token")

    return user


def get_document_service(
    db: AsyncSession = Depends(get_db),
    clock: SystemClock = Depends(get_clock)
) -> DocumentService:
    return DocumentService(db, clock=clock)


def parse_id(value: str) -> uuid.UUID:
    """Идентификатор из пути; при некорректном формате 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise BadRequestError("Invalid id")
