from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.security import create_access_token, verify_token
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)

    def issue_token(self, user: User) -> str:
        """Создание JWT токена для пользователя"""
        return create_access_token(data={"sub": str(user.uuid)})

    async def register_user(self, user_data: UserCreate) -> Tuple[User, str]:
        """Регистрация нового пользователя"""
        email = User.normalize_email(user_data.email)
        if await self.user_repository.exists(email, user_data.username):
            raise ConflictError("Email or username already in use")

        user = User.create_user(
            email=email,
            username=user_data.username,
            password=user_data.password
        )
        user = await self.user_repository.create(user)
        logger.info(f"Registered user {user.uuid}")

        return user, self.issue_token(user)

    async def login_user(self, login_data: UserLogin) -> Tuple[User, str]:
        """Вход пользователя по email или username"""
        user = await self.user_repository.get_by_login(login_data.login)

        if not user or not user.authenticate(login_data.password):
            logger.warning("Failed login attempt")
            raise UnauthorizedError("Invalid credentials")

        return user, self.issue_token(user)

    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload:
            return None

        try:
            user_uuid = uuid.UUID(str(payload.get("sub")))
        except ValueError:
            return None

        return await self.user_repository.get_by_uuid(user_uuid)
