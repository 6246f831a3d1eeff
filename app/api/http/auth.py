from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin, UserOut, AuthResponse
from app.domains.identity.services import IdentityService

router = APIRouter(prefix="/auth", tags=["authentication"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        token=token,
        user=UserOut(id=user.uuid, email=user.email, username=user.username)
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(db)
    user, token = await identity_service.register_user(user_data)
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Вход пользователя"""
    identity_service = IdentityService(db)
    user, token = await identity_service.login_user(login_data)
    return _auth_response(user, token)
