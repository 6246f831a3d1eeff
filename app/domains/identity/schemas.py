from pydantic import BaseModel, EmailStr, Field, field_validator
import uuid

from app.core.schemas import CamelModel


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=200)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError('Username must be at least 3 characters long')
        return v


class UserLogin(BaseModel):
    """Схема для входа: login это email или username"""
    login: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    """Публичные данные пользователя (без хеша пароля)"""
    id: uuid.UUID
    email: str
    username: str


class AuthResponse(BaseModel):
    """Ответ регистрации и входа"""
    token: str
    user: UserOut


class MeResponse(CamelModel):
    ok: bool = True
    user_id: uuid.UUID
