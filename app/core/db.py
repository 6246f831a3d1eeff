from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import settings

# Базовый класс для моделей
Base = declarative_base()

# Асинхронный движок
engine = create_async_engine(settings.database_url, future=True, echo=settings.database_echo)

# Сессии
SessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models():
    """Создание таблиц (для локального запуска без миграций)"""
    import app.db.models  # noqa: F401  регистрирует модели в Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
