from contextlib import asynccontextmanager
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router
from app.api.http.users import router as users_router
from app.api.http.documents import router as documents_router
from app.api.http.public import router as public_router
from app.core.config import settings
from app.core.db import init_models
from app.core.exceptions import DocShareError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        await init_models()
        logger.info("Database tables are ready")
    yield


app = FastAPI(
    title="DocShare",
    description="Веб-приложение для хранения и совместного доступа к документам",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DocShareError)
async def docshare_error_handler(request: Request, exc: DocShareError):
    """Доменные ошибки -> фиксированные коды ответа"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Некорректный ввод: 400, как и остальные ошибки валидации"""
    errors = [{"loc": err.get("loc"), "msg": err.get("msg")} for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"detail": "Invalid input", "errors": errors})
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())[:8]
    logger.exception("Unhandled exception [%s]: %s", error_id, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error_id": error_id},
    )


# Подключаем роутеры
app.include_router(health_router)
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(public_router, prefix="/api")


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocShare API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
