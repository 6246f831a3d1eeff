from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    database_echo: bool = False
    create_tables_on_startup: bool = True

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Блокировка редактирования (10 минут)
    lock_ttl_seconds: int = 600
    public_token_bytes: int = 16
    bcrypt_rounds: int = 12

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
