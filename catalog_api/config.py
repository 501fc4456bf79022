"""
Configuration management for the products/categories API
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "API Productos"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database (DATABASE_URL wins over the DB_* parts when set)
    DATABASE_URL: str = ""
    DB_DRIVER: str = "mysql+aiomysql"
    DB_HOST: str = "localhost"
    DB_PORT: Optional[int] = None
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "api_productos"

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0  # <= 0 waits forever
    DB_POOL_RECYCLE: int = 3600

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
