#common/config.py

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 1440   # 24 ore

    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "gestione_affitti"
    DB_USER: str = "postgres"
    DB_PASS: str = ""

    CORS_ORIGINS: str = "*"   # lista separata da virgole

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
