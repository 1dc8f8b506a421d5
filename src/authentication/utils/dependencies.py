# authentication/utils/dependencies.py

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends

from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.token_service import TokenService
from common.config import get_settings
from common.database_connection import get_db_connection


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expiration=timedelta(minutes=settings.JWT_EXPIRATION_MINUTES),
    )


def get_auth_repository(conn=Depends(get_db_connection)) -> AuthRepository:
    return AuthRepository(conn)
