# authentication/api/routes.py

from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from authentication.application.auth_service import AuthService
from authentication.domain.authorization_policy import AUTENTICATA
from authentication.domain.entities import UtenteToken
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.token_service import TokenService
from authentication.middleware.jwt_middleware import richiede
from authentication.utils.dependencies import get_auth_repository, get_token_service
from common.errors import EntityNotFound

router = APIRouter(prefix="/api/auth", tags=["Autenticazione"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# --------
# Models
# --------
class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    nome: str = Field(..., min_length=1)
    cognome: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    type: str = "Bearer"
    utente_id: int
    email: str
    nome: str
    cognome: str
    ruoli: List[str]


def get_auth_service(
    repo: AuthRepository = Depends(get_auth_repository),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(repo, token_service)


# --------
# Endpoints
# --------
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
             summary="Registrare un nuovo utente locatario")
def register(request: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    return service.registra(
        email=request.email,
        password=request.password,
        nome=request.nome,
        cognome=request.cognome,
    )


@router.post("/login", response_model=AuthResponse, summary="Login e ottenimento del token JWT")
def login(request: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return service.login(request.email, request.password)


@router.get("/me", summary="Informazioni sull'utente autenticato")
def me(
    utente: UtenteToken = Depends(richiede(AUTENTICATA)),
    repo: AuthRepository = Depends(get_auth_repository),
):
    profilo = repo.trova_utente_per_id(utente.id)
    if profilo is None:
        raise EntityNotFound("Utente", utente.id)
    return {
        "id": profilo.id,
        "email": profilo.email,
        "nome": profilo.nome,
        "cognome": profilo.cognome,
        "ruoli": sorted(utente.ruoli),
        "data_registrazione": profilo.data_registrazione.isoformat() if profilo.data_registrazione else None,
    }
