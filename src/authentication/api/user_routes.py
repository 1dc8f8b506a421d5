# authentication/api/user_routes.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from authentication.application.user_service import UserService
from authentication.domain.authorization_policy import AUTENTICATA, SOLO_ADMIN
from authentication.domain.entities import Utente, UtenteToken
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.middleware.jwt_middleware import richiede
from authentication.utils.dependencies import get_auth_repository

router = APIRouter(prefix="/api/users", tags=["Utenti"])


# --------
# Models
# --------
class ProfiloUpdateRequest(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    cognome: Optional[str] = Field(None, max_length=100)


class UtenteResponse(BaseModel):
    id: int
    email: str
    nome: str
    cognome: str
    abilitato: bool
    ruoli: List[str]
    data_registrazione: Optional[datetime] = None


def _to_response(utente: Utente) -> dict:
    # l'hash della password non esce mai dal servizio
    return {
        "id": utente.id,
        "email": utente.email,
        "nome": utente.nome,
        "cognome": utente.cognome,
        "abilitato": utente.abilitato,
        "ruoli": sorted(utente.ruoli),
        "data_registrazione": utente.data_registrazione,
    }


def get_user_service(repo: AuthRepository = Depends(get_auth_repository)) -> UserService:
    return UserService(repo)


# --------
# Endpoints
# --------
@router.get("", response_model=List[UtenteResponse], dependencies=[Depends(richiede(SOLO_ADMIN))])
def lista_utenti(service: UserService = Depends(get_user_service)):
    return [_to_response(u) for u in service.lista()]


@router.get("/roles", response_model=List[str], dependencies=[Depends(richiede(SOLO_ADMIN))])
def lista_ruoli(service: UserService = Depends(get_user_service)):
    return service.ruoli()


@router.get("/me", response_model=UtenteResponse)
def utente_corrente(
    utente: UtenteToken = Depends(richiede(AUTENTICATA)),
    service: UserService = Depends(get_user_service),
):
    return _to_response(service.trova(utente.id))


@router.put("/me", response_model=UtenteResponse, summary="Aggiornare nome e cognome del proprio profilo")
def aggiorna_utente_corrente(
    request: ProfiloUpdateRequest,
    utente: UtenteToken = Depends(richiede(AUTENTICATA)),
    service: UserService = Depends(get_user_service),
):
    return _to_response(service.aggiorna_profilo(utente.id, request.nome, request.cognome))


@router.get("/{utente_id}", response_model=UtenteResponse, dependencies=[Depends(richiede(SOLO_ADMIN))])
def dettaglio_utente(utente_id: int, service: UserService = Depends(get_user_service)):
    return _to_response(service.trova(utente_id))


@router.put("/{utente_id}", response_model=UtenteResponse, dependencies=[Depends(richiede(SOLO_ADMIN))])
def aggiorna_utente(
    utente_id: int,
    request: ProfiloUpdateRequest,
    service: UserService = Depends(get_user_service),
):
    return _to_response(service.aggiorna_profilo(utente_id, request.nome, request.cognome))


@router.put("/{utente_id}/roles", response_model=UtenteResponse, dependencies=[Depends(richiede(SOLO_ADMIN))])
def aggiorna_ruoli_utente(
    utente_id: int,
    ruoli: List[str] = Body(...),
    service: UserService = Depends(get_user_service),
):
    return _to_response(service.aggiorna_ruoli(utente_id, ruoli))
