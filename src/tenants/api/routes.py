# tenants/api/routes.py

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from authentication.domain.authorization_policy import GESTIONE, SOLO_ADMIN, SOLO_LOCATARIO
from authentication.domain.entities import UtenteToken
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.middleware.jwt_middleware import richiede
from authentication.utils.dependencies import get_auth_repository
from tenants.application.tenant_service import TenantService
from tenants.infrastructure.tenant_repository import TenantRepository
from tenants.utils.dependencies import get_tenant_repository

router = APIRouter(prefix="/api/locatari", tags=["Locatari"])

CF_PATTERN = r"^[A-Za-z0-9]{16}$"


class LocatarioBase(BaseModel):
    nome: str = Field(..., min_length=1)
    cognome: str = Field(..., min_length=1)
    cf: str = Field(..., pattern=CF_PATTERN)
    indirizzo: str = Field(..., min_length=1)
    telefono: str = Field(..., min_length=1)


class LocatarioCreateRequest(LocatarioBase):
    utente_id: int = Field(..., gt=0)


class LocatarioUpdateRequest(LocatarioBase):
    pass


class LocatarioResponse(BaseModel):
    id: int
    nome: str
    cognome: str
    cf: str
    indirizzo: str
    telefono: str
    utente_id: int


def get_tenant_service(
    repo: TenantRepository = Depends(get_tenant_repository),
    auth_repo: AuthRepository = Depends(get_auth_repository),
) -> TenantService:
    return TenantService(repo, auth_repo)


@router.get("", response_model=List[LocatarioResponse], dependencies=[Depends(richiede(GESTIONE))])
def lista_locatari(service: TenantService = Depends(get_tenant_service)):
    return [asdict(locatario) for locatario in service.lista()]


@router.get("/me", response_model=LocatarioResponse)
def mio_locatario(
    utente: UtenteToken = Depends(richiede(SOLO_LOCATARIO)),
    service: TenantService = Depends(get_tenant_service),
):
    return asdict(service.trova_per_utente(utente.id))


@router.get("/contratti-lunghi", response_model=List[LocatarioResponse], dependencies=[Depends(richiede(GESTIONE))])
def locatari_con_contratti_lunghi(service: TenantService = Depends(get_tenant_service)):
    return [asdict(locatario) for locatario in service.con_contratti_lunghi()]


@router.get("/{locatario_id}", response_model=LocatarioResponse, dependencies=[Depends(richiede(GESTIONE))])
def dettaglio_locatario(locatario_id: int, service: TenantService = Depends(get_tenant_service)):
    return asdict(service.trova(locatario_id))


@router.post("", response_model=LocatarioResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(richiede(GESTIONE))])
def crea_locatario(request: LocatarioCreateRequest, service: TenantService = Depends(get_tenant_service)):
    return asdict(service.crea(**request.model_dump()))


@router.put("/{locatario_id}", response_model=LocatarioResponse, dependencies=[Depends(richiede(GESTIONE))])
def aggiorna_locatario(
    locatario_id: int,
    request: LocatarioUpdateRequest,
    service: TenantService = Depends(get_tenant_service),
):
    return asdict(service.aggiorna(locatario_id, **request.model_dump()))


@router.delete("/{locatario_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(richiede(SOLO_ADMIN))])
def elimina_locatario(locatario_id: int, service: TenantService = Depends(get_tenant_service)):
    service.elimina(locatario_id)
