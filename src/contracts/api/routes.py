# contracts/api/routes.py

from typing import List

from fastapi import APIRouter, Depends, status

from authentication.domain.authorization_policy import (
    GESTIONE,
    GESTIONE_O_LOCATARIO,
    SOLO_ADMIN,
    SOLO_LOCATARIO,
    verifica_proprieta,
)
from authentication.domain.entities import UtenteToken
from authentication.middleware.jwt_middleware import richiede
from contracts.api.schemas import ContrattoRequest, ContrattoResponse, contratto_to_response
from contracts.application.contract_service import ContractService
from contracts.infrastructure.contract_repository import ContractRepository
from contracts.utils.dependencies import get_contract_repository
from properties.infrastructure.property_repository import PropertyRepository
from properties.utils.dependencies import get_property_repository
from tenants.infrastructure.tenant_repository import TenantRepository
from tenants.utils.dependencies import get_tenant_repository

router = APIRouter(prefix="/api/contratti", tags=["Contratti"])


def get_contract_service(
    repo: ContractRepository = Depends(get_contract_repository),
    tenant_repo: TenantRepository = Depends(get_tenant_repository),
    property_repo: PropertyRepository = Depends(get_property_repository),
) -> ContractService:
    return ContractService(repo, tenant_repo, property_repo)


# 🔹 le rotte statiche vanno dichiarate prima di /{contratto_id}
@router.get("", response_model=List[ContrattoResponse], dependencies=[Depends(richiede(GESTIONE))])
def lista_contratti(service: ContractService = Depends(get_contract_service)):
    return [contratto_to_response(c) for c in service.lista()]


@router.get("/me", response_model=List[ContrattoResponse])
def miei_contratti(
    utente: UtenteToken = Depends(richiede(SOLO_LOCATARIO)),
    service: ContractService = Depends(get_contract_service),
):
    return [contratto_to_response(c) for c in service.lista_per_email(utente.email)]


@router.get("/morosi", response_model=List[ContrattoResponse], dependencies=[Depends(richiede(GESTIONE))])
def contratti_morosi(service: ContractService = Depends(get_contract_service)):
    return [contratto_to_response(c) for c in service.morosi()]


@router.get("/{contratto_id}", response_model=ContrattoResponse)
def dettaglio_contratto(
    contratto_id: int,
    utente: UtenteToken = Depends(richiede(GESTIONE_O_LOCATARIO)),
    repo: ContractRepository = Depends(get_contract_repository),
    service: ContractService = Depends(get_contract_service),
):
    verifica_proprieta(utente, contratto_id, repo.trova_utente_proprietario)
    return contratto_to_response(service.trova(contratto_id))


@router.post("", response_model=ContrattoResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(richiede(GESTIONE))])
def crea_contratto(request: ContrattoRequest, service: ContractService = Depends(get_contract_service)):
    return contratto_to_response(service.crea(**request.model_dump()))


@router.put("/{contratto_id}", response_model=ContrattoResponse, dependencies=[Depends(richiede(GESTIONE))])
def aggiorna_contratto(
    contratto_id: int,
    request: ContrattoRequest,
    service: ContractService = Depends(get_contract_service),
):
    return contratto_to_response(service.aggiorna(contratto_id, **request.model_dump()))


@router.delete("/{contratto_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(richiede(SOLO_ADMIN))])
def elimina_contratto(contratto_id: int, service: ContractService = Depends(get_contract_service)):
    service.elimina(contratto_id)
