# contracts/api/installment_routes.py

from datetime import date
from typing import Callable, List

from fastapi import APIRouter, Depends, Query

from authentication.domain.authorization_policy import (
    GESTIONE,
    GESTIONE_O_LOCATARIO,
    SOLO_LOCATARIO,
    verifica_proprieta,
)
from authentication.domain.entities import UtenteToken
from authentication.middleware.jwt_middleware import richiede
from contracts.api.schemas import RataResponse, rata_to_response
from contracts.application.installment_service import InstallmentService
from contracts.infrastructure.contract_repository import ContractRepository
from contracts.infrastructure.installment_repository import InstallmentRepository
from contracts.utils.dependencies import get_contract_repository, get_installment_repository, get_oggi

router = APIRouter(prefix="/api/rate", tags=["Rate"])


def get_installment_service(
    repo: InstallmentRepository = Depends(get_installment_repository),
    oggi: Callable[[], date] = Depends(get_oggi),
) -> InstallmentService:
    return InstallmentService(repo, oggi)


@router.get("", response_model=List[RataResponse], dependencies=[Depends(richiede(GESTIONE))])
def lista_rate(service: InstallmentService = Depends(get_installment_service)):
    return [rata_to_response(r) for r in service.lista()]


@router.get("/me", response_model=List[RataResponse])
def mie_rate(
    utente: UtenteToken = Depends(richiede(SOLO_LOCATARIO)),
    service: InstallmentService = Depends(get_installment_service),
):
    return [rata_to_response(r) for r in service.lista_per_email(utente.email)]


@router.get("/non-pagate", response_model=List[RataResponse], dependencies=[Depends(richiede(GESTIONE))])
def rate_non_pagate(service: InstallmentService = Depends(get_installment_service)):
    return [rata_to_response(r) for r in service.non_pagate()]


@router.get("/scadute", response_model=List[RataResponse], dependencies=[Depends(richiede(GESTIONE))])
def rate_scadute(service: InstallmentService = Depends(get_installment_service)):
    return [rata_to_response(r) for r in service.scadute()]


@router.get("/contratto/{contratto_id}", response_model=List[RataResponse])
def rate_del_contratto(
    contratto_id: int,
    utente: UtenteToken = Depends(richiede(GESTIONE_O_LOCATARIO)),
    contract_repo: ContractRepository = Depends(get_contract_repository),
    service: InstallmentService = Depends(get_installment_service),
):
    verifica_proprieta(utente, contratto_id, contract_repo.trova_utente_proprietario)
    return [rata_to_response(r) for r in service.lista_per_contratto(contratto_id)]


@router.get("/{rata_id}", response_model=RataResponse)
def dettaglio_rata(
    rata_id: int,
    utente: UtenteToken = Depends(richiede(GESTIONE_O_LOCATARIO)),
    repo: InstallmentRepository = Depends(get_installment_repository),
    service: InstallmentService = Depends(get_installment_service),
):
    verifica_proprieta(utente, rata_id, repo.trova_utente_proprietario)
    return rata_to_response(service.trova(rata_id))


@router.put("/{rata_id}/pagata", response_model=RataResponse, dependencies=[Depends(richiede(GESTIONE))])
def aggiorna_pagata(
    rata_id: int,
    pagata: str = Query(..., description="S oppure N"),
    service: InstallmentService = Depends(get_installment_service),
):
    return rata_to_response(service.aggiorna_pagata(rata_id, pagata))
