# maintenance/api/routes.py

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel, Field

from authentication.domain.authorization_policy import (
    GESTIONE,
    GESTIONE_O_LOCATARIO,
    SOLO_ADMIN,
    SOLO_LOCATARIO,
    verifica_proprieta,
)
from authentication.domain.entities import UtenteToken
from authentication.middleware.jwt_middleware import richiede
from maintenance.application.maintenance_service import MaintenanceService
from maintenance.domain.entities import IMPORTO_MASSIMO, Manutenzione, TipoManutenzione
from maintenance.infrastructure.maintenance_repository import MaintenanceRepository
from maintenance.utils.dependencies import get_maintenance_repository
from properties.infrastructure.property_repository import PropertyRepository
from properties.utils.dependencies import get_property_repository
from tenants.infrastructure.tenant_repository import TenantRepository
from tenants.utils.dependencies import get_tenant_repository

router = APIRouter(prefix="/api/manutenzioni", tags=["Manutenzioni"])


class ManutenzioneRequest(BaseModel):
    immobile_id: int = Field(..., gt=0)
    locatario_id: int = Field(..., gt=0)
    data_man: date
    importo: Decimal = Field(..., gt=0, lt=IMPORTO_MASSIMO, max_digits=12, decimal_places=2)
    tipo: TipoManutenzione = TipoManutenzione.STRAORDINARIA
    descrizione: Optional[str] = None


class ManutenzioneResponse(BaseModel):
    id: int
    immobile_id: int
    locatario_id: int
    data_man: date
    importo: float
    tipo: str
    descrizione: Optional[str] = None


def _to_response(manutenzione: Manutenzione) -> dict:
    return {
        "id": manutenzione.id,
        "immobile_id": manutenzione.immobile_id,
        "locatario_id": manutenzione.locatario_id,
        "data_man": manutenzione.data_man,
        "importo": float(manutenzione.importo),
        "tipo": manutenzione.tipo.value,
        "descrizione": manutenzione.descrizione,
    }


def get_maintenance_service(
    repo: MaintenanceRepository = Depends(get_maintenance_repository),
    tenant_repo: TenantRepository = Depends(get_tenant_repository),
    property_repo: PropertyRepository = Depends(get_property_repository),
) -> MaintenanceService:
    return MaintenanceService(repo, tenant_repo, property_repo)


@router.get("", response_model=List[ManutenzioneResponse], dependencies=[Depends(richiede(GESTIONE))])
def lista_manutenzioni(service: MaintenanceService = Depends(get_maintenance_service)):
    return [_to_response(m) for m in service.lista()]


@router.get("/me", response_model=List[ManutenzioneResponse])
def mie_manutenzioni(
    utente: UtenteToken = Depends(richiede(SOLO_LOCATARIO)),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return [_to_response(m) for m in service.lista_per_email(utente.email)]


@router.get("/totale-per-anno-citta", response_model=Dict[str, Dict[str, float]],
            dependencies=[Depends(richiede(GESTIONE))])
def totale_per_anno_e_citta(service: MaintenanceService = Depends(get_maintenance_service)):
    return {
        anno: {citta: float(totale) for citta, totale in per_citta.items()}
        for anno, per_citta in service.totali_per_anno_e_citta().items()
    }


@router.get("/locatario/{locatario_id}/anno/{anno}", response_model=List[ManutenzioneResponse],
            dependencies=[Depends(richiede(GESTIONE))])
def manutenzioni_locatario_per_anno(
    locatario_id: int,
    anno: int = Path(..., ge=1, le=9999),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return [_to_response(m) for m in service.per_locatario_e_anno(locatario_id, anno)]


@router.get("/locatario/{locatario_id}/importo-maggiore/{importo}", response_model=List[date],
            dependencies=[Depends(richiede(GESTIONE))])
def date_manutenzioni_importo_maggiore(
    locatario_id: int,
    importo: Decimal,
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return service.date_con_importo_maggiore(locatario_id, importo)


@router.get("/{manutenzione_id}", response_model=ManutenzioneResponse)
def dettaglio_manutenzione(
    manutenzione_id: int,
    utente: UtenteToken = Depends(richiede(GESTIONE_O_LOCATARIO)),
    repo: MaintenanceRepository = Depends(get_maintenance_repository),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    verifica_proprieta(utente, manutenzione_id, repo.trova_utente_proprietario)
    return _to_response(service.trova(manutenzione_id))


@router.post("", response_model=ManutenzioneResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(richiede(GESTIONE))])
def crea_manutenzione(request: ManutenzioneRequest, service: MaintenanceService = Depends(get_maintenance_service)):
    return _to_response(service.crea(**request.model_dump()))


@router.put("/{manutenzione_id}", response_model=ManutenzioneResponse, dependencies=[Depends(richiede(GESTIONE))])
def aggiorna_manutenzione(
    manutenzione_id: int,
    request: ManutenzioneRequest,
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return _to_response(service.aggiorna(manutenzione_id, **request.model_dump()))


@router.delete("/{manutenzione_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(richiede(SOLO_ADMIN))])
def elimina_manutenzione(manutenzione_id: int, service: MaintenanceService = Depends(get_maintenance_service)):
    service.elimina(manutenzione_id)
