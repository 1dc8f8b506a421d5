# properties/api/routes.py

from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Union

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from authentication.domain.authorization_policy import AUTENTICATA, GESTIONE, SOLO_ADMIN
from authentication.middleware.jwt_middleware import richiede
from properties.application.property_service import PropertyService
from properties.domain.entities import (
    DatiAppartamento,
    DatiNegozio,
    DatiUfficio,
    Immobile,
    dati_to_dict,
)
from properties.infrastructure.property_repository import PropertyRepository
from properties.utils.dependencies import get_property_repository

router = APIRouter(prefix="/api/immobili", tags=["Immobili"])


# --------
# Models: il campo "tipo" in "dati" seleziona la variante
# --------
class AppartamentoModel(BaseModel):
    tipo: Literal["APPARTAMENTO"]
    piano: int
    num_camere: int = Field(..., ge=0)

    def to_domain(self):
        return DatiAppartamento(piano=self.piano, num_camere=self.num_camere)


class NegozioModel(BaseModel):
    tipo: Literal["NEGOZIO"]
    vetrine: int = Field(..., ge=0)
    magazzino_mq: float = Field(..., ge=0)

    def to_domain(self):
        return DatiNegozio(vetrine=self.vetrine, magazzino_mq=self.magazzino_mq)


class UfficioModel(BaseModel):
    tipo: Literal["UFFICIO"]
    posti_lavoro: int = Field(..., ge=0)
    sale_riunioni: int = Field(..., ge=0)

    def to_domain(self):
        return DatiUfficio(posti_lavoro=self.posti_lavoro, sale_riunioni=self.sale_riunioni)


DatiModel = Annotated[Union[AppartamentoModel, NegozioModel, UfficioModel], Field(discriminator="tipo")]


class ImmobileRequest(BaseModel):
    indirizzo: str = Field(..., min_length=1)
    citta: str = Field(..., min_length=1)
    superficie: Decimal = Field(..., gt=0)
    dati: DatiModel


class ImmobileResponse(BaseModel):
    id: int
    indirizzo: str
    citta: str
    superficie: float
    tipo: str
    dati: dict


def _to_response(immobile: Immobile) -> dict:
    return {
        "id": immobile.id,
        "indirizzo": immobile.indirizzo,
        "citta": immobile.citta,
        "superficie": float(immobile.superficie),
        "tipo": immobile.tipo.value,
        "dati": {"tipo": immobile.tipo.value, **dati_to_dict(immobile.dati)},
    }


def get_property_service(repo: PropertyRepository = Depends(get_property_repository)) -> PropertyService:
    return PropertyService(repo)


# --------
# Endpoints
# --------
@router.get("", response_model=List[ImmobileResponse], dependencies=[Depends(richiede(AUTENTICATA))])
def lista_immobili(service: PropertyService = Depends(get_property_service)):
    return [_to_response(i) for i in service.lista()]


@router.get("/per-citta", response_model=Dict[str, int], dependencies=[Depends(richiede(GESTIONE))])
def immobili_affittati_per_citta(service: PropertyService = Depends(get_property_service)):
    return service.affittati_per_citta()


@router.get("/per-tipo", response_model=Dict[str, int], dependencies=[Depends(richiede(GESTIONE))])
def immobili_per_tipo(service: PropertyService = Depends(get_property_service)):
    return service.conteggio_per_tipo()


@router.get("/{immobile_id}", response_model=ImmobileResponse, dependencies=[Depends(richiede(AUTENTICATA))])
def dettaglio_immobile(immobile_id: int, service: PropertyService = Depends(get_property_service)):
    return _to_response(service.trova(immobile_id))


@router.post("", response_model=ImmobileResponse, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(richiede(GESTIONE))])
def crea_immobile(request: ImmobileRequest, service: PropertyService = Depends(get_property_service)):
    immobile = service.crea(
        indirizzo=request.indirizzo,
        citta=request.citta,
        superficie=request.superficie,
        dati=request.dati.to_domain(),
    )
    return _to_response(immobile)


@router.put("/{immobile_id}", response_model=ImmobileResponse, dependencies=[Depends(richiede(GESTIONE))])
def aggiorna_immobile(
    immobile_id: int,
    request: ImmobileRequest,
    service: PropertyService = Depends(get_property_service),
):
    immobile = service.aggiorna(
        immobile_id,
        indirizzo=request.indirizzo,
        citta=request.citta,
        superficie=request.superficie,
        dati=request.dati.to_domain(),
    )
    return _to_response(immobile)


@router.delete("/{immobile_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(richiede(SOLO_ADMIN))])
def elimina_immobile(immobile_id: int, service: PropertyService = Depends(get_property_service)):
    service.elimina(immobile_id)
