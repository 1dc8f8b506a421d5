# contracts/api/schemas.py

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from contracts.domain.entities import Contratto, FrequenzaRata, Rata
from contracts.domain.schedule_generator import DURATA_MASSIMA_ANNI, IMPORTO_MASSIMO


class ContrattoRequest(BaseModel):
    locatario_id: int = Field(..., gt=0)
    immobile_id: int = Field(..., gt=0)
    data_inizio: date
    durata_anni: int = Field(..., gt=0, le=DURATA_MASSIMA_ANNI)
    canone_annuo: Decimal = Field(..., gt=0, lt=IMPORTO_MASSIMO, max_digits=12, decimal_places=2)
    frequenza_rata: FrequenzaRata = FrequenzaRata.TRIMESTRALE


class RataResponse(BaseModel):
    id: int
    contratto_id: int
    numero_rata: int
    data_scadenza: date
    importo: float
    pagata: str
    pagata_bool: bool


class ContrattoResponse(BaseModel):
    id: int
    locatario_id: int
    immobile_id: int
    data_inizio: date
    durata_anni: int
    canone_annuo: float
    frequenza_rata: FrequenzaRata
    rate: List[RataResponse] = []


def rata_to_response(rata: Rata) -> RataResponse:
    return RataResponse(
        id=rata.id,
        contratto_id=rata.contratto_id,
        numero_rata=rata.numero_rata,
        data_scadenza=rata.data_scadenza,
        importo=float(rata.importo),
        pagata=rata.pagata,
        pagata_bool=rata.pagata_bool,
    )


def contratto_to_response(contratto: Contratto) -> ContrattoResponse:
    return ContrattoResponse(
        id=contratto.id,
        locatario_id=contratto.locatario_id,
        immobile_id=contratto.immobile_id,
        data_inizio=contratto.data_inizio,
        durata_anni=contratto.durata_anni,
        canone_annuo=float(contratto.canone_annuo),
        frequenza_rata=contratto.frequenza_rata,
        rate=[rata_to_response(r) for r in contratto.rate],
    )
