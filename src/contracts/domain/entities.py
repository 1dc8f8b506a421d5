#contracts/domain/entities.py

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

PAGATA = "S"
NON_PAGATA = "N"


class FrequenzaRata(str, Enum):
    MENSILE = "MENSILE"
    BIMESTRALE = "BIMESTRALE"
    TRIMESTRALE = "TRIMESTRALE"   # default
    SEMESTRALE = "SEMESTRALE"
    ANNUALE = "ANNUALE"


@dataclass(frozen=True)
class RataDraft:
    numero_rata: int
    data_scadenza: date
    importo: Decimal
    pagata: str = NON_PAGATA


@dataclass
class Rata:
    id: Optional[int]
    contratto_id: int
    numero_rata: int
    data_scadenza: date
    importo: Decimal
    pagata: str = NON_PAGATA

    @property
    def pagata_bool(self) -> bool:
        return self.pagata == PAGATA


@dataclass
class Contratto:
    id: Optional[int]
    locatario_id: int
    immobile_id: int
    data_inizio: date
    durata_anni: int
    canone_annuo: Decimal
    frequenza_rata: FrequenzaRata = FrequenzaRata.TRIMESTRALE
    rate: List[Rata] = field(default_factory=list)
