#maintenance/domain/entities.py

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

# NUMERIC(12, 2)
IMPORTO_MASSIMO = Decimal("10000000000")


class TipoManutenzione(str, Enum):
    ORDINARIA = "ORDINARIA"
    STRAORDINARIA = "STRAORDINARIA"


@dataclass
class Manutenzione:
    id: Optional[int]
    immobile_id: int
    locatario_id: int
    data_man: date
    importo: Decimal
    tipo: TipoManutenzione = TipoManutenzione.STRAORDINARIA
    descrizione: Optional[str] = None
