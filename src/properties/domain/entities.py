#properties/domain/entities.py

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from common.errors import ValidationFailed


class TipoImmobile(str, Enum):
    APPARTAMENTO = "APPARTAMENTO"
    NEGOZIO = "NEGOZIO"
    UFFICIO = "UFFICIO"


@dataclass(frozen=True)
class DatiAppartamento:
    piano: int
    num_camere: int


@dataclass(frozen=True)
class DatiNegozio:
    vetrine: int
    magazzino_mq: float


@dataclass(frozen=True)
class DatiUfficio:
    posti_lavoro: int
    sale_riunioni: int


DatiImmobile = Union[DatiAppartamento, DatiNegozio, DatiUfficio]

_CLASSE_PER_TIPO = {
    TipoImmobile.APPARTAMENTO: DatiAppartamento,
    TipoImmobile.NEGOZIO: DatiNegozio,
    TipoImmobile.UFFICIO: DatiUfficio,
}
_TIPO_PER_CLASSE = {classe: tipo for tipo, classe in _CLASSE_PER_TIPO.items()}


def tipo_di(dati: DatiImmobile) -> TipoImmobile:
    return _TIPO_PER_CLASSE[type(dati)]


def dati_da_dict(tipo: Union[TipoImmobile, str], valori: dict) -> DatiImmobile:
    """Ricostruisce il payload della variante a partire dal discriminante."""
    try:
        classe = _CLASSE_PER_TIPO[TipoImmobile(tipo)]
    except ValueError:
        raise ValidationFailed(f"Tipo immobile non valido: {tipo}", {"tipo": "valore non ammesso"})
    try:
        return classe(**valori)
    except TypeError as e:
        raise ValidationFailed(f"Dati non coerenti con il tipo {tipo}: {e}")


def dati_to_dict(dati: DatiImmobile) -> dict:
    return asdict(dati)


@dataclass
class Immobile:
    id: Optional[int]
    indirizzo: str
    citta: str
    superficie: Decimal
    dati: DatiImmobile

    @property
    def tipo(self) -> TipoImmobile:
        return tipo_di(self.dati)
