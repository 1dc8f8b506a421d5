#tenants/domain/entities.py

from dataclasses import dataclass
from typing import Optional


@dataclass
class Locatario:
    id: Optional[int]
    nome: str
    cognome: str
    cf: str
    indirizzo: str
    telefono: str
    utente_id: int
