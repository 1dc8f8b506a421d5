#authentication/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_MANAGER = "ROLE_MANAGER"
ROLE_LOCATARIO = "ROLE_LOCATARIO"

RUOLI_VALIDI = frozenset({ROLE_ADMIN, ROLE_MANAGER, ROLE_LOCATARIO})


@dataclass
class Utente:
    id: Optional[int]
    email: str
    password_hash: str
    nome: str
    cognome: str
    abilitato: bool = True
    ruoli: FrozenSet[str] = field(default_factory=frozenset)
    data_registrazione: Optional[datetime] = None


@dataclass(frozen=True)
class UtenteToken:
    """Identità autenticata della richiesta corrente; i ruoli sono una fotografia immutabile."""
    id: int
    email: str
    ruoli: FrozenSet[str]

    def ha_ruolo(self, *ruoli: str) -> bool:
        return bool(self.ruoli.intersection(ruoli))


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    issued_at: datetime
    expires_at: datetime
