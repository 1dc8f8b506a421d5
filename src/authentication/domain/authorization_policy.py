# authentication/domain/authorization_policy.py

"""
Politica di autorizzazione a due livelli.

1. Gate di rotta: PUBBLICA, AUTENTICATA oppure RUOLI (insieme di ruoli richiesti).
   Nessuna identità -> Unauthenticated; ruoli non compatibili -> Forbidden.
2. Gate di proprietà, solo per risorse del locatario (contratti, rate, manutenzioni):
   un utente con il solo ruolo locatario può agire solo sulle risorse del proprio
   locatario; ADMIN e MANAGER lo saltano.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Hashable, Optional

from authentication.domain.entities import ROLE_ADMIN, ROLE_LOCATARIO, ROLE_MANAGER, UtenteToken
from common.errors import Forbidden, Unauthenticated

RUOLI_ELEVATI = frozenset({ROLE_ADMIN, ROLE_MANAGER})


class AccessoRotta(str, Enum):
    PUBBLICA = "public"
    AUTENTICATA = "authenticated"
    RUOLI = "role-gated"


@dataclass(frozen=True)
class RegolaRotta:
    accesso: AccessoRotta
    ruoli: FrozenSet[str] = frozenset()

    @classmethod
    def pubblica(cls) -> "RegolaRotta":
        return cls(AccessoRotta.PUBBLICA)

    @classmethod
    def autenticata(cls) -> "RegolaRotta":
        return cls(AccessoRotta.AUTENTICATA)

    @classmethod
    def con_ruoli(cls, *ruoli: str) -> "RegolaRotta":
        if not ruoli:
            raise ValueError("Una regola con ruoli richiede almeno un ruolo")
        return cls(AccessoRotta.RUOLI, frozenset(ruoli))


PUBBLICA = RegolaRotta.pubblica()
AUTENTICATA = RegolaRotta.autenticata()
SOLO_ADMIN = RegolaRotta.con_ruoli(ROLE_ADMIN)
GESTIONE = RegolaRotta.con_ruoli(ROLE_ADMIN, ROLE_MANAGER)
GESTIONE_O_LOCATARIO = RegolaRotta.con_ruoli(ROLE_ADMIN, ROLE_MANAGER, ROLE_LOCATARIO)
SOLO_LOCATARIO = RegolaRotta.con_ruoli(ROLE_LOCATARIO)


def verifica_rotta(regola: RegolaRotta, utente: Optional[UtenteToken]) -> None:
    if regola.accesso == AccessoRotta.PUBBLICA:
        return
    if utente is None:
        raise Unauthenticated("Nessuna identità valida per una rotta protetta")
    if regola.accesso == AccessoRotta.RUOLI and not utente.ha_ruolo(*regola.ruoli):
        raise Forbidden(
            f"Utente {utente.email} senza ruoli richiesti {sorted(regola.ruoli)}"
        )


def salta_controllo_proprieta(utente: UtenteToken) -> bool:
    return utente.ha_ruolo(*RUOLI_ELEVATI)


def verifica_proprieta(
    utente: UtenteToken,
    risorsa_id: Hashable,
    trova_utente_proprietario: Callable[[Hashable], Optional[int]],
) -> None:
    """
    trova_utente_proprietario restituisce l'id dell'utente collegato al locatario
    proprietario della risorsa, oppure None se la risorsa non esiste.
    """
    if salta_controllo_proprieta(utente):
        return
    if ROLE_LOCATARIO not in utente.ruoli:
        raise Forbidden(f"Utente {utente.email} senza ruolo per risorse del locatario")

    proprietario = trova_utente_proprietario(risorsa_id)
    if proprietario is None or proprietario != utente.id:
        raise Forbidden(
            f"Locatario {utente.email} ha tentato di accedere alla risorsa {risorsa_id} di un altro locatario"
        )


def autorizza(
    regola: RegolaRotta,
    utente: Optional[UtenteToken],
    risorsa_id: Optional[Hashable] = None,
    trova_utente_proprietario: Optional[Callable[[Hashable], Optional[int]]] = None,
) -> None:
    """Valuta i due livelli in ordine: prima la rotta, poi (se richiesto) la proprietà."""
    verifica_rotta(regola, utente)
    if trova_utente_proprietario is not None and utente is not None:
        verifica_proprieta(utente, risorsa_id, trova_utente_proprietario)
