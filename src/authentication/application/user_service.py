# authentication/application/user_service.py

from typing import Iterable, List, Optional

from authentication.domain.entities import Utente
from authentication.infrastructure.auth_repository import AuthRepository
from common.errors import BusinessRuleViolated, EntityNotFound
from common.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("user_service")

PREFISSO_RUOLO = "ROLE_"


def normalizza_ruolo(nome: str) -> str:
    """'manager' -> 'ROLE_MANAGER'; i nomi già completi restano invariati."""
    nome = nome.strip()
    return nome if nome.startswith(PREFISSO_RUOLO) else PREFISSO_RUOLO + nome.upper()


class UserService:
    def __init__(self, repo: AuthRepository):
        self.repo = repo

    def lista(self) -> List[Utente]:
        utenti = self.repo.trova_tutti()
        logger.info(f"📋 Recuperati {len(utenti)} utenti")
        return utenti

    def trova(self, utente_id: int) -> Utente:
        logger.debug(f"🔍 Recupero utente con ID: {utente_id}")
        utente = self.repo.trova_utente_per_id(utente_id)
        if utente is None:
            logger.warning(f"⚠️ Utente non trovato con ID: {utente_id}")
            raise EntityNotFound("Utente", utente_id)
        return utente

    def ruoli(self) -> List[str]:
        return self.repo.trova_ruoli()

    def aggiorna_profilo(self, utente_id: int, nome: Optional[str] = None,
                         cognome: Optional[str] = None) -> Utente:
        """Aggiorna solo i campi valorizzati e non vuoti."""
        logger.info(f"✏️ Aggiornamento profilo utente con ID: {utente_id}")
        utente = self.trova(utente_id)

        if nome is not None and nome.strip():
            utente.nome = nome.strip()
        if cognome is not None and cognome.strip():
            utente.cognome = cognome.strip()

        self.repo.aggiorna_profilo(utente.id, utente.nome, utente.cognome)
        logger.info(f"✅ Profilo aggiornato. ID: {utente.id}, Email: {utente.email}")
        return utente

    def aggiorna_ruoli(self, utente_id: int, nomi_ruoli: Iterable[str]) -> Utente:
        utente = self.trova(utente_id)
        ruoli = frozenset(normalizza_ruolo(n) for n in nomi_ruoli if n and n.strip())
        logger.info(f"✏️ Aggiornamento ruoli per utente ID: {utente_id}, ruoli: {sorted(ruoli)}")
        if not ruoli:
            raise BusinessRuleViolated("Un utente deve avere almeno un ruolo")

        esistenti = set(self.repo.trova_ruoli())
        for ruolo in sorted(ruoli):
            if ruolo not in esistenti:
                logger.error(f"❌ Ruolo non trovato: {ruolo}")
                raise EntityNotFound("Ruolo", ruolo)

        self.repo.sostituisci_ruoli(utente.id, ruoli)
        utente.ruoli = ruoli
        logger.info(f"✅ Ruoli aggiornati per utente ID: {utente_id}")
        return utente
