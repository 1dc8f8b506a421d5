# authentication/application/auth_service.py

from typing import Optional

from authentication.domain.entities import ROLE_LOCATARIO, RUOLI_VALIDI, Utente
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.token_service import TokenService
from authentication.utils.password_utils import genera_hash_password, verifica_password
from common.errors import BusinessRuleViolated, EntityNotFound, InvalidCredentials
from common.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("auth_service")


class AuthService:
    def __init__(self, repo: AuthRepository, token_service: Optional[TokenService]):
        self.repo = repo
        self.token_service = token_service

    def login(self, email: str, password: str) -> dict:
        logger.info(f"🔐 Tentativo di login per email: {email}")
        utente = self.repo.trova_utente_per_email(email)
        if not utente or not utente.abilitato:
            raise InvalidCredentials("Utente non trovato o disabilitato")

        if not verifica_password(password, utente.password_hash):
            raise InvalidCredentials("Password non valida")

        token = self.token_service.issue(utente.email)
        logger.info(f"✅ Login effettuato per email: {utente.email}, ID: {utente.id}")
        return self._risposta_auth(utente, token)

    def registra(self, email: str, password: str, nome: str, cognome: str) -> dict:
        logger.info(f"📝 Tentativo di registrazione per email: {email}")
        if self.repo.esiste_email(email):
            logger.warning(f"⚠️ Email già registrata: {email}")
            raise BusinessRuleViolated("Email già registrata")

        utente = self.repo.crea_utente(Utente(
            id=None,
            email=email,
            password_hash=genera_hash_password(password),
            nome=nome,
            cognome=cognome,
            abilitato=True,
            # 🔹 ogni nuova registrazione parte come locatario
            ruoli=frozenset({ROLE_LOCATARIO}),
        ))
        logger.info(f"✅ Utente registrato. ID: {utente.id}, Email: {utente.email}")

        token = self.token_service.issue(utente.email)
        return self._risposta_auth(utente, token)

    def crea_utente_con_ruoli(self, email: str, password: str, nome: str, cognome: str, ruoli) -> Utente:
        """Usato dal tool amministrativo: crea un utente con ruoli arbitrari."""
        ruoli = frozenset(ruoli)
        sconosciuti = ruoli - RUOLI_VALIDI
        if not ruoli or sconosciuti:
            raise BusinessRuleViolated(f"Ruoli non validi: {sorted(sconosciuti) or 'nessuno'}")
        if self.repo.esiste_email(email):
            raise BusinessRuleViolated("Email già registrata")

        return self.repo.crea_utente(Utente(
            id=None,
            email=email,
            password_hash=genera_hash_password(password),
            nome=nome,
            cognome=cognome,
            abilitato=True,
            ruoli=ruoli,
        ))

    def imposta_abilitato(self, email: str, abilitato: bool) -> Utente:
        """Gli utenti non si cancellano: si disabilitano. I token già emessi smettono di valere."""
        utente = self.repo.trova_utente_per_email(email)
        if utente is None:
            raise EntityNotFound("Utente")
        self.repo.aggiorna_abilitato(utente.id, abilitato)
        utente.abilitato = abilitato
        logger.info(f"{'✅' if abilitato else '🚫'} Utente {email} abilitato={abilitato}")
        return utente

    @staticmethod
    def _risposta_auth(utente: Utente, token: str) -> dict:
        return {
            "token": token,
            "type": "Bearer",
            "utente_id": utente.id,
            "email": utente.email,
            "nome": utente.nome,
            "cognome": utente.cognome,
            "ruoli": sorted(utente.ruoli),
        }
