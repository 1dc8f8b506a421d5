# authentication/middleware/jwt_middleware.py

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authentication.domain.authorization_policy import RegolaRotta, verifica_rotta
from authentication.domain.entities import UtenteToken
from authentication.infrastructure.auth_repository import AuthRepository
from authentication.infrastructure.token_service import TokenService
from authentication.utils.dependencies import get_auth_repository, get_token_service
from common.errors import TokenInvalid, TokenMalformed
from common.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("jwt_middleware")

# auto_error=False: header assente o malformato -> richiesta non autenticata
bearer_scheme = HTTPBearer(auto_error=False)


def get_utente_opzionale(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
    repo: AuthRepository = Depends(get_auth_repository),
) -> Optional[UtenteToken]:
    """
    Estrae e valida il token Bearer e carica l'utente.
    Restituisce None se il token manca o non è valido: sarà il gate di rotta a decidere.
    """
    if credentials is None or not credentials.credentials:
        return None

    token = credentials.credentials
    try:
        claims = token_service.parse(token)
    except (TokenInvalid, TokenMalformed) as e:
        logger.warning(f"⚠️ Token rifiutato: {e.message}")
        return None

    utente = repo.trova_utente_per_email(claims.subject)
    if utente is None or not utente.abilitato:
        logger.warning(f"⚠️ Token per utente inesistente o disabilitato: {claims.subject}")
        return None

    if not token_service.validate(token, utente.email):
        logger.warning(f"⚠️ Token scaduto o con soggetto diverso per {claims.subject}")
        return None

    return UtenteToken(id=utente.id, email=utente.email, ruoli=frozenset(utente.ruoli))


def richiede(regola: RegolaRotta):
    """Dipendenza FastAPI che applica il gate di rotta e restituisce l'utente (o None se pubblica)."""

    def _gate(utente: Optional[UtenteToken] = Depends(get_utente_opzionale)) -> Optional[UtenteToken]:
        verifica_rotta(regola, utente)
        return utente

    return _gate
