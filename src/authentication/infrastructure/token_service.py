# authentication/infrastructure/token_service.py

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from authentication.domain.entities import TokenClaims
from common.errors import TokenInvalid, TokenMalformed


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Emissione e verifica di token JWT firmati (HMAC).
    Nessuno stato lato server: un token resta valido fino alla sua scadenza naturale.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expiration: timedelta = timedelta(hours=24),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret_key:
            raise ValueError("❌ JWT secret non configurato.")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expiration = expiration
        self.clock = clock or _utc_now

    def issue(self, subject: str) -> str:
        adesso = self.clock()
        payload = {
            "sub": subject,
            "iat": int(adesso.timestamp()),
            "exp": int((adesso + self.expiration).timestamp()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def parse(self, token: str) -> TokenClaims:
        # la scadenza viene controllata da validate() con il clock iniettato
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.InvalidSignatureError as e:
            raise TokenInvalid(f"Firma del token non valida: {e}") from e
        except jwt.DecodeError as e:
            raise TokenMalformed(f"Token non decodificabile: {e}") from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Token non valido: {e}") from e

        try:
            return TokenClaims(
                subject=str(payload["sub"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise TokenMalformed(f"Claim temporali non validi: {e}") from e

    def validate(self, token: str, expected_subject: str) -> bool:
        try:
            claims = self.parse(token)
        except (TokenInvalid, TokenMalformed):
            return False
        return claims.subject == expected_subject and self.clock() < claims.expires_at
