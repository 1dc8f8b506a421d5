# common/errors.py

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION_FAILED = "ValidationFailed"
    BUSINESS_RULE_VIOLATED = "BusinessRuleViolated"
    ENTITY_NOT_FOUND = "EntityNotFound"
    UNAUTHENTICATED = "Unauthenticated"
    INVALID_CREDENTIALS = "InvalidCredentials"
    TOKEN_INVALID = "TokenInvalid"
    TOKEN_MALFORMED = "TokenMalformed"
    FORBIDDEN = "Forbidden"
    UNCLASSIFIED = "Unclassified"


class AppError(Exception):
    """Base degli errori applicativi. Ogni sottoclasse dichiara il proprio ErrorKind."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors


class BusinessRuleViolated(AppError):
    kind = ErrorKind.BUSINESS_RULE_VIOLATED


class EntityNotFound(AppError):
    kind = ErrorKind.ENTITY_NOT_FOUND

    def __init__(self, entita: str, identificativo=None):
        if identificativo is None:
            message = f"{entita} non trovato"
        else:
            message = f"{entita} non trovato con id: {identificativo}"
        super().__init__(message)
        self.entita = entita
        self.identificativo = identificativo


class Unauthenticated(AppError):
    kind = ErrorKind.UNAUTHENTICATED


class InvalidCredentials(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS


class TokenInvalid(AppError):
    kind = ErrorKind.TOKEN_INVALID


class TokenMalformed(AppError):
    kind = ErrorKind.TOKEN_MALFORMED


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
