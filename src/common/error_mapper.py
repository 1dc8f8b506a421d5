# common/error_mapper.py

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.errors import AppError, ErrorKind
from common.logging_factory import LoggerFactory

logger = LoggerFactory.get_logger("error_mapper")

MSG_LOGIN_RICHIESTO = "Autenticazione richiesta. Effettua il login per accedere."
MSG_PERMESSI = "Non hai i permessi per accedere a questa risorsa."
MSG_CREDENZIALI = "Email o password non validi"
MSG_ERRORE_INTERNO = "Si è verificato un errore interno. Contattare l'amministratore."
MSG_VALIDAZIONE = "Dati di input non validi"

# kind -> (status, error, messaggio fisso | None = usa il messaggio dell'eccezione)
TABELLA_ERRORI: Dict[ErrorKind, Tuple[int, str, Optional[str]]] = {
    ErrorKind.VALIDATION_FAILED: (400, "Validation Error", None),
    ErrorKind.BUSINESS_RULE_VIOLATED: (400, "Business Error", None),
    ErrorKind.ENTITY_NOT_FOUND: (404, "Not Found", None),
    ErrorKind.UNAUTHENTICATED: (401, "Unauthorized", MSG_LOGIN_RICHIESTO),
    ErrorKind.INVALID_CREDENTIALS: (401, "Unauthorized", MSG_CREDENZIALI),
    ErrorKind.TOKEN_INVALID: (401, "Unauthorized", MSG_LOGIN_RICHIESTO),
    ErrorKind.TOKEN_MALFORMED: (401, "Unauthorized", MSG_LOGIN_RICHIESTO),
    ErrorKind.FORBIDDEN: (403, "Forbidden", MSG_PERMESSI),
    ErrorKind.UNCLASSIFIED: (500, "Internal Server Error", MSG_ERRORE_INTERNO),
}


def classifica(exc: BaseException) -> ErrorKind:
    if isinstance(exc, AppError):
        return exc.kind
    if isinstance(exc, RequestValidationError):
        return ErrorKind.VALIDATION_FAILED
    return ErrorKind.UNCLASSIFIED


def _errori_di_campo(exc: RequestValidationError) -> Dict[str, str]:
    errori = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        campo = ".".join(loc) or "request"
        errori.setdefault(campo, err.get("msg", "valore non valido"))
    return errori


def mappa_errore(exc: BaseException, path: str, adesso: Optional[datetime] = None) -> Tuple[int, dict]:
    """
    Converte qualsiasi eccezione nel corpo di errore pubblico
    {timestamp, status, error, message, path[, errors]}.
    Gli errori non classificati non espongono mai il dettaglio interno.
    """
    adesso = adesso or datetime.now(timezone.utc)

    # Errori HTTP del framework (rotta inesistente, metodo non consentito...)
    if isinstance(exc, StarletteHTTPException):
        frase = HTTPStatus(exc.status_code).phrase
        message = exc.detail if isinstance(exc.detail, str) else frase
        return exc.status_code, {
            "timestamp": adesso.isoformat(),
            "status": exc.status_code,
            "error": frase,
            "message": message,
            "path": path,
        }

    kind = classifica(exc)
    status, error, messaggio_fisso = TABELLA_ERRORI[kind]

    if messaggio_fisso is not None:
        message = messaggio_fisso
    elif isinstance(exc, AppError):
        message = exc.message
    else:
        message = MSG_VALIDAZIONE

    body = {
        "timestamp": adesso.isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": path,
    }

    if isinstance(exc, RequestValidationError):
        body["errors"] = _errori_di_campo(exc)
    elif kind == ErrorKind.VALIDATION_FAILED and getattr(exc, "errors", None):
        body["errors"] = dict(exc.errors)

    return status, body


def _risposta(request: Request, exc: BaseException) -> JSONResponse:
    status, body = mappa_errore(exc, request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=body, headers=headers)


async def _handler_app_error(request: Request, exc: AppError):
    if exc.kind in (ErrorKind.FORBIDDEN, ErrorKind.UNAUTHENTICATED, ErrorKind.INVALID_CREDENTIALS,
                    ErrorKind.TOKEN_INVALID, ErrorKind.TOKEN_MALFORMED):
        logger.warning(f"⚠️ {exc.kind.value} su {request.url.path}: {exc.message}")
    else:
        logger.info(f"ℹ️ {exc.kind.value} su {request.url.path}: {exc.message}")
    return _risposta(request, exc)


async def _handler_validazione(request: Request, exc: RequestValidationError):
    logger.info(f"ℹ️ Validazione fallita su {request.url.path}: {exc.errors()}")
    return _risposta(request, exc)


async def _handler_http(request: Request, exc: StarletteHTTPException):
    return _risposta(request, exc)


async def _handler_generico(request: Request, exc: Exception):
    logger.exception(f"❌ Errore non gestito su {request.url.path}: {exc}")
    return _risposta(request, exc)


def registra_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handler_app_error)
    app.add_exception_handler(RequestValidationError, _handler_validazione)
    app.add_exception_handler(StarletteHTTPException, _handler_http)
    app.add_exception_handler(Exception, _handler_generico)
