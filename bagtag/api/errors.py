import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bagtag.core.exceptions import (
    AuthError,
    ConflictError,
    DomainError,
    ExtractionError,
    InfrastructureError,
    NotFoundError,
    UploadError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# (exception, status, fallback detail). Handlers resolve along the MRO, so the
# InfrastructureError subclasses keep their own status.
DOMAIN_ERROR_STATUS: tuple[tuple[type[DomainError], int, str], ...] = (
    (NotFoundError, 404, "Not Found"),
    (ValidationError, 400, "Bad Request"),
    (ConflictError, 409, "Conflict"),
    (AuthError, 401, "Unauthorized"),
    (UploadError, 502, "Upload failed."),
    (ExtractionError, 502, "Scan failed."),
    (InfrastructureError, 503, "Service Unavailable"),
)

_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _detail(status_code: int, detail, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return _detail(exc.status_code, exc.detail, exc.headers)


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Keep simple, unified error message (avoid verbose FastAPI default list)
    return _detail(422, "Unprocessable Entity")


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return _detail(500, "Internal Server Error")


def _domain_error_handler(status_code: int, fallback: str):
    headers = _CHALLENGE if status_code == 401 else None

    def _handler(_: Request, exc: DomainError) -> JSONResponse:
        return _detail(status_code, str(exc) or fallback, headers)

    return _handler


def install(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    for exc_type, status_code, fallback in DOMAIN_ERROR_STATUS:
        app.add_exception_handler(exc_type, _domain_error_handler(status_code, fallback))
    app.add_exception_handler(Exception, _unhandled_exception_handler)
