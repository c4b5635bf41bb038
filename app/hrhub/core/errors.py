import logging
from decimal import Decimal

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from app.hrhub.core.error_catalog import AppError, ErrorCatalog, ErrorDefinition
from app.hrhub.core.logging import log_json

logger = logging.getLogger("hrhub.errors")

_HTTP_STATUS_ERRORS = {
    400: ErrorCatalog.BAD_REQUEST,
    401: ErrorCatalog.UNAUTHORIZED,
    403: ErrorCatalog.FORBIDDEN,
    404: ErrorCatalog.NOT_FOUND,
    409: ErrorCatalog.CONFLICT,
    503: ErrorCatalog.SERVICE_UNAVAILABLE,
}

_UNIQUE_MARKERS = ("unique constraint", "duplicate key", "unique failed")
_FOREIGN_KEY_MARKERS = ("foreign key",)
_UNAVAILABLE_MARKERS = (
    "could not connect",
    "connection refused",
    "server closed the connection",
    "unable to open database",
    "database is locked",
)


def _set_error_context(request: Request, code: str, exc: Exception | None = None) -> None:
    request.state.error_code = code
    if exc is not None:
        request.state.error_class = exc.__class__.__name__


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def request_language(request: Request) -> str | None:
    header = request.headers.get("Accept-Language")
    if not header:
        return None
    primary = header.split(",", 1)[0].split(";", 1)[0].strip().lower()
    return primary.split("-", 1)[0] or None


def _json_safe(value):
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def _pgcode(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def translate_storage_error(exc: Exception) -> AppError:
    """Map a storage-layer failure onto the error taxonomy."""
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, (NoResultFound, StaleDataError)):
        return AppError(ErrorCatalog.NOT_FOUND)
    if isinstance(exc, IntegrityError):
        code = _pgcode(exc)
        message = str(getattr(exc, "orig", exc)).lower()
        if code == "23505" or any(marker in message for marker in _UNIQUE_MARKERS):
            return AppError(ErrorCatalog.CONFLICT)
        if code == "23503" or any(marker in message for marker in _FOREIGN_KEY_MARKERS):
            return AppError(
                ErrorCatalog.BAD_REQUEST,
                "Referenced record does not exist",
            )
        return AppError(ErrorCatalog.INTERNAL_ERROR)
    if isinstance(exc, OperationalError):
        message = str(exc).lower()
        if any(marker in message for marker in _UNAVAILABLE_MARKERS):
            return AppError(ErrorCatalog.SERVICE_UNAVAILABLE)
    return AppError(ErrorCatalog.INTERNAL_ERROR)


def _validation_issues(exc: RequestValidationError) -> list[dict]:
    issues = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        field = ".".join(str(item) for item in loc if item not in {"body", "query", "path", "header"}) or None
        issues.append(
            {
                "field": field,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            }
        )
    return issues


def error_payload(
    request: Request,
    error: ErrorDefinition,
    *,
    message: str | None = None,
    details: object | None = None,
) -> dict:
    body = {
        "code": error.code,
        "message": message or error.localized_message(request_language(request)),
        "trace_id": _trace_id(request),
    }
    if details is not None:
        body["details"] = _json_safe(details)
    return {"error": body}


def error_response(request: Request, error: ErrorDefinition, *, message: str | None = None, details: object | None = None) -> JSONResponse:
    _set_error_context(request, error.code)
    return JSONResponse(
        status_code=error.status_code,
        content=error_payload(request, error, message=message, details=details),
    )


def _app_error_response(request: Request, exc: AppError) -> JSONResponse:
    _set_error_context(request, exc.error.code, exc)
    return JSONResponse(
        status_code=exc.error.status_code,
        content=error_payload(
            request,
            exc.error,
            message=exc.message_for(request_language(request)),
            details=exc.details,
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return _app_error_response(request, exc)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        error = _HTTP_STATUS_ERRORS.get(exc.status_code, ErrorCatalog.INTERNAL_ERROR)
        message = exc.detail if isinstance(exc.detail, str) else None
        _set_error_context(request, error.code, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(request, error, message=message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _app_error_response(
            request,
            AppError(ErrorCatalog.BAD_REQUEST, details={"issues": _validation_issues(exc)}),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        translated = translate_storage_error(exc)
        if translated.error is ErrorCatalog.INTERNAL_ERROR:
            logger.exception("Unmapped storage error", exc_info=exc)
        return _app_error_response(request, translated)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log_json(
            logger,
            {
                "event": "unhandled_exception",
                "trace_id": _trace_id(request),
                "error_class": exc.__class__.__name__,
                "route": request.url.path,
            },
        )
        return _app_error_response(request, AppError(ErrorCatalog.INTERNAL_ERROR, details={"type": exc.__class__.__name__}))
