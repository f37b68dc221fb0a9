"""Обработчики исключений: любая ошибка API превращается в envelope."""
import traceback

import jwt
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from moodyplace.api.rate_limit import limit_message, seconds_until_reset
from moodyplace.api.responses import error_response
from moodyplace.utils.exceptions import AuthenticationError, QueryFailedError, RateLimitError, SiteError
from moodyplace.utils.logger import get_logger
from moodyplace.web.views import render_not_found

logger = get_logger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTH_REQUIRED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
    429: "RATE_LIMIT_EXCEEDED",
}

LOCATIONS = ("body", "query", "path", "header", "cookie")


def is_api_request(request: Request) -> bool:
    """JSON клиент: путь /api/* или Accept: application/json."""
    if request.url.path.startswith("/api"):
        return True
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


def format_validation_errors(errors) -> list:
    """Ошибки pydantic -> список {field, message, location}."""
    formatted = []
    for err in errors:
        loc = list(err.get("loc", ()))
        location = loc[0] if loc and loc[0] in LOCATIONS else "body"
        field_parts = loc[1:] if loc and loc[0] in LOCATIONS else loc
        field = ".".join(str(part) for part in field_parts) or location
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        formatted.append({"field": field, "message": message, "location": location})
    return formatted


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


async def site_error_handler(request: Request, exc: SiteError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    if exc.status_code >= 500:
        logger.error("site_error", code=exc.code, message=exc.message, path=request.url.path)
    else:
        logger.info("request_rejected", code=exc.code, status=exc.status_code, path=request.url.path)
    return error_response(exc.message, exc.code, exc.status_code, exc.details, headers=headers)


async def query_failed_handler(request: Request, exc: QueryFailedError):
    if exc.is_integrity_error:
        logger.warning("database_conflict", path=request.url.path, error=str(exc.__cause__))
        return error_response("Resource already exists or violates a constraint", "CONFLICT", 409)

    logger.error("database_error", path=request.url.path, error=str(exc.__cause__ or exc))
    details = {"error": str(exc.__cause__)} if _is_development(request) and exc.__cause__ else None
    return error_response("Database error", "DATABASE_ERROR", 500, details)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response("Invalid JSON in request body", "INVALID_JSON", 400)

    details = format_validation_errors(errors)
    logger.info("validation_failed", path=request.url.path, fields=[d["field"] for d in details])
    return error_response("Validation failed", "VALIDATION_ERROR", 400, details)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    limit = getattr(exc, "limit", None)
    scope = getattr(limit, "scope", None) if limit is not None else None
    retry_after = seconds_until_reset(request, limit.limit.get_expiry() if limit is not None else 60)
    logger.warning("rate_limit_exceeded", path=request.url.path, scope=scope, limit=str(exc.detail))
    err = RateLimitError(limit_message(scope))
    return error_response(
        err.message,
        err.code,
        err.status_code,
        headers={"Retry-After": str(retry_after)},
        meta={"retry_after": retry_after},
    )


async def jwt_error_handler(request: Request, exc: jwt.PyJWTError):
    if isinstance(exc, jwt.ExpiredSignatureError):
        return error_response("Token has expired", "AUTH_TOKEN_EXPIRED", 401)
    return error_response("Invalid token", "AUTH_INVALID_TOKEN", 401)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and not is_api_request(request):
        return render_not_found(request.app.state.settings.views_dir)

    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    if exc.status_code == 404:
        message = f"Endpoint {request.method} {request.url.path} not found"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(message, code, exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    details = None
    if _is_development(request):
        details = {"error": str(exc), "stack": traceback.format_exception(type(exc), exc, exc.__traceback__)}
    return error_response("Internal server error", "INTERNAL_ERROR", 500, details)


def register_exception_handlers(app: FastAPI) -> None:
    """Подключить все обработчики к приложению."""
    app.add_exception_handler(QueryFailedError, query_failed_handler)
    app.add_exception_handler(SiteError, site_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(jwt.PyJWTError, jwt_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
