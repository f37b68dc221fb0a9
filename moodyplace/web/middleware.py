"""HTTP middleware: заголовки безопасности, проверка Origin, лимит тела, access log."""
import time
from typing import Iterable, Optional
from urllib.parse import urlparse

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from moodyplace.api.responses import error_response
from moodyplace.utils.client import get_client_ip, get_user_agent
from moodyplace.utils.exceptions import CorsViolationError
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

# Источники для встроенных плееров и шрифтов
CSP_DIRECTIVES = {
    "default-src": ["'self'"],
    "style-src": ["'self'", "'unsafe-inline'", "https://fonts.googleapis.com", "https://fonts.gstatic.com"],
    "font-src": ["'self'", "https://fonts.gstatic.com", "https://fonts.googleapis.com"],
    "img-src": ["'self'", "data:", "https:", "blob:"],
    "script-src": ["'self'"],
    "media-src": ["'self'", "blob:"],
    "connect-src": ["'self'"],
    "frame-src": ["https://www.youtube.com", "https://open.spotify.com", "https://w.soundcloud.com"],
    "object-src": ["'none'"],
}

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"


def build_csp(production: bool) -> str:
    parts = [f"{name} {' '.join(sources)}" for name, sources in CSP_DIRECTIVES.items()]
    if production:
        parts.append("upgrade-insecure-requests")
    return "; ".join(parts)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Заголовки безопасности для всех ответов; HSTS только в production."""

    def __init__(self, app, production: bool = False):
        super().__init__(app)
        self.production = production
        self.headers = {
            "Content-Security-Policy": build_csp(production),
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "SAMEORIGIN",
            "Referrer-Policy": "strict-origin-when-cross-origin",
            "Cross-Origin-Opener-Policy": "same-origin",
        }
        if production:
            self.headers["Strict-Transport-Security"] = HSTS_VALUE

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response


class OriginCheckMiddleware(BaseHTTPMiddleware):
    """
    Отклонить запросы к API с чужим Origin.

    Запросы без Origin (curl, серверные клиенты) и с Origin того же хоста
    пропускаются; остальные должны быть в списке разрешённых.
    """

    def __init__(self, app, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed = {origin.rstrip("/") for origin in allowed_origins}

    def is_allowed(self, origin: str, host: Optional[str]) -> bool:
        if "*" in self.allowed or origin.rstrip("/") in self.allowed:
            return True
        return host is not None and urlparse(origin).netloc == host

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and request.url.path.startswith("/api") and not self.is_allowed(origin, request.headers.get("host")):
            logger.warning("cors_violation", origin=origin, path=request.url.path, ip=get_client_ip(request))
            exc = CorsViolationError()
            return error_response(exc.message, exc.code, exc.status_code)
        return await call_next(request)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Отклонить запрос с телом больше лимита (413).

    Размер берётся из Content-Length; тело без длины (chunked) читается
    потоком до превышения лимита и затем передаётся обработчику целиком.
    """

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    def _too_large(self, request: Request, length):
        logger.warning("request_too_large", path=request.url.path, length=length, limit=self.max_bytes)
        return error_response("Request body too large", "PAYLOAD_TOO_LARGE", 413)

    async def dispatch(self, request: Request, call_next):
        length = request.headers.get("content-length")
        if length is not None:
            try:
                too_large = int(length) > self.max_bytes
            except ValueError:
                return error_response("Invalid Content-Length header", "BAD_REQUEST", 400)
            if too_large:
                return self._too_large(request, length)
        elif "chunked" in request.headers.get("transfer-encoding", "").lower():
            body = bytearray()
            async for chunk in request.stream():
                body.extend(chunk)
                if len(body) > self.max_bytes:
                    return self._too_large(request, len(body))
            # Прочитанное тело отдаётся дальше так же, как после request.body()
            request._body = bytes(body)
        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Событие http_request для каждого запроса (warning для статусов >= 400)."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            ip=get_client_ip(request),
            user_agent=get_user_agent(request),
            admin_id=getattr(request.state, "admin_id", None),
        )
        return response
