"""Метрики Prometheus для HTTP запросов."""
import time

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

# Служебные маршруты не учитываются
EXCLUDED_PATHS = frozenset({"/metrics", "/health", "/health/detailed"})


class HTTPMetrics:
    """Набор метрик приложения в собственном реестре."""

    def __init__(self, registry: CollectorRegistry = None):
        self.registry = registry or CollectorRegistry()
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "handler", "status"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "handler"],
            registry=self.registry,
        )
        self.requests_inprogress = Gauge(
            "http_requests_inprogress",
            "HTTP requests in progress",
            ["method", "handler"],
            registry=self.registry,
        )

    def render(self) -> Response:
        return Response(generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)


def route_template(request: Request):
    """Шаблон пути маршрута (/api/songs/{slug}); None для путей без маршрута."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", None)
    return None


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Счётчики и гистограмма длительности по шаблону маршрута."""

    def __init__(self, app, metrics: HTTPMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        handler = route_template(request)
        if handler is None or handler in EXCLUDED_PATHS:
            return await call_next(request)

        method = request.method
        inprogress = self.metrics.requests_inprogress.labels(method, handler)
        inprogress.inc()
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            inprogress.dec()
            self.metrics.request_duration.labels(method, handler).observe(time.perf_counter() - started)
            self.metrics.requests_total.labels(method, handler, str(status)).inc()
