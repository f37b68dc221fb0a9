"""Сборка FastAPI приложения."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware

from config.database import Database, create_database
from config.settings import Settings, get_settings
from moodyplace import __version__
from moodyplace.api import api_router
from moodyplace.api.errors import register_exception_handlers
from moodyplace.api.rate_limit import configure_limits, limiter
from moodyplace.core.auth_service import AuthService
from moodyplace.utils.logger import get_logger
from moodyplace.web import health, pages
from moodyplace.web.metrics import HTTPMetrics, PrometheusMiddleware
from moodyplace.web.middleware import (
    AccessLogMiddleware,
    BodySizeLimitMiddleware,
    OriginCheckMiddleware,
    SecurityHeadersMiddleware,
)
from moodyplace.web.static import mount_static

logger = get_logger(__name__)

SESSION_COOKIE = "sessionId"
SESSION_MAX_AGE = 24 * 60 * 60


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Создать приложение.

    Args:
        settings: Настройки (по умолчанию из окружения)
        database: Готовый Database (тесты); иначе создаётся из настроек

    Returns:
        FastAPI приложение со всеми маршрутами и middleware
    """
    settings = settings or get_settings()
    db = database or create_database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Недоступная БД при старте - фатальная ошибка
        await db.connect()
        logger.info("site_startup", environment=settings.environment, port=settings.port, version=__version__)
        try:
            yield
        finally:
            logger.info("site_shutdown")
            await db.close()

    app = FastAPI(
        title=f"{settings.site_name} API",
        description="Сайт и CMS артиста",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.db = db
    app.state.auth_service = AuthService(db, settings)
    app.state.limiter = limiter
    configure_limits(settings)

    register_exception_handlers(app)

    # Порядок: последний добавленный middleware - внешний
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE,
        max_age=SESSION_MAX_AGE,
        same_site="strict" if settings.is_production else "lax",
        https_only=settings.is_production,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
        expose_headers=["X-Token-Refresh-Suggested", "X-Token-Expires-At", "Retry-After"],
        max_age=86400,
    )
    app.add_middleware(OriginCheckMiddleware, allowed_origins=settings.cors_origins)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(SecurityHeadersMiddleware, production=settings.is_production)

    if settings.enable_metrics:
        metrics = HTTPMetrics()
        app.state.metrics = metrics
        app.add_middleware(PrometheusMiddleware, metrics=metrics)

        @app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint():
            return metrics.render()

    app.add_middleware(AccessLogMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix="/api")
    app.include_router(pages.router)

    mount_static(app, settings)

    return app
