"""Точка входа для запуска сайта."""
import asyncio
import os
import signal
import sys
from pathlib import Path

import uvicorn

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import get_settings
from moodyplace.server import create_app
from moodyplace.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def handle_uncaught_exception(exc_type, exc, tb):
    """Непойманное исключение: записать в лог и завершить процесс (перезапуск - задача супервизора)."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    logger.critical("uncaught_exception", error=str(exc), exc_info=(exc_type, exc, tb))
    sys.exit(1)


def handle_asyncio_exception(loop, context):
    """Необработанная ошибка в задаче asyncio: записать в лог и остановить сервер."""
    exc = context.get("exception")
    logger.critical("unhandled_async_error", message=context.get("message"), error=str(exc) if exc else None, exc_info=exc)
    os.kill(os.getpid(), signal.SIGTERM)


async def main():
    """Главная функция запуска сайта."""
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.is_production)
    asyncio.get_running_loop().set_exception_handler(handle_asyncio_exception)

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
        timeout_graceful_shutdown=settings.shutdown_timeout,
        log_config=None,
    )
    server = uvicorn.Server(config)
    logger.info("server_starting", host=settings.host, port=settings.port, environment=settings.environment)
    await server.serve()


if __name__ == "__main__":
    sys.excepthook = handle_uncaught_exception
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
