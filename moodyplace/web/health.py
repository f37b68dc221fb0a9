"""Health checks процесса и базы данных."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config.database import Database
from moodyplace import __version__
from moodyplace.api.deps import get_app_settings, get_db
from moodyplace.utils.logger import get_logger
from moodyplace.utils.process import get_process_metrics, get_uptime_seconds

logger = get_logger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health(settings=Depends(get_app_settings)):
    """Health check - базовая проверка."""
    return {
        "status": "healthy",
        "timestamp": _now(),
        "uptime": get_uptime_seconds(),
        "environment": settings.environment,
        "version": __version__,
    }


@router.get("/health/detailed")
async def health_detailed(settings=Depends(get_app_settings), db: Database = Depends(get_db)):
    """Детальный health check: БД (задержка, пул) и память процесса; 503 если БД недоступна."""
    database = await db.health_check()
    process = get_process_metrics()
    healthy = database["status"] == "healthy"
    if not healthy:
        logger.warning("health_check_failed", database=database)

    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": _now(),
        "uptime": process["uptime_seconds"],
        "environment": settings.environment,
        "version": __version__,
        "database": database,
        "memory": process["memory"],
        "process": {"pid": process["pid"], "threads": process.get("threads")},
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)
