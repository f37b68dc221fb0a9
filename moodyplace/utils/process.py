"""Метрики процесса для health checks."""
import os
import time
from typing import Any, Dict

import psutil

from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

# Время старта процесса (для uptime)
STARTED_AT = time.time()


def get_uptime_seconds() -> float:
    """Время работы процесса в секундах."""
    return round(time.time() - STARTED_AT, 2)


def get_process_metrics() -> Dict[str, Any]:
    """
    Получить метрики текущего процесса.

    Returns:
        Словарь с памятью (RSS, VMS, процент), числом потоков и uptime
    """
    metrics: Dict[str, Any] = {"uptime_seconds": get_uptime_seconds(), "pid": os.getpid()}
    try:
        process = psutil.Process(os.getpid())
        memory_info = process.memory_info()
        metrics["memory"] = {
            "rss_mb": round(memory_info.rss / (1024 * 1024), 2),
            "vms_mb": round(memory_info.vms / (1024 * 1024), 2),
            "percent": round(process.memory_percent(), 2),
        }
        metrics["threads"] = process.num_threads()
    except psutil.Error as e:
        logger.warning("failed_to_get_process_metrics", error=str(e))
        metrics["memory"] = None
    return metrics
