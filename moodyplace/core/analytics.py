"""Запись событий использования сайта в site_analytics."""
from datetime import datetime
from typing import Any, Dict, Optional

from moodyplace.models import SiteAnalytics
from moodyplace.utils.client import detect_device_type, get_client_ip, get_user_agent

analytics = SiteAnalytics.__table__


def event_values(
    event_type,
    request,
    data: Optional[Dict[str, Any]] = None,
    admin_user_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Значения строки site_analytics для события из HTTP запроса."""
    user_agent = get_user_agent(request)
    referrer = request.headers.get("Referer")
    return {
        "event_type": getattr(event_type, "value", event_type),
        "event_data": data,
        "page_url": str(request.url)[:500],
        "referrer": referrer[:500] if referrer else None,
        "user_ip": get_client_ip(request),
        "user_agent": user_agent,
        "device_type": detect_device_type(user_agent),
        "admin_user_id": admin_user_id,
        "created_at": datetime.utcnow(),
    }


def insert_event(event_type, request, data: Optional[Dict[str, Any]] = None, admin_user_id: Optional[int] = None):
    """INSERT для события (выполняется в транзакции вызывающего)."""
    return analytics.insert().values(**event_values(event_type, request, data, admin_user_id))
