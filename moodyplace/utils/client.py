"""Сведения о клиенте из HTTP запроса."""
from typing import Optional

from slowapi.util import get_remote_address

from moodyplace.utils.enums import DeviceType

MOBILE_KEYWORDS = ("mobile", "android", "iphone")
TABLET_KEYWORDS = ("tablet", "ipad")


def get_client_ip(request) -> str:
    """
    Получить IP-адрес клиента из запроса.

    Заголовки X-Forwarded-For не читаются: адрес клиента за доверенным
    прокси подставляет uvicorn (proxy_headers и forwarded_allow_ips).

    Args:
        request: Starlette/FastAPI Request объект

    Returns:
        IP-адрес клиента
    """
    return get_remote_address(request)


def get_user_agent(request) -> Optional[str]:
    """User-Agent запроса (обрезается до размера колонки)."""
    user_agent = request.headers.get("User-Agent")
    return user_agent[:500] if user_agent else None


def detect_device_type(user_agent: Optional[str]) -> str:
    """
    Определить класс устройства по ключевым словам User-Agent.

    Args:
        user_agent: Строка User-Agent или None

    Returns:
        mobile, tablet, desktop или unknown
    """
    if not user_agent:
        return DeviceType.UNKNOWN.value

    ua = user_agent.lower()
    if any(keyword in ua for keyword in MOBILE_KEYWORDS):
        return DeviceType.MOBILE.value
    if any(keyword in ua for keyword in TABLET_KEYWORDS):
        return DeviceType.TABLET.value
    return DeviceType.DESKTOP.value
