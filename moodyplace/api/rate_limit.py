"""Rate limiting по IP клиента (slowapi, in-memory)."""
import time
from typing import Callable, Dict

from slowapi import Limiter
from slowapi.util import get_remote_address

# Счётчики живут в памяти процесса и сбрасываются при перезапуске
limiter = Limiter(key_func=get_remote_address, headers_enabled=False)

SCOPE_GENERAL = "general"
SCOPE_API = "api"
SCOPE_AUTH = "auth"
SCOPE_FORMS = "forms"

LIMIT_MESSAGES = {
    SCOPE_GENERAL: "Too many requests from this IP, please try again later.",
    SCOPE_API: "Too many API requests from this IP, please try again later.",
    SCOPE_AUTH: "Too many authentication attempts, please try again later.",
    SCOPE_FORMS: "Too many form submissions, please try again later.",
}

# Лимиты областей из настроек приложения (заполняет configure_limits)
_scope_limits: Dict[str, str] = {}


def configure_limits(settings) -> None:
    """Взять лимиты из настроек, переданных в create_app."""
    _scope_limits.update(
        {
            SCOPE_GENERAL: settings.rate_limit_general,
            SCOPE_API: settings.rate_limit_api,
            SCOPE_AUTH: settings.rate_limit_auth,
            SCOPE_FORMS: settings.rate_limit_forms,
        }
    )


def _scope_limit(scope: str) -> Callable[[], str]:
    """Лимит области читается при каждом запросе."""

    def provider() -> str:
        return _scope_limits[scope]

    return provider


# Страницы сайта
general_limit = limiter.shared_limit(_scope_limit(SCOPE_GENERAL), scope=SCOPE_GENERAL)
# JSON API
api_limit = limiter.shared_limit(_scope_limit(SCOPE_API), scope=SCOPE_API)
# Вход и обновление токенов
auth_limit = limiter.shared_limit(_scope_limit(SCOPE_AUTH), scope=SCOPE_AUTH)
# Контактная форма и рассылка
form_limit = limiter.shared_limit(_scope_limit(SCOPE_FORMS), scope=SCOPE_FORMS)


def limit_message(scope: str) -> str:
    return LIMIT_MESSAGES.get(scope, "Too many requests, please try again later.")


def seconds_until_reset(request, default: int) -> int:
    """
    Сколько секунд осталось до конца окна превышенного лимита.

    slowapi сохраняет сработавший лимит в request.state.view_rate_limit.
    """
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is None:
        return default
    item, identifiers = view_limit
    reset_at, _ = limiter.limiter.get_window_stats(item, *identifiers)
    return max(1, int(1 + reset_at - time.time()))
