"""Зависимости FastAPI: БД, аутентификация, роли, пагинация."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Query, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config.database import Database
from moodyplace.core.auth_service import TOKEN_TYPE_REFRESH, AuthService
from moodyplace.core.permissions import ADMIN_ROLES, EDITOR_ROLES, SUPERADMIN_ROLES, has_any_role
from moodyplace.utils.client import get_client_ip, get_user_agent
from moodyplace.utils.exceptions import (
    AuthenticationError,
    ForbiddenError,
    InvalidTokenError,
    SecurityViolationError,
    SiteError,
)
from moodyplace.utils.logger import get_logger
from moodyplace.utils.validators import MAX_USER_AGENT_LENGTH, is_suspicious_header

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# За сколько до истечения токена клиенту предлагается обновить его
REFRESH_SUGGESTION_WINDOW = timedelta(minutes=30)


def get_db(request: Request) -> Database:
    """Dependency для получения Database приложения."""
    return request.app.state.db


def get_app_settings(request: Request):
    return request.app.state.settings


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@dataclass
class CurrentAdmin:
    """Аутентифицированный администратор и данные его токена."""

    id: int
    username: str
    email: str
    role: str
    full_name: Optional[str]
    token_payload: Dict[str, Any]

    @classmethod
    def from_row(cls, row: Dict[str, Any], payload: Dict[str, Any]) -> "CurrentAdmin":
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            role=row["role"],
            full_name=row.get("full_name"),
            token_payload=payload,
        )


def _bearer_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is not None and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials

    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError("Access token required", code="AUTH_TOKEN_MISSING")
    raise AuthenticationError("Invalid authorization header format", code="AUTH_INVALID_FORMAT")


async def _resolve_admin(token: str, auth_service: AuthService) -> CurrentAdmin:
    payload = auth_service.verify_token(token)
    if payload.get("type") == TOKEN_TYPE_REFRESH:
        raise InvalidTokenError("Refresh token cannot be used for authentication")

    user = await auth_service.get_active_user(payload.get("user_id"))
    if user is None:
        raise AuthenticationError("User not found or inactive", code="AUTH_USER_NOT_FOUND")
    return CurrentAdmin.from_row(user, payload)


async def get_current_admin(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentAdmin:
    """
    Получить текущего администратора из Bearer токена.

    Если токен истекает в ближайшие 30 минут, в ответ добавляются
    заголовки X-Token-Refresh-Suggested и X-Token-Expires-At.
    """
    token = _bearer_token(request, credentials)
    admin = await _resolve_admin(token, auth_service)

    expires_at = datetime.fromtimestamp(admin.token_payload["exp"], tz=timezone.utc)
    if expires_at - datetime.now(timezone.utc) < REFRESH_SUGGESTION_WINDOW:
        response.headers["X-Token-Refresh-Suggested"] = "true"
        response.headers["X-Token-Expires-At"] = expires_at.isoformat()

    request.state.admin_id = admin.id
    return admin


async def get_optional_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[CurrentAdmin]:
    """Идентифицировать администратора, если токен есть; без токена или с плохим токеном - аноним."""
    if credentials is None:
        return None
    try:
        admin = await _resolve_admin(credentials.credentials, auth_service)
    except SiteError as e:
        logger.warning("optional_auth_failed", error=e.message, code=e.code, ip=get_client_ip(request))
        return None
    request.state.admin_id = admin.id
    return admin


def require_roles(*roles):
    """
    Dependency: разрешить доступ только указанным ролям.

    Пример:
        @router.delete("/{id}", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
    """
    allowed = frozenset(roles)

    async def checker(request: Request, admin: CurrentAdmin = Depends(get_current_admin)) -> CurrentAdmin:
        if not has_any_role(admin.role, allowed):
            logger.warning(
                "access_denied",
                admin_id=admin.id,
                role=admin.role,
                required=sorted(role.value for role in allowed),
                path=request.url.path,
            )
            raise ForbiddenError("Insufficient permissions")
        return admin

    return checker


require_editor = require_roles(*EDITOR_ROLES)
require_admin = require_roles(*ADMIN_ROLES)
require_superadmin = require_roles(*SUPERADMIN_ROLES)


def require_ownership_or_admin(param: str = "user_id"):
    """Dependency: владелец ресурса (id из пути) или admin/super_admin."""

    async def checker(request: Request, admin: CurrentAdmin = Depends(get_current_admin)) -> CurrentAdmin:
        target = request.path_params.get(param)
        if target is not None and str(admin.id) == str(target):
            return admin
        if has_any_role(admin.role, ADMIN_ROLES):
            return admin
        logger.warning("access_denied", admin_id=admin.id, role=admin.role, target=target, path=request.url.path)
        raise ForbiddenError("Access denied: insufficient permissions or not resource owner")

    return checker


async def screen_suspicious_headers(request: Request) -> None:
    """Отклонить запросы с подозрительными заголовками (админ-панель)."""
    user_agent = request.headers.get("User-Agent", "")
    if not user_agent or len(user_agent) > MAX_USER_AGENT_LENGTH:
        logger.warning("suspicious_request", reason="user_agent", ip=get_client_ip(request))
        raise SecurityViolationError("Invalid request headers")

    for header in ("User-Agent", "Referer", "Origin"):
        if is_suspicious_header(request.headers.get(header)):
            logger.warning("suspicious_request", reason=header.lower(), ip=get_client_ip(request))
            raise SecurityViolationError("Suspicious request detected")


@dataclass
class Pagination:
    """Параметры страницы: page (1..1000) и limit (не больше max_page_size)."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination(
    request: Request,
    page: int = Query(1, ge=1, le=1000),
    limit: Optional[int] = Query(None, ge=1),
) -> Pagination:
    settings = request.app.state.settings
    size = limit or settings.default_page_size
    return Pagination(page=page, limit=min(size, settings.max_page_size))


def client_info(request: Request) -> Dict[str, Optional[str]]:
    """IP и User-Agent для журналов."""
    return {"ip": get_client_ip(request), "user_agent": get_user_agent(request)}
