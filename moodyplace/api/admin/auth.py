"""API аутентификации администраторов."""
from fastapi import APIRouter, Depends, Request

from moodyplace.api.deps import CurrentAdmin, client_info, get_auth_service, get_current_admin
from moodyplace.api.rate_limit import auth_limit
from moodyplace.api.responses import success
from moodyplace.core.auth_service import AuthService, public_user
from moodyplace.schemas.auth import ChangePasswordRequest, LoginRequest, RefreshRequest
from moodyplace.utils.enums import AuthEvent
from moodyplace.utils.exceptions import NotFoundError

router = APIRouter()


@router.post("/login")
@auth_limit
async def login(request: Request, payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Вход по имени пользователя или email."""
    result = await auth_service.login(payload.username_or_email, payload.password, **client_info(request))
    # Cookie-сессия для страниц сайта (не заменяет Bearer токен)
    request.session["admin_id"] = result["user"]["id"]
    return success(result, "Login successful")


@router.post("/logout")
async def logout(
    request: Request,
    current_admin: CurrentAdmin = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Выход. Токены не отзываются: клиент удаляет их у себя."""
    info = client_info(request)
    await auth_service.log_auth_event(AuthEvent.LOGOUT, current_admin.id, info["ip"], info["user_agent"], "Logout")
    request.session.clear()
    return success(None, "Logout successful")


@router.post("/refresh")
@auth_limit
async def refresh(request: Request, payload: RefreshRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Новая пара токенов по refresh токену."""
    tokens = await auth_service.refresh_tokens(payload.refresh_token, **client_info(request))
    return success({"tokens": tokens}, "Token refreshed")


@router.get("/me")
async def me(
    current_admin: CurrentAdmin = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Профиль текущего администратора."""
    user = await auth_service.get_active_user(current_admin.id)
    if user is None:
        raise NotFoundError("User")
    return success(public_user(user))


@router.post("/change-password")
async def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    current_admin: CurrentAdmin = Depends(get_current_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Смена пароля с проверкой текущего."""
    await auth_service.change_password(
        current_admin.id, payload.current_password, payload.new_password, **client_info(request)
    )
    return success(None, "Password changed successfully")
