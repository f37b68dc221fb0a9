"""Управление администраторами (только super_admin, кроме чтения своего профиля)."""
from datetime import datetime

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy import select, update

from config.database import Database
from moodyplace.api.deps import (
    CurrentAdmin,
    Pagination,
    client_info,
    get_auth_service,
    get_db,
    get_pagination,
    require_ownership_or_admin,
    require_superadmin,
)
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import created, paginated, success
from moodyplace.core.auth_service import PUBLIC_USER_FIELDS, AuthService, public_user
from moodyplace.models import AdminUser
from moodyplace.schemas.auth import CreateAdminRequest, UpdateRoleRequest
from moodyplace.utils.enums import AuthEvent
from moodyplace.utils.exceptions import RequestValidationFailed
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

users = AdminUser.__table__


@router.get("")
@api_limit
async def list_users(
    request: Request,
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_superadmin),
    db: Database = Depends(get_db),
):
    query = select(*(users.c[field] for field in PUBLIC_USER_FIELDS))
    rows, total = await fetch_page(db, query, pagination, users.c.id.asc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.post("")
@api_limit
async def create_user(
    request: Request,
    payload: CreateAdminRequest,
    current_admin: CurrentAdmin = Depends(require_superadmin),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = await auth_service.create_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role,
    )
    info = client_info(request)
    await auth_service.log_auth_event(
        AuthEvent.USER_CREATED,
        current_admin.id,
        info["ip"],
        info["user_agent"],
        f"Created {user['username']} ({user['role']})",
    )
    return created(user, "Admin user created successfully")


@router.get("/{user_id}")
@api_limit
async def get_user(
    request: Request,
    user_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_ownership_or_admin("user_id")),
    db: Database = Depends(get_db),
):
    """Профиль администратора: свой или любой для admin/super_admin."""
    return success(public_user(await get_or_404(db, users, user_id, "User")))


@router.put("/{user_id}/role")
@api_limit
async def update_role(
    request: Request,
    payload: UpdateRoleRequest,
    user_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_superadmin),
    db: Database = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    if user_id == current_admin.id:
        raise RequestValidationFailed("You cannot change your own role", code="SELF_MODIFICATION")

    user = await get_or_404(db, users, user_id, "User")
    await db.update(
        update(users).where(users.c.id == user_id).values(role=payload.role.value, updated_at=datetime.utcnow())
    )
    info = client_info(request)
    await auth_service.log_auth_event(
        AuthEvent.ROLE_CHANGED,
        current_admin.id,
        info["ip"],
        info["user_agent"],
        f"{user['username']}: {user['role']} -> {payload.role.value}",
    )
    return success(public_user(await get_or_404(db, users, user_id, "User")), "Role updated successfully")


@router.delete("/{user_id}")
@api_limit
async def deactivate_user(
    request: Request,
    user_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_superadmin),
    db: Database = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Деактивировать администратора (записи не удаляются)."""
    if user_id == current_admin.id:
        raise RequestValidationFailed("You cannot deactivate your own account", code="SELF_MODIFICATION")

    user = await get_or_404(db, users, user_id, "User")
    await db.update(
        update(users).where(users.c.id == user_id).values(is_active=False, updated_at=datetime.utcnow())
    )
    info = client_info(request)
    await auth_service.log_auth_event(
        AuthEvent.USER_DEACTIVATED, current_admin.id, info["ip"], info["user_agent"], f"Deactivated {user['username']}"
    )
    return success(None, "User deactivated successfully")
