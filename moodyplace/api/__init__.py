"""JSON API: публичная часть (/api) и админ-панель (/api/admin)."""
from fastapi import APIRouter

from moodyplace.api.admin import admin_router
from moodyplace.api.public import public_router

api_router = APIRouter()
api_router.include_router(admin_router, prefix="/admin")
api_router.include_router(public_router)

__all__ = ["api_router"]
