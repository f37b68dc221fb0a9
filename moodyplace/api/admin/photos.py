"""Управление фотографиями (метаданные; файлы кладутся в public/images заранее)."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, select, update

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import created, paginated, success
from moodyplace.models import Photo
from moodyplace.schemas.content import PhotoCreate, PhotoUpdate
from moodyplace.utils.enums import PhotoCategory
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

photos = Photo.__table__


@router.get("")
@api_limit
async def list_photos(
    request: Request,
    category: Optional[PhotoCategory] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    query = select(photos)
    if category is not None:
        query = query.where(photos.c.category == category.value)
    rows, total = await fetch_page(db, query, pagination, photos.c.sort_order.asc(), photos.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.post("")
@api_limit
async def create_photo(
    request: Request,
    payload: PhotoCreate,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    now = datetime.utcnow()
    photo_id = await db.insert(photos.insert().values(**payload.to_db(), created_at=now, updated_at=now))
    logger.info("photo_created", photo_id=photo_id, category=payload.category.value, admin_id=current_admin.id)
    return created(await get_or_404(db, photos, photo_id, "Photo"), "Photo created successfully")


@router.get("/{photo_id}")
@api_limit
async def get_photo(
    request: Request,
    photo_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    return success(await get_or_404(db, photos, photo_id, "Photo"))


@router.put("/{photo_id}")
@api_limit
async def update_photo(
    request: Request,
    payload: PhotoUpdate,
    photo_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    await get_or_404(db, photos, photo_id, "Photo")
    changes = payload.to_db()
    if changes:
        await db.update(update(photos).where(photos.c.id == photo_id).values(**changes, updated_at=datetime.utcnow()))
        logger.info("photo_updated", photo_id=photo_id, fields=sorted(changes), admin_id=current_admin.id)
    return success(await get_or_404(db, photos, photo_id, "Photo"), "Photo updated successfully")


@router.delete("/{photo_id}")
@api_limit
async def delete_photo(
    request: Request,
    photo_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    await get_or_404(db, photos, photo_id, "Photo")
    await db.delete(delete(photos).where(photos.c.id == photo_id))
    logger.info("photo_deleted", photo_id=photo_id, admin_id=current_admin.id)
    return success(None, "Photo deleted successfully")
