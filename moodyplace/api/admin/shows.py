"""Управление концертами."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, select, update

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import created, paginated, success
from moodyplace.models import Show
from moodyplace.schemas.content import ShowCreate, ShowUpdate
from moodyplace.utils.enums import ShowStatus
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

shows = Show.__table__


@router.get("")
@api_limit
async def list_shows(
    request: Request,
    status: Optional[ShowStatus] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    query = select(shows)
    if status is not None:
        query = query.where(shows.c.status == status.value)
    rows, total = await fetch_page(db, query, pagination, shows.c.event_date.desc(), shows.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.post("")
@api_limit
async def create_show(
    request: Request,
    payload: ShowCreate,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    now = datetime.utcnow()
    show_id = await db.insert(shows.insert().values(**payload.to_db(), created_at=now, updated_at=now))
    logger.info("show_created", show_id=show_id, admin_id=current_admin.id)
    return created(await get_or_404(db, shows, show_id, "Show"), "Show created successfully")


@router.get("/{show_id}")
@api_limit
async def get_show(
    request: Request,
    show_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    return success(await get_or_404(db, shows, show_id, "Show"))


@router.put("/{show_id}")
@api_limit
async def update_show(
    request: Request,
    payload: ShowUpdate,
    show_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    await get_or_404(db, shows, show_id, "Show")
    changes = payload.to_db()
    if changes:
        await db.update(update(shows).where(shows.c.id == show_id).values(**changes, updated_at=datetime.utcnow()))
        logger.info("show_updated", show_id=show_id, fields=sorted(changes), admin_id=current_admin.id)
    return success(await get_or_404(db, shows, show_id, "Show"), "Show updated successfully")


@router.delete("/{show_id}")
@api_limit
async def delete_show(
    request: Request,
    show_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    await get_or_404(db, shows, show_id, "Show")
    await db.delete(delete(shows).where(shows.c.id == show_id))
    logger.info("show_deleted", show_id=show_id, admin_id=current_admin.id)
    return success(None, "Show deleted successfully")
