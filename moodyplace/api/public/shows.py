"""Публичный API концертов."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import or_, select

from config.database import Database
from moodyplace.api.deps import Pagination, get_db, get_pagination
from moodyplace.api.queries import fetch_page
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.models import Show
from moodyplace.utils.enums import ShowStatus
from moodyplace.utils.exceptions import NotFoundError

router = APIRouter()

shows = Show.__table__
published = select(shows).where(shows.c.is_published.is_(True))

UPCOMING_LIMIT = 20
PAST_LIMIT = 20


@router.get("")
@api_limit
async def list_shows(
    request: Request,
    status: Optional[ShowStatus] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: Database = Depends(get_db),
):
    """Концерты с фильтром по статусу (по умолчанию предстоящие)."""
    status = status or ShowStatus.UPCOMING
    query = published.where(shows.c.status == status.value)
    order = shows.c.event_date.asc() if status is ShowStatus.UPCOMING else shows.c.event_date.desc()
    rows, total = await fetch_page(db, query, pagination, order, shows.c.id)
    return paginated(rows, pagination.page, pagination.limit, total)


@router.get("/upcoming")
@api_limit
async def upcoming_shows(request: Request, db: Database = Depends(get_db)):
    """Ближайшие концерты."""
    query = (
        published.where(shows.c.status == ShowStatus.UPCOMING.value, shows.c.event_date >= datetime.utcnow())
        .order_by(shows.c.event_date.asc())
        .limit(UPCOMING_LIMIT)
    )
    return success(await db.query(query))


@router.get("/past")
@api_limit
async def past_shows(request: Request, db: Database = Depends(get_db)):
    """Прошедшие концерты."""
    query = (
        published.where(
            or_(shows.c.event_date < datetime.utcnow(), shows.c.status == ShowStatus.COMPLETED.value),
            shows.c.status != ShowStatus.CANCELLED.value,
        )
        .order_by(shows.c.event_date.desc())
        .limit(PAST_LIMIT)
    )
    return success(await db.query(query))


@router.get("/{show_id}")
@api_limit
async def get_show(request: Request, show_id: int = Path(..., ge=1), db: Database = Depends(get_db)):
    show = await db.query_one(published.where(shows.c.id == show_id))
    if show is None:
        raise NotFoundError("Show")
    return success(show)
