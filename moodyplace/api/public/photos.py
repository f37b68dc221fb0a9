"""Публичный API галереи."""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import select

from config.database import Database
from moodyplace.api.deps import Pagination, get_db, get_pagination
from moodyplace.api.queries import fetch_page
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.models import Photo
from moodyplace.utils.enums import PhotoCategory

router = APIRouter()

photos = Photo.__table__
ORDER = (photos.c.sort_order, photos.c.id.desc())

FEATURED_LIMIT = 12


@router.get("")
@api_limit
async def list_photos(
    request: Request,
    category: Optional[PhotoCategory] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    db: Database = Depends(get_db),
):
    """Фотографии галереи с фильтром по категории."""
    query = select(photos)
    if category is not None:
        query = query.where(photos.c.category == category.value)
    rows, total = await fetch_page(db, query, pagination, *ORDER)
    return paginated(rows, pagination.page, pagination.limit, total)


@router.get("/featured")
@api_limit
async def featured_photos(request: Request, db: Database = Depends(get_db)):
    query = select(photos).where(photos.c.is_featured.is_(True)).order_by(*ORDER).limit(FEATURED_LIMIT)
    return success(await db.query(query))


@router.get("/category/{category}")
@api_limit
async def photos_by_category(request: Request, category: PhotoCategory = Path(...), db: Database = Depends(get_db)):
    query = select(photos).where(photos.c.category == category.value).order_by(*ORDER)
    return success(await db.query(query))
