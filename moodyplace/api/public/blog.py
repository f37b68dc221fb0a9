"""Публичный API блога."""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy import select, update

from config.database import Database, DatabaseConnection
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_optional_admin, get_pagination
from moodyplace.api.queries import fetch_page
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.core.analytics import insert_event
from moodyplace.models import BlogPost
from moodyplace.utils.enums import AnalyticsEvent
from moodyplace.utils.exceptions import NotFoundError
from moodyplace.utils.validators import SLUG_RE

router = APIRouter()

posts = BlogPost.__table__
published = select(posts).where(posts.c.is_published.is_(True))

# В списке не отдаём полный текст
LIST_COLUMNS = [c for c in posts.c if c.name != "content"]

FEATURED_LIMIT = 3


@router.get("")
@api_limit
async def list_posts(
    request: Request,
    pagination: Pagination = Depends(get_pagination),
    db: Database = Depends(get_db),
):
    """Опубликованные записи, новые сверху."""
    query = select(*LIST_COLUMNS).where(posts.c.is_published.is_(True))
    rows, total = await fetch_page(db, query, pagination, posts.c.published_at.desc(), posts.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.get("/featured")
@api_limit
async def featured_posts(request: Request, db: Database = Depends(get_db)):
    query = (
        select(*LIST_COLUMNS)
        .where(posts.c.is_published.is_(True), posts.c.featured.is_(True))
        .order_by(posts.c.published_at.desc())
        .limit(FEATURED_LIMIT)
    )
    return success(await db.query(query))


@router.get("/{slug}")
@api_limit
async def get_post(
    request: Request,
    slug: str = Path(..., min_length=1, max_length=255, pattern=SLUG_RE.pattern),
    db: Database = Depends(get_db),
):
    """Запись по slug."""
    post = await db.query_one(published.where(posts.c.slug == slug))
    if post is None:
        raise NotFoundError("Blog post")
    return success(post)


@router.post("/{post_id}/view")
@api_limit
async def track_view(
    request: Request,
    post_id: int = Path(..., ge=1),
    admin: Optional[CurrentAdmin] = Depends(get_optional_admin),
    db: Database = Depends(get_db),
):
    """Учесть просмотр записи (администратор с токеном отмечается в событии)."""
    admin_user_id = admin.id if admin is not None else None

    async def body(conn: DatabaseConnection):
        post = await conn.query_one(
            select(posts.c.id, posts.c.slug).where(posts.c.id == post_id, posts.c.is_published.is_(True))
        )
        if post is None:
            raise NotFoundError("Blog post")
        await conn.update(update(posts).where(posts.c.id == post_id).values(view_count=posts.c.view_count + 1))
        await conn.insert(
            insert_event(AnalyticsEvent.BLOG_VIEW, request, {"post_id": post_id, "slug": post["slug"]}, admin_user_id)
        )
        return await conn.scalar(select(posts.c.view_count).where(posts.c.id == post_id))

    view_count = await db.transaction(body)
    return success({"post_id": post_id, "view_count": view_count}, "View tracked")
