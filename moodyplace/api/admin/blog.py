"""Управление блогом."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, or_, select, update

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import created, paginated, success
from moodyplace.models import BlogPost
from moodyplace.schemas.content import BlogPostCreate, BlogPostUpdate
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

posts = BlogPost.__table__


@router.get("")
@api_limit
async def list_posts(
    request: Request,
    q: Optional[str] = Query(None, min_length=1, max_length=255),
    published: Optional[bool] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Все записи блога, включая черновики."""
    query = select(posts)
    if q:
        pattern = f"%{q}%"
        query = query.where(or_(posts.c.title.ilike(pattern), posts.c.slug.ilike(pattern)))
    if published is not None:
        query = query.where(posts.c.is_published.is_(published))
    rows, total = await fetch_page(db, query, pagination, posts.c.created_at.desc(), posts.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.post("")
@api_limit
async def create_post(
    request: Request,
    payload: BlogPostCreate,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    now = datetime.utcnow()
    values = payload.to_db()
    if values["is_published"] and values.get("published_at") is None:
        values["published_at"] = now
    post_id = await db.insert(
        posts.insert().values(**values, author_id=current_admin.id, view_count=0, created_at=now, updated_at=now)
    )
    logger.info("blog_post_created", post_id=post_id, slug=payload.slug, admin_id=current_admin.id)
    return created(await get_or_404(db, posts, post_id, "Blog post"), "Blog post created successfully")


@router.get("/{post_id}")
@api_limit
async def get_post(
    request: Request,
    post_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    return success(await get_or_404(db, posts, post_id, "Blog post"))


@router.put("/{post_id}")
@api_limit
async def update_post(
    request: Request,
    payload: BlogPostUpdate,
    post_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    post = await get_or_404(db, posts, post_id, "Blog post")
    changes = payload.to_db()
    if changes.get("is_published") and not post["published_at"] and not changes.get("published_at"):
        changes["published_at"] = datetime.utcnow()
    if changes:
        await db.update(update(posts).where(posts.c.id == post_id).values(**changes, updated_at=datetime.utcnow()))
        logger.info("blog_post_updated", post_id=post_id, fields=sorted(changes), admin_id=current_admin.id)
    return success(await get_or_404(db, posts, post_id, "Blog post"), "Blog post updated successfully")


@router.delete("/{post_id}")
@api_limit
async def delete_post(
    request: Request,
    post_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    await get_or_404(db, posts, post_id, "Blog post")
    await db.delete(delete(posts).where(posts.c.id == post_id))
    logger.info("blog_post_deleted", post_id=post_id, admin_id=current_admin.id)
    return success(None, "Blog post deleted successfully")


@router.post("/{post_id}/publish")
@api_limit
async def toggle_publish(
    request: Request,
    post_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Опубликовать или снять с публикации; дата публикации ставится при первой публикации."""
    post = await get_or_404(db, posts, post_id, "Blog post")
    now = datetime.utcnow()
    publish = not post["is_published"]
    values = {"is_published": publish, "updated_at": now}
    if publish and post["published_at"] is None:
        values["published_at"] = now
    await db.update(update(posts).where(posts.c.id == post_id).values(**values))
    logger.info("blog_post_publish_toggled", post_id=post_id, published=publish, admin_id=current_admin.id)
    return success(
        await get_or_404(db, posts, post_id, "Blog post"),
        "Blog post published" if publish else "Blog post unpublished",
    )
