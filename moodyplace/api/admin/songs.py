"""Управление песнями."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, not_, or_, select, update

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import created, paginated, success
from moodyplace.models import Song
from moodyplace.schemas.content import SongCreate, SongUpdate
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

songs = Song.__table__


@router.get("")
@api_limit
async def list_songs(
    request: Request,
    q: Optional[str] = Query(None, min_length=1, max_length=255),
    published: Optional[bool] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Все песни, включая неопубликованные."""
    query = select(songs)
    if q:
        pattern = f"%{q}%"
        query = query.where(or_(songs.c.title.ilike(pattern), songs.c.slug.ilike(pattern)))
    if published is not None:
        query = query.where(songs.c.is_published.is_(published))
    rows, total = await fetch_page(db, query, pagination, songs.c.sort_order, songs.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.post("")
@api_limit
async def create_song(
    request: Request,
    payload: SongCreate,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    now = datetime.utcnow()
    song_id = await db.insert(songs.insert().values(**payload.to_db(), play_count=0, created_at=now, updated_at=now))
    logger.info("song_created", song_id=song_id, slug=payload.slug, admin_id=current_admin.id)
    return created(await get_or_404(db, songs, song_id, "Song"), "Song created successfully")


@router.get("/{song_id}")
@api_limit
async def get_song(
    request: Request,
    song_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    return success(await get_or_404(db, songs, song_id, "Song"))


@router.put("/{song_id}")
@api_limit
async def update_song(
    request: Request,
    payload: SongUpdate,
    song_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Частичное обновление: меняются только переданные поля."""
    await get_or_404(db, songs, song_id, "Song")
    changes = payload.to_db()
    if changes:
        await db.update(update(songs).where(songs.c.id == song_id).values(**changes, updated_at=datetime.utcnow()))
        logger.info("song_updated", song_id=song_id, fields=sorted(changes), admin_id=current_admin.id)
    return success(await get_or_404(db, songs, song_id, "Song"), "Song updated successfully")


@router.delete("/{song_id}")
@api_limit
async def delete_song(
    request: Request,
    song_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    await get_or_404(db, songs, song_id, "Song")
    await db.delete(delete(songs).where(songs.c.id == song_id))
    logger.info("song_deleted", song_id=song_id, admin_id=current_admin.id)
    return success(None, "Song deleted successfully")


@router.post("/{song_id}/toggle-featured")
@api_limit
async def toggle_featured(
    request: Request,
    song_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Переключить признак «избранное»."""
    await get_or_404(db, songs, song_id, "Song")
    await db.update(
        update(songs).where(songs.c.id == song_id).values(featured=not_(songs.c.featured), updated_at=datetime.utcnow())
    )
    song = await get_or_404(db, songs, song_id, "Song")
    return success(song, "Song featured" if song["featured"] else "Song unfeatured")
