"""Публичный API песен."""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy import select, update

from config.database import Database, DatabaseConnection
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_optional_admin, get_pagination
from moodyplace.api.queries import fetch_page
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.core.analytics import insert_event
from moodyplace.models import Song
from moodyplace.utils.enums import AnalyticsEvent
from moodyplace.utils.exceptions import NotFoundError
from moodyplace.utils.validators import SLUG_RE

router = APIRouter()

songs = Song.__table__
published = select(songs).where(songs.c.is_published.is_(True))

FEATURED_LIMIT = 6


@router.get("")
@api_limit
async def list_songs(
    request: Request,
    pagination: Pagination = Depends(get_pagination),
    db: Database = Depends(get_db),
):
    """Опубликованные песни."""
    rows, total = await fetch_page(
        db, published, pagination, songs.c.sort_order, songs.c.release_date.desc(), songs.c.id
    )
    return paginated(rows, pagination.page, pagination.limit, total)


@router.get("/featured")
@api_limit
async def featured_songs(request: Request, db: Database = Depends(get_db)):
    """Избранные песни для главной страницы."""
    rows = await db.query(
        published.where(songs.c.featured.is_(True)).order_by(songs.c.sort_order, songs.c.id).limit(FEATURED_LIMIT)
    )
    return success(rows)


@router.get("/{slug}")
@api_limit
async def get_song(
    request: Request,
    slug: str = Path(..., min_length=1, max_length=255, pattern=SLUG_RE.pattern),
    db: Database = Depends(get_db),
):
    """Песня по slug."""
    song = await db.query_one(published.where(songs.c.slug == slug))
    if song is None:
        raise NotFoundError("Song")
    return success(song)


@router.post("/{song_id}/play")
@api_limit
async def track_play(
    request: Request,
    song_id: int = Path(..., ge=1),
    admin: Optional[CurrentAdmin] = Depends(get_optional_admin),
    db: Database = Depends(get_db),
):
    """Учесть прослушивание: счётчик и событие аналитики в одной транзакции."""
    admin_user_id = admin.id if admin is not None else None

    async def body(conn: DatabaseConnection):
        song = await conn.query_one(select(songs.c.id, songs.c.title).where(
            songs.c.id == song_id, songs.c.is_published.is_(True)
        ))
        if song is None:
            raise NotFoundError("Song")
        await conn.update(update(songs).where(songs.c.id == song_id).values(play_count=songs.c.play_count + 1))
        await conn.insert(
            insert_event(AnalyticsEvent.SONG_PLAY, request, {"song_id": song_id, "title": song["title"]}, admin_user_id)
        )
        return await conn.scalar(select(songs.c.play_count).where(songs.c.id == song_id))

    play_count = await db.transaction(body)
    return success({"song_id": song_id, "play_count": play_count}, "Play tracked")
