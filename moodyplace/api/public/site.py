"""Сведения о сайте, пресс-кит и health check API."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select

from config.database import Database
from moodyplace import __version__
from moodyplace.api.deps import get_app_settings, get_db
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import success
from moodyplace.models import Photo, Show, Song
from moodyplace.utils.enums import ShowStatus

router = APIRouter()

photos = Photo.__table__
songs = Song.__table__
shows = Show.__table__


def social_links(settings) -> dict:
    return {
        "spotify": settings.spotify_url,
        "youtube": settings.youtube_url,
        "instagram": settings.instagram_url,
        "soundcloud": settings.soundcloud_url,
    }


@router.get("/health")
async def api_health():
    """Проверка доступности API."""
    return success(
        {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat(), "version": __version__},
        "API is running",
    )


@router.get("/site-info")
@api_limit
async def site_info(request: Request, settings=Depends(get_app_settings)):
    """Название сайта, артист, контакты и ссылки на соцсети."""
    return success(
        {
            "site_name": settings.site_name,
            "site_url": settings.site_url,
            "artist_name": settings.artist_name,
            "contact_email": settings.contact_email,
            "booking_email": settings.booking_email,
            "social_links": social_links(settings),
            "version": __version__,
        }
    )


@router.get("/press-kit")
@api_limit
async def press_kit(request: Request, settings=Depends(get_app_settings), db: Database = Depends(get_db)):
    """Материалы для прессы: биография, одобренные фото, избранные треки, ближайшие концерты."""
    press_photos = await db.query(
        select(photos).where(photos.c.is_press_approved.is_(True)).order_by(photos.c.sort_order, photos.c.id)
    )
    featured_songs = await db.query(
        select(songs)
        .where(songs.c.is_published.is_(True), songs.c.featured.is_(True))
        .order_by(songs.c.sort_order, songs.c.id)
    )
    upcoming = await db.query(
        select(shows)
        .where(
            shows.c.is_published.is_(True),
            shows.c.status == ShowStatus.UPCOMING.value,
            shows.c.event_date >= datetime.utcnow(),
        )
        .order_by(shows.c.event_date)
        .limit(5)
    )
    return success(
        {
            "artist": {"name": settings.artist_name, "bio": settings.artist_bio},
            "contact": {"general": settings.contact_email, "booking": settings.booking_email},
            "social_links": social_links(settings),
            "photos": press_photos,
            "featured_songs": featured_songs,
            "upcoming_shows": upcoming,
        }
    )
