"""Вспомогательные утилиты для тестов: наполнение БД контентом."""
from datetime import datetime, timedelta

from sqlalchemy import select

from config.database import Database
from moodyplace.models import BlogPost, NewsletterSubscriber, Photo, Show, Song


async def add_song(db: Database, slug: str, **values) -> int:
    return await db.insert(
        Song.__table__.insert().values(title=slug.replace("-", " ").title(), slug=slug, **values)
    )


async def add_post(db: Database, slug: str, published: bool = True, **values) -> int:
    values.setdefault("content", "<p>Notes from the studio, late at night.</p>")
    if published:
        values.setdefault("published_at", datetime.utcnow())
    return await db.insert(
        BlogPost.__table__.insert().values(
            title=slug.replace("-", " ").title(), slug=slug, is_published=published, **values
        )
    )


async def add_show(db: Database, title: str, days_from_now: int = 30, **values) -> int:
    values.setdefault("venue", "The Basement")
    values.setdefault("city", "Berlin")
    values.setdefault("country", "DE")
    return await db.insert(
        Show.__table__.insert().values(
            title=title, event_date=datetime.utcnow() + timedelta(days=days_from_now), **values
        )
    )


async def add_photo(db: Database, file_path: str, **values) -> int:
    values.setdefault("alt_text", "Mood on stage")
    return await db.insert(Photo.__table__.insert().values(file_path=file_path, **values))


async def get_subscriber(db: Database, email: str):
    subscribers = NewsletterSubscriber.__table__
    return await db.query_one(select(subscribers).where(subscribers.c.email == email))


ADMIN_PASSWORD = "Str0ng!Passw0rd"
TEST_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) pytest"


def bearer(auth_service, user: dict) -> dict:
    """Заголовок Authorization с access токеном пользователя."""
    tokens = auth_service.generate_tokens(user)
    return {"Authorization": f"Bearer {tokens['access_token']}"}
