#!/usr/bin/env python3
"""Заполнение базы данных начальными данными для разработки."""
import asyncio
import os
import secrets
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete

from config.database import DatabaseConnection, create_database
from config.settings import get_settings
from moodyplace.core.auth_service import hash_password
from moodyplace.models import (
    AdminUser,
    BlogPost,
    ContactInquiry,
    NewsletterSubscriber,
    Photo,
    Show,
    SiteAnalytics,
    Song,
)
from moodyplace.utils.enums import PhotoCategory, Role, ShowStatus
from moodyplace.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

# Порядок удаления важен из-за внешних ключей
TABLES_TO_CLEAR = [SiteAnalytics, ContactInquiry, NewsletterSubscriber, Show, Photo, BlogPost, Song, AdminUser]

SONGS = [
    {
        "title": "Midnight Reflections",
        "slug": "midnight-reflections",
        "description": "A contemplative piece exploring the quiet moments of late-night introspection.",
        "release_date": date(2023, 8, 15),
        "duration": 245,
        "spotify_url": "https://open.spotify.com/track/example1",
        "featured": True,
        "sort_order": 1,
    },
    {
        "title": "Urban Solitude",
        "slug": "urban-solitude",
        "description": "Finding peace within the chaos of city life.",
        "release_date": date(2023, 7, 20),
        "duration": 198,
        "youtube_url": "https://www.youtube.com/watch?v=example1",
        "featured": True,
        "sort_order": 2,
    },
    {
        "title": "Echoes of Tomorrow",
        "slug": "echoes-of-tomorrow",
        "description": "An experimental track blending acoustic and electronic elements.",
        "release_date": date(2023, 6, 10),
        "duration": 312,
        "soundcloud_url": "https://soundcloud.com/mood/echoes-of-tomorrow",
        "sort_order": 3,
    },
]

POSTS = [
    {
        "title": 'The Journey Behind "Midnight Reflections"',
        "slug": "journey-behind-midnight-reflections",
        "content": (
            "<p>Creating \"Midnight Reflections\" began during one of those sleepless nights we all know too well.</p>"
            "<p>Instead of starting with a melody, I began with silence: the ambient sounds of my apartment at 2 AM.</p>"
        ),
        "excerpt": "The story behind my latest single and the late-night creative process that brought it to life.",
        "meta_title": 'The Journey Behind "Midnight Reflections"',
        "meta_description": "The inspiration and creative process behind the single Midnight Reflections.",
        "is_published": True,
        "featured": True,
        "published_at": datetime(2023, 8, 16, 10, 0),
        "read_time_minutes": 3,
    },
    {
        "title": "Finding Sound in the City",
        "slug": "finding-sound-in-the-city",
        "content": (
            "<p>Living in the city as a musician is a constant dance between inspiration and overstimulation.</p>"
            "<p>\"Urban Solitude\" incorporates field recordings from around the city.</p>"
        ),
        "excerpt": "How the city itself became an instrument in my latest composition.",
        "is_published": True,
        "published_at": datetime(2023, 7, 22, 14, 30),
        "read_time_minutes": 4,
    },
]


def shows_data(now: datetime):
    return [
        {
            "title": "Intimate Evening at Blue Note",
            "venue": "Blue Note",
            "city": "New York",
            "state_province": "NY",
            "country": "USA",
            "event_date": now + timedelta(days=30),
            "doors_time": "19:00:00",
            "show_time": "20:00:00",
            "ticket_url": "https://tickets.example.com/blue-note",
            "ticket_price": "$25-35",
            "age_restriction": "21+",
            "status": ShowStatus.UPCOMING.value,
        },
        {
            "title": "Summer Sessions",
            "venue": "The Roxy",
            "city": "Los Angeles",
            "state_province": "CA",
            "country": "USA",
            "event_date": now - timedelta(days=60),
            "show_time": "21:00:00",
            "status": ShowStatus.COMPLETED.value,
        },
    ]


PHOTOS = [
    {
        "title": "Studio Session",
        "file_path": "/images/gallery/studio-session.jpg",
        "alt_text": "Mood recording vocals in the studio",
        "category": PhotoCategory.STUDIO.value,
        "is_featured": True,
        "sort_order": 1,
    },
    {
        "title": "Press Portrait",
        "file_path": "/images/gallery/press-portrait.jpg",
        "alt_text": "Black and white portrait of Mood",
        "category": PhotoCategory.PRESS.value,
        "photographer": "Alex Rivera",
        "is_press_approved": True,
        "sort_order": 2,
    },
]


def generate_password() -> str:
    """Случайный пароль, удовлетворяющий политике сложности."""
    return f"{secrets.token_urlsafe(12)}Aa1!"


async def seed(reset: bool) -> str:
    """
    Заполнить базу данных.

    Returns:
        Пароль созданного администратора
    """
    settings = get_settings()
    if settings.is_production:
        raise RuntimeError("Seeding is disabled in production")

    password = os.getenv("SEED_ADMIN_PASSWORD") or generate_password()
    password_hash = await asyncio.to_thread(hash_password, password, settings.bcrypt_rounds)
    now = datetime.utcnow()

    db = create_database(settings)
    try:
        await db.connect()
        await db.create_tables()

        async def body(conn: DatabaseConnection):
            if reset:
                logger.info("clearing_existing_data")
                for model in TABLES_TO_CLEAR:
                    await conn.delete(delete(model.__table__))

            admin_id = await conn.insert(
                AdminUser.__table__.insert().values(
                    username="admin",
                    email="admin@a-moody-place.com",
                    password_hash=password_hash,
                    full_name="Site Administrator",
                    role=Role.SUPERADMIN.value,
                    is_active=True,
                    failed_login_attempts=0,
                    created_at=now,
                    updated_at=now,
                )
            )
            for song in SONGS:
                await conn.insert(
                    Song.__table__.insert().values(**song, is_published=True, play_count=0, created_at=now, updated_at=now)
                )
            for post in POSTS:
                await conn.insert(
                    BlogPost.__table__.insert().values(
                        **post, author_id=admin_id, view_count=0, created_at=now, updated_at=now
                    )
                )
            for show in shows_data(now):
                await conn.insert(Show.__table__.insert().values(**show, is_published=True, created_at=now, updated_at=now))
            for photo in PHOTOS:
                await conn.insert(Photo.__table__.insert().values(**photo, created_at=now, updated_at=now))

        await db.transaction(body)
    finally:
        await db.close()

    logger.info("database_seeded", songs=len(SONGS), posts=len(POSTS), photos=len(PHOTOS))
    return password


def main():
    """Главная функция."""
    import argparse

    parser = argparse.ArgumentParser(description="Начальные данные для разработки")
    parser.add_argument("--reset", action="store_true", help="Удалить существующие данные перед заполнением")
    args = parser.parse_args()

    try:
        password = asyncio.run(seed(args.reset))
    except Exception as e:
        logger.error("database_seed_failed", error=str(e), exc_info=True)
        print(f"\n❌ Ошибка: {e}")
        sys.exit(1)

    print("✅ База данных заполнена")
    print("Администратор: admin")
    if not os.getenv("SEED_ADMIN_PASSWORD"):
        print(f"Пароль: {password}")


if __name__ == "__main__":
    main()
