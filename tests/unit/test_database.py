"""Тесты для слоя доступа к данным."""
from datetime import datetime

import pytest
from sqlalchemy import func, select

from config.database import Database
from moodyplace.models import Song
from moodyplace.utils.exceptions import QueryFailedError

songs = Song.__table__


def song_values(slug: str, **overrides):
    now = datetime.utcnow()
    values = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "featured": False,
        "is_published": True,
        "sort_order": 0,
        "play_count": 0,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return values


async def count_songs(db: Database) -> int:
    return await db.scalar(select(func.count()).select_from(songs))


@pytest.mark.asyncio
@pytest.mark.unit
async def test_insert_and_query(database):
    song_id = await database.insert(songs.insert().values(**song_values("midnight-city")))

    assert song_id is not None
    row = await database.query_one(select(songs).where(songs.c.id == song_id))
    assert row["slug"] == "midnight-city"
    assert row["play_count"] == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_text_query_with_params(database):
    """Строковый SQL выполняется только с именованными параметрами."""
    await database.insert(songs.insert().values(**song_values("rainy-day")))

    rows = await database.query("SELECT slug FROM songs WHERE slug = :slug", {"slug": "rainy-day"})
    assert rows == [{"slug": "rainy-day"}]
    assert await database.query_one("SELECT slug FROM songs WHERE slug = :slug", {"slug": "missing"}) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_and_delete_return_rowcount(database):
    song_id = await database.insert(songs.insert().values(**song_values("neon")))

    assert await database.update(songs.update().where(songs.c.id == song_id).values(title="Neon Lights")) == 1
    assert await database.update(songs.update().where(songs.c.id == 9999).values(title="Nothing")) == 0
    assert await database.delete(songs.delete().where(songs.c.id == song_id)) == 1
    assert await count_songs(database) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_transaction_commits(database):
    async def body(conn):
        first = await conn.insert(songs.insert().values(**song_values("first")))
        second = await conn.insert(songs.insert().values(**song_values("second")))
        return first, second

    first, second = await database.transaction(body)

    assert first != second
    assert await count_songs(database) == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_transaction_rolls_back_on_error(database):
    """Исключение в теле транзакции откатывает все изменения."""

    async def body(conn):
        await conn.insert(songs.insert().values(**song_values("doomed")))
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await database.transaction(body)

    assert await count_songs(database) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unique_violation_is_integrity_error(database):
    await database.insert(songs.insert().values(**song_values("same")))

    with pytest.raises(QueryFailedError) as exc_info:
        await database.insert(songs.insert().values(**song_values("same")))
    assert exc_info.value.is_integrity_error


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_query_raises_query_failed(database):
    with pytest.raises(QueryFailedError) as exc_info:
        await database.query("SELECT * FROM missing_table")
    assert not exc_info.value.is_integrity_error
    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_health_check_healthy(database):
    health = await database.health_check()

    assert health["status"] == "healthy"
    assert health["connected"] is True
    assert health["response_time_ms"] >= 0
    assert "queued" in health["pool"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_health_check_unreachable(tmp_path):
    """Недоступная БД: статус unhealthy вместо исключения."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'db.sqlite'}")
    try:
        health = await db.health_check()
    finally:
        await db.close()

    assert health["status"] == "unhealthy"
    assert health["connected"] is False
    assert health["error"]
