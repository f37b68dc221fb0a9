"""Модель песни."""
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text

from config.database import Base
from moodyplace.models.types import BigIntegerAuto


class Song(Base):
    """Трек артиста со ссылками на стриминговые сервисы."""

    __tablename__ = "songs"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    lyrics = Column(Text, nullable=True)
    release_date = Column(Date, nullable=True)
    duration = Column(Integer, nullable=True)  # секунды
    spotify_url = Column(String(500), nullable=True)
    apple_music_url = Column(String(500), nullable=True)
    youtube_url = Column(String(500), nullable=True)
    soundcloud_url = Column(String(500), nullable=True)
    audio_file_path = Column(String(500), nullable=True)
    cover_image_path = Column(String(500), nullable=True)
    featured = Column(Boolean, default=False, nullable=False, index=True)
    is_published = Column(Boolean, default=True, nullable=False, index=True)
    sort_order = Column(Integer, default=0, nullable=False)
    play_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
