"""Модель фотографии."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base
from moodyplace.models.types import BigIntegerAuto
from moodyplace.utils.enums import PhotoCategory


class Photo(Base):
    """Фотография галереи и пресс-кита."""

    __tablename__ = "photos"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=True)
    caption = Column(String(1000), nullable=True)
    file_path = Column(String(500), nullable=False)
    medium_path = Column(String(500), nullable=True)
    thumbnail_path = Column(String(500), nullable=True)
    alt_text = Column(String(255), nullable=False)
    category = Column(String(20), default=PhotoCategory.PROFESSIONAL.value, nullable=False, index=True)
    photographer = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_press_approved = Column(Boolean, default=False, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
