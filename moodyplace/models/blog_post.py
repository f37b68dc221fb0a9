"""Модель записи блога."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from config.database import Base
from moodyplace.models.types import BigIntegerAuto


class BlogPost(Base):
    """Запись блога."""

    __tablename__ = "blog_posts"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(String(500), nullable=True)
    featured_image = Column(String(500), nullable=True)
    meta_title = Column(String(60), nullable=True)
    meta_description = Column(String(160), nullable=True)
    is_published = Column(Boolean, default=False, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime, nullable=True, index=True)
    read_time_minutes = Column(Integer, nullable=True)
    view_count = Column(Integer, default=0, nullable=False)
    author_id = Column(BigIntegerAuto, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
