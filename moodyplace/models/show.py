"""Модель концерта."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text

from config.database import Base
from moodyplace.models.types import BigIntegerAuto
from moodyplace.utils.enums import ShowStatus


class Show(Base):
    """Концерт или выступление."""

    __tablename__ = "shows"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    venue = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state_province = Column(String(50), nullable=True)
    country = Column(String(50), nullable=False)
    event_date = Column(DateTime, nullable=False, index=True)
    doors_time = Column(String(8), nullable=True)  # HH:MM:SS
    show_time = Column(String(8), nullable=True)
    ticket_url = Column(String(500), nullable=True)
    ticket_price = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    age_restriction = Column(String(20), nullable=True)
    status = Column(String(20), default=ShowStatus.UPCOMING.value, nullable=False, index=True)
    is_published = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
