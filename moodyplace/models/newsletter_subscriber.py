"""Модель подписчика рассылки."""
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from config.database import Base
from moodyplace.models.types import BigIntegerAuto
from moodyplace.utils.enums import SubscriberType


class NewsletterSubscriber(Base):
    """Подписчик рассылки (двойное подтверждение по токену)."""

    __tablename__ = "newsletter_subscribers"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    source = Column(String(50), default="website", nullable=False)
    subscriber_type = Column(String(20), default=SubscriberType.FAN.value, nullable=False)
    interests = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    confirmation_token = Column(String(64), unique=True, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    unsubscribed_at = Column(DateTime, nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
