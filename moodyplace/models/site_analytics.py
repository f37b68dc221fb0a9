"""Модель журнала событий сайта."""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from config.database import Base
from moodyplace.models.types import BigIntegerAuto


class SiteAnalytics(Base):
    """
    Событие сайта: аутентификация, прослушивания, просмотры, формы.

    Записи только добавляются и никогда не изменяются.
    """

    __tablename__ = "site_analytics"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    event_type = Column(String(50), nullable=False, index=True)
    event_data = Column(JSON, nullable=True)
    page_url = Column(String(500), nullable=True)
    referrer = Column(String(500), nullable=True)
    user_ip = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    device_type = Column(String(20), nullable=True)
    admin_user_id = Column(BigIntegerAuto, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
