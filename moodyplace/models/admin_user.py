"""Модель администратора."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base
from moodyplace.models.types import BigIntegerAuto
from moodyplace.utils.enums import Role


class AdminUser(Base):
    """Пользователь админ-панели."""

    __tablename__ = "admin_users"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(String(20), default=Role.EDITOR.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    # Блокировка после неудачных попыток входа
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    locked_until = Column(DateTime, nullable=True)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
