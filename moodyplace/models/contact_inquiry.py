"""Модель обращения через форму контактов."""
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from config.database import Base
from moodyplace.models.types import BigIntegerAuto
from moodyplace.utils.enums import InquiryStatus, InquiryType, Urgency


class ContactInquiry(Base):
    """Обращение посетителя сайта."""

    __tablename__ = "contact_inquiries"

    id = Column(BigIntegerAuto, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    company_organization = Column(String(255), nullable=True)
    inquiry_type = Column(String(20), default=InquiryType.GENERAL.value, nullable=False)
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    preferred_contact_method = Column(String(10), nullable=True)
    urgency = Column(String(10), default=Urgency.MEDIUM.value, nullable=False)
    status = Column(String(20), default=InquiryStatus.NEW.value, nullable=False, index=True)
    admin_notes = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
