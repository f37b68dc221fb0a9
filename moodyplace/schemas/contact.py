"""Схемы публичных форм: контакты и рассылка."""
from typing import List, Optional

from pydantic import EmailStr, field_validator

from moodyplace.schemas.base import DBModel, Trimmed, blank_to_none
from moodyplace.utils.enums import ContactMethod, InquiryType, NewsletterInterest, SubscriberType, Urgency
from moodyplace.utils.validators import is_valid_person_name, is_valid_phone, strip_unsafe_html

NAME_MESSAGE = "can only contain letters, spaces, hyphens, apostrophes, and periods"


class ContactRequest(DBModel):
    """Обращение через форму контактов."""

    name: Trimmed(2, 255)
    email: EmailStr
    phone: Optional[str] = None
    company_organization: Optional[Trimmed(0, 255)] = None
    inquiry_type: Optional[InquiryType] = InquiryType.GENERAL
    subject: Optional[Trimmed(0, 255)] = None
    message: Trimmed(10, 5000)
    preferred_contact_method: Optional[ContactMethod] = None
    urgency: Optional[Urgency] = Urgency.MEDIUM

    @field_validator(
        "phone", "company_organization", "subject", "preferred_contact_method", "inquiry_type", "urgency", mode="before"
    )
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("inquiry_type", mode="after")
    @classmethod
    def default_inquiry_type(cls, v):
        return v or InquiryType.GENERAL

    @field_validator("urgency", mode="after")
    @classmethod
    def default_urgency(cls, v):
        return v or Urgency.MEDIUM

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not is_valid_person_name(v):
            raise ValueError(f"Name {NAME_MESSAGE}")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v is not None:
            v = v.strip()
            if not is_valid_phone(v):
                raise ValueError("Valid phone number required if provided")
        return v

    @field_validator("subject", "message")
    @classmethod
    def sanitize(cls, v):
        return strip_unsafe_html(v) if v is not None else v


class NewsletterSubscribeRequest(DBModel):
    """Подписка на рассылку."""

    email: EmailStr
    first_name: Optional[Trimmed(0, 100)] = None
    last_name: Optional[Trimmed(0, 100)] = None
    subscriber_type: SubscriberType = SubscriberType.FAN
    interests: Optional[List[NewsletterInterest]] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v, info):
        if v is not None and not is_valid_person_name(v, allow_empty=True):
            label = "First name" if info.field_name == "first_name" else "Last name"
            raise ValueError(f"{label} {NAME_MESSAGE}")
        return v


class NewsletterUnsubscribeRequest(DBModel):
    """Отписка от рассылки."""

    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()
