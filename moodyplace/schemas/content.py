"""Схемы контента: песни, блог, концерты, фотографии."""
from datetime import date, datetime
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from moodyplace.schemas.base import DBModel, PartialUpdate, Trimmed, blank_to_none, to_naive_utc
from moodyplace.utils.enums import InquiryStatus, PhotoCategory, ShowStatus, Urgency
from moodyplace.utils.validators import is_safe_html, is_url, is_valid_slug, is_valid_time

Title = Trimmed(1, 255)
Slug = Trimmed(1, 255)
Path500 = Trimmed(1, 500)

URL_LABELS = {
    "spotify_url": "Spotify URL",
    "apple_music_url": "Apple Music URL",
    "youtube_url": "YouTube URL",
    "soundcloud_url": "SoundCloud URL",
    "ticket_url": "Ticket URL",
}


def check_slug(v: Optional[str]) -> Optional[str]:
    if v is not None and not is_valid_slug(v):
        raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")
    return v


# ----------------------------------------------------------------------
# Песни
# ----------------------------------------------------------------------


class SongFields(DBModel):
    title: Optional[Title] = None
    slug: Optional[Slug] = None
    description: Optional[Trimmed(0, 5000)] = None
    lyrics: Optional[Trimmed(0, 20000)] = None
    release_date: Optional[date] = None
    duration: Optional[int] = Field(None, ge=1, le=7200)
    spotify_url: Optional[str] = None
    apple_music_url: Optional[str] = None
    youtube_url: Optional[str] = None
    soundcloud_url: Optional[str] = None
    audio_file_path: Optional[Path500] = None
    cover_image_path: Optional[Path500] = None
    featured: Optional[bool] = None
    is_published: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator(
        "description", "lyrics", "spotify_url", "apple_music_url", "youtube_url", "soundcloud_url", mode="before"
    )
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return check_slug(v)

    @field_validator("spotify_url", "apple_music_url", "youtube_url", "soundcloud_url")
    @classmethod
    def validate_streaming_url(cls, v, info: ValidationInfo):
        if v is not None and not is_url(v, ("https",)):
            raise ValueError(f"{URL_LABELS[info.field_name]} must be a valid HTTPS URL")
        return v


class SongCreate(SongFields):
    """Новая песня."""

    title: Title
    slug: Slug
    featured: bool = False
    is_published: bool = True
    sort_order: int = Field(0, ge=0)


class SongUpdate(SongFields, PartialUpdate):
    """Изменение песни."""

    NOT_NULL = frozenset({"title", "slug", "featured", "is_published", "sort_order"})


# ----------------------------------------------------------------------
# Блог
# ----------------------------------------------------------------------


class BlogPostFields(DBModel):
    title: Optional[Title] = None
    slug: Optional[Slug] = None
    content: Optional[Trimmed(10, 50000)] = None
    excerpt: Optional[Trimmed(0, 500)] = None
    featured_image: Optional[Path500] = None
    meta_title: Optional[Trimmed(0, 60)] = None
    meta_description: Optional[Trimmed(0, 160)] = None
    is_published: Optional[bool] = None
    featured: Optional[bool] = None
    published_at: Optional[datetime] = None
    read_time_minutes: Optional[int] = Field(None, ge=1, le=120)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return check_slug(v)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if v is not None and not is_safe_html(v):
            raise ValueError("Content contains potentially dangerous HTML")
        return v

    @field_validator("published_at")
    @classmethod
    def normalize_published_at(cls, v):
        return to_naive_utc(v)


class BlogPostCreate(BlogPostFields):
    """Новая запись блога."""

    title: Title
    slug: Slug
    content: Trimmed(10, 50000)
    is_published: bool = False
    featured: bool = False


class BlogPostUpdate(BlogPostFields, PartialUpdate):
    """Изменение записи блога."""

    NOT_NULL = frozenset({"title", "slug", "content", "is_published", "featured"})


# ----------------------------------------------------------------------
# Концерты
# ----------------------------------------------------------------------


class ShowFields(DBModel):
    title: Optional[Title] = None
    venue: Optional[Title] = None
    city: Optional[Trimmed(1, 100)] = None
    state_province: Optional[Trimmed(0, 50)] = None
    country: Optional[Trimmed(2, 50)] = None
    event_date: Optional[datetime] = None
    doors_time: Optional[str] = None
    show_time: Optional[str] = None
    ticket_url: Optional[str] = None
    ticket_price: Optional[Trimmed(0, 50)] = None
    description: Optional[Trimmed(0, 2000)] = None
    age_restriction: Optional[Trimmed(0, 20)] = None
    status: Optional[ShowStatus] = None
    is_published: Optional[bool] = None

    @field_validator("doors_time", "show_time", "ticket_url", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("doors_time", "show_time")
    @classmethod
    def validate_time(cls, v, info: ValidationInfo):
        if v is not None and not is_valid_time(v):
            label = "Doors time" if info.field_name == "doors_time" else "Show time"
            raise ValueError(f"{label} must be in HH:MM:SS format")
        return v

    @field_validator("ticket_url")
    @classmethod
    def validate_ticket_url(cls, v):
        if v is not None and not is_url(v):
            raise ValueError("Ticket URL must be a valid URL")
        return v

    @field_validator("event_date")
    @classmethod
    def normalize_event_date(cls, v):
        return to_naive_utc(v)


class ShowCreate(ShowFields):
    """Новый концерт."""

    title: Title
    venue: Title
    city: Trimmed(1, 100)
    country: Trimmed(2, 50)
    event_date: datetime
    status: ShowStatus = ShowStatus.UPCOMING
    is_published: bool = True


class ShowUpdate(ShowFields, PartialUpdate):
    """Изменение концерта."""

    NOT_NULL = frozenset({"title", "venue", "city", "country", "event_date", "status", "is_published"})


# ----------------------------------------------------------------------
# Фотографии
# ----------------------------------------------------------------------


class PhotoFields(DBModel):
    title: Optional[Trimmed(0, 255)] = None
    caption: Optional[Trimmed(0, 1000)] = None
    file_path: Optional[Path500] = None
    medium_path: Optional[Path500] = None
    thumbnail_path: Optional[Path500] = None
    alt_text: Optional[Trimmed(1, 255)] = None
    category: Optional[PhotoCategory] = None
    photographer: Optional[Trimmed(0, 255)] = None
    location: Optional[Trimmed(0, 255)] = None
    is_featured: Optional[bool] = None
    is_press_approved: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)


class PhotoCreate(PhotoFields):
    """Новая фотография (файл уже загружен, передаются пути)."""

    file_path: Path500
    alt_text: Trimmed(1, 255)
    category: PhotoCategory = PhotoCategory.PROFESSIONAL
    is_featured: bool = False
    is_press_approved: bool = False
    sort_order: int = Field(0, ge=0)


class PhotoUpdate(PhotoFields, PartialUpdate):
    """Изменение фотографии."""

    NOT_NULL = frozenset({"file_path", "alt_text", "category", "is_featured", "is_press_approved", "sort_order"})


# ----------------------------------------------------------------------
# Обращения (админка)
# ----------------------------------------------------------------------


class ContactInquiryUpdate(PartialUpdate):
    """Обработка обращения администратором."""

    status: Optional[InquiryStatus] = None
    urgency: Optional[Urgency] = None
    admin_notes: Optional[Trimmed(0, 5000)] = None

    NOT_NULL = frozenset({"status", "urgency"})
