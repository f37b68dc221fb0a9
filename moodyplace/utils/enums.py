"""Перечисления для ролей, статусов и типов."""
from enum import Enum


class Role(str, Enum):
    """Роли администраторов (от старшей к младшей)."""
    SUPERADMIN = "super_admin"
    ADMIN = "admin"
    EDITOR = "editor"


class ShowStatus(str, Enum):
    """Статусы концертов."""
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class PhotoCategory(str, Enum):
    """Категории фотографий."""
    PROFESSIONAL = "professional"
    PERFORMANCE = "performance"
    STUDIO = "studio"
    PERSONAL = "personal"
    PRESS = "press"


class InquiryType(str, Enum):
    """Типы обращений через форму контактов."""
    COLLABORATION = "collaboration"
    BOOKING = "booking"
    PRESS = "press"
    LICENSING = "licensing"
    FAN = "fan"
    GENERAL = "general"


class InquiryStatus(str, Enum):
    """Статусы обработки обращений."""
    NEW = "new"
    READ = "read"
    RESPONDED = "responded"
    ARCHIVED = "archived"


class Urgency(str, Enum):
    """Срочность обращения."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContactMethod(str, Enum):
    """Предпочитаемый способ связи."""
    EMAIL = "email"
    PHONE = "phone"


class SubscriberType(str, Enum):
    """Типы подписчиков рассылки."""
    FAN = "fan"
    INDUSTRY = "industry"
    PRESS = "press"


class NewsletterInterest(str, Enum):
    """Темы рассылки."""
    NEW_RELEASES = "new-releases"
    SHOWS = "shows"
    BLOG_POSTS = "blog-posts"
    PRESS = "press"


class DeviceType(str, Enum):
    """Класс устройства по User-Agent."""
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"
    UNKNOWN = "unknown"


class AuthEvent(str, Enum):
    """События аутентификации для журнала."""
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED = "login_blocked"
    ACCOUNT_LOCKED = "account_locked"
    LOGOUT = "logout"
    TOKEN_REFRESHED = "token_refreshed"
    PASSWORD_CHANGED = "password_changed"
    USER_CREATED = "user_created"
    ROLE_CHANGED = "role_changed"
    USER_DEACTIVATED = "user_deactivated"


class AnalyticsEvent(str, Enum):
    """События использования сайта."""
    SONG_PLAY = "song_play"
    BLOG_VIEW = "blog_view"
    CONTACT_SUBMITTED = "contact_submitted"
    NEWSLETTER_SUBSCRIBED = "newsletter_subscribed"
    NEWSLETTER_UNSUBSCRIBED = "newsletter_unsubscribed"
