"""Проверки и нормализация входных данных."""
import re
from urllib.parse import urlparse
from typing import Optional

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
PERSON_NAME_RE = re.compile(r"^[a-zA-Z\s\-'.]+$")
TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]:[0-5][0-9]$")
PHONE_RE = re.compile(r"^\+?[0-9\s\-().]{7,20}$")

SPECIAL_CHARS_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

DANGEROUS_TAGS_RE = re.compile(r"<(script|iframe|object|embed|form|input|button|meta|link|style)[^>]*>", re.IGNORECASE)
DANGEROUS_ATTRIBUTES_RE = re.compile(r"on[a-z]+\s*=", re.IGNORECASE)
DANGEROUS_PROTOCOLS_RE = re.compile(r"(javascript|data|vbscript):", re.IGNORECASE)

# Для заголовков запроса (User-Agent, Referer, Origin)
SUSPICIOUS_HEADER_RE = re.compile(r"<\s*/?\s*[a-z][^>]*>|javascript:|vbscript:|data:", re.IGNORECASE)
MAX_USER_AGENT_LENGTH = 1000

PASSWORD_MIN_LENGTH = 8
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters with uppercase, lowercase, number, and special character"
)


def is_strong_password(password: str) -> bool:
    """
    Проверить сложность пароля.

    Минимум 8 символов, заглавная и строчная буквы, цифра и спецсимвол.
    """
    return (
        len(password) >= PASSWORD_MIN_LENGTH
        and re.search(r"[A-Z]", password) is not None
        and re.search(r"[a-z]", password) is not None
        and re.search(r"\d", password) is not None
        and SPECIAL_CHARS_RE.search(password) is not None
    )


def is_valid_slug(slug: str) -> bool:
    """Slug: строчные латинские буквы и цифры, разделённые одиночными дефисами."""
    return SLUG_RE.match(slug) is not None


def is_safe_html(html: str) -> bool:
    """Нет опасных тегов, обработчиков событий и javascript:/data:/vbscript: ссылок."""
    return (
        DANGEROUS_TAGS_RE.search(html) is None
        and DANGEROUS_ATTRIBUTES_RE.search(html) is None
        and DANGEROUS_PROTOCOLS_RE.search(html) is None
    )


def strip_unsafe_html(value: str) -> str:
    """Удалить опасные теги, обработчики событий и протоколы из текста."""
    value = DANGEROUS_TAGS_RE.sub("", value)
    value = re.sub(r"</(script|iframe|object|embed|form|button|style)\s*>", "", value, flags=re.IGNORECASE)
    value = DANGEROUS_ATTRIBUTES_RE.sub("", value)
    return DANGEROUS_PROTOCOLS_RE.sub("", value)


def is_valid_person_name(name: str, allow_empty: bool = False) -> bool:
    """Имя: буквы, пробелы, дефисы, апострофы и точки."""
    if not name:
        return allow_empty
    return PERSON_NAME_RE.match(name) is not None


def is_valid_username(username: str) -> bool:
    return USERNAME_RE.match(username) is not None


def is_valid_time(value: str) -> bool:
    """Время в формате HH:MM:SS."""
    return TIME_RE.match(value) is not None


def is_valid_phone(phone: str) -> bool:
    return PHONE_RE.match(phone) is not None


def is_suspicious_header(value: Optional[str]) -> bool:
    """Значение заголовка содержит HTML или опасный протокол."""
    if not value:
        return False
    return SUSPICIOUS_HEADER_RE.search(value) is not None


def is_url(value: str, protocols=("http", "https")) -> bool:
    """Абсолютный URL с допустимым протоколом и доменом."""
    parsed = urlparse(value)
    host = parsed.hostname or ""
    return parsed.scheme in protocols and ("." in host or host == "localhost")
