"""Тесты для валидаторов."""
import pytest

from moodyplace.utils.client import detect_device_type
from moodyplace.utils.validators import (
    is_safe_html,
    is_strong_password,
    is_suspicious_header,
    is_url,
    is_valid_person_name,
    is_valid_phone,
    is_valid_slug,
    is_valid_time,
    strip_unsafe_html,
)


@pytest.mark.unit
@pytest.mark.parametrize("password", ["Str0ng!Pass", "Aa1!aaaa", "Longer#Passw0rd"])
def test_strong_password_accepted(password):
    """Пароль со всеми классами символов проходит проверку."""
    assert is_strong_password(password)


@pytest.mark.unit
@pytest.mark.parametrize(
    "password",
    [
        "Sh0rt!",  # меньше 8 символов
        "nouppercase1!",
        "NOLOWERCASE1!",
        "NoDigits!!",
        "NoSpecial123",
    ],
)
def test_weak_password_rejected(password):
    assert not is_strong_password(password)


@pytest.mark.unit
def test_slug_format():
    """Slug: строчные буквы и цифры через одиночные дефисы."""
    assert is_valid_slug("midnight-city")
    assert is_valid_slug("song2")
    assert not is_valid_slug("Midnight-City")
    assert not is_valid_slug("double--dash")
    assert not is_valid_slug("-leading")
    assert not is_valid_slug("with space")


@pytest.mark.unit
def test_time_format():
    assert is_valid_time("19:30:00")
    assert is_valid_time("9:05:00")
    assert not is_valid_time("24:00:00")
    assert not is_valid_time("19:30")


@pytest.mark.unit
def test_person_name():
    assert is_valid_person_name("Mary-Jane O'Neil Jr.")
    assert not is_valid_person_name("R2D2")
    assert not is_valid_person_name("")
    assert is_valid_person_name("", allow_empty=True)


@pytest.mark.unit
def test_phone():
    assert is_valid_phone("+1 (555) 123-4567")
    assert not is_valid_phone("call me")
    assert not is_valid_phone("123")


@pytest.mark.unit
def test_safe_html_detection():
    """Опасные теги, обработчики и протоколы отклоняются."""
    assert is_safe_html("<p>New single <strong>out now</strong></p>")
    assert not is_safe_html("<script>alert(1)</script>")
    assert not is_safe_html('<img src="x" onerror="alert(1)">')
    assert not is_safe_html('<a href="javascript:alert(1)">x</a>')
    assert not is_safe_html('<iframe src="https://evil.example"></iframe>')


@pytest.mark.unit
def test_strip_unsafe_html():
    """Из текста формы удаляются теги script и обработчики событий."""
    cleaned = strip_unsafe_html("Hello <script>alert(1)</script> there")
    assert "<script" not in cleaned
    assert "</script>" not in cleaned
    assert cleaned == "Hello alert(1) there"


@pytest.mark.unit
def test_suspicious_headers():
    assert not is_suspicious_header(None)
    assert not is_suspicious_header("Mozilla/5.0 (X11; Linux x86_64)")
    assert is_suspicious_header("<script>alert(1)</script>")
    assert is_suspicious_header("javascript:alert(1)")


@pytest.mark.unit
def test_url_validation():
    assert is_url("https://open.spotify.com/track/1")
    assert is_url("http://localhost")
    assert not is_url("http://open.spotify.com/track/1", ("https",))
    assert not is_url("ftp://files.example.com")
    assert not is_url("not a url")


@pytest.mark.unit
@pytest.mark.parametrize(
    "user_agent, expected",
    [
        (None, "unknown"),
        ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148", "mobile"),
        ("Mozilla/5.0 (Linux; Android 14; Pixel 8)", "mobile"),
        ("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)", "tablet"),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64)", "desktop"),
    ],
)
def test_detect_device_type(user_agent, expected):
    """Класс устройства по ключевым словам User-Agent."""
    assert detect_device_type(user_agent) == expected
