"""Тесты для сервиса аутентификации."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from moodyplace.core.auth_service import (
    AccountState,
    AuthService,
    account_state,
    hash_password,
    lockout_minutes_left,
    verify_password,
)
from moodyplace.models import AdminUser, SiteAnalytics
from moodyplace.utils.enums import Role
from moodyplace.utils.exceptions import (
    AccountLockedError,
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    RequestValidationFailed,
    TokenExpiredError,
)

PASSWORD = "Str0ng!Passw0rd"


class FakeClock:
    """Управляемое время для проверки границ блокировки."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime.utcnow().replace(microsecond=0))


@pytest.fixture
def service(database, settings, clock) -> AuthService:
    return AuthService(database, settings, clock=clock)


@pytest.fixture
async def user(service):
    return await service.create_user("mood", "mood@gmail.com", PASSWORD, "Mood Admin", Role.ADMIN)


@pytest.mark.unit
def test_password_hashing():
    password_hash = hash_password("S3cret!pass", rounds=4)

    assert password_hash != "S3cret!pass"
    assert verify_password("S3cret!pass", password_hash)
    assert not verify_password("wrong", password_hash)
    assert not verify_password("", password_hash)
    assert not verify_password("S3cret!pass", "not-a-bcrypt-hash")


@pytest.mark.unit
def test_account_state_boundary():
    """Блокировка действует, только пока locked_until строго в будущем."""
    now = datetime(2026, 1, 1, 12, 0, 0)

    assert account_state(None, now) is AccountState.ACTIVE
    assert account_state(now + timedelta(seconds=1), now) is AccountState.LOCKED
    assert account_state(now, now) is AccountState.ACTIVE
    assert account_state(now - timedelta(seconds=1), now) is AccountState.ACTIVE


@pytest.mark.unit
def test_lockout_minutes_left_rounds_up():
    now = datetime(2026, 1, 1, 12, 0, 0)

    assert lockout_minutes_left(now + timedelta(minutes=15), now) == 15
    assert lockout_minutes_left(now + timedelta(seconds=90), now) == 2
    assert lockout_minutes_left(now + timedelta(seconds=1), now) == 1


@pytest.mark.unit
def test_generate_and_verify_tokens(service, settings):
    tokens = service.generate_tokens({"id": 7, "username": "mood", "role": "admin"})

    assert tokens["token_type"] == "Bearer"
    assert tokens["expires_in"] == settings.access_token_expire_minutes * 60

    access = service.verify_token(tokens["access_token"])
    refresh = service.verify_token(tokens["refresh_token"])
    assert access["type"] == "access"
    assert refresh["type"] == "refresh"
    assert access["user_id"] == 7
    assert access["iss"] == settings.jwt_issuer
    assert access["aud"] == settings.jwt_audience
    assert access["jti"] != refresh["jti"]


@pytest.mark.unit
def test_expired_token(database, settings):
    past = FakeClock(datetime.utcnow() - timedelta(days=2))
    tokens = AuthService(database, settings, clock=past).generate_tokens({"id": 1, "username": "a", "role": "admin"})

    with pytest.raises(TokenExpiredError):
        AuthService(database, settings).verify_token(tokens["access_token"])


@pytest.mark.unit
def test_token_with_wrong_audience(database, settings):
    """Токен другой аудитории не принимается."""
    other = settings.model_copy(update={"jwt_audience": "someone-else"})
    token = AuthService(database, other).generate_tokens({"id": 1, "username": "a", "role": "admin"})["access_token"]

    with pytest.raises(InvalidTokenError):
        AuthService(database, settings).verify_token(token)


@pytest.mark.unit
def test_token_with_wrong_issuer(database, settings):
    """Токен другого издателя отклоняется как недействительный, а не как истёкший."""
    other = settings.model_copy(update={"jwt_issuer": "other"})
    token = AuthService(database, other).generate_tokens({"id": 1, "username": "a", "role": "admin"})["access_token"]

    with pytest.raises(InvalidTokenError) as exc_info:
        AuthService(database, settings).verify_token(token)
    assert not isinstance(exc_info.value, TokenExpiredError)


@pytest.mark.unit
def test_tampered_token(service):
    token = service.generate_tokens({"id": 1, "username": "a", "role": "admin"})["access_token"]

    with pytest.raises(InvalidTokenError):
        service.verify_token(token[:-4] + "abcd")
    with pytest.raises(InvalidTokenError):
        service.verify_token("")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_hides_password_hash(user):
    assert user["username"] == "mood"
    assert user["role"] == "admin"
    assert user["is_active"] is True
    assert "password_hash" not in user


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_duplicate(service, user):
    with pytest.raises(ConflictError):
        await service.create_user("mood", "other@gmail.com", PASSWORD)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_login_by_username_and_email(service, user):
    by_name = await service.login("mood", PASSWORD)
    by_email = await service.login("MOOD@gmail.com", PASSWORD)

    assert by_name["user"]["id"] == user["id"]
    assert by_email["user"]["id"] == user["id"]
    assert by_name["user"]["last_login_at"] is not None
    assert "access_token" in by_name["tokens"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_login_unknown_user(service):
    """Неизвестный пользователь и неверный пароль неразличимы."""
    with pytest.raises(InvalidCredentialsError) as exc_info:
        await service.login("nobody", PASSWORD)
    assert exc_info.value.message == "Invalid credentials"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_lockout_after_max_attempts(service, user, clock, database, settings):
    """Пятая неудачная попытка блокирует вход на 15 минут."""
    for _ in range(settings.max_login_attempts):
        with pytest.raises(InvalidCredentialsError):
            await service.login("mood", "Wrong!Passw0rd", ip="10.0.0.1")

    row = await database.query_one(select(AdminUser.__table__).where(AdminUser.__table__.c.id == user["id"]))
    assert row["failed_login_attempts"] == settings.max_login_attempts
    assert row["locked_until"] == clock.now + timedelta(minutes=settings.lockout_minutes)

    # Даже верный пароль не помогает, пока действует блокировка
    with pytest.raises(AccountLockedError) as exc_info:
        await service.login("mood", PASSWORD)
    assert exc_info.value.minutes == 15

    clock.advance(minutes=14, seconds=59)
    with pytest.raises(AccountLockedError) as exc_info:
        await service.login("mood", PASSWORD)
    assert exc_info.value.minutes == 1

    # Ровно в момент locked_until блокировка уже снята
    clock.advance(seconds=1)
    result = await service.login("mood", PASSWORD)
    assert result["user"]["id"] == user["id"]

    row = await database.query_one(select(AdminUser.__table__).where(AdminUser.__table__.c.id == user["id"]))
    assert row["failed_login_attempts"] == 0
    assert row["locked_until"] is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blocked_attempt_does_not_count(service, user, clock, database, settings):
    """Попытка во время блокировки не увеличивает счётчик и не продлевает блокировку."""
    for _ in range(settings.max_login_attempts):
        with pytest.raises(InvalidCredentialsError):
            await service.login("mood", "Wrong!Passw0rd")
    locked_until = clock.now + timedelta(minutes=settings.lockout_minutes)

    clock.advance(minutes=5)
    for _ in range(3):
        with pytest.raises(AccountLockedError):
            await service.login("mood", "Wrong!Passw0rd")

    row = await database.query_one(select(AdminUser.__table__).where(AdminUser.__table__.c.id == user["id"]))
    assert row["failed_login_attempts"] == settings.max_login_attempts
    assert row["locked_until"] == locked_until


@pytest.mark.asyncio
@pytest.mark.unit
async def test_wrong_password_after_lockout_expiry(service, user, clock, database, settings):
    """После окончания блокировки пароль проверяется обычным образом, счётчик не сбрасывается."""
    for _ in range(settings.max_login_attempts):
        with pytest.raises(InvalidCredentialsError):
            await service.login("mood", "Wrong!Passw0rd")

    clock.advance(minutes=settings.lockout_minutes, seconds=1)
    with pytest.raises(InvalidCredentialsError):
        await service.login("mood", "Wrong!Passw0rd")

    row = await database.query_one(select(AdminUser.__table__).where(AdminUser.__table__.c.id == user["id"]))
    assert row["failed_login_attempts"] == settings.max_login_attempts + 1
    # Счётчик уже на пределе, поэтому новая ошибка снова блокирует вход
    assert row["locked_until"] == clock.now + timedelta(minutes=settings.lockout_minutes)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_login_events_are_logged(service, user, database):
    with pytest.raises(InvalidCredentialsError):
        await service.login("mood", "Wrong!Passw0rd", ip="10.0.0.1", user_agent="pytest")
    await service.login("mood", PASSWORD, ip="10.0.0.1", user_agent="pytest")

    analytics = SiteAnalytics.__table__
    rows = await database.query(select(analytics.c.event_type, analytics.c.user_ip).order_by(analytics.c.id))
    assert [row["event_type"] for row in rows] == ["login_failed", "login_success"]
    assert all(row["user_ip"] == "10.0.0.1" for row in rows)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_refresh_tokens(service, user):
    tokens = service.generate_tokens({**user})

    new_tokens = await service.refresh_tokens(tokens["refresh_token"])
    assert service.verify_token(new_tokens["access_token"])["user_id"] == user["id"]

    # access токен нельзя использовать для обновления
    with pytest.raises(InvalidTokenError):
        await service.refresh_tokens(tokens["access_token"])


@pytest.mark.asyncio
@pytest.mark.unit
async def test_change_password(service, user, database):
    with pytest.raises(RequestValidationFailed) as exc_info:
        await service.change_password(user["id"], "Wrong!Passw0rd", "N3w!Password")
    assert exc_info.value.code == "INVALID_CURRENT_PASSWORD"

    await service.change_password(user["id"], PASSWORD, "N3w!Password")

    with pytest.raises(InvalidCredentialsError):
        await service.login("mood", PASSWORD)
    assert (await service.login("mood", "N3w!Password"))["user"]["id"] == user["id"]

    count = await database.scalar(
        select(func.count()).select_from(SiteAnalytics.__table__).where(
            SiteAnalytics.__table__.c.event_type == "password_changed"
        )
    )
    assert count == 1
