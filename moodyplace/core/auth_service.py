"""Аутентификация администраторов: пароли, токены, блокировка после неудачных входов."""
import asyncio
import math
import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Optional

import bcrypt
import jwt
from sqlalchemy import or_, select, update

from config.database import Database, DatabaseConnection
from moodyplace.models import AdminUser, SiteAnalytics
from moodyplace.utils.client import detect_device_type
from moodyplace.utils.enums import AuthEvent, Role
from moodyplace.utils.exceptions import (
    AccountLockedError,
    AuthenticationError,
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    QueryFailedError,
    RequestValidationFailed,
    TokenExpiredError,
)
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

users = AdminUser.__table__
analytics = SiteAnalytics.__table__

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"

# Поля профиля, которые можно отдавать клиенту
PUBLIC_USER_FIELDS = ("id", "username", "email", "full_name", "role", "is_active", "last_login_at", "created_at")

SECURITY_WARNING_EVENTS = {
    AuthEvent.LOGIN_FAILED.value,
    AuthEvent.LOGIN_BLOCKED.value,
    AuthEvent.ACCOUNT_LOCKED.value,
}


def utcnow() -> datetime:
    return datetime.utcnow()


class AccountState(str, Enum):
    """Состояние учётной записи с точки зрения входа."""
    ACTIVE = "active"
    LOCKED = "locked"


def account_state(locked_until: Optional[datetime], now: datetime) -> AccountState:
    """
    Вычислить состояние блокировки.

    Блокировка действует, только пока locked_until строго в будущем:
    запрос, пришедший после истечения, обрабатывается как обычный.
    """
    if locked_until is not None and locked_until > now:
        return AccountState.LOCKED
    return AccountState.ACTIVE


def lockout_minutes_left(locked_until: datetime, now: datetime) -> int:
    """Сколько минут (с округлением вверх) осталось до снятия блокировки."""
    return max(1, math.ceil((locked_until - now).total_seconds() / 60))


def hash_password(password: str, rounds: int = 12) -> str:
    """Хэшировать пароль bcrypt с заданным числом раундов."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Проверить пароль (сравнение за постоянное время внутри bcrypt)."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Повреждённый хэш в БД
        return False


def public_user(row: Dict[str, Any]) -> Dict[str, Any]:
    """Профиль без хэша пароля и служебных счётчиков."""
    return {field: row.get(field) for field in PUBLIC_USER_FIELDS}


class AuthService:
    """
    Сервис аутентификации.

    Хранит ссылку на Database и настройки; время берётся из clock,
    чтобы границы блокировки можно было проверять в тестах.
    """

    def __init__(self, db: Database, settings, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.settings = settings
        self.clock = clock

    # ------------------------------------------------------------------
    # Пароли
    # ------------------------------------------------------------------

    async def hash_password(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.settings.bcrypt_rounds)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(verify_password, password, password_hash)

    # ------------------------------------------------------------------
    # Токены
    # ------------------------------------------------------------------

    def _encode(self, payload: Dict[str, Any]) -> str:
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def generate_tokens(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Выпустить пару токенов.

        Args:
            user: Строка admin_users (нужны id, username, role)

        Returns:
            access_token, refresh_token, token_type и expires_in (секунды)
        """
        now = self.clock()
        access_ttl = timedelta(minutes=self.settings.access_token_expire_minutes)
        refresh_ttl = timedelta(days=self.settings.refresh_token_expire_days)

        claims = {
            "user_id": user["id"],
            "username": user["username"],
            "role": user["role"],
            "iat": now,
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
        }
        access_token = self._encode(
            {**claims, "type": TOKEN_TYPE_ACCESS, "exp": now + access_ttl, "jti": uuid.uuid4().hex}
        )
        refresh_token = self._encode(
            {**claims, "type": TOKEN_TYPE_REFRESH, "exp": now + refresh_ttl, "jti": uuid.uuid4().hex}
        )

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "Bearer",
            "expires_in": int(access_ttl.total_seconds()),
        }

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Проверить подпись, срок действия, издателя и аудиторию токена.

        Raises:
            TokenExpiredError: Срок действия истёк
            InvalidTokenError: Любая другая ошибка проверки
        """
        if not token:
            raise InvalidTokenError("Access token required")
        try:
            return jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                issuer=self.settings.jwt_issuer,
                audience=self.settings.jwt_audience,
                options={"require": ["exp", "iat", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

    # ------------------------------------------------------------------
    # Пользователи
    # ------------------------------------------------------------------

    async def find_active_user(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Найти активного пользователя по имени или email."""
        stmt = select(users).where(
            or_(users.c.username == identifier, users.c.email == identifier.lower()),
            users.c.is_active.is_(True),
        )
        return await self.db.query_one(stmt)

    async def get_active_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        stmt = select(users).where(users.c.id == user_id, users.c.is_active.is_(True))
        return await self.db.query_one(stmt)

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        role: Role = Role.EDITOR,
    ) -> Dict[str, Any]:
        """
        Создать администратора.

        Raises:
            ConflictError: Имя пользователя или email уже заняты
        """
        password_hash = await self.hash_password(password)
        now = self.clock()
        try:
            user_id = await self.db.insert(
                users.insert().values(
                    username=username,
                    email=email.lower(),
                    password_hash=password_hash,
                    full_name=full_name,
                    role=Role(role).value,
                    is_active=True,
                    failed_login_attempts=0,
                    created_at=now,
                    updated_at=now,
                )
            )
        except QueryFailedError as e:
            if e.is_integrity_error:
                raise ConflictError("Username or email already exists") from e
            raise

        logger.info("admin_user_created", user_id=user_id, username=username, role=Role(role).value)
        user = await self.get_active_user(user_id)
        return public_user(user)

    # ------------------------------------------------------------------
    # Вход
    # ------------------------------------------------------------------

    async def login(
        self,
        identifier: str,
        password: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Вход по имени пользователя или email.

        Returns:
            {"user": профиль, "tokens": пара токенов}

        Raises:
            InvalidCredentialsError: Неизвестный пользователь или неверный пароль
            AccountLockedError: Учётная запись временно заблокирована
        """
        user = await self.find_active_user(identifier)
        if user is None:
            await self.log_auth_event(AuthEvent.LOGIN_FAILED, None, ip, user_agent, f"Unknown user: {identifier}")
            raise InvalidCredentialsError()

        now = self.clock()
        if account_state(user["locked_until"], now) is AccountState.LOCKED:
            minutes = lockout_minutes_left(user["locked_until"], now)
            await self.log_auth_event(
                AuthEvent.LOGIN_BLOCKED, user["id"], ip, user_agent, f"Account locked for {minutes} more minutes"
            )
            raise AccountLockedError(minutes)

        if not await self.verify_password(password, user["password_hash"]):
            attempts, locked_until = await self._register_failed_attempt(user["id"], now)
            if locked_until is not None:
                await self.log_auth_event(
                    AuthEvent.ACCOUNT_LOCKED,
                    user["id"],
                    ip,
                    user_agent,
                    f"Locked after {attempts} failed attempts until {locked_until.isoformat()}",
                )
            else:
                await self.log_auth_event(
                    AuthEvent.LOGIN_FAILED, user["id"], ip, user_agent, f"Invalid password (attempt {attempts})"
                )
            raise InvalidCredentialsError()

        await self.db.update(
            update(users)
            .where(users.c.id == user["id"])
            .values(failed_login_attempts=0, locked_until=None, last_login_at=now)
        )
        user.update(failed_login_attempts=0, locked_until=None, last_login_at=now)

        tokens = self.generate_tokens(user)
        await self.log_auth_event(AuthEvent.LOGIN_SUCCESS, user["id"], ip, user_agent, "Login successful")
        logger.info("admin_login", user_id=user["id"], username=user["username"], ip=ip)

        return {"user": public_user(user), "tokens": tokens}

    async def _register_failed_attempt(self, user_id: int, now: datetime):
        """Увеличить счётчик неудачных попыток и при достижении лимита заблокировать."""

        async def body(conn: DatabaseConnection):
            attempts = await conn.scalar(select(users.c.failed_login_attempts).where(users.c.id == user_id))
            attempts = (attempts or 0) + 1
            values: Dict[str, Any] = {"failed_login_attempts": attempts}
            locked_until = None
            if attempts >= self.settings.max_login_attempts:
                locked_until = now + timedelta(minutes=self.settings.lockout_minutes)
                values["locked_until"] = locked_until
            await conn.update(update(users).where(users.c.id == user_id).values(**values))
            return attempts, locked_until

        return await self.db.transaction(body)

    async def refresh_tokens(
        self,
        refresh_token: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Обменять refresh токен на новую пару.

        Предыдущий refresh токен не отзывается и действует до своего exp.
        """
        payload = self.verify_token(refresh_token)
        if payload.get("type") != TOKEN_TYPE_REFRESH:
            raise InvalidTokenError("Invalid refresh token")

        user = await self.get_active_user(payload.get("user_id"))
        if user is None:
            raise AuthenticationError("User not found or inactive", code="AUTH_USER_NOT_FOUND")

        tokens = self.generate_tokens(user)
        await self.log_auth_event(AuthEvent.TOKEN_REFRESHED, user["id"], ip, user_agent, "Token refreshed")
        return tokens

    async def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Сменить пароль после повторной проверки текущего.

        Raises:
            NotFoundError: Пользователь не найден
            RequestValidationFailed: Текущий пароль неверен
        """
        user = await self.get_active_user(user_id)
        if user is None:
            raise NotFoundError("User")

        if not await self.verify_password(current_password, user["password_hash"]):
            await self.log_auth_event(
                AuthEvent.LOGIN_FAILED, user_id, ip, user_agent, "Invalid current password on password change"
            )
            raise RequestValidationFailed("Current password is incorrect", code="INVALID_CURRENT_PASSWORD")

        password_hash = await self.hash_password(new_password)
        await self.db.update(
            update(users).where(users.c.id == user_id).values(password_hash=password_hash, updated_at=self.clock())
        )
        await self.log_auth_event(AuthEvent.PASSWORD_CHANGED, user_id, ip, user_agent, "Password changed")

    # ------------------------------------------------------------------
    # Журнал
    # ------------------------------------------------------------------

    async def log_auth_event(
        self,
        event_type,
        user_id: Optional[int],
        ip: Optional[str],
        user_agent: Optional[str],
        details: Optional[str] = None,
    ) -> None:
        """
        Записать событие аутентификации в site_analytics.

        Ошибка записи не прерывает исходный запрос.
        """
        event = getattr(event_type, "value", event_type)
        now = self.clock()
        try:
            await self.db.insert(
                analytics.insert().values(
                    event_type=event,
                    event_data={"user_id": user_id, "details": details, "timestamp": now.isoformat()},
                    admin_user_id=user_id,
                    user_ip=ip,
                    user_agent=user_agent[:500] if user_agent else None,
                    device_type=detect_device_type(user_agent),
                    created_at=now,
                )
            )
        except Exception as e:
            logger.warning("auth_event_log_failed", event_type=event, error=str(e))
            return

        if event in SECURITY_WARNING_EVENTS:
            logger.warning("auth_event", event_type=event, user_id=user_id, ip=ip)
        else:
            logger.info("auth_event", event_type=event, user_id=user_id, ip=ip)
