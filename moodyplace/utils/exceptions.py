"""Кастомные исключения для приложения."""
from typing import Any, Optional


class SiteError(Exception):
    """Базовое исключение сайта: машинный код, сообщение и HTTP статус."""

    status_code = 500
    code = "ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class RequestValidationFailed(SiteError):
    """Ошибка валидации входных данных."""

    status_code = 400
    code = "VALIDATION_ERROR"


class SecurityViolationError(SiteError):
    """Подозрительный запрос (заголовки с попыткой XSS и т.п.)."""

    status_code = 400
    code = "SECURITY_VIOLATION"


class AuthenticationError(SiteError):
    """Ошибка аутентификации."""

    status_code = 401
    code = "AUTH_REQUIRED"


class InvalidCredentialsError(AuthenticationError):
    """Неверный логин или пароль (без раскрытия существования аккаунта)."""

    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AccountLockedError(AuthenticationError):
    """Аккаунт временно заблокирован после неудачных попыток входа."""

    code = "ACCOUNT_LOCKED"

    def __init__(self, minutes: int):
        super().__init__(f"Account temporarily locked. Try again in {minutes} minutes.")
        self.minutes = minutes


class InvalidTokenError(AuthenticationError):
    """Токен не прошёл проверку (подпись, издатель, аудитория, тип)."""

    code = "AUTH_INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Срок действия токена истёк."""

    code = "AUTH_TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class ForbiddenError(SiteError):
    """Ошибка прав доступа."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access forbidden"):
        super().__init__(message)


class CorsViolationError(ForbiddenError):
    """Запрос с Origin, которого нет в списке разрешённых."""

    code = "CORS_VIOLATION"

    def __init__(self, message: str = "CORS policy violation"):
        super().__init__(message)


class NotFoundError(SiteError):
    """Ресурс не найден."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(SiteError):
    """Нарушение уникальности (slug, email, username)."""

    status_code = 409
    code = "CONFLICT"


class RateLimitError(SiteError):
    """Превышен rate limit."""

    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"


class DatabaseError(SiteError):
    """Ошибка базы данных."""

    status_code = 500
    code = "DATABASE_ERROR"


class QueryFailedError(DatabaseError):
    """Запрос не выполнен; исходная причина доступна через __cause__."""

    def __init__(self, message: str = "Query failed"):
        super().__init__(message)

    @property
    def is_integrity_error(self) -> bool:
        """Причина - нарушение ограничения (unique, foreign key)."""
        from sqlalchemy.exc import IntegrityError

        return isinstance(self.__cause__, IntegrityError)
