"""Конфигурация pytest."""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

# Добавляем корень проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Секреты и окружение должны быть заданы до первого get_settings()
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-that-is-long-enough-1234567890")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-that-is-long-enough-12345")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from config.database import Database
from config.settings import PROJECT_ROOT, Settings

# Импортируем все модели, чтобы они были зарегистрированы в Base.metadata
import moodyplace.models  # noqa: F401
from moodyplace.api.rate_limit import limiter
from moodyplace.core.auth_service import AuthService
from moodyplace.server import create_app
from moodyplace.utils.enums import Role
from tests.utils import ADMIN_PASSWORD, TEST_USER_AGENT, bearer


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Счётчики rate limit живут в памяти процесса: сбрасываем между тестами."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Настройки приложения для тестов (временная SQLite БД и каталоги)."""
    return Settings(
        environment="test",
        jwt_secret=os.environ["JWT_SECRET"],
        session_secret=os.environ["SESSION_SECRET"],
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        bcrypt_rounds=4,
        enable_metrics=True,
        public_dir=tmp_path / "public",
        uploads_dir=tmp_path / "uploads",
        views_dir=PROJECT_ROOT / "views",
        dist_dir=tmp_path / "dist",
    )


@pytest.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    """Фикстура для тестовой БД: таблицы создаются перед тестом и удаляются после."""
    db = Database(settings.database_url)
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()


@pytest.fixture
def auth_service(database, settings) -> AuthService:
    return AuthService(database, settings)


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP клиент к приложению без запуска сервера."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(
        transport=transport, base_url="http://testserver", headers={"User-Agent": TEST_USER_AGENT}
    ) as ac:
        yield ac


async def _create_admin(auth_service: AuthService, username: str, role: Role) -> dict:
    return await auth_service.create_user(
        username=username,
        email=f"{username}@gmail.com",
        password=ADMIN_PASSWORD,
        full_name="Test Admin",
        role=role,
    )


@pytest.fixture
async def superadmin(auth_service) -> dict:
    return await _create_admin(auth_service, "root", Role.SUPERADMIN)


@pytest.fixture
async def admin_user(auth_service) -> dict:
    return await _create_admin(auth_service, "manager", Role.ADMIN)


@pytest.fixture
async def editor_user(auth_service) -> dict:
    return await _create_admin(auth_service, "writer", Role.EDITOR)


@pytest.fixture
def superadmin_headers(auth_service, superadmin) -> dict:
    return bearer(auth_service, superadmin)


@pytest.fixture
def admin_headers(auth_service, admin_user) -> dict:
    return bearer(auth_service, admin_user)


@pytest.fixture
def editor_headers(auth_service, editor_user) -> dict:
    return bearer(auth_service, editor_user)
