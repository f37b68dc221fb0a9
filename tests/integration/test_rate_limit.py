"""Тесты для ограничения частоты запросов."""
import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from moodyplace.server import create_app
from tests.utils import TEST_USER_AGENT

CONTACT = {"name": "Jane Doe", "email": "jane@gmail.com", "message": "Hello from a very persistent fan!"}
CREDENTIALS = {"username_or_email": "ghost", "password": "Wrong!Passw0rd"}


def make_client(app, address: str = "127.0.0.1") -> AsyncClient:
    """Клиент с заданным адресом соединения."""
    transport = ASGITransport(app=app, raise_app_exceptions=False, client=(address, 123))
    return AsyncClient(transport=transport, base_url="http://testserver", headers={"User-Agent": TEST_USER_AGENT})


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_rate_limit(client):
    """Шестая попытка входа за 15 минут отклоняется с Retry-After."""
    for _ in range(5):
        response = await client.post("/api/admin/login", json=CREDENTIALS)
        assert response.status_code == 401

    response = await client.post("/api/admin/login", json=CREDENTIALS)

    assert response.status_code == 429
    body = response.json()
    assert body["error"]["code"] == "RATE_LIMIT_EXCEEDED"
    assert body["error"]["message"] == "Too many authentication attempts, please try again later."
    retry_after = int(response.headers["Retry-After"])
    assert 0 < retry_after <= 15 * 60
    assert body["meta"]["retry_after"] == retry_after


@pytest.mark.asyncio
@pytest.mark.integration
async def test_forwarded_for_header_does_not_reset_limit(client):
    """Подменённый X-Forwarded-For не даёт обойти лимит с одного соединения."""
    statuses = []
    for index in range(20):
        response = await client.post(
            "/api/admin/login", json=CREDENTIALS, headers={"X-Forwarded-For": f"198.51.100.{index}"}
        )
        statuses.append(response.status_code)

    assert statuses[:5] == [401] * 5
    assert set(statuses[5:]) == {429}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_rate_limit_is_per_client_ip(app):
    """Счётчики ведутся по адресу соединения."""
    async with make_client(app, "203.0.113.1") as first, make_client(app, "203.0.113.2") as second:
        for _ in range(6):
            await first.post("/api/admin/login", json=CREDENTIALS)

        blocked = await first.post("/api/admin/login", json=CREDENTIALS)
        other = await second.post("/api/admin/login", json=CREDENTIALS)

    assert blocked.status_code == 429
    assert other.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_custom_auth_limit_from_settings(settings, database):
    """Лимит берётся из настроек, переданных в create_app."""
    app = create_app(settings.model_copy(update={"rate_limit_auth": "2/15minutes"}), database)

    async with make_client(app) as ac:
        statuses = [(await ac.post("/api/admin/login", json=CREDENTIALS)).status_code for _ in range(3)]

    assert statuses == [401, 401, 429]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_limit_resets_after_window(settings, database):
    """После окончания окна счётчик начинается заново."""
    app = create_app(settings.model_copy(update={"rate_limit_auth": "2/1second"}), database)

    async with make_client(app) as ac:
        for _ in range(2):
            assert (await ac.post("/api/admin/login", json=CREDENTIALS)).status_code == 401
        assert (await ac.post("/api/admin/login", json=CREDENTIALS)).status_code == 429

        await asyncio.sleep(1.2)

        response = await ac.post("/api/admin/login", json=CREDENTIALS)

    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_form_rate_limit(client):
    for _ in range(5):
        response = await client.post("/api/contact", json=CONTACT)
        assert response.status_code == 201

    response = await client.post("/api/contact", json=CONTACT)

    assert response.status_code == 429
    assert response.json()["error"]["message"] == "Too many form submissions, please try again later."


@pytest.mark.asyncio
@pytest.mark.integration
async def test_scopes_are_independent(client):
    """Исчерпанный лимит форм не влияет на чтение API."""
    for _ in range(6):
        await client.post("/api/contact", json=CONTACT)

    response = await client.get("/api/songs")

    assert response.status_code == 200
