"""Тесты для API аутентификации администраторов."""
import pytest

from tests.utils import ADMIN_PASSWORD, bearer


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_success(client, admin_user):
    response = await client.post(
        "/api/admin/login", json={"username_or_email": "manager", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["username"] == "manager"
    assert "password_hash" not in data["user"]
    assert data["tokens"]["token_type"] == "Bearer"
    assert data["tokens"]["access_token"]
    assert data["tokens"]["refresh_token"]
    # Cookie-сессия для страниц сайта
    assert "sessionId" in response.cookies


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_by_email_with_camel_case_field(client, admin_user):
    response = await client.post(
        "/api/admin/login", json={"usernameOrEmail": "manager@gmail.com", "password": ADMIN_PASSWORD}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_invalid_credentials(client, admin_user):
    """Неизвестный пользователь и неверный пароль дают одинаковый ответ."""
    wrong_password = await client.post(
        "/api/admin/login", json={"username_or_email": "manager", "password": "Wrong!Passw0rd"}
    )
    unknown_user = await client.post(
        "/api/admin/login", json={"username_or_email": "ghost", "password": ADMIN_PASSWORD}
    )

    for response in (wrong_password, unknown_user):
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
        assert response.json()["error"]["message"] == "Invalid credentials"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me(client, admin_user, admin_headers):
    response = await client.get("/api/admin/me", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == admin_user["id"]
    assert response.json()["data"]["role"] == "admin"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_without_token(client):
    response = await client.get("/api/admin/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_TOKEN_MISSING"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_me_with_garbage_token(client):
    response = await client.get("/api/admin/me", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_refresh_token_cannot_authenticate(client, auth_service, admin_user):
    """Refresh токен не принимается как access токен."""
    tokens = auth_service.generate_tokens(admin_user)

    response = await client.get(
        "/api/admin/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_INVALID_TOKEN"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_refresh(client, auth_service, admin_user):
    tokens = auth_service.generate_tokens(admin_user)

    response = await client.post("/api/admin/refresh", json={"refreshToken": tokens["refresh_token"]})

    assert response.status_code == 200
    new_tokens = response.json()["data"]["tokens"]
    me = await client.get("/api/admin/me", headers={"Authorization": f"Bearer {new_tokens['access_token']}"})
    assert me.status_code == 200

    # access токен для обновления не подходит
    rejected = await client.post("/api/admin/refresh", json={"refresh_token": tokens["access_token"]})
    assert rejected.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_token_for_deactivated_user(client, auth_service, superadmin_headers, editor_user):
    headers = bearer(auth_service, editor_user)
    await client.delete(f"/api/admin/users/{editor_user['id']}", headers=superadmin_headers)

    response = await client.get("/api/admin/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_USER_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_logout(client, admin_headers):
    response = await client.post("/api/admin/logout", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_change_password(client, admin_headers):
    wrong = await client.post(
        "/api/admin/change-password",
        headers=admin_headers,
        json={"currentPassword": "Wrong!Passw0rd", "newPassword": "N3w!Password", "confirmPassword": "N3w!Password"},
    )
    assert wrong.status_code == 400
    assert wrong.json()["error"]["code"] == "INVALID_CURRENT_PASSWORD"

    mismatch = await client.post(
        "/api/admin/change-password",
        headers=admin_headers,
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "N3w!Password", "confirmPassword": "Other!Pass1"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["error"]["code"] == "VALIDATION_ERROR"

    changed = await client.post(
        "/api/admin/change-password",
        headers=admin_headers,
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "N3w!Password", "confirmPassword": "N3w!Password"},
    )
    assert changed.status_code == 200

    login = await client.post("/api/admin/login", json={"username": "manager", "password": "N3w!Password"})
    assert login.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_suspicious_user_agent_rejected(client, admin_headers):
    """Запросы к админке с HTML в заголовках отклоняются."""
    response = await client.get(
        "/api/admin/me", headers={**admin_headers, "User-Agent": "<script>alert(1)</script>"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SECURITY_VIOLATION"
