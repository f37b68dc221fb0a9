"""Тесты для страниц сайта, sitemap и HTTP middleware."""
import json

import pytest
from httpx import ASGITransport, AsyncClient

from moodyplace.server import create_app
from moodyplace.web.pages import PAGES, build_sitemap
from tests.utils import TEST_USER_AGENT, add_post, add_song


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("url", list(PAGES))
async def test_site_pages(client, url):
    response = await client.get(url)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["Cache-Control"] == "public, max-age=300"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_detail_pages(client):
    song = await client.get("/music/midnight-city")
    post = await client.get("/blog/studio-diary")

    assert song.status_code == 200
    assert 'data-source="/api/songs/{slug}"' in song.text
    assert post.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_not_found_html_vs_json(client):
    """Для страниц - HTML 404, для API и JSON клиентов - envelope."""
    page = await client.get("/no-such-page")
    assert page.status_code == 404
    assert page.headers["content-type"].startswith("text/html")

    api = await client.get("/api/no-such-endpoint")
    assert api.status_code == 404
    assert api.json()["success"] is False

    json_client = await client.get("/no-such-page", headers={"Accept": "application/json"})
    assert json_client.status_code == 404
    assert json_client.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.unit
def test_build_sitemap():
    xml = build_sitemap(
        "https://a-moody-place.com/",
        [{"slug": "midnight-city", "updated_at": None}],
        [{"slug": "a&b", "updated_at": None}],
    )

    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://a-moody-place.com/</loc>" in xml
    assert "<loc>https://a-moody-place.com/press-kit</loc>" in xml
    assert "<loc>https://a-moody-place.com/music/midnight-city</loc>" in xml
    assert "<loc>https://a-moody-place.com/blog/a&amp;b</loc>" in xml


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sitemap_lists_published_content(client, database):
    await add_song(database, "midnight-city")
    await add_song(database, "secret-track", is_published=False)
    await add_post(database, "studio-diary")

    response = await client.get("/sitemap.xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.headers["Cache-Control"] == "public, max-age=3600"
    assert "/music/midnight-city</loc>" in response.text
    assert "/blog/studio-diary</loc>" in response.text
    assert "secret-track" not in response.text
    assert "<lastmod>" in response.text


@pytest.mark.asyncio
@pytest.mark.integration
async def test_robots_txt(client):
    response = await client.get("/robots.txt")

    assert response.status_code == 200
    assert "Disallow: /api/admin/" in response.text
    assert "Sitemap: https://a-moody-place.com/sitemap.xml" in response.text


@pytest.mark.asyncio
@pytest.mark.integration
async def test_security_headers(client):
    response = await client.get("/")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    csp = response.headers["Content-Security-Policy"]
    assert "default-src 'self'" in csp
    assert "https://open.spotify.com" in csp
    assert "object-src 'none'" in csp
    # HSTS только в production
    assert "Strict-Transport-Security" not in response.headers


@pytest.mark.asyncio
@pytest.mark.integration
async def test_production_headers(settings, database):
    prod = settings.model_copy(update={"environment": "production"})
    app = create_app(prod, database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        response = await ac.get("/health")
        docs = await ac.get("/api/docs")

    assert response.headers["Strict-Transport-Security"].startswith("max-age=31536000")
    assert "upgrade-insecure-requests" in response.headers["Content-Security-Policy"]
    assert docs.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_static_files_cache_headers(client, settings):
    css = settings.public_dir / "css" / "site.css"
    css.write_text("body{margin:0}", encoding="utf-8")
    upload = settings.uploads_dir / "cover.jpg"
    upload.write_bytes(b"\xff\xd8\xff")

    asset = await client.get("/css/site.css")
    uploaded = await client.get("/uploads/cover.jpg")
    missing = await client.get("/css/missing.css")

    assert asset.status_code == 200
    assert asset.text == "body{margin:0}"
    assert asset.headers["Cache-Control"] == "public, max-age=86400"
    assert uploaded.headers["Cache-Control"] == "public, max-age=3600"
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_foreign_origin_rejected(client):
    response = await client.get("/api/songs", headers={"Origin": "https://evil.example"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "CORS_VIOLATION"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_allowed_and_same_origin(client):
    allowed = await client.get("/api/songs", headers={"Origin": "http://localhost:3000"})
    same_host = await client.get("/api/songs", headers={"Origin": "http://testserver"})

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert same_host.status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_body_too_large(settings, database):
    small = settings.model_copy(update={"max_body_bytes": 100})
    app = create_app(small, database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        response = await ac.post(
            "/api/contact",
            json={"name": "Jane Doe", "email": "jane@gmail.com", "message": "x" * 500},
        )

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"


async def chunked(payload: bytes, size: int = 32):
    for start in range(0, len(payload), size):
        yield payload[start:start + size]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_chunked_body_is_capped(settings, database):
    """Тело без Content-Length считается по мере чтения."""
    small = settings.model_copy(update={"max_body_bytes": 200})
    app = create_app(small, database)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    large = json.dumps({"name": "Jane Doe", "email": "jane@gmail.com", "message": "x" * 500}).encode()
    fits = json.dumps({"name": "Jane Doe", "email": "jane@gmail.com", "message": "Hello from a fan!"}).encode()
    headers = {"Content-Type": "application/json", "User-Agent": TEST_USER_AGENT}

    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        rejected = await ac.post("/api/contact", content=chunked(large), headers=headers)
        accepted = await ac.post("/api/contact", content=chunked(fits), headers=headers)

    assert rejected.status_code == 413
    assert rejected.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"
    assert accepted.status_code == 201


@pytest.mark.asyncio
@pytest.mark.integration
async def test_gzip_for_large_responses(client, database):
    for index in range(30):
        await add_song(database, f"song-{index}", description="A long description " * 10)

    response = await client.get("/api/songs", params={"limit": 30}, headers={"Accept-Encoding": "gzip"})

    assert response.status_code == 200
    assert response.headers["content-encoding"] == "gzip"
    assert len(response.json()["data"]) == 30
