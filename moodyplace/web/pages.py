"""Страницы сайта, sitemap.xml и robots.txt."""
from datetime import datetime
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy import select

from config.database import Database
from moodyplace.api.deps import get_app_settings, get_db
from moodyplace.api.rate_limit import general_limit
from moodyplace.models import BlogPost, Song
from moodyplace.utils.validators import SLUG_RE
from moodyplace.web.views import render_view

router = APIRouter()

songs = Song.__table__
posts = BlogPost.__table__

# URL страницы -> (имя шаблона, changefreq, priority)
PAGES = {
    "/": ("home", "weekly", "1.0"),
    "/about": ("about", "monthly", "0.8"),
    "/music": ("music", "weekly", "0.9"),
    "/shows": ("shows", "weekly", "0.8"),
    "/blog": ("blog", "weekly", "0.8"),
    "/gallery": ("gallery", "monthly", "0.6"),
    "/press-kit": ("press-kit", "monthly", "0.6"),
    "/contact": ("contact", "yearly", "0.5"),
}

SITEMAP_CACHE_CONTROL = "public, max-age=3600"


def _page(name: str):
    async def page(request: Request, settings=Depends(get_app_settings)):
        return render_view(settings.views_dir, name)

    page.__name__ = f"page_{name.replace('-', '_')}"
    page.__doc__ = f"Страница {name}."
    return page


for _url, (_name, _, _) in PAGES.items():
    router.add_api_route(_url, general_limit(_page(_name)), methods=["GET"], include_in_schema=False)


@router.get("/music/{slug}", include_in_schema=False)
@general_limit
async def song_page(request: Request, slug: str = Path(..., pattern=SLUG_RE.pattern), settings=Depends(get_app_settings)):
    """Страница песни; данные подгружаются из /api/songs/{slug}."""
    return render_view(settings.views_dir, "song")


@router.get("/blog/{slug}", include_in_schema=False)
@general_limit
async def post_page(request: Request, slug: str = Path(..., pattern=SLUG_RE.pattern), settings=Depends(get_app_settings)):
    """Страница записи блога; данные подгружаются из /api/blog/{slug}."""
    return render_view(settings.views_dir, "blog-post")


def _url_entry(loc: str, lastmod: Optional[datetime], changefreq: str, priority: str) -> str:
    parts = [f"    <loc>{escape(loc)}</loc>"]
    if lastmod is not None:
        parts.append(f"    <lastmod>{lastmod.date().isoformat()}</lastmod>")
    parts.append(f"    <changefreq>{changefreq}</changefreq>")
    parts.append(f"    <priority>{priority}</priority>")
    return "  <url>\n" + "\n".join(parts) + "\n  </url>"


def build_sitemap(site_url: str, song_rows: Iterable[dict], post_rows: Iterable[dict]) -> str:
    """
    Собрать sitemap.xml.

    Args:
        site_url: Базовый URL сайта
        song_rows: Опубликованные песни (slug, updated_at)
        post_rows: Опубликованные записи блога (slug, updated_at)
    """
    base = site_url.rstrip("/")
    entries = [
        _url_entry(f"{base}{url}" if url != "/" else f"{base}/", None, changefreq, priority)
        for url, (_, changefreq, priority) in PAGES.items()
    ]
    entries += [_url_entry(f"{base}/music/{row['slug']}", row.get("updated_at"), "monthly", "0.7") for row in song_rows]
    entries += [_url_entry(f"{base}/blog/{row['slug']}", row.get("updated_at"), "monthly", "0.7") for row in post_rows]
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>\n"
    )


@router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(settings=Depends(get_app_settings), db: Database = Depends(get_db)):
    song_rows = await db.query(
        select(songs.c.slug, songs.c.updated_at).where(songs.c.is_published.is_(True)).order_by(songs.c.sort_order)
    )
    post_rows = await db.query(
        select(posts.c.slug, posts.c.updated_at)
        .where(posts.c.is_published.is_(True))
        .order_by(posts.c.published_at.desc())
    )
    return Response(
        build_sitemap(settings.site_url, song_rows, post_rows),
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


@router.get("/robots.txt", include_in_schema=False)
async def robots(settings=Depends(get_app_settings)):
    body = "\n".join(
        [
            "User-agent: *",
            "Allow: /",
            "Disallow: /api/admin/",
            "Disallow: /uploads/",
            "",
            f"Sitemap: {settings.site_url.rstrip('/')}/sitemap.xml",
            "",
        ]
    )
    return PlainTextResponse(body, headers={"Cache-Control": SITEMAP_CACHE_CONTROL})
