"""HTML страницы сайта из каталога views."""
from pathlib import Path

from fastapi.responses import FileResponse, HTMLResponse, Response

# Короткое кэширование HTML (страницы меняются вместе с контентом)
HTML_CACHE_CONTROL = "public, max-age=300"

FALLBACK_NOT_FOUND = "<!DOCTYPE html><html><head><title>Page not found</title></head><body><h1>404</h1><p>Page not found</p></body></html>"


def view_path(views_dir: Path, name: str) -> Path:
    return Path(views_dir) / f"{name}.html"


def render_view(views_dir: Path, name: str, status_code: int = 200, cache: bool = True) -> Response:
    """
    Отдать HTML страницу.

    Args:
        views_dir: Каталог с шаблонами
        name: Имя страницы без расширения
        status_code: HTTP статус
        cache: Добавить Cache-Control для браузера

    Returns:
        FileResponse или встроенная страница 404, если файла нет
    """
    path = view_path(views_dir, name)
    headers = {"Cache-Control": HTML_CACHE_CONTROL if cache else "no-store"}
    if path.is_file():
        return FileResponse(path, status_code=status_code, media_type="text/html", headers=headers)
    return HTMLResponse(FALLBACK_NOT_FOUND, status_code=404, headers={"Cache-Control": "no-store"})


def render_not_found(views_dir: Path) -> Response:
    """Страница 404 сайта."""
    path = view_path(views_dir, "404")
    if path.is_file():
        return FileResponse(path, status_code=404, media_type="text/html", headers={"Cache-Control": "no-store"})
    return HTMLResponse(FALLBACK_NOT_FOUND, status_code=404, headers={"Cache-Control": "no-store"})
