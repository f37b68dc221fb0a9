"""Раздача статических файлов с заголовками кэширования."""
from pathlib import Path
from typing import List, Tuple

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

DAY = 24 * 60 * 60
YEAR = 365 * DAY


class CachedStaticFiles(StaticFiles):
    """StaticFiles, добавляющий Cache-Control к успешным ответам."""

    def __init__(self, *args, cache_control: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.cache_control = cache_control

    def file_response(self, *args, **kwargs):
        response = super().file_response(*args, **kwargs)
        if response.status_code in (200, 304):
            response.headers["Cache-Control"] = self.cache_control
        return response


def asset_cache_control(production: bool) -> str:
    """CSS/JS/изображения/аудио: год (immutable) в production, сутки иначе."""
    if production:
        return f"public, max-age={YEAR}, immutable"
    return f"public, max-age={DAY}"


def uploads_cache_control(production: bool) -> str:
    """Загруженные файлы: 30 дней в production, час иначе."""
    return f"public, max-age={30 * DAY if production else 60 * 60}"


def static_mounts(settings) -> List[Tuple[str, Path, str]]:
    """(префикс, каталог, Cache-Control) для каждого статического каталога."""
    public_dir = Path(settings.public_dir)
    assets = asset_cache_control(settings.is_production)
    return [
        ("/css", public_dir / "css", assets),
        ("/js", public_dir / "js", assets),
        ("/images", public_dir / "images", assets),
        ("/audio", public_dir / "audio", assets),
        ("/static", public_dir, assets),
        ("/uploads", Path(settings.uploads_dir), uploads_cache_control(settings.is_production)),
    ]


def mount_static(app: FastAPI, settings) -> None:
    """Смонтировать статические каталоги (создаются при отсутствии)."""
    for prefix, directory, cache_control in static_mounts(settings):
        directory.mkdir(parents=True, exist_ok=True)
        app.mount(
            prefix,
            CachedStaticFiles(directory=str(directory), cache_control=cache_control),
            name=prefix.strip("/"),
        )
    logger.debug("static_mounted", mounts=[prefix for prefix, _, _ in static_mounts(settings)])
