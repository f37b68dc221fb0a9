"""
Сборка и анализ статических файлов.

build_assets минифицирует CSS/JS из public/ в dist/, кладёт рядом
gzip-копии и версии с хэшем содержимого в имени, пишет manifest.json.
analyze_assets считает размеры (в т.ч. после gzip) и проверяет HTML
страницы на блокирующие скрипты, preload и lazy-загрузку изображений.
"""
import gzip
import hashlib
import json
import re
import shutil
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".svg", ".gif"}

# Порог "оптимизированного" изображения по типу, байты
IMAGE_SIZE_THRESHOLDS = {".jpg": 100_000, ".jpeg": 100_000, ".png": 150_000, ".webp": 80_000, ".svg": 20_000}
DEFAULT_IMAGE_THRESHOLD = 100_000

HASH_LENGTH = 10
MANIFEST_NAME = "manifest.json"

# Страницы для анализа: имя -> шаблон в views/
ANALYZED_PAGES = {"Home": "home", "Music": "music", "About": "about", "Contact": "contact"}

CSS_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
CSS_SPACE_AROUND_RE = re.compile(r"\s*([{};:,>])\s*")
WHITESPACE_RE = re.compile(r"\s+")
JS_BLOCK_COMMENT_RE = re.compile(r"^\s*/\*.*?\*/\s*$", re.DOTALL | re.MULTILINE)
JS_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)

STYLESHEET_RE = re.compile(r"<link[^>]*rel=[\"']stylesheet[\"'][^>]*>", re.IGNORECASE)
SCRIPT_SRC_RE = re.compile(r"<script[^>]*\bsrc=[^>]*>", re.IGNORECASE)
PRELOAD_RE = re.compile(r"<link[^>]*rel=[\"']preload[\"'][^>]*>", re.IGNORECASE)
IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
EXTERNAL_URL_RE = re.compile(r"(?:src|href)=[\"']https?://", re.IGNORECASE)


# ----------------------------------------------------------------------
# Утилиты
# ----------------------------------------------------------------------


def format_size(size: int) -> str:
    """Размер в человекочитаемом виде (1.5 KB)."""
    if size == 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def gzip_size(data: bytes) -> int:
    return len(gzip.compress(data, compresslevel=9))


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


def is_minified(content: str) -> bool:
    """Эвристика: длинные строки и мало строк."""
    lines = content.split("\n")
    return len(content) / len(lines) > 80 and len(lines) < 50


def is_image_optimized(name: str, size: int) -> bool:
    return size < IMAGE_SIZE_THRESHOLDS.get(Path(name).suffix.lower(), DEFAULT_IMAGE_THRESHOLD)


def minify_css(source: str) -> str:
    """Удалить комментарии и лишние пробелы."""
    css = CSS_COMMENT_RE.sub("", source)
    css = WHITESPACE_RE.sub(" ", css)
    css = CSS_SPACE_AROUND_RE.sub(r"\1", css)
    return css.replace(";}", "}").strip()


def minify_js(source: str) -> str:
    """
    Консервативная минификация JS.

    Удаляются только комментарии на отдельных строках, отступы и пустые
    строки; переводы строк сохраняются (автоматическая вставка ';').
    """
    js = JS_BLOCK_COMMENT_RE.sub("", source)
    js = JS_LINE_COMMENT_RE.sub("", js)
    lines = (line.strip() for line in js.splitlines())
    return "\n".join(line for line in lines if line)


MINIFIERS = {".css": minify_css, ".js": minify_js}


# ----------------------------------------------------------------------
# Сборка
# ----------------------------------------------------------------------


@dataclass
class BuiltAsset:
    """Результат обработки одного файла."""

    source: str
    output: str
    hashed: str
    original_size: int
    minified_size: int
    gzip_size: int

    @property
    def saved_percent(self) -> int:
        if not self.original_size:
            return 0
        return round((1 - self.minified_size / self.original_size) * 100)


@dataclass
class BuildResult:
    assets: List[BuiltAsset] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)
    manifest: Dict[str, str] = field(default_factory=dict)

    @property
    def original_size(self) -> int:
        return sum(asset.original_size for asset in self.assets)

    @property
    def minified_size(self) -> int:
        return sum(asset.minified_size for asset in self.assets)


def _build_one(path: Path, public_dir: Path, dist_dir: Path) -> BuiltAsset:
    relative = path.relative_to(public_dir)
    original = path.read_bytes()
    minified = MINIFIERS[path.suffix](original.decode("utf-8")).encode("utf-8")

    output = dist_dir / relative
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(minified)

    hashed = output.with_name(f"{output.stem}.{content_hash(minified)}{output.suffix}")
    hashed.write_bytes(minified)

    compressed = gzip.compress(minified, compresslevel=9)
    output.with_name(output.name + ".gz").write_bytes(compressed)
    hashed.with_name(hashed.name + ".gz").write_bytes(compressed)

    return BuiltAsset(
        source=relative.as_posix(),
        output=output.relative_to(dist_dir).as_posix(),
        hashed=hashed.relative_to(dist_dir).as_posix(),
        original_size=len(original),
        minified_size=len(minified),
        gzip_size=len(compressed),
    )


def build_assets(public_dir: Path, dist_dir: Path, clean: bool = True) -> BuildResult:
    """
    Собрать статические файлы для production.

    Args:
        public_dir: Исходный каталог (css/, js/, images/)
        dist_dir: Каталог результата
        clean: Удалить dist_dir перед сборкой

    Returns:
        BuildResult со статистикой и manifest (исходный путь -> путь с хэшем)
    """
    public_dir = Path(public_dir)
    dist_dir = Path(dist_dir)
    if clean and dist_dir.exists():
        shutil.rmtree(dist_dir)
    dist_dir.mkdir(parents=True, exist_ok=True)

    result = BuildResult()
    for folder, suffix in (("css", ".css"), ("js", ".js")):
        for path in sorted((public_dir / folder).glob(f"*{suffix}")):
            # Уже минифицированные файлы копируются как есть
            if path.name.endswith(f".min{suffix}"):
                target = dist_dir / folder / path.name
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, target)
                result.copied.append(target.relative_to(dist_dir).as_posix())
                continue
            asset = _build_one(path, public_dir, dist_dir)
            result.assets.append(asset)
            result.manifest[asset.source] = asset.hashed
            logger.info(
                "asset_built",
                source=asset.source,
                original=format_size(asset.original_size),
                minified=format_size(asset.minified_size),
                saved_percent=asset.saved_percent,
            )

    images_dir = public_dir / "images"
    if images_dir.is_dir():
        for path in sorted(images_dir.iterdir()):
            if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS:
                target = dist_dir / "images" / path.name
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, target)
                result.copied.append(target.relative_to(dist_dir).as_posix())

    (dist_dir / MANIFEST_NAME).write_text(json.dumps(result.manifest, indent=2, sort_keys=True), encoding="utf-8")
    logger.info(
        "assets_build_completed",
        files=len(result.assets),
        copied=len(result.copied),
        original=format_size(result.original_size),
        minified=format_size(result.minified_size),
    )
    return result


# ----------------------------------------------------------------------
# Анализ
# ----------------------------------------------------------------------


def _describe_text_asset(path: Path) -> Dict[str, Any]:
    data = path.read_bytes()
    content = data.decode("utf-8", errors="replace")
    return {
        "name": path.name,
        "size": len(data),
        "gzip_size": gzip_size(data),
        "lines": len(content.split("\n")),
        "minified": is_minified(content),
    }


def _describe_image(path: Path) -> Dict[str, Any]:
    size = path.stat().st_size
    return {
        "name": path.name,
        "size": size,
        "type": path.suffix.lower(),
        "optimized": is_image_optimized(path.name, size),
    }


def collect_assets(public_dir: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Описание CSS, JS и изображений из public/."""
    public_dir = Path(public_dir)
    assets: Dict[str, List[Dict[str, Any]]] = {"css": [], "js": [], "images": []}
    for folder in ("css", "js"):
        directory = public_dir / folder
        if directory.is_dir():
            assets[folder] = [_describe_text_asset(path) for path in sorted(directory.glob(f"*.{folder}"))]
    images_dir = public_dir / "images"
    if images_dir.is_dir():
        assets["images"] = [
            _describe_image(path)
            for path in sorted(images_dir.iterdir())
            if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
        ]
    return assets


def analyze_html(html: str) -> Dict[str, Any]:
    """
    Проверить страницу на типичные проблемы загрузки.

    Returns:
        Счётчики ресурсов, оценка 0..100 и список проблем
    """
    scripts = SCRIPT_SRC_RE.findall(html)
    blocking = [tag for tag in scripts if not re.search(r"\b(defer|async)\b", tag) and 'type="module"' not in tag]
    stylesheets = STYLESHEET_RE.findall(html)
    preloads = PRELOAD_RE.findall(html)
    images = IMG_RE.findall(html)
    eager_images = [tag for tag in images if 'loading="lazy"' not in tag and "loading='lazy'" not in tag]
    external = EXTERNAL_URL_RE.findall(html)

    score = 100
    issues = []
    if blocking:
        score -= len(blocking) * 10
        issues.append(f"{len(blocking)} blocking scripts")
    if len(external) > 5:
        score -= (len(external) - 5) * 5
        issues.append(f"{len(external)} external resources")
    if not preloads:
        score -= 15
        issues.append("No critical resource preloads")
    # Первое изображение (LCP) может загружаться сразу
    if len(eager_images) > 1:
        score -= 5
        issues.append(f"{len(eager_images)} images without lazy loading")

    return {
        "stylesheets": len(stylesheets),
        "scripts": len(scripts),
        "blocking_scripts": len(blocking),
        "preloads": len(preloads),
        "images": len(images),
        "lazy_images": len(images) - len(eager_images),
        "external_resources": len(external),
        "score": max(0, score),
        "issues": issues,
    }


def analyze_pages(views_dir: Path, pages: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    results = []
    for title, name in (pages or ANALYZED_PAGES).items():
        path = Path(views_dir) / f"{name}.html"
        if not path.is_file():
            logger.warning("page_not_found", page=title, path=str(path))
            continue
        data = path.read_bytes()
        results.append(
            {"name": title, "size": len(data), "gzip_size": gzip_size(data), **analyze_html(data.decode("utf-8"))}
        )
    return results


def recommendations(assets: Dict[str, List[Dict[str, Any]]], pages: List[Dict[str, Any]]) -> List[str]:
    result = []
    total = sum(item["size"] for group in assets.values() for item in group)
    if total > 1_000_000:
        result.append("Reduce total asset size to under 1MB")

    large_images = [image for image in assets["images"] if not image["optimized"]]
    if large_images:
        result.append(f"Optimize {len(large_images)} large image(s)")

    unminified = [item["name"] for item in assets["css"] + assets["js"] if not item["minified"]]
    if unminified:
        result.append(f"Serve minified builds for {len(unminified)} file(s) (run scripts/build_assets.py)")

    if any(page["blocking_scripts"] for page in pages):
        result.append("Add defer or async to render-blocking scripts")
    if pages and not any(page["preloads"] for page in pages):
        result.append("Preload critical resources (fonts, main stylesheet)")
    if any(page["images"] - page["lazy_images"] > 1 for page in pages):
        result.append('Add loading="lazy" to below-the-fold images')
    return result


def overall_score(assets: Dict[str, List[Dict[str, Any]]], pages: List[Dict[str, Any]]) -> int:
    """Средняя оценка страниц со штрафом за общий размер файлов."""
    score = round(sum(page["score"] for page in pages) / len(pages)) if pages else 70
    total = sum(item["size"] for group in assets.values() for item in group)
    if total > 1_000_000:
        score -= 20
    elif total > 500_000:
        score -= 10
    return min(100, max(0, score))


def analyze_assets(public_dir: Path, views_dir: Path, pages: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Полный отчёт о статических файлах и страницах.

    Returns:
        timestamp, assets, pages, summary (количество, размеры, оценка) и recommendations
    """
    assets = collect_assets(public_dir)
    page_reports = analyze_pages(views_dir, pages)
    all_assets = [item for group in assets.values() for item in group]
    text_assets = assets["css"] + assets["js"]

    report = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "assets": assets,
        "pages": page_reports,
        "summary": {
            "total_assets": len(all_assets),
            "total_size": sum(item["size"] for item in all_assets),
            "total_gzip_size": sum(item["gzip_size"] for item in text_assets),
            "performance_score": overall_score(assets, page_reports),
        },
        "recommendations": recommendations(assets, page_reports),
    }
    logger.info(
        "assets_analyzed",
        total_assets=report["summary"]["total_assets"],
        total_size=format_size(report["summary"]["total_size"]),
        score=report["summary"]["performance_score"],
    )
    return report


def write_report(report: Dict[str, Any], path: Path) -> Path:
    path = Path(path)
    path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    return path


def build_summary(result: BuildResult) -> Dict[str, Any]:
    """Статистика сборки для вывода в консоль."""
    return {
        "files": [asdict(asset) for asset in result.assets],
        "copied": result.copied,
        "original_size": result.original_size,
        "minified_size": result.minified_size,
    }
