"""Тесты для сборки и анализа статических файлов."""
import json

import pytest

from config.settings import PROJECT_ROOT
from moodyplace.tools.assets import (
    analyze_assets,
    analyze_html,
    build_assets,
    content_hash,
    format_size,
    is_image_optimized,
    is_minified,
    minify_css,
    minify_js,
)


@pytest.fixture
def public_dir(tmp_path):
    root = tmp_path / "public"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "images").mkdir()
    (root / "css" / "main.css").write_text(
        "/* Основные стили */\nbody {\n    color: #222;\n    margin: 0;\n}\n\na > span {\n    color: red;\n}\n",
        encoding="utf-8",
    )
    (root / "js" / "main.js").write_text(
        "// Точка входа\nfunction hello(name) {\n    return 'Hello, ' + name;\n}\n\n/* конец */\n",
        encoding="utf-8",
    )
    (root / "js" / "vendor.min.js").write_text("var a=1;", encoding="utf-8")
    (root / "images" / "logo.svg").write_text("<svg xmlns='http://www.w3.org/2000/svg'/>", encoding="utf-8")
    (root / "images" / "notes.txt").write_text("not an image", encoding="utf-8")
    return root


@pytest.mark.unit
@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 B"), (500, "500 B"), (1024, "1 KB"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5 MB")],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


@pytest.mark.unit
def test_minify_css():
    css = "/* comment */\nbody {\n    color: #222;\n    margin: 0;\n}\n"
    assert minify_css(css) == "body{color:#222;margin:0}"


@pytest.mark.unit
def test_minify_js_keeps_line_breaks():
    """Переводы строк сохраняются, удаляются комментарии и отступы."""
    js = "// comment\nfunction f() {\n    return 1;\n}\n\n"
    assert minify_js(js) == "function f() {\nreturn 1;\n}"


@pytest.mark.unit
def test_is_minified():
    assert is_minified("a" * 200)
    assert not is_minified("a\n" * 100)


@pytest.mark.unit
def test_is_image_optimized():
    assert is_image_optimized("photo.jpg", 50_000)
    assert not is_image_optimized("photo.jpg", 200_000)
    assert is_image_optimized("photo.png", 120_000)
    assert not is_image_optimized("icon.svg", 30_000)


@pytest.mark.unit
def test_build_assets(public_dir, tmp_path):
    dist = tmp_path / "dist"
    result = build_assets(public_dir, dist)

    assert sorted(asset.source for asset in result.assets) == ["css/main.css", "js/main.js"]
    assert (dist / "css" / "main.css").read_text(encoding="utf-8") == "body{color:#222;margin:0}a>span{color:red}"
    assert (dist / "css" / "main.css.gz").is_file()

    # Имя с хэшем содержимого
    minified = (dist / "js" / "main.js").read_bytes()
    assert result.manifest["js/main.js"] == f"js/main.{content_hash(minified)}.js"
    assert (dist / result.manifest["js/main.js"]).read_bytes() == minified

    # Уже минифицированные файлы и изображения копируются как есть
    assert "js/vendor.min.js" in result.copied
    assert "images/logo.svg" in result.copied
    assert not (dist / "images" / "notes.txt").exists()

    manifest = json.loads((dist / "manifest.json").read_text(encoding="utf-8"))
    assert manifest == result.manifest
    assert result.minified_size < result.original_size


@pytest.mark.unit
def test_build_assets_cleans_dist(public_dir, tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "stale.css").write_text("old", encoding="utf-8")

    build_assets(public_dir, dist)

    assert not (dist / "stale.css").exists()


@pytest.mark.unit
def test_analyze_html_penalties():
    """Блокирующий скрипт, нет preload, два изображения без lazy."""
    html = (
        '<html><head><link rel="stylesheet" href="/css/main.css">'
        '<script src="/js/app.js"></script></head>'
        '<body><img src="a.png"><img src="b.png"></body></html>'
    )
    report = analyze_html(html)

    assert report["blocking_scripts"] == 1
    assert report["preloads"] == 0
    assert report["images"] == 2
    assert report["lazy_images"] == 0
    assert report["score"] == 70
    assert len(report["issues"]) == 3


@pytest.mark.unit
def test_analyze_html_clean_page():
    html = (
        '<head><link rel="preload" href="/css/main.css" as="style">'
        '<script src="/js/main.js" defer></script></head>'
        '<body><img src="hero.jpg"><img src="b.jpg" loading="lazy"></body>'
    )
    report = analyze_html(html)

    assert report["blocking_scripts"] == 0
    assert report["score"] == 100
    assert report["issues"] == []


@pytest.mark.unit
def test_analyze_assets_report(public_dir):
    """Отчёт по реальным шаблонам сайта."""
    report = analyze_assets(public_dir, PROJECT_ROOT / "views")

    assert {page["name"] for page in report["pages"]} == {"Home", "Music", "About", "Contact"}
    assert all(page["blocking_scripts"] == 0 for page in report["pages"])
    assert report["summary"]["total_assets"] == 4
    assert 0 <= report["summary"]["performance_score"] <= 100
    assert any("minified" in item for item in report["recommendations"])
