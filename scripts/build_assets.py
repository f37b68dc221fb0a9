#!/usr/bin/env python3
"""Сборка статических файлов для production (минификация, gzip, manifest)."""
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import PROJECT_ROOT
from moodyplace.tools.assets import build_assets, format_size
from moodyplace.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


def main():
    """Главная функция."""
    import argparse

    parser = argparse.ArgumentParser(description="Сборка CSS/JS в dist/")
    parser.add_argument("--public-dir", type=Path, default=PROJECT_ROOT / "public")
    parser.add_argument("--dist-dir", type=Path, default=PROJECT_ROOT / "dist")
    parser.add_argument("--no-clean", action="store_true", help="Не очищать dist/ перед сборкой")
    args = parser.parse_args()

    try:
        result = build_assets(args.public_dir, args.dist_dir, clean=not args.no_clean)
    except OSError as e:
        logger.error("assets_build_failed", error=str(e), exc_info=True)
        print(f"\n❌ Ошибка сборки: {e}")
        sys.exit(1)

    print("=" * 60)
    for asset in result.assets:
        print(
            f"  {asset.source}: {format_size(asset.original_size)} -> {format_size(asset.minified_size)} "
            f"(gzip {format_size(asset.gzip_size)}, -{asset.saved_percent}%) => {asset.hashed}"
        )
    for copied in result.copied:
        print(f"  {copied}: скопирован")
    print("=" * 60)
    print(f"Итого: {format_size(result.original_size)} -> {format_size(result.minified_size)}")
    print(f"Manifest: {args.dist_dir / 'manifest.json'}")


if __name__ == "__main__":
    main()
