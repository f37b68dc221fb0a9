#!/usr/bin/env python3
"""Анализ статических файлов и страниц сайта с отчётом в JSON."""
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import PROJECT_ROOT
from moodyplace.tools.assets import analyze_assets, format_size, write_report
from moodyplace.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


def print_report(report: dict) -> None:
    print("=" * 60)
    for group, items in report["assets"].items():
        if not items:
            continue
        print(f"{group.upper()}:")
        for item in items:
            mark = "✅" if item.get("minified", item.get("optimized")) else "❌"
            gzip_part = f" (gzip: {format_size(item['gzip_size'])})" if "gzip_size" in item else ""
            print(f"  {item['name']}: {format_size(item['size'])}{gzip_part} {mark}")

    for page in report["pages"]:
        print(f"Страница {page['name']}: {format_size(page['size'])}, gzip {format_size(page['gzip_size'])}")
        print(f"  Оценка: {page['score']}/100")
        if page["issues"]:
            print(f"  ⚠️  {', '.join(page['issues'])}")

    summary = report["summary"]
    print("=" * 60)
    print(f"Общая оценка: {summary['performance_score']}/100")
    print(f"Файлов: {summary['total_assets']}, размер: {format_size(summary['total_size'])}")
    for index, recommendation in enumerate(report["recommendations"], start=1):
        print(f"  {index}. {recommendation}")


def main():
    """Главная функция."""
    import argparse

    parser = argparse.ArgumentParser(description="Анализ размеров и загрузки статики")
    parser.add_argument("--public-dir", type=Path, default=PROJECT_ROOT / "public")
    parser.add_argument("--views-dir", type=Path, default=PROJECT_ROOT / "views")
    parser.add_argument("--output", type=Path, default=PROJECT_ROOT / "performance-report.json")
    args = parser.parse_args()

    try:
        report = analyze_assets(args.public_dir, args.views_dir)
        path = write_report(report, args.output)
    except OSError as e:
        logger.error("assets_analysis_failed", error=str(e), exc_info=True)
        print(f"\n❌ Ошибка анализа: {e}")
        sys.exit(1)

    print_report(report)
    print(f"Отчёт сохранён: {path}")


if __name__ == "__main__":
    main()
