"""Офлайн-инструменты: сборка и анализ статических файлов."""
