"""Утилиты."""
