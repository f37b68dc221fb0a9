"""Бизнес-логика: аутентификация и права доступа."""
