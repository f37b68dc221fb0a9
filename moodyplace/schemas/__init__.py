"""Pydantic схемы запросов."""
