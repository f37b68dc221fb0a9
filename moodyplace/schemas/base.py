"""Общие типы и базовые классы схем."""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, FrozenSet, Optional

from pydantic import BaseModel, StringConstraints, model_validator


def Trimmed(min_length: int = 0, max_length: Optional[int] = None):
    """Строка с обрезкой пробелов и ограничениями длины."""
    return Annotated[str, StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)]


def blank_to_none(value: Any) -> Any:
    """Пустая строка из HTML формы означает отсутствие значения."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Даты хранятся в UTC без часового пояса."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_db_value(item) for item in value]
    return value


class DBModel(BaseModel):
    """Схема, данные которой пишутся в таблицу."""

    def to_db(self, exclude_unset: bool = False) -> Dict[str, Any]:
        """Значения для INSERT/UPDATE: перечисления заменены строками."""
        data = self.model_dump(exclude_unset=exclude_unset)
        return {key: _db_value(value) for key, value in data.items()}


class PartialUpdate(DBModel):
    """
    Частичное обновление: передаются только изменяемые поля.

    Поля из NOT_NULL нельзя явно сбросить в null.
    """

    NOT_NULL: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def check_not_null(self):
        for field in self.NOT_NULL & self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def to_db(self, exclude_unset: bool = True) -> Dict[str, Any]:
        return super().to_db(exclude_unset=exclude_unset)
