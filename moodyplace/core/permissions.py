"""Роли и проверки доступа."""
from typing import Iterable, Optional, Union

from moodyplace.utils.enums import Role

# Наборы ролей, допустимых для маршрутов
SUPERADMIN_ROLES = frozenset({Role.SUPERADMIN})
ADMIN_ROLES = frozenset({Role.SUPERADMIN, Role.ADMIN})
EDITOR_ROLES = frozenset({Role.SUPERADMIN, Role.ADMIN, Role.EDITOR})


def parse_role(value: Union[str, Role, None]) -> Optional[Role]:
    """Преобразовать строку из токена или БД в Role; неизвестная роль -> None."""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def has_any_role(role: Union[str, Role, None], allowed: Iterable[Role]) -> bool:
    """Роль вызывающего входит в набор допустимых ролей."""
    parsed = parse_role(role)
    return parsed is not None and parsed in set(allowed)
