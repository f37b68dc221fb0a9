"""Тесты для проверок ролей."""
import pytest

from moodyplace.core.permissions import (
    ADMIN_ROLES,
    EDITOR_ROLES,
    SUPERADMIN_ROLES,
    has_any_role,
    parse_role,
)
from moodyplace.utils.enums import Role


@pytest.mark.unit
def test_parse_role():
    assert parse_role("super_admin") is Role.SUPERADMIN
    assert parse_role(Role.EDITOR) is Role.EDITOR
    assert parse_role("owner") is None
    assert parse_role(None) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "role, allowed, expected",
    [
        ("super_admin", SUPERADMIN_ROLES, True),
        ("admin", SUPERADMIN_ROLES, False),
        ("admin", ADMIN_ROLES, True),
        ("editor", ADMIN_ROLES, False),
        ("editor", EDITOR_ROLES, True),
        ("super_admin", EDITOR_ROLES, True),
        ("unknown", EDITOR_ROLES, False),
        (None, EDITOR_ROLES, False),
    ],
)
def test_has_any_role(role, allowed, expected):
    """Роль проверяется по набору, неизвестная роль не даёт доступа."""
    assert has_any_role(role, allowed) is expected
