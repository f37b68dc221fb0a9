#!/usr/bin/env python3
"""Скрипт для создания администратора."""
import asyncio
import getpass
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в путь
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.database import create_database
from config.settings import get_settings
from moodyplace.core.auth_service import AuthService
from moodyplace.utils.enums import Role
from moodyplace.utils.exceptions import ConflictError
from moodyplace.utils.logger import get_logger, setup_logging
from moodyplace.utils.validators import PASSWORD_POLICY_MESSAGE, is_strong_password

setup_logging()
logger = get_logger(__name__)


async def create_admin(username: str, email: str, password: str, full_name: str, role: Role) -> bool:
    """Создать администратора; False, если имя или email заняты."""
    settings = get_settings()
    db = create_database(settings)
    try:
        await db.connect()
        auth_service = AuthService(db, settings)
        user = await auth_service.create_user(username, email, password, full_name=full_name, role=role)
    except ConflictError:
        print(f"Администратор '{username}' или email '{email}' уже существует!")
        return False
    finally:
        await db.close()

    print(f"Администратор '{user['username']}' ({user['role']}) успешно создан, id={user['id']}")
    return True


def main():
    """Главная функция."""
    import argparse

    parser = argparse.ArgumentParser(description="Создание администратора сайта")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--full-name", default=None, help="Полное имя")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.SUPERADMIN.value,
        help="Роль (по умолчанию super_admin)",
    )
    args = parser.parse_args()

    password = getpass.getpass("Введите пароль: ")
    password_confirm = getpass.getpass("Подтвердите пароль: ")

    if password != password_confirm:
        print("Пароли не совпадают!")
        sys.exit(1)

    if not is_strong_password(password):
        print(PASSWORD_POLICY_MESSAGE)
        sys.exit(1)

    created = asyncio.run(
        create_admin(args.username, args.email.lower(), password, args.full_name or args.username, Role(args.role))
    )
    sys.exit(0 if created else 1)


if __name__ == "__main__":
    main()
