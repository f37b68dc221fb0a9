"""Общие запросы для обработчиков API."""
from typing import Any, Dict, List, Tuple

from sqlalchemy import Table, func, select
from sqlalchemy.sql import Select

from config.database import Database
from moodyplace.api.deps import Pagination
from moodyplace.utils.exceptions import NotFoundError


async def count_rows(db: Database, query: Select) -> int:
    """Количество строк, которые вернул бы запрос."""
    total = await db.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    return int(total or 0)


async def fetch_page(db: Database, query: Select, pagination: Pagination, *order_by) -> Tuple[List[Dict[str, Any]], int]:
    """
    Получить страницу строк и общее количество.

    Returns:
        (строки страницы, всего строк)
    """
    total = await count_rows(db, query)
    rows = await db.query(query.order_by(*order_by).offset(pagination.offset).limit(pagination.limit))
    return rows, total


async def get_or_404(db: Database, table: Table, row_id: int, resource: str) -> Dict[str, Any]:
    """Строка по id или NotFoundError."""
    row = await db.query_one(select(table).where(table.c.id == row_id))
    if row is None:
        raise NotFoundError(resource)
    return row
