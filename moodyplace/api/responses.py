"""Единый формат ответов API (envelope)."""
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def success(data: Any = None, message: Optional[str] = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Успешный ответ."""
    return {
        "success": True,
        "data": jsonable_encoder(data),
        "message": message,
        "meta": {"timestamp": _timestamp(), **(meta or {})},
    }


def error(
    message: str,
    code: str = "ERROR",
    status_code: int = 500,
    details: Any = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Ответ с ошибкой: машинный код, сообщение, HTTP статус и детали."""
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": jsonable_encoder(details),
            "statusCode": status_code,
        },
        "meta": {"timestamp": _timestamp(), **(meta or {})},
    }


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Вычислить метаданные пагинации.

    Args:
        page: Текущая страница (с 1)
        limit: Размер страницы
        total: Общее количество строк

    Returns:
        current_page, per_page, total_items, total_pages, has_next/has_prev, next_page/prev_page
    """
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "current_page": page,
        "per_page": limit,
        "total_items": total,
        "total_pages": total_pages,
        "has_next": has_next,
        "has_prev": has_prev,
        "next_page": page + 1 if has_next else None,
        "prev_page": page - 1 if has_prev else None,
    }


def paginated(data: Any, page: int, limit: int, total: int, message: Optional[str] = None) -> Dict[str, Any]:
    """Успешный ответ со страницей данных."""
    return success(data, message, meta={"pagination": pagination_meta(page, limit, total)})


def created(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    """Ответ 201 Created."""
    return JSONResponse(status_code=201, content=success(data, message))


def error_response(
    message: str,
    code: str = "ERROR",
    status_code: int = 500,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """JSONResponse с ошибкой в едином формате."""
    return JSONResponse(
        status_code=status_code,
        content=error(message, code, status_code, details, meta),
        headers=headers,
    )
