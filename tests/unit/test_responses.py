"""Тесты для формата ответов API."""
import json

import pytest

from moodyplace.api.responses import created, error, paginated, pagination_meta, success


@pytest.mark.unit
def test_success_envelope():
    body = success({"id": 1}, "Done")

    assert body["success"] is True
    assert body["data"] == {"id": 1}
    assert body["message"] == "Done"
    assert body["meta"]["timestamp"].endswith("Z")


@pytest.mark.unit
def test_error_envelope():
    body = error("Song not found", "NOT_FOUND", 404, details={"slug": "x"})

    assert body["success"] is False
    assert body["error"] == {
        "code": "NOT_FOUND",
        "message": "Song not found",
        "details": {"slug": "x"},
        "statusCode": 404,
    }
    assert "timestamp" in body["meta"]


@pytest.mark.unit
def test_pagination_middle_page():
    """Средняя страница: есть и следующая, и предыдущая."""
    meta = pagination_meta(page=2, limit=10, total=25)

    assert meta == {
        "current_page": 2,
        "per_page": 10,
        "total_items": 25,
        "total_pages": 3,
        "has_next": True,
        "has_prev": True,
        "next_page": 3,
        "prev_page": 1,
    }


@pytest.mark.unit
def test_pagination_last_page():
    meta = pagination_meta(page=3, limit=10, total=25)

    assert meta["has_next"] is False
    assert meta["next_page"] is None
    assert meta["prev_page"] == 2


@pytest.mark.unit
def test_pagination_empty():
    """Пустой результат: ноль страниц, переходов нет."""
    meta = pagination_meta(page=1, limit=10, total=0)

    assert meta["total_pages"] == 0
    assert meta["has_next"] is False
    assert meta["has_prev"] is False


@pytest.mark.unit
def test_paginated_puts_pagination_into_meta():
    body = paginated([{"id": 1}], page=1, limit=1, total=2)

    assert body["data"] == [{"id": 1}]
    assert body["meta"]["pagination"]["total_pages"] == 2


@pytest.mark.unit
def test_created_response():
    response = created({"id": 5}, "Created")

    assert response.status_code == 201
    payload = json.loads(response.body)
    assert payload["success"] is True
    assert payload["data"] == {"id": 5}
