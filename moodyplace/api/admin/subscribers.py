"""Подписчики рассылки."""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, select

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.models import NewsletterSubscriber
from moodyplace.utils.enums import SubscriberType
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

subscribers = NewsletterSubscriber.__table__

# Токен подтверждения не отдаётся даже администраторам
SUBSCRIBER_FIELDS = [column for column in subscribers.c if column.name != "confirmation_token"]


@router.get("")
@api_limit
async def list_subscribers(
    request: Request,
    active: Optional[bool] = Query(None),
    subscriber_type: Optional[SubscriberType] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    query = select(*SUBSCRIBER_FIELDS)
    if active is not None:
        query = query.where(subscribers.c.is_active.is_(active))
    if subscriber_type is not None:
        query = query.where(subscribers.c.subscriber_type == subscriber_type.value)
    rows, total = await fetch_page(db, query, pagination, subscribers.c.created_at.desc(), subscribers.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.delete("/{subscriber_id}")
@api_limit
async def delete_subscriber(
    request: Request,
    subscriber_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    """Удалить подписчика полностью (по запросу на удаление данных)."""
    await get_or_404(db, subscribers, subscriber_id, "Subscriber")
    await db.delete(delete(subscribers).where(subscribers.c.id == subscriber_id))
    logger.info("subscriber_deleted", subscriber_id=subscriber_id, admin_id=current_admin.id)
    return success(None, "Subscriber deleted successfully")
