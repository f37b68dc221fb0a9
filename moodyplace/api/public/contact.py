"""Публичные формы: контакты и рассылка."""
import secrets
from datetime import datetime

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy import select, update

from config.database import Database, DatabaseConnection
from moodyplace.api.deps import get_db
from moodyplace.api.rate_limit import api_limit, form_limit
from moodyplace.api.responses import created, success
from moodyplace.core.analytics import insert_event
from moodyplace.models import ContactInquiry, NewsletterSubscriber
from moodyplace.schemas.contact import ContactRequest, NewsletterSubscribeRequest, NewsletterUnsubscribeRequest
from moodyplace.utils.client import get_client_ip, get_user_agent
from moodyplace.utils.enums import AnalyticsEvent, InquiryStatus
from moodyplace.utils.exceptions import NotFoundError
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

inquiries = ContactInquiry.__table__
subscribers = NewsletterSubscriber.__table__


@router.post("/contact")
@router.post("/contact/submit")
@form_limit
async def submit_contact(request: Request, payload: ContactRequest, db: Database = Depends(get_db)):
    """Сохранить обращение из формы контактов."""
    now = datetime.utcnow()
    values = {
        **payload.to_db(),
        "status": InquiryStatus.NEW.value,
        "ip_address": get_client_ip(request),
        "user_agent": get_user_agent(request),
        "created_at": now,
        "updated_at": now,
    }

    async def body(conn: DatabaseConnection):
        inquiry_id = await conn.insert(inquiries.insert().values(**values))
        await conn.insert(
            insert_event(
                AnalyticsEvent.CONTACT_SUBMITTED,
                request,
                {"inquiry_id": inquiry_id, "inquiry_type": values["inquiry_type"]},
            )
        )
        return inquiry_id

    inquiry_id = await db.transaction(body)
    logger.info("contact_inquiry_received", inquiry_id=inquiry_id, inquiry_type=values["inquiry_type"])
    return created({"id": inquiry_id}, "Thank you for your message! We will get back to you soon.")


@router.post("/newsletter/subscribe")
@router.post("/newsletter")
@form_limit
async def subscribe(request: Request, payload: NewsletterSubscribeRequest, db: Database = Depends(get_db)):
    """
    Подписка на рассылку.

    Повторная подписка активного адреса не создаёт дубликат; отписавшийся
    адрес активируется снова и получает новый токен подтверждения.
    """
    now = datetime.utcnow()
    data = payload.to_db()

    async def body(conn: DatabaseConnection):
        existing = await conn.query_one(select(subscribers).where(subscribers.c.email == data["email"]))
        if existing is not None and existing["is_active"]:
            return existing["id"], False

        token = secrets.token_urlsafe(32)
        if existing is not None:
            subscriber_id = existing["id"]
            await conn.update(
                update(subscribers)
                .where(subscribers.c.id == subscriber_id)
                .values(
                    **data,
                    is_active=True,
                    unsubscribed_at=None,
                    confirmation_token=None if existing["confirmed_at"] else token,
                    updated_at=now,
                )
            )
        else:
            subscriber_id = await conn.insert(
                subscribers.insert().values(
                    **data,
                    source="website",
                    is_active=True,
                    confirmation_token=token,
                    ip_address=get_client_ip(request),
                    created_at=now,
                    updated_at=now,
                )
            )
        await conn.insert(insert_event(AnalyticsEvent.NEWSLETTER_SUBSCRIBED, request, {"subscriber_id": subscriber_id}))
        return subscriber_id, True

    subscriber_id, is_new = await db.transaction(body)
    if not is_new:
        return success({"email": data["email"]}, "You are already subscribed to our newsletter")

    logger.info("newsletter_subscribed", subscriber_id=subscriber_id)
    return created(
        {"email": data["email"], "confirmation_required": True},
        "Successfully subscribed! Please check your email to confirm your subscription.",
    )


@router.post("/newsletter/unsubscribe")
@form_limit
async def unsubscribe(request: Request, payload: NewsletterUnsubscribeRequest, db: Database = Depends(get_db)):
    """Отписка. Ответ не раскрывает, был ли адрес в списке."""
    now = datetime.utcnow()

    async def body(conn: DatabaseConnection):
        affected = await conn.update(
            update(subscribers)
            .where(subscribers.c.email == payload.email, subscribers.c.is_active.is_(True))
            .values(is_active=False, unsubscribed_at=now, updated_at=now)
        )
        if affected:
            await conn.insert(insert_event(AnalyticsEvent.NEWSLETTER_UNSUBSCRIBED, request))
        return affected

    affected = await db.transaction(body)
    if affected:
        logger.info("newsletter_unsubscribed")
    return success(None, "You have been unsubscribed from our newsletter")


@router.get("/newsletter/confirm/{token}")
@api_limit
async def confirm_subscription(
    request: Request,
    token: str = Path(..., min_length=16, max_length=64),
    db: Database = Depends(get_db),
):
    """Подтвердить подписку по токену из письма."""
    now = datetime.utcnow()
    affected = await db.update(
        update(subscribers)
        .where(subscribers.c.confirmation_token == token)
        .values(confirmed_at=now, confirmation_token=None, updated_at=now)
    )
    if not affected:
        raise NotFoundError("Confirmation token")
    return success(None, "Your subscription has been confirmed")
