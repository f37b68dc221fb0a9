"""Обработка обращений из формы контактов."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy import delete, select, update

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, Pagination, get_db, get_pagination, require_admin, require_editor
from moodyplace.api.queries import fetch_page, get_or_404
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import paginated, success
from moodyplace.models import ContactInquiry
from moodyplace.schemas.content import ContactInquiryUpdate
from moodyplace.utils.enums import InquiryStatus, InquiryType
from moodyplace.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

inquiries = ContactInquiry.__table__


@router.get("")
@api_limit
async def list_inquiries(
    request: Request,
    status: Optional[InquiryStatus] = Query(None),
    inquiry_type: Optional[InquiryType] = Query(None),
    pagination: Pagination = Depends(get_pagination),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Обращения, новые сверху."""
    query = select(inquiries)
    if status is not None:
        query = query.where(inquiries.c.status == status.value)
    if inquiry_type is not None:
        query = query.where(inquiries.c.inquiry_type == inquiry_type.value)
    rows, total = await fetch_page(db, query, pagination, inquiries.c.created_at.desc(), inquiries.c.id.desc())
    return paginated(rows, pagination.page, pagination.limit, total)


@router.get("/{inquiry_id}")
@api_limit
async def get_inquiry(
    request: Request,
    inquiry_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Обращение; новое при открытии помечается прочитанным."""
    inquiry = await get_or_404(db, inquiries, inquiry_id, "Inquiry")
    if inquiry["status"] == InquiryStatus.NEW.value:
        await db.update(
            update(inquiries)
            .where(inquiries.c.id == inquiry_id)
            .values(status=InquiryStatus.READ.value, updated_at=datetime.utcnow())
        )
        inquiry = await get_or_404(db, inquiries, inquiry_id, "Inquiry")
    return success(inquiry)


@router.put("/{inquiry_id}")
@api_limit
async def update_inquiry(
    request: Request,
    payload: ContactInquiryUpdate,
    inquiry_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    inquiry = await get_or_404(db, inquiries, inquiry_id, "Inquiry")
    changes = payload.to_db()
    now = datetime.utcnow()
    if changes.get("status") == InquiryStatus.RESPONDED.value and inquiry["responded_at"] is None:
        changes["responded_at"] = now
    if changes:
        await db.update(update(inquiries).where(inquiries.c.id == inquiry_id).values(**changes, updated_at=now))
        logger.info("inquiry_updated", inquiry_id=inquiry_id, fields=sorted(changes), admin_id=current_admin.id)
    return success(await get_or_404(db, inquiries, inquiry_id, "Inquiry"), "Inquiry updated successfully")


@router.delete("/{inquiry_id}")
@api_limit
async def delete_inquiry(
    request: Request,
    inquiry_id: int = Path(..., ge=1),
    current_admin: CurrentAdmin = Depends(require_admin),
    db: Database = Depends(get_db),
):
    await get_or_404(db, inquiries, inquiry_id, "Inquiry")
    await db.delete(delete(inquiries).where(inquiries.c.id == inquiry_id))
    logger.info("inquiry_deleted", inquiry_id=inquiry_id, admin_id=current_admin.id)
    return success(None, "Inquiry deleted successfully")
