"""Дашборд админ-панели."""
from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, get_db, require_editor
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import success
from moodyplace.models import BlogPost, ContactInquiry, NewsletterSubscriber, Photo, Show, Song
from moodyplace.utils.enums import InquiryStatus, ShowStatus

router = APIRouter()

songs = Song.__table__
posts = BlogPost.__table__
shows = Show.__table__
photos = Photo.__table__
inquiries = ContactInquiry.__table__
subscribers = NewsletterSubscriber.__table__

RECENT_LIMIT = 5


async def _count(db: Database, table, *conditions) -> int:
    return int(await db.scalar(select(func.count()).select_from(table).where(*conditions)) or 0)


@router.get("")
@api_limit
async def get_dashboard(
    request: Request,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Количество записей по разделам и последние обращения/записи."""
    counts = {
        "songs": {
            "total": await _count(db, songs),
            "published": await _count(db, songs, songs.c.is_published.is_(True)),
        },
        "blog_posts": {
            "total": await _count(db, posts),
            "published": await _count(db, posts, posts.c.is_published.is_(True)),
        },
        "shows": {
            "total": await _count(db, shows),
            "upcoming": await _count(db, shows, shows.c.status == ShowStatus.UPCOMING.value),
        },
        "photos": {"total": await _count(db, photos)},
        "inquiries": {
            "total": await _count(db, inquiries),
            "new": await _count(db, inquiries, inquiries.c.status == InquiryStatus.NEW.value),
        },
        "subscribers": {
            "total": await _count(db, subscribers),
            "active": await _count(db, subscribers, subscribers.c.is_active.is_(True)),
        },
    }

    recent_inquiries = await db.query(
        select(
            inquiries.c.id,
            inquiries.c.name,
            inquiries.c.email,
            inquiries.c.inquiry_type,
            inquiries.c.subject,
            inquiries.c.urgency,
            inquiries.c.status,
            inquiries.c.created_at,
        )
        .order_by(inquiries.c.created_at.desc(), inquiries.c.id.desc())
        .limit(RECENT_LIMIT)
    )
    recent_posts = await db.query(
        select(posts.c.id, posts.c.title, posts.c.slug, posts.c.is_published, posts.c.updated_at)
        .order_by(posts.c.updated_at.desc(), posts.c.id.desc())
        .limit(RECENT_LIMIT)
    )

    return success(
        {
            "counts": counts,
            "recent_inquiries": recent_inquiries,
            "recent_posts": recent_posts,
            "admin": {"id": current_admin.id, "username": current_admin.username, "role": current_admin.role},
        }
    )
