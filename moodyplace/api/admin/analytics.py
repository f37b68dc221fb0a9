"""Отчёты по событиям сайта."""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import func, select

from config.database import Database
from moodyplace.api.deps import CurrentAdmin, get_db, require_editor
from moodyplace.api.rate_limit import api_limit
from moodyplace.api.responses import success
from moodyplace.models import BlogPost, ContactInquiry, NewsletterSubscriber, SiteAnalytics, Song
from moodyplace.utils.enums import AnalyticsEvent

router = APIRouter()

analytics = SiteAnalytics.__table__
songs = Song.__table__
posts = BlogPost.__table__
inquiries = ContactInquiry.__table__
subscribers = NewsletterSubscriber.__table__

TOP_LIMIT = 5


@router.get("")
@api_limit
async def get_analytics(
    request: Request,
    days: int = Query(30, ge=1, le=365),
    event_type: Optional[str] = Query(None, min_length=1, max_length=50),
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """
    События за последние days дней.

    Returns:
        by_type: [{event_type, count}], by_day: [{day, count}]
    """
    since = datetime.utcnow() - timedelta(days=days)
    conditions = [analytics.c.created_at >= since]
    if event_type:
        conditions.append(analytics.c.event_type == event_type)

    count = func.count().label("count")
    by_type = await db.query(
        select(analytics.c.event_type, count)
        .where(*conditions)
        .group_by(analytics.c.event_type)
        .order_by(count.desc())
    )

    day = func.date(analytics.c.created_at).label("day")
    by_day = await db.query(select(day, func.count().label("count")).where(*conditions).group_by(day).order_by(day))

    return success(
        {
            "period": {"days": days, "since": since},
            "event_type": event_type,
            "total": sum(row["count"] for row in by_type),
            "by_type": by_type,
            "by_day": by_day,
        }
    )


@router.get("/summary")
@api_limit
async def get_summary(
    request: Request,
    current_admin: CurrentAdmin = Depends(require_editor),
    db: Database = Depends(get_db),
):
    """Сводка для дашборда: итоги, неделя, самые популярные песни и записи."""
    week_ago = datetime.utcnow() - timedelta(days=7)

    async def count_events(*conditions) -> int:
        return int(await db.scalar(select(func.count()).select_from(analytics).where(*conditions)) or 0)

    totals = {
        "events": await count_events(),
        "song_plays": await count_events(analytics.c.event_type == AnalyticsEvent.SONG_PLAY.value),
        "blog_views": await count_events(analytics.c.event_type == AnalyticsEvent.BLOG_VIEW.value),
        "contact_submissions": await count_events(analytics.c.event_type == AnalyticsEvent.CONTACT_SUBMITTED.value),
        "active_subscribers": int(
            await db.scalar(select(func.count()).select_from(subscribers).where(subscribers.c.is_active.is_(True)))
            or 0
        ),
    }
    last_7_days = {
        "events": await count_events(analytics.c.created_at >= week_ago),
        "song_plays": await count_events(
            analytics.c.created_at >= week_ago, analytics.c.event_type == AnalyticsEvent.SONG_PLAY.value
        ),
        "blog_views": await count_events(
            analytics.c.created_at >= week_ago, analytics.c.event_type == AnalyticsEvent.BLOG_VIEW.value
        ),
        "new_inquiries": int(
            await db.scalar(select(func.count()).select_from(inquiries).where(inquiries.c.created_at >= week_ago))
            or 0
        ),
    }

    top_songs = await db.query(
        select(songs.c.id, songs.c.title, songs.c.slug, songs.c.play_count)
        .where(songs.c.play_count > 0)
        .order_by(songs.c.play_count.desc(), songs.c.id)
        .limit(TOP_LIMIT)
    )
    top_posts = await db.query(
        select(posts.c.id, posts.c.title, posts.c.slug, posts.c.view_count)
        .where(posts.c.view_count > 0)
        .order_by(posts.c.view_count.desc(), posts.c.id)
        .limit(TOP_LIMIT)
    )

    return success(
        {"totals": totals, "last_7_days": last_7_days, "top_songs": top_songs, "top_posts": top_posts}
    )
