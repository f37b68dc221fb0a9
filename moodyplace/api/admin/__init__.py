"""Роутеры админ-панели (/api/admin)."""
from fastapi import APIRouter, Depends

from moodyplace.api.admin import analytics, auth, blog, contacts, dashboard, photos, shows, songs, subscribers, users
from moodyplace.api.deps import screen_suspicious_headers

admin_router = APIRouter(dependencies=[Depends(screen_suspicious_headers)])

admin_router.include_router(auth.router, tags=["admin-auth"])
admin_router.include_router(dashboard.router, prefix="/dashboard", tags=["admin"])
admin_router.include_router(songs.router, prefix="/songs", tags=["admin-songs"])
admin_router.include_router(blog.router, prefix="/blog", tags=["admin-blog"])
admin_router.include_router(shows.router, prefix="/shows", tags=["admin-shows"])
admin_router.include_router(photos.router, prefix="/photos", tags=["admin-photos"])
admin_router.include_router(contacts.router, prefix="/contacts", tags=["admin-contacts"])
admin_router.include_router(subscribers.router, prefix="/subscribers", tags=["admin-subscribers"])
admin_router.include_router(analytics.router, prefix="/analytics", tags=["admin-analytics"])
admin_router.include_router(users.router, prefix="/users", tags=["admin-users"])

__all__ = ["admin_router"]
