"""Публичный JSON API."""
from fastapi import APIRouter

from moodyplace.api.public import blog, contact, photos, shows, site, songs

public_router = APIRouter()

public_router.include_router(site.router, tags=["site"])
public_router.include_router(songs.router, prefix="/songs", tags=["songs"])
public_router.include_router(blog.router, prefix="/blog", tags=["blog"])
public_router.include_router(shows.router, prefix="/shows", tags=["shows"])
public_router.include_router(photos.router, prefix="/photos", tags=["photos"])
public_router.include_router(contact.router, tags=["forms"])
