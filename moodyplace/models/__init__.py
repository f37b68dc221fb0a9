"""Модели базы данных."""
from moodyplace.models.admin_user import AdminUser
from moodyplace.models.blog_post import BlogPost
from moodyplace.models.contact_inquiry import ContactInquiry
from moodyplace.models.newsletter_subscriber import NewsletterSubscriber
from moodyplace.models.photo import Photo
from moodyplace.models.show import Show
from moodyplace.models.site_analytics import SiteAnalytics
from moodyplace.models.song import Song

__all__ = [
    "AdminUser",
    "BlogPost",
    "ContactInquiry",
    "NewsletterSubscriber",
    "Photo",
    "Show",
    "SiteAnalytics",
    "Song",
]
