"""Create site tables

Revision ID: 001_create_site_tables
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_create_site_tables'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade():
    # Администраторы
    op.create_table(
        'admin_users',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='editor'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('failed_login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_admin_users_username'), 'admin_users', ['username'], unique=True)
    op.create_index(op.f('ix_admin_users_email'), 'admin_users', ['email'], unique=True)
    op.create_index(op.f('ix_admin_users_is_active'), 'admin_users', ['is_active'], unique=False)

    # Песни
    op.create_table(
        'songs',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('lyrics', sa.Text(), nullable=True),
        sa.Column('release_date', sa.Date(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('spotify_url', sa.String(length=500), nullable=True),
        sa.Column('apple_music_url', sa.String(length=500), nullable=True),
        sa.Column('youtube_url', sa.String(length=500), nullable=True),
        sa.Column('soundcloud_url', sa.String(length=500), nullable=True),
        sa.Column('audio_file_path', sa.String(length=500), nullable=True),
        sa.Column('cover_image_path', sa.String(length=500), nullable=True),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('play_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_songs_slug'), 'songs', ['slug'], unique=True)
    op.create_index(op.f('ix_songs_featured'), 'songs', ['featured'], unique=False)
    op.create_index(op.f('ix_songs_is_published'), 'songs', ['is_published'], unique=False)

    # Блог
    op.create_table(
        'blog_posts',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('excerpt', sa.String(length=500), nullable=True),
        sa.Column('featured_image', sa.String(length=500), nullable=True),
        sa.Column('meta_title', sa.String(length=60), nullable=True),
        sa.Column('meta_description', sa.String(length=160), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('read_time_minutes', sa.Integer(), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('author_id', sa.BigInteger(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['author_id'], ['admin_users.id'], ondelete='SET NULL')
    )
    op.create_index(op.f('ix_blog_posts_slug'), 'blog_posts', ['slug'], unique=True)
    op.create_index(op.f('ix_blog_posts_is_published'), 'blog_posts', ['is_published'], unique=False)
    op.create_index(op.f('ix_blog_posts_published_at'), 'blog_posts', ['published_at'], unique=False)

    # Концерты
    op.create_table(
        'shows',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('venue', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state_province', sa.String(length=50), nullable=True),
        sa.Column('country', sa.String(length=50), nullable=False),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('doors_time', sa.String(length=8), nullable=True),
        sa.Column('show_time', sa.String(length=8), nullable=True),
        sa.Column('ticket_url', sa.String(length=500), nullable=True),
        sa.Column('ticket_price', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('age_restriction', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='upcoming'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_shows_event_date'), 'shows', ['event_date'], unique=False)
    op.create_index(op.f('ix_shows_status'), 'shows', ['status'], unique=False)

    # Фотографии
    op.create_table(
        'photos',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('caption', sa.String(length=1000), nullable=True),
        sa.Column('file_path', sa.String(length=500), nullable=False),
        sa.Column('medium_path', sa.String(length=500), nullable=True),
        sa.Column('thumbnail_path', sa.String(length=500), nullable=True),
        sa.Column('alt_text', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='professional'),
        sa.Column('photographer', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_press_approved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_photos_category'), 'photos', ['category'], unique=False)

    # Обращения
    op.create_table(
        'contact_inquiries',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('company_organization', sa.String(length=255), nullable=True),
        sa.Column('inquiry_type', sa.String(length=20), nullable=False, server_default='general'),
        sa.Column('subject', sa.String(length=255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('preferred_contact_method', sa.String(length=10), nullable=True),
        sa.Column('urgency', sa.String(length=10), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='new'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_contact_inquiries_email'), 'contact_inquiries', ['email'], unique=False)
    op.create_index(op.f('ix_contact_inquiries_status'), 'contact_inquiries', ['status'], unique=False)
    op.create_index(op.f('ix_contact_inquiries_created_at'), 'contact_inquiries', ['created_at'], unique=False)

    # Подписчики
    op.create_table(
        'newsletter_subscribers',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('source', sa.String(length=50), nullable=False, server_default='website'),
        sa.Column('subscriber_type', sa.String(length=20), nullable=False, server_default='fan'),
        sa.Column('interests', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('confirmation_token', sa.String(length=64), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('unsubscribed_at', sa.DateTime(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('confirmation_token')
    )
    op.create_index(op.f('ix_newsletter_subscribers_email'), 'newsletter_subscribers', ['email'], unique=True)
    op.create_index(op.f('ix_newsletter_subscribers_is_active'), 'newsletter_subscribers', ['is_active'], unique=False)

    # События сайта и аутентификации
    op.create_table(
        'site_analytics',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('event_data', sa.JSON(), nullable=True),
        sa.Column('page_url', sa.String(length=500), nullable=True),
        sa.Column('referrer', sa.String(length=500), nullable=True),
        sa.Column('user_ip', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('device_type', sa.String(length=20), nullable=True),
        sa.Column('admin_user_id', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['admin_user_id'], ['admin_users.id'], ondelete='SET NULL')
    )
    op.create_index(op.f('ix_site_analytics_event_type'), 'site_analytics', ['event_type'], unique=False)
    op.create_index(op.f('ix_site_analytics_admin_user_id'), 'site_analytics', ['admin_user_id'], unique=False)
    op.create_index(op.f('ix_site_analytics_created_at'), 'site_analytics', ['created_at'], unique=False)


def downgrade():
    op.drop_table('site_analytics')
    op.drop_table('newsletter_subscribers')
    op.drop_table('contact_inquiries')
    op.drop_table('photos')
    op.drop_table('shows')
    op.drop_table('blog_posts')
    op.drop_table('songs')
    op.drop_table('admin_users')
