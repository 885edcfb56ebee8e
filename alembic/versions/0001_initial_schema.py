"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('USER', 'ORGANIZER', 'ADMIN', name='userrole')
dance_style = sa.Enum('SALSA', 'BACHATA', 'KIZOMBA', 'MERENGUE', 'REGGAETON', 'OTHER', name='dancestyle')
skill_level = sa.Enum('ALL', 'BEGINNER', 'INTERMEDIATE', 'ADVANCED', 'PROFESSIONAL', name='skilllevel')
event_type = sa.Enum('WORKSHOP', 'SOCIAL', 'FESTIVAL', 'COMPETITION', 'COURSE', name='eventtype')
event_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'CANCELLED', 'COMPLETED', name='eventstatus')
participant_status = sa.Enum('REGISTERED', 'ATTENDED', 'CANCELLED', name='participantstatus')
notification_type = sa.Enum(
    'NEW_EVENT', 'EVENT_APPROVED', 'EVENT_REJECTED', 'EVENT_REMINDER', 'EVENT_PENDING',
    'ADMIN_EVENT_PENDING', 'EVENT_CANCELLED', 'NEW_COMMENT', 'COMMENT_REPLY', 'FOLLOW',
    'LIKE', 'EVENT_UPDATED', 'EVENT_FAVOURITE', 'SYSTEM',
    name='notificationtype',
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('avatar_handle', sa.String(500), nullable=True),
        sa.Column('bio', sa.String(500), nullable=False, server_default=''),
        sa.Column('role', user_role, nullable=False, server_default='USER'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('preferred_dance_styles', sa.JSON(), nullable=False),
        sa.Column('preferred_skill_level', skill_level, nullable=False, server_default='BEGINNER'),
        sa.Column('notify_email', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notify_push', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notify_new_events', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notify_event_reminders', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('image_handle', sa.String(500), nullable=True),
        sa.Column('organizer_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date_time', sa.DateTime(), nullable=False),
        sa.Column('end_date_time', sa.DateTime(), nullable=True),
        sa.Column('venue', sa.String(200), nullable=False),
        sa.Column('address', sa.String(300), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('dance_style', dance_style, nullable=False),
        sa.Column('skill_level', skill_level, nullable=False, server_default='ALL'),
        sa.Column('event_type', event_type, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(10), nullable=False, server_default='EUR'),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('requirements', sa.String(500), nullable=True),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('contact_whatsapp', sa.String(50), nullable=True),
        sa.Column('facebook_url', sa.String(500), nullable=True),
        sa.Column('instagram_url', sa.String(500), nullable=True),
        sa.Column('website_url', sa.String(500), nullable=True),
        sa.Column('status', event_status, nullable=False, server_default='PENDING'),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_organizer_id', 'events', ['organizer_id'])
    op.create_index('ix_events_date_time', 'events', ['date_time'])
    op.create_index('ix_events_city', 'events', ['city'])
    op.create_index('ix_events_dance_style', 'events', ['dance_style'])
    op.create_index('ix_events_status', 'events', ['status'])

    op.create_table(
        'user_follows',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('follower_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('followed_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('follower_id', 'followed_id', name='uq_user_follows_pair'),
    )
    op.create_index('ix_user_follows_id', 'user_follows', ['id'])
    op.create_index('ix_user_follows_follower_id', 'user_follows', ['follower_id'])
    op.create_index('ix_user_follows_followed_id', 'user_follows', ['followed_id'])

    op.create_table(
        'user_favourite_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_user_favourite_events_pair'),
    )
    op.create_index('ix_user_favourite_events_id', 'user_favourite_events', ['id'])
    op.create_index('ix_user_favourite_events_user_id', 'user_favourite_events', ['user_id'])
    op.create_index('ix_user_favourite_events_event_id', 'user_favourite_events', ['event_id'])

    op.create_table(
        'event_participants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.Column('status', participant_status, nullable=False, server_default='REGISTERED'),
        *_timestamps(),
        sa.UniqueConstraint('event_id', 'user_id', name='uq_event_participants_pair'),
    )
    op.create_index('ix_event_participants_id', 'event_participants', ['id'])
    op.create_index('ix_event_participants_event_id', 'event_participants', ['event_id'])
    op.create_index('ix_event_participants_user_id', 'event_participants', ['user_id'])

    op.create_table(
        'event_gallery_images',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('public_id', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_event_gallery_images_id', 'event_gallery_images', ['id'])
    op.create_index('ix_event_gallery_images_event_id', 'event_gallery_images', ['event_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_comment_id', sa.Integer(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_edited', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('edited_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_comments_id', 'comments', ['id'])
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])
    op.create_index('ix_comments_event_id', 'comments', ['event_id'])
    op.create_index('ix_comments_parent_comment_id', 'comments', ['parent_comment_id'])

    op.create_table(
        'comment_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('comment_id', sa.Integer(), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('comment_id', 'user_id', name='uq_comment_likes_pair'),
    )
    op.create_index('ix_comment_likes_id', 'comment_likes', ['id'])
    op.create_index('ix_comment_likes_comment_id', 'comment_likes', ['comment_id'])
    op.create_index('ix_comment_likes_user_id', 'comment_likes', ['user_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipient_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('notification_type', notification_type, nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.String(500), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='SET NULL'), nullable=True),
        sa.Column('comment_id', sa.Integer(), sa.ForeignKey('comments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('from_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('action_url', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])
    op.create_index('ix_notifications_notification_type', 'notifications', ['notification_type'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('comment_likes')
    op.drop_table('comments')
    op.drop_table('event_gallery_images')
    op.drop_table('event_participants')
    op.drop_table('user_favourite_events')
    op.drop_table('user_follows')
    op.drop_table('events')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (notification_type, participant_status, event_status, event_type, skill_level, dance_style, user_role):
        enum_type.drop(bind, checkfirst=True)
