"""Initial schema - content platform

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _lifecycle_columns():
    return [
        sa.Column('slug', sa.String(256), unique=True, nullable=False),
        sa.Column('title', sa.String(256), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.String(50), nullable=False, server_default='draft', index=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.String(500), nullable=True),
        sa.Column('rejection_details', sa.Text(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # Profiles keyed by the identity provider's user id
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('name', sa.String(256), nullable=True),
        sa.Column('email', sa.String(256), nullable=True),
        sa.Column('position', sa.String(256), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('is_team_member', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('team_role', sa.String(256), nullable=True),
        sa.Column('show_on_website', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    # Taxonomy
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(100), unique=True, nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('slug', sa.String(50), unique=True, nullable=False),
    )

    # Publications
    op.create_table(
        'publications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_lifecycle_columns(),
        sa.Column('abstract', sa.String(1000), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('pdf_url', sa.Text(), nullable=True),
        sa.Column('author_id', sa.String(255), sa.ForeignKey('profiles.id'), nullable=True, index=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id'), nullable=True),
        sa.Column('featured_order', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        'ix_publications_status_published_at', 'publications', ['status', 'published_at']
    )

    # Policies and case studies
    op.create_table(
        'policies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_lifecycle_columns(),
        sa.Column('summary', sa.String(1000), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('author_id', sa.String(255), sa.ForeignKey('profiles.id'), nullable=True, index=True),
        *_timestamps(),
    )
    op.create_table(
        'case_studies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_lifecycle_columns(),
        sa.Column('summary', sa.String(1000), nullable=True),
        sa.Column('policy_id', sa.Integer(), sa.ForeignKey('policies.id'), nullable=True, index=True),
        sa.Column('author_id', sa.String(255), sa.ForeignKey('profiles.id'), nullable=True, index=True),
        *_timestamps(),
    )

    # Events and initiatives
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(256), nullable=False),
        sa.Column('slug', sa.String(256), unique=True, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(256), nullable=True),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('registration_url', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='upcoming'),
        sa.Column('is_virtual', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('virtual_link', sa.Text(), nullable=True),
        sa.Column('max_attendees', sa.Integer(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_table(
        'initiatives',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(256), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('icon_name', sa.String(100), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    # Directory
    op.create_table(
        'partners',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(256), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('show_on_website', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(256), nullable=False),
        sa.Column('role', sa.String(256), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('show_on_website', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    # Contact form
    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(256), nullable=False),
        sa.Column('email', sa.String(256), nullable=False),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('subject', sa.String(256), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('inquiry_type', sa.String(50), nullable=False, server_default='general'),
        sa.Column('status', sa.String(50), nullable=False, server_default='new', index=True),
        *_timestamps(),
    )

    # Memberships
    op.create_table(
        'membership_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(1000), nullable=True),
        sa.Column('benefits', sa.String(1000), nullable=True),
        sa.Column('requires_approval', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_table(
        'memberships',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), sa.ForeignKey('profiles.id'), nullable=False, index=True),
        sa.Column('membership_type_id', sa.Integer(), sa.ForeignKey('membership_types.id'), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # Append-only audit log
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('action', sa.String(100), nullable=False, index=True),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(255), nullable=False),
        sa.Column('actor_id', sa.String(255), nullable=True, index=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index('ix_audit_logs_entity', 'audit_logs', ['entity_type', 'entity_id'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_entity', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_table('memberships')
    op.drop_table('membership_types')
    op.drop_table('contact_submissions')
    op.drop_table('team_members')
    op.drop_table('partners')
    op.drop_table('initiatives')
    op.drop_table('events')
    op.drop_table('case_studies')
    op.drop_table('policies')
    op.drop_index('ix_publications_status_published_at', table_name='publications')
    op.drop_table('publications')
    op.drop_table('tags')
    op.drop_table('categories')
    op.drop_table('profiles')
