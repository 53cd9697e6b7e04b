"""create_biolink_schema

Revision ID: 4b7e2c9a1f03
Revises:
Create Date: 2026-10-19 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b7e2c9a1f03'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, profiles and the per-item tables."""
    op.create_table('accounts',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('handle', sa.String(length=64), nullable=True),
        sa.Column('provider', sa.String(length=32), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "(provider = 'local' AND password_hash IS NOT NULL) "
            "OR (provider <> 'local' AND external_id IS NOT NULL)",
            name='ck_accounts_credential',
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_accounts_email'),
        sa.UniqueConstraint('handle', name='uq_accounts_handle'),
        sa.UniqueConstraint('provider', 'external_id', name='uq_accounts_provider_external_id'),
    )

    op.create_table('profiles',
        sa.Column('account_id', sa.UUID(), nullable=False),
        sa.Column('display_title', sa.String(length=200), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False),
        sa.Column('avatar_image', sa.Text(), nullable=False),
        sa.Column('theme', sa.String(length=32), nullable=False),
        sa.Column('social_links', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('outfits', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('schema_version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('account_id'),
    )

    op.create_table('profile_links',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('icon', sa.String(length=64), nullable=True),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('click_count >= 0', name='ck_profile_links_click_count'),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.account_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profile_links_profile_id', 'profile_links', ['profile_id'], unique=False)

    op.create_table('profile_store_items',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('price', sa.String(length=50), nullable=False),
        sa.Column('image', sa.Text(), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=True),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('click_count >= 0', name='ck_profile_store_items_click_count'),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.account_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_profile_store_items_profile_id', 'profile_store_items', ['profile_id'], unique=False
    )


def downgrade() -> None:
    """Drop the Biolink schema."""
    op.drop_index('ix_profile_store_items_profile_id', table_name='profile_store_items')
    op.drop_table('profile_store_items')
    op.drop_index('ix_profile_links_profile_id', table_name='profile_links')
    op.drop_table('profile_links')
    op.drop_table('profiles')
    op.drop_table('accounts')
