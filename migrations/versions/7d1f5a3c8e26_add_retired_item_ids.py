"""add_retired_item_ids

Revision ID: 7d1f5a3c8e26
Revises: 4b7e2c9a1f03
Create Date: 2026-10-20 14:03:55.918204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7d1f5a3c8e26'
down_revision: Union[str, Sequence[str], None] = '4b7e2c9a1f03'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Record ids of deleted items so saves never revive them."""
    op.create_table('retired_item_ids',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('kind', sa.String(length=16), nullable=False),
        sa.Column('retired_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', 'kind'),
    )


def downgrade() -> None:
    """Drop the retired item id ledger."""
    op.drop_table('retired_item_ids')
