"""create_screen_time_tables

Revision ID: 3f9a2c71d4e0
Revises:
Create Date: 2026-10-19 10:12:41.503118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a2c71d4e0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'adjustment_type',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('adjustment', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'adjustment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('adjustment_type_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['adjustment_type_id'], ['adjustment_type.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_adjustment_adjustment_type_id', 'adjustment', ['adjustment_type_id'])
    op.create_index('ix_adjustment_created_at_id', 'adjustment', ['created_at', 'id'])

    op.create_table(
        'time_entry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('time', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_time_entry_created_at_id', 'time_entry', ['created_at', 'id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_time_entry_created_at_id', table_name='time_entry')
    op.drop_table('time_entry')
    op.drop_index('ix_adjustment_created_at_id', table_name='adjustment')
    op.drop_index('ix_adjustment_adjustment_type_id', table_name='adjustment')
    op.drop_table('adjustment')
    op.drop_table('adjustment_type')
