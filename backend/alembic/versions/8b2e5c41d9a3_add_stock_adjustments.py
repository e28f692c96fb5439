"""Add stock adjustments

Revision ID: 8b2e5c41d9a3
Revises: 3f1c2a9d7e10
Create Date: 2026-10-19 15:40:02.771930

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '8b2e5c41d9a3'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9d7e10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'stock_adjustments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('adjustment_number', sa.String(length=32), nullable=False),
        sa.Column('reason', sa.String(), nullable=False),
        sa.Column('notes', sa.String(), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total_items', sa.Integer(), nullable=False),
        sa.Column('total_increase', sa.Integer(), nullable=False),
        sa.Column('total_decrease', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(op.f('ix_stock_adjustments_id'), 'stock_adjustments', ['id'], unique=False)
    op.create_index(op.f('ix_stock_adjustments_admin_id'), 'stock_adjustments', ['admin_id'], unique=False)
    op.create_index(op.f('ix_stock_adjustments_adjustment_number'), 'stock_adjustments',
                    ['adjustment_number'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('stock_adjustments')
