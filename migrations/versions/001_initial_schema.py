"""Initial schema - godowns, godown items and stock check reports

Revision ID: 001
Revises:
Create Date: 2025-01-10 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create godowns table
    op.create_table(
        'godowns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=255), nullable=True),
        sa.Column('state', sa.String(length=255), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_godowns'),
        sa.UniqueConstraint('name', name='uq_godowns_name')
    )

    # Create godown_items table
    op.create_table(
        'godown_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('godown_id', sa.Integer(), nullable=False),
        sa.Column('barcode', sa.String(length=100), nullable=False),
        sa.Column('item_code', sa.String(length=255), nullable=True),
        sa.Column('item_name', sa.String(length=500), nullable=True),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['godown_id'], ['godowns.id'], name='fk_godown_items_godown_id_godowns', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_godown_items')
    )
    op.create_index('ix_godown_items_godown_id', 'godown_items', ['godown_id'])
    op.create_index('idx_godown_items_barcode', 'godown_items', ['godown_id', 'barcode'])

    # Create stock_check_reports table
    op.create_table(
        'stock_check_reports',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('godown_id', sa.Integer(), nullable=False),
        sa.Column('godown_name', sa.String(length=255), nullable=False),
        sa.Column('product_type', sa.String(length=255), nullable=False),
        sa.Column('product_prefix', sa.String(length=20), nullable=False),
        sa.Column('expected_count', sa.Integer(), nullable=False),
        sa.Column('scanned_count', sa.Integer(), nullable=False),
        sa.Column('missing_count', sa.Integer(), nullable=False),
        sa.Column('wrong_scans_count', sa.Integer(), nullable=False),
        sa.Column('scanned_items', sa.JSON(), nullable=False),
        sa.Column('missing_items', sa.JSON(), nullable=False),
        sa.Column('wrong_scans', sa.JSON(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('submitted_by', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['godown_id'], ['godowns.id'], name='fk_stock_check_reports_godown_id_godowns', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_stock_check_reports')
    )
    op.create_index('ix_stock_check_reports_godown_id', 'stock_check_reports', ['godown_id'])
    op.create_index('idx_stock_check_reports_status', 'stock_check_reports', ['status'])
    op.create_index('idx_stock_check_reports_submitted_at', 'stock_check_reports', ['submitted_at'])


def downgrade() -> None:
    op.drop_table('stock_check_reports')
    op.drop_table('godown_items')
    op.drop_table('godowns')
