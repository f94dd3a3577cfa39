"""Add site options table

Revision ID: 4c1e7a9d2b30
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = '4c1e7a9d2b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'site_options',
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('key', name='pk_site_options'),
    )


def downgrade():
    op.drop_table('site_options')
