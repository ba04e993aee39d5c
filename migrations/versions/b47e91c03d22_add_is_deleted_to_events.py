"""Add is_deleted flag to events (soft delete)

Revision ID: b47e91c03d22
Revises: 8c1d2e4f6a10
Create Date: 2025-06-03 09:47:51.602311

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b47e91c03d22'
down_revision = '8c1d2e4f6a10'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.add_column(sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()))


def downgrade():
    with op.batch_alter_table('events', schema=None) as batch_op:
        batch_op.drop_column('is_deleted')
