"""initial schema: users, items, claims, notifications

Revision ID: 0001_initial_schema
Revises:
Create Date: 2024-01-08 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum('staff', 'student', name='role_enum')
item_category_enum = sa.Enum(
    'electronics', 'clothing', 'books', 'accessories', 'sports', 'jewelry', 'other',
    name='item_category_enum',
)
item_priority_enum = sa.Enum('normal', 'high', name='item_priority_enum')
item_status_enum = sa.Enum('active', 'claimed', 'archived', name='item_status_enum')
claim_status_enum = sa.Enum('pending', 'approved', 'rejected', 'more_info_needed', name='claim_status_enum')
notification_type_enum = sa.Enum('info', 'success', 'warning', 'error', name='notification_type_enum')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=120), nullable=True),
        sa.Column('last_name', sa.String(length=120), nullable=True),
        sa.Column('student_id', sa.String(length=50), nullable=True),
        sa.Column('role', role_enum, server_default='student', nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('student_id'),
    )
    op.create_table(
        'items',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', item_category_enum, nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('photo_urls', sa.JSON(), nullable=False),
        sa.Column('priority', item_priority_enum, server_default='normal', nullable=False),
        sa.Column('status', item_status_enum, server_default='active', nullable=False),
        sa.Column('staff_notes', sa.Text(), nullable=True),
        sa.Column('found_by_id', sa.BigInteger(), nullable=True),
        sa.Column('claimed_by_id', sa.BigInteger(), nullable=True),
        sa.Column('date_found', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_archived', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['found_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['claimed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_items_status', 'items', ['status'])
    op.create_index('idx_items_category', 'items', ['category'])
    op.create_index('idx_items_location', 'items', ['location'])
    op.create_index('idx_items_date_found', 'items', ['date_found'])

    op.create_table(
        'claims',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('item_id', sa.BigInteger(), nullable=False),
        sa.Column('student_id', sa.BigInteger(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', claim_status_enum, server_default='pending', nullable=False),
        sa.Column('staff_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by_id', sa.BigInteger(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['item_id'], ['items.id']),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reviewed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_claims_item', 'claims', ['item_id'])
    op.create_index('idx_claims_student', 'claims', ['student_id'])
    op.create_index('idx_claims_status', 'claims', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', notification_type_enum, server_default='info', nullable=False),
        sa.Column('read', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('related_item_id', sa.BigInteger(), nullable=True),
        sa.Column('related_claim_id', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['related_item_id'], ['items.id']),
        sa.ForeignKeyConstraint(['related_claim_id'], ['claims.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notifications_user_read', 'notifications', ['user_id', 'read'])


def downgrade():
    op.drop_index('idx_notifications_user_read', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('idx_claims_status', table_name='claims')
    op.drop_index('idx_claims_student', table_name='claims')
    op.drop_index('idx_claims_item', table_name='claims')
    op.drop_table('claims')
    op.drop_index('idx_items_date_found', table_name='items')
    op.drop_index('idx_items_location', table_name='items')
    op.drop_index('idx_items_category', table_name='items')
    op.drop_index('idx_items_status', table_name='items')
    op.drop_table('items')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (
        notification_type_enum,
        claim_status_enum,
        item_status_enum,
        item_priority_enum,
        item_category_enum,
        role_enum,
    ):
        enum.drop(bind, checkfirst=True)
