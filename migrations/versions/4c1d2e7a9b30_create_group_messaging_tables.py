"""create_group_messaging_tables

Revision ID: 4c1d2e7a9b30
Revises:
Create Date: 2026-10-19 09:12:04.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create groups, group_memberships and messages tables."""
    op.create_table('groups',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('owner_id', sa.String(length=255), nullable=False),
        sa.Column('max_members', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.CheckConstraint("type IN ('open', 'private')", name='ck_groups_type'),
        sa.CheckConstraint('max_members >= 2', name='ck_groups_max_members'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_groups_owner_id', 'groups', ['owner_id'], unique=False)

    op.create_table('group_memberships',
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('member', 'pending', 'banished')",
            name='ck_group_memberships_status',
        ),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('group_id', 'user_id'),
    )
    op.create_index(
        'ix_group_memberships_user_id', 'group_memberships', ['user_id'], unique=False
    )

    op.create_table('messages',
        sa.Column('seq', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('sender_id', sa.String(length=255), nullable=False),
        sa.Column('encrypted_text', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('seq'),
        sa.UniqueConstraint('id'),
    )
    op.create_index('ix_messages_group_id', 'messages', ['group_id'], unique=False)
    op.create_index('ix_messages_timestamp', 'messages', ['timestamp'], unique=False)


def downgrade() -> None:
    """Drop group messaging tables."""
    op.drop_index('ix_messages_timestamp', table_name='messages')
    op.drop_index('ix_messages_group_id', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_group_memberships_user_id', table_name='group_memberships')
    op.drop_table('group_memberships')
    op.drop_index('ix_groups_owner_id', table_name='groups')
    op.drop_table('groups')
