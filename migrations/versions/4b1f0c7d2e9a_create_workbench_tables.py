"""create_workbench_tables

Revision ID: 4b1f0c7d2e9a
Revises:
Create Date: 2026-10-18 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1f0c7d2e9a'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, spaces, members, nodes, attachments and verification codes."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('mobile', sa.String(length=32), nullable=True),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('password_changed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('spaces',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_spaces_owner_id', 'spaces', ['owner_id'], unique=False)

    # One row per (space, email), soft-deleted rows included
    op.create_table('members',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('space_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_point', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='inactive'),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "(is_active AND status = 'active') OR (NOT is_active AND status = 'inactive')",
            name='ck_members_status_matches_active',
        ),
        sa.ForeignKeyConstraint(['space_id'], ['spaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('space_id', 'email', name='uq_members_space_email'),
    )
    op.create_index('ix_members_space_user', 'members', ['space_id', 'user_id'], unique=False)

    op.create_table('nodes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('space_id', sa.UUID(), nullable=False),
        sa.Column('parent_id', sa.UUID(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('node_type', sa.String(length=20), nullable=False),
        sa.Column('created_by', sa.UUID(), nullable=True),
        sa.Column('is_rubbish', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_by', sa.UUID(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "node_type IN ('root', 'folder', 'datasheet', 'form', 'dashboard')",
            name='ck_nodes_type',
        ),
        sa.ForeignKeyConstraint(['space_id'], ['spaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['nodes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['members.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['deleted_by'], ['members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_nodes_parent_id', 'nodes', ['parent_id'], unique=False)
    op.create_index(
        'ix_nodes_space_rubbish',
        'nodes',
        ['space_id', 'is_rubbish', 'deleted_at'],
        unique=False,
    )

    op.create_table('attachments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('space_id', sa.UUID(), nullable=False),
        sa.Column('token', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('mime_type', sa.String(length=127), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('is_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('audit_result', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('audited_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['space_id'], ['spaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index('ix_attachments_space_id', 'attachments', ['space_id'], unique=False)

    op.create_table('verification_codes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('validate_type', sa.String(length=20), nullable=False),
        sa.Column('code_hash', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('consumed_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "validate_type IN ('sms_code', 'email_code')",
            name='ck_verification_codes_type',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_verification_codes_user_type',
        'verification_codes',
        ['user_id', 'validate_type'],
        unique=False,
    )


def downgrade() -> None:
    """Drop all workbench tables."""
    op.drop_index('ix_verification_codes_user_type', table_name='verification_codes')
    op.drop_table('verification_codes')
    op.drop_index('ix_attachments_space_id', table_name='attachments')
    op.drop_table('attachments')
    op.drop_index('ix_nodes_space_rubbish', table_name='nodes')
    op.drop_index('ix_nodes_parent_id', table_name='nodes')
    op.drop_table('nodes')
    op.drop_index('ix_members_space_user', table_name='members')
    op.drop_table('members')
    op.drop_index('ix_spaces_owner_id', table_name='spaces')
    op.drop_table('spaces')
    op.drop_table('profiles')
