"""create document tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_0001'
down_revision = None
branch_labels = None
depends_on = None


def document_columns() -> list[sa.Column]:
    """Columns shared by every document table (from Document)."""
    return [
        sa.Column('id', sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            'partition_key',
            sa.String(length=64),
            nullable=False,
            comment='Fixed per document type: users, agents or services'
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('schema_version', sa.String(length=16), nullable=False),
    ]


def upgrade() -> None:
    """Create the users, agents and services tables."""

    op.create_table(
        'users',
        *document_columns(),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False, comment='bcrypt hash'),
        sa.Column('role', sa.String(length=32), nullable=False, comment='Admin, Manager or User'),
        sa.Column(
            'linked_service_names',
            sa.JSON(),
            nullable=False,
            comment='Names of services a non-admin user may access'
        ),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    op.create_table(
        'agents',
        *document_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False, comment='Base address of the agent API'),
        sa.Column('api_key', sa.String(length=128), nullable=False),
        sa.Column('is_api_key_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_agents_api_key', 'agents', ['api_key'], unique=False)

    # agent_id is a plain reference, not a foreign key
    op.create_table(
        'services',
        *document_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=64), nullable=True),
        sa.Column('version', sa.String(length=64), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('port', sa.Integer(), nullable=True),
        sa.Column('agent_id', sa.String(length=36), nullable=True),
    )
    op.create_index('ix_services_name', 'services', ['name'], unique=False)
    op.create_index('ix_services_agent_id', 'services', ['agent_id'], unique=False)


def downgrade() -> None:
    """Drop the document tables and their indexes."""

    op.drop_index('ix_services_agent_id', table_name='services')
    op.drop_index('ix_services_name', table_name='services')
    op.drop_table('services')

    op.drop_index('ix_agents_api_key', table_name='agents')
    op.drop_table('agents')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
