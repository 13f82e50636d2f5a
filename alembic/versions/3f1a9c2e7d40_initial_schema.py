"""Initial schema: users, leads, calls, catalog, form submissions, insights, stats

Revision ID: 3f1a9c2e7d40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated=True):
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return cols


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('job_title', sa.Text(), nullable=True),
        sa.Column('department', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
    )

    op.create_table('leads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('company', sa.Text(), nullable=True),
        sa.Column('project_type', sa.Text(), nullable=False),
        sa.Column('budget', sa.Integer(), nullable=True),
        sa.Column('timeline', sa.Text(), nullable=True),
        sa.Column('source', sa.Text(), nullable=False),
        sa.Column('source_icon', sa.Text(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('ai_qualified', sa.Boolean(), nullable=True),
        sa.Column('ai_qualification_reason', sa.Text(), nullable=True),
        sa.Column('ai_processed', sa.Boolean(), nullable=True),
        sa.Column('ai_analysis', sa.Text(), nullable=True),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['assigned_to'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leads_created_at', 'leads', ['created_at'])

    op.create_table('calls',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lead_id', sa.Integer(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=True),
        sa.Column('attendees', sa.JSON(), nullable=True),
        sa.Column('ai_scheduled', sa.Boolean(), nullable=True),
        sa.Column('ai_summary', sa.Text(), nullable=True),
        sa.Column('follow_up_needed', sa.Boolean(), nullable=True),
        sa.Column('follow_up_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_calls_lead_id', 'calls', ['lead_id'])

    op.create_table('project_types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_budget', sa.Integer(), nullable=True),
        sa.Column('average_timeline', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table('marketing_channels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('icon', sa.Text(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=True),
        sa.Column('conversion_rate', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table('form_submissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('form_type', sa.Text(), nullable=False),
        sa.Column('raw_data', sa.JSON(), nullable=False),
        sa.Column('source', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.Text(), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('ai_processed', sa.Boolean(), nullable=True),
        sa.Column('ai_response', sa.JSON(), nullable=True),
        sa.Column('lead_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_form_submissions_lead_id', 'form_submissions', ['lead_id'])

    op.create_table('ai_insights',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('icon', sa.Text(), nullable=False),
        sa.Column('action', sa.Text(), nullable=True),
        sa.Column('action_url', sa.Text(), nullable=True),
        sa.Column('priority', sa.Text(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('stats',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('change_percentage', sa.Integer(), nullable=True),
        sa.Column('icon', sa.Text(), nullable=False),
        sa.Column('icon_bg', sa.Text(), nullable=False),
        sa.Column('icon_color', sa.Text(), nullable=False),
        sa.Column('period', sa.Text(), nullable=False),
        sa.Column('date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('stats')
    op.drop_table('ai_insights')
    op.drop_index('ix_form_submissions_lead_id', table_name='form_submissions')
    op.drop_table('form_submissions')
    op.drop_table('marketing_channels')
    op.drop_table('project_types')
    op.drop_index('ix_calls_lead_id', table_name='calls')
    op.drop_table('calls')
    op.drop_index('ix_leads_created_at', table_name='leads')
    op.drop_table('leads')
    op.drop_table('users')
