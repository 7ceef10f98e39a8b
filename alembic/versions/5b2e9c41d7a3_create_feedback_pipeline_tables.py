"""create_feedback_pipeline_tables

Revision ID: 5b2e9c41d7a3
Revises:
Create Date: 2026-10-19 10:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b2e9c41d7a3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'feedback',
        sa.Column('id', sa.String(length=200), nullable=False),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('label', sa.String(), nullable=True),
        sa.Column('author', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ingested_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('raw_metadata', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_feedback_source', 'feedback', ['source'], unique=False)
    op.create_index('idx_feedback_created', 'feedback', ['created_at'], unique=False)

    op.create_table(
        'classifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('feedback_id', sa.String(), nullable=False),
        sa.Column('urgency', sa.Integer(), nullable=False),
        sa.Column('sentiment', sa.Integer(), nullable=False),
        sa.Column('impact', sa.Integer(), nullable=False),
        sa.Column('actionability', sa.Integer(), nullable=False),
        sa.Column('route', sa.String(), nullable=True),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('reasoning', sa.String(), nullable=True),
        sa.Column('classified_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('urgency BETWEEN 1 AND 5', name='ck_classifications_urgency'),
        sa.CheckConstraint('sentiment BETWEEN -2 AND 2', name='ck_classifications_sentiment'),
        sa.CheckConstraint('impact BETWEEN 1 AND 5', name='ck_classifications_impact'),
        sa.CheckConstraint('actionability BETWEEN 1 AND 5', name='ck_classifications_actionability'),
        sa.ForeignKeyConstraint(['feedback_id'], ['feedback.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('feedback_id'),
    )
    op.create_index('idx_classifications_route', 'classifications', ['route'], unique=False)
    op.create_index('idx_classifications_urgency', 'classifications', ['urgency'], unique=False)

    op.create_table(
        'signals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('feedback_id', sa.String(), nullable=False),
        sa.Column('signal_type', sa.String(), nullable=False),
        sa.Column('signal_value', sa.String(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['feedback_id'], ['feedback.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_signals_feedback_id'), 'signals', ['feedback_id'], unique=False)
    op.create_index('idx_signals_type', 'signals', ['signal_type'], unique=False)

    op.create_table(
        'summaries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('period_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('period_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('summary_type', sa.String(length=20), nullable=False),
        sa.Column('content', sa.String(), nullable=False),
        sa.Column('metrics', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'kv_entries',
        sa.Column('key', sa.String(length=500), nullable=False),
        sa.Column('value', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )
    op.create_index(op.f('ix_kv_entries_expires_at'), 'kv_entries', ['expires_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_kv_entries_expires_at'), table_name='kv_entries')
    op.drop_table('kv_entries')
    op.drop_table('summaries')
    op.drop_index('idx_signals_type', table_name='signals')
    op.drop_index(op.f('ix_signals_feedback_id'), table_name='signals')
    op.drop_table('signals')
    op.drop_index('idx_classifications_urgency', table_name='classifications')
    op.drop_index('idx_classifications_route', table_name='classifications')
    op.drop_table('classifications')
    op.drop_index('idx_feedback_created', table_name='feedback')
    op.drop_index('idx_feedback_source', table_name='feedback')
    op.drop_table('feedback')
