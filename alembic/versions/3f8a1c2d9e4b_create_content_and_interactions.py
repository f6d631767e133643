"""create content and profile interactions tables

Revision ID: 3f8a1c2d9e4b
Revises:
Create Date: 2026-10-19 10:12:41.208113
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f8a1c2d9e4b'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'content',
        sa.Column('id', sa.String(24), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.Enum('Movie', 'Series', name='contentcategory'), nullable=False),
        sa.Column('genre', sa.String(255), nullable=False),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('backdrop', sa.String(500), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('rating', sa.String(20), nullable=True),
        sa.Column('runtime', sa.String(50), nullable=True),
        sa.Column('director', sa.String(255), nullable=True),
        sa.Column('cast', sa.Text(), nullable=True),
        sa.Column('video_file', sa.String(500), nullable=True),
        sa.Column('popularity', sa.Float(), nullable=True),
        sa.Column('likes', sa.Integer(), nullable=True),
        sa.Column('tmdb_id', sa.BigInteger(), nullable=True, unique=True),
        sa.Column(
            'section',
            sa.Enum('continue', 'trending', 'movies', 'series', name='contentsection'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_content_category', 'content', ['category'])
    op.create_index('ix_content_popular', 'content', ['likes', 'popularity'])

    op.create_table(
        'profile_interactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('profile_id', sa.String(64), nullable=False),
        sa.Column('liked_content', sa.JSON(), nullable=True),
        sa.Column('watch_progress', sa.JSON(), nullable=True),
        sa.Column('search_history', sa.JSON(), nullable=True),
        sa.Column('activity_log', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_profile_interactions_profile_id', 'profile_interactions', ['profile_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_profile_interactions_profile_id', table_name='profile_interactions')
    op.drop_table('profile_interactions')
    op.drop_index('ix_content_popular', table_name='content')
    op.drop_index('ix_content_category', table_name='content')
    op.drop_table('content')
    sa.Enum(name='contentsection').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='contentcategory').drop(op.get_bind(), checkfirst=True)
