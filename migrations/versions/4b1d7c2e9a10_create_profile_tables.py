"""create_profile_tables

Revision ID: 4b1d7c2e9a10
Revises:
Create Date: 2026-03-02 10:14:52.418306

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1d7c2e9a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, profile_notes and profile_collaborators tables."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('description', sa.String(length=50), nullable=True),
        sa.Column('visibility', sa.String(length=10), server_default='private', nullable=False),
        sa.Column('image_data', sa.Text(), nullable=True),
        sa.Column('punch_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('hug_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('kiss_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('notes_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint("visibility IN ('public', 'private')", name='check_profile_visibility'),
        sa.CheckConstraint(
            'punch_count >= 0 AND hug_count >= 0 AND kiss_count >= 0 AND notes_count >= 0',
            name='check_profile_counters',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_profiles_owner_id'), 'profiles', ['owner_id'], unique=False)
    op.create_index(op.f('ix_profiles_created_at'), 'profiles', ['created_at'], unique=False)

    op.create_table('profile_notes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('emotion_type', sa.String(length=20), server_default='feelings', nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_profile_notes_profile_id'), 'profile_notes', ['profile_id'], unique=False)

    op.create_table('profile_collaborators',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('profile_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('profile_id', 'user_id', name='uq_profile_collaborator'),
    )
    op.create_index(op.f('ix_profile_collaborators_profile_id'), 'profile_collaborators', ['profile_id'], unique=False)
    op.create_index(op.f('ix_profile_collaborators_user_id'), 'profile_collaborators', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop the profile tables."""
    op.drop_index(op.f('ix_profile_collaborators_user_id'), table_name='profile_collaborators')
    op.drop_index(op.f('ix_profile_collaborators_profile_id'), table_name='profile_collaborators')
    op.drop_table('profile_collaborators')
    op.drop_index(op.f('ix_profile_notes_profile_id'), table_name='profile_notes')
    op.drop_table('profile_notes')
    op.drop_index(op.f('ix_profiles_created_at'), table_name='profiles')
    op.drop_index(op.f('ix_profiles_owner_id'), table_name='profiles')
    op.drop_table('profiles')
