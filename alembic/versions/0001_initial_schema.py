"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('uuid')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'recipes',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('user_uuid', sa.Uuid(), nullable=False),
        sa.Column('tag_string', sa.String(), nullable=False),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_uuid'], ['users.uuid']),
        sa.PrimaryKeyConstraint('uuid')
    )
    op.create_index(op.f('ix_recipes_user_uuid'), 'recipes', ['user_uuid'], unique=False)
    op.create_index(op.f('ix_recipes_created_at'), 'recipes', ['created_at'], unique=False)

    op.create_table(
        'files',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('recipe_uuid', sa.Uuid(), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.Column('image', sa.Boolean(), nullable=False),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_uuid'], ['recipes.uuid']),
        sa.PrimaryKeyConstraint('uuid')
    )
    op.create_index(op.f('ix_files_recipe_uuid'), 'files', ['recipe_uuid'], unique=False)

    op.create_table(
        'recipe_steps',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('recipe_uuid', sa.Uuid(), nullable=False),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('instruction', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_uuid'], ['recipes.uuid']),
        sa.PrimaryKeyConstraint('uuid')
    )
    op.create_index(op.f('ix_recipe_steps_recipe_uuid'), 'recipe_steps', ['recipe_uuid'], unique=False)

    op.create_table(
        'step_ingredients',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('recipe_step_uuid', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('text', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_step_uuid'], ['recipe_steps.uuid']),
        sa.PrimaryKeyConstraint('uuid')
    )
    op.create_index(op.f('ix_step_ingredients_recipe_step_uuid'), 'step_ingredients', ['recipe_step_uuid'], unique=False)

    op.create_table(
        'tags',
        sa.Column('uuid', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('uuid'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'recipe_tags',
        sa.Column('recipe_uuid', sa.Uuid(), nullable=False),
        sa.Column('tag_uuid', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['recipe_uuid'], ['recipes.uuid']),
        sa.ForeignKeyConstraint(['tag_uuid'], ['tags.uuid']),
        sa.PrimaryKeyConstraint('recipe_uuid', 'tag_uuid')
    )

    op.create_table(
        'user_connections',
        sa.Column('source_user_uuid', sa.Uuid(), nullable=False),
        sa.Column('target_user_uuid', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['source_user_uuid'], ['users.uuid']),
        sa.ForeignKeyConstraint(['target_user_uuid'], ['users.uuid']),
        sa.PrimaryKeyConstraint('source_user_uuid', 'target_user_uuid')
    )


def downgrade() -> None:
    op.drop_table('user_connections')
    op.drop_table('recipe_tags')
    op.drop_table('tags')
    op.drop_index(op.f('ix_step_ingredients_recipe_step_uuid'), table_name='step_ingredients')
    op.drop_table('step_ingredients')
    op.drop_index(op.f('ix_recipe_steps_recipe_uuid'), table_name='recipe_steps')
    op.drop_table('recipe_steps')
    op.drop_index(op.f('ix_files_recipe_uuid'), table_name='files')
    op.drop_table('files')
    op.drop_index(op.f('ix_recipes_created_at'), table_name='recipes')
    op.drop_index(op.f('ix_recipes_user_uuid'), table_name='recipes')
    op.drop_table('recipes')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
