"""miniature <-> painting recipe links (many-to-many)

Revision ID: 0002_miniature_recipes
Revises: 0001_initial_schema
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_miniature_recipes"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "miniature_recipes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "miniature_id",
            sa.Integer(),
            sa.ForeignKey("miniatures.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "recipe_id",
            sa.Integer(),
            sa.ForeignKey("painting_recipes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.UniqueConstraint("miniature_id", "recipe_id", name="uq_miniature_recipes_pair"),
    )
    op.create_index("ix_miniature_recipes_miniature_id", "miniature_recipes", ["miniature_id"], unique=False)
    op.create_index("ix_miniature_recipes_recipe_id", "miniature_recipes", ["recipe_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_miniature_recipes_recipe_id", table_name="miniature_recipes")
    op.drop_index("ix_miniature_recipes_miniature_id", table_name="miniature_recipes")
    op.drop_table("miniature_recipes")
