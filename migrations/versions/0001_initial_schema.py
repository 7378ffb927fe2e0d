"""projects, miniatures, photos, painting_recipes

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("game_system", sa.String(50), nullable=False),
        sa.Column("army", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint(
            "game_system IN ('age_of_sigmar', 'horus_heresy', 'warhammer_40k')",
            name="ck_projects_game_system",
        ),
    )
    op.create_index("ix_projects_game_system", "projects", ["game_system"], unique=False)

    op.create_table(
        "miniatures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Integer(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("miniature_type", sa.String(20), nullable=False),
        sa.Column("progress_status", sa.String(50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint("miniature_type IN ('troop', 'character')", name="ck_miniatures_type"),
        sa.CheckConstraint(
            "progress_status IN ('unpainted', 'primed', 'basecoated', 'detailed', 'completed')",
            name="ck_miniatures_progress_status",
        ),
    )
    op.create_index("ix_miniatures_project_id", "miniatures", ["project_id"], unique=False)

    op.create_table(
        "photos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "miniature_id",
            sa.Integer(),
            sa.ForeignKey("miniatures.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("mime_type", sa.String(100), nullable=True),
        sa.Column("uploaded_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_photos_miniature_id", "photos", ["miniature_id"], unique=False)

    op.create_table(
        "painting_recipes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("miniature_type", sa.String(20), nullable=False),
        sa.Column("steps", sa.Text(), nullable=False),
        sa.Column("paints_used", sa.Text(), nullable=True),
        sa.Column("techniques", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint("miniature_type IN ('troop', 'character')", name="ck_recipes_type"),
    )
    op.create_index("ix_painting_recipes_miniature_type", "painting_recipes", ["miniature_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_painting_recipes_miniature_type", table_name="painting_recipes")
    op.drop_table("painting_recipes")
    op.drop_index("ix_photos_miniature_id", table_name="photos")
    op.drop_table("photos")
    op.drop_index("ix_miniatures_project_id", table_name="miniatures")
    op.drop_table("miniatures")
    op.drop_index("ix_projects_game_system", table_name="projects")
    op.drop_table("projects")
