"""Initial schema with owners, recipes and ordered recipe children

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _child_fk() -> sa.Column:
    return sa.Column(
        "recipe_id", sa.String(36), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )


def upgrade() -> None:
    # Owners table
    op.create_table(
        "owners",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("profile_photo_ref", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # Recipes table (library rows have a dense sort_order, inbox rows NULL)
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("symbol", sa.String(80), nullable=False),
        sa.Column("font_name", sa.String(80), nullable=False),
        sa.Column("accent_color", sa.String(7), nullable=False),
        sa.Column("secondary_color", sa.String(7), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("place_name", sa.String(200), nullable=True),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("owners.id", ondelete="SET NULL"), nullable=True),
        sa.Column("in_inbox", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer, nullable=True),
        sa.Column("sender_name", sa.String(200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_recipes_partition_sort", "recipes", ["in_inbox", "sort_order"])
    op.create_index("ix_recipes_partition_created", "recipes", ["in_inbox", "created_at"])

    # Ingredients
    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.String(36), primary_key=True),
        _child_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.String(100), nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False),
    )
    op.create_index("ix_recipe_ingredients_recipe_id", "recipe_ingredients", ["recipe_id"])

    # Steps
    op.create_table(
        "recipe_steps",
        sa.Column("id", sa.String(36), primary_key=True),
        _child_fk(),
        sa.Column("instruction", sa.Text, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False),
    )
    op.create_index("ix_recipe_steps_recipe_id", "recipe_steps", ["recipe_id"])

    # Ancestry (the recipe's journey)
    op.create_table(
        "recipe_ancestry_steps",
        sa.Column("id", sa.String(36), primary_key=True),
        _child_fk(),
        sa.Column("country", sa.String(120), nullable=False),
        sa.Column("region", sa.String(120), nullable=True),
        sa.Column("rough_date", sa.String(80), nullable=True),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("generation", sa.Integer, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False),
    )
    op.create_index("ix_recipe_ancestry_steps_recipe_id", "recipe_ancestry_steps", ["recipe_id"])

    # Photos
    op.create_table(
        "recipe_photos",
        sa.Column("id", sa.String(36), primary_key=True),
        _child_fk(),
        sa.Column("blob_ref", sa.String(500), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_recipe_photos_recipe_id", "recipe_photos", ["recipe_id"])

    # Audio notes (newest first, no sort_order)
    op.create_table(
        "recipe_audio_notes",
        sa.Column("id", sa.String(36), primary_key=True),
        _child_fk(),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("duration", sa.Float, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_recipe_audio_notes_recipe_created", "recipe_audio_notes", ["recipe_id", "created_at"])


def downgrade() -> None:
    op.drop_table("recipe_audio_notes")
    op.drop_table("recipe_photos")
    op.drop_table("recipe_ancestry_steps")
    op.drop_table("recipe_steps")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("owners")
