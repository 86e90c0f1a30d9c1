"""SQLAlchemy ORM models for Recipe Voyage.

Tables:
- owners: People a recipe can be attributed to (weak reference, lookup only)
- recipes: Root aggregate, partitioned into library (ordered) and inbox
- recipe_ingredients / recipe_steps / recipe_ancestry_steps / recipe_photos:
  Ordered child collections, each with a dense 0-based sort_order per recipe
- recipe_audio_notes: Narration clips, newest first, backed by files on disk
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    Integer,
    Boolean,
    Float,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import false

from .db import Base
from .orm_types import UTCDateTime


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Owner(Base):
    """Person a recipe is attributed to. Recipes only point at owners."""
    __tablename__ = "owners"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    profile_photo_ref: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )


class Recipe(Base):
    """Recipe aggregate root.

    Exactly one of two partitions at all times:
    - library (in_inbox=False): sort_order is a dense 0..N-1 permutation
    - inbox (in_inbox=True): sort_order is NULL, ordered by created_at desc
    """
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_partition_sort", "in_inbox", "sort_order"),
        Index("ix_recipes_partition_created", "in_inbox", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Styling
    symbol: Mapped[str] = mapped_column(String(80), nullable=False)
    font_name: Mapped[str] = mapped_column(String(80), nullable=False)
    accent_color: Mapped[str] = mapped_column(String(7), nullable=False)
    secondary_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)

    # Origin
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    place_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    owner_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("owners.id", ondelete="SET NULL"), nullable=True
    )

    # Partition
    in_inbox: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    sort_order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sender_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    # Relationships
    owner: Mapped[Optional["Owner"]] = relationship("Owner")

    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeIngredient.sort_order"
    )
    steps: Mapped[list["RecipeStep"]] = relationship(
        "RecipeStep", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeStep.sort_order"
    )
    ancestry_steps: Mapped[list["RecipeAncestryStep"]] = relationship(
        "RecipeAncestryStep", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeAncestryStep.sort_order"
    )
    photos: Mapped[list["RecipePhoto"]] = relationship(
        "RecipePhoto", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipePhoto.sort_order"
    )
    audio_notes: Mapped[list["RecipeAudioNote"]] = relationship(
        "RecipeAudioNote", back_populates="recipe", cascade="all, delete-orphan",
        order_by="desc(RecipeAudioNote.created_at)"
    )

    @property
    def primary_audio_note(self) -> Optional["RecipeAudioNote"]:
        """The most recently created audio note, if any."""
        if not self.audio_notes:
            return None
        return sorted(
            self.audio_notes, key=lambda n: (n.created_at, n.id), reverse=True
        )[0]


class RecipeIngredient(Base):
    """Ingredient line. Quantity is free text and never parsed."""
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("ix_recipe_ingredients_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")


class RecipeStep(Base):
    """Ordered preparation step within a recipe."""
    __tablename__ = "recipe_steps"
    __table_args__ = (
        Index("ix_recipe_steps_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="steps")


class RecipeAncestryStep(Base):
    """One stop on a recipe's journey through a family (country, era, note)."""
    __tablename__ = "recipe_ancestry_steps"
    __table_args__ = (
        Index("ix_recipe_ancestry_steps_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    region: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    rough_date: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)  # e.g. "1920s"
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    generation: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ancestry_steps")


class RecipePhoto(Base):
    """Photo reference. The blob itself lives in the photo store."""
    __tablename__ = "recipe_photos"
    __table_args__ = (
        Index("ix_recipe_photos_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    blob_ref: Mapped[str] = mapped_column(String(500), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="photos")


class RecipeAudioNote(Base):
    """Narration clip. No sort_order: newest first by created_at."""
    __tablename__ = "recipe_audio_notes"
    __table_args__ = (
        Index("ix_recipe_audio_notes_recipe_created", "recipe_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="audio_notes")
