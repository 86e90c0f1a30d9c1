"""Recipe repository: the only mutation surface for recipes and their children.

Every mutating call runs in one transaction and, once committed, reloads the
library and inbox views from the store and publishes them to subscribers.
A failed commit is rolled back and leaves the published views untouched.
"""

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from .db import SessionLocal, create_schema, init_engine
from .errors import (
    ChildNotFound,
    RecipeNotFound,
    RecipeVoyageError,
    ResourceCleanupFailure,
    StoreFailure,
    ValidationError,
)
from .models import (
    Owner,
    Recipe,
    RecipeAncestryStep,
    RecipeAudioNote,
    RecipeIngredient,
    RecipePhoto,
    RecipeStep,
    generate_uuid,
    utcnow,
)
from .ordering import OrderedCollection
from .orm_types import as_utc
from .partition import RecipePartition, inbox_query, library_query
from .realtime.views_bus import Listener, ViewsBus
from .schemas import (
    AncestryStepIn,
    AncestryStepOut,
    AudioNoteOut,
    GeoLocation,
    IngredientIn,
    IngredientOut,
    OwnerOut,
    PhotoIn,
    PhotoOut,
    RecipeOut,
    RecipePatch,
    RecipeSummaryOut,
    RecipeViews,
    StepIn,
    StepOut,
    Styling,
)
from .services.storage import AudioFileStore, LocalAudioStore, LocalPhotoStore, PhotoStore
from .settings import settings

logger = logging.getLogger("recipe_voyage.repository")


class ChildKind(str, Enum):
    INGREDIENT = "ingredient"
    STEP = "step"
    ANCESTRY = "ancestry"
    PHOTO = "photo"


@dataclass(frozen=True)
class _ChildTable:
    model: type
    relationship: str
    payload: type[BaseModel]
    out: type[BaseModel]
    required: str


_CHILD_TABLES: dict[ChildKind, _ChildTable] = {
    ChildKind.INGREDIENT: _ChildTable(RecipeIngredient, "ingredients", IngredientIn, IngredientOut, "name"),
    ChildKind.STEP: _ChildTable(RecipeStep, "steps", StepIn, StepOut, "instruction"),
    ChildKind.ANCESTRY: _ChildTable(RecipeAncestryStep, "ancestry_steps", AncestryStepIn, AncestryStepOut, "country"),
    ChildKind.PHOTO: _ChildTable(RecipePhoto, "photos", PhotoIn, PhotoOut, "blob_ref"),
}


def _child_kind(kind: Union[ChildKind, str]) -> ChildKind:
    try:
        return ChildKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown child kind {kind!r}", field="kind") from None


# --- Snapshot helpers ---

def _styling(recipe: Recipe) -> Styling:
    return Styling(
        symbol=recipe.symbol,
        font=recipe.font_name,
        accent_color=recipe.accent_color,
        secondary_color=recipe.secondary_color,
    )


def _location(recipe: Recipe) -> Optional[GeoLocation]:
    if recipe.latitude is None or recipe.longitude is None:
        return None
    return GeoLocation(
        latitude=recipe.latitude,
        longitude=recipe.longitude,
        place_name=recipe.place_name,
    )


def _recipe_to_summary(recipe: Recipe) -> RecipeSummaryOut:
    return RecipeSummaryOut(
        id=recipe.id,
        title=recipe.title,
        styling=_styling(recipe),
        in_inbox=recipe.in_inbox,
        sort_order=recipe.sort_order,
        sender_name=recipe.sender_name,
        created_at=recipe.created_at,
        audio_note_count=len(recipe.audio_notes),
    )


def _ordered(items) -> list:
    return OrderedCollection(list(items)).read_ordered()


def _recipe_to_out(recipe: Recipe) -> RecipeOut:
    audio_notes = sorted(recipe.audio_notes, key=lambda n: (n.created_at, n.id), reverse=True)
    return RecipeOut(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        styling=_styling(recipe),
        location=_location(recipe),
        owner=OwnerOut.model_validate(recipe.owner) if recipe.owner else None,
        in_inbox=recipe.in_inbox,
        sort_order=recipe.sort_order,
        sender_name=recipe.sender_name,
        created_at=recipe.created_at,
        ingredients=[IngredientOut.model_validate(i) for i in _ordered(recipe.ingredients)],
        steps=[StepOut.model_validate(s) for s in _ordered(recipe.steps)],
        ancestry_steps=[AncestryStepOut.model_validate(a) for a in _ordered(recipe.ancestry_steps)],
        photos=[PhotoOut.model_validate(p) for p in _ordered(recipe.photos)],
        audio_notes=[AudioNoteOut.model_validate(n) for n in audio_notes],
    )


# --- Validation helpers ---

def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def _coerce(model: type[BaseModel], value: Union[BaseModel, Mapping[str, Any], None], field: str):
    if value is None or isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {field}: {e}", field=field) from e


class RecipeRepository:
    """Facade over the recipe store.

    Construct one per application session and pass it to whatever needs it.
    Returned objects are pydantic snapshots; the ORM entities never leave
    the repository.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        audio_store: AudioFileStore,
        photo_store: PhotoStore,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._session_factory = session_factory
        self.audio_store = audio_store
        self.photo_store = photo_store
        self._clock = clock or utcnow
        self._bus = ViewsBus()
        self._views = RecipeViews(version=0)
        self.refresh()

    # --- Views ---

    @property
    def views(self) -> RecipeViews:
        return self._views

    @property
    def library(self) -> tuple[RecipeSummaryOut, ...]:
        return self._views.library

    @property
    def inbox(self) -> tuple[RecipeSummaryOut, ...]:
        return self._views.inbox

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with fresh views after every committed mutation."""
        return self._bus.subscribe(listener)

    def refresh(self) -> RecipeViews:
        """Reload both views from the store (never patched incrementally)."""
        try:
            with self._session_factory() as db:
                library = tuple(
                    _recipe_to_summary(r)
                    for r in db.scalars(library_query().options(selectinload(Recipe.audio_notes)))
                )
                inbox = tuple(
                    _recipe_to_summary(r)
                    for r in db.scalars(inbox_query().options(selectinload(Recipe.audio_notes)))
                )
        except SQLAlchemyError as e:
            # Keep showing the last good snapshot rather than a partial one
            logger.error(f"View refresh failed, keeping version {self._views.version}: {e}")
            return self._views

        self._views = RecipeViews(version=self._views.version + 1, library=library, inbox=inbox)
        self._bus.publish(self._views)
        return self._views

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except RecipeVoyageError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{action} failed, rolled back: {e}")
            raise StoreFailure(f"{action} failed: {e}") from e
        finally:
            db.close()
        self.refresh()

    def _now(self) -> datetime:
        return as_utc(self._clock())

    @staticmethod
    def _get_recipe(db: Session, recipe_id: str) -> Recipe:
        recipe = db.get(Recipe, recipe_id)
        if recipe is None:
            raise RecipeNotFound(f"Recipe {recipe_id} not found")
        return recipe

    # --- Reads ---

    def get_recipe(self, recipe_id: str) -> RecipeOut:
        with self._session_factory() as db:
            recipe = db.scalar(
                select(Recipe)
                .options(
                    selectinload(Recipe.owner),
                    selectinload(Recipe.ingredients),
                    selectinload(Recipe.steps),
                    selectinload(Recipe.ancestry_steps),
                    selectinload(Recipe.photos),
                    selectinload(Recipe.audio_notes),
                )
                .where(Recipe.id == recipe_id)
            )
            if recipe is None:
                raise RecipeNotFound(f"Recipe {recipe_id} not found")
            return _recipe_to_out(recipe)

    def list_children(self, recipe_id: str, kind: Union[ChildKind, str]) -> list:
        table = _CHILD_TABLES[_child_kind(kind)]
        with self._session_factory() as db:
            recipe = self._get_recipe(db, recipe_id)
            return [table.out.model_validate(c) for c in _ordered(getattr(recipe, table.relationship))]

    def primary_audio_note(self, recipe_id: str) -> Optional[AudioNoteOut]:
        with self._session_factory() as db:
            note = self._get_recipe(db, recipe_id).primary_audio_note
            return AudioNoteOut.model_validate(note) if note else None

    def list_owners(self) -> list[OwnerOut]:
        with self._session_factory() as db:
            owners = db.scalars(select(Owner).order_by(Owner.name, Owner.id))
            return [OwnerOut.model_validate(o) for o in owners]

    # --- Owners ---

    def create_owner(self, name: str, profile_photo_ref: Optional[str] = None) -> OwnerOut:
        name = _require_text(name, "name")
        owner = Owner(
            id=generate_uuid(),
            name=name,
            profile_photo_ref=profile_photo_ref,
            created_at=self._now(),
        )
        with self._transaction("create_owner") as db:
            db.add(owner)
            out = OwnerOut.model_validate(owner)
        logger.info(f"Created owner {name!r}")
        return out

    # --- Recipes ---

    def _new_recipe(
        self,
        db: Session,
        title: str,
        styling: Optional[Styling],
        description: Optional[str],
        owner_id: Optional[str],
        location: Optional[GeoLocation],
    ) -> Recipe:
        if owner_id is not None and db.get(Owner, owner_id) is None:
            raise ValidationError(f"Owner {owner_id} does not exist", field="owner_id")
        styling = styling or Styling()
        return Recipe(
            id=generate_uuid(),
            title=title,
            description=description or None,
            symbol=styling.symbol,
            font_name=styling.font.value,
            accent_color=styling.accent_color,
            secondary_color=styling.secondary_color,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            place_name=location.place_name if location else None,
            owner_id=owner_id,
            created_at=self._now(),
        )

    def create_recipe(
        self,
        title: str,
        *,
        styling: Union[Styling, Mapping[str, Any], None] = None,
        description: Optional[str] = None,
        owner_id: Optional[str] = None,
        location: Union[GeoLocation, Mapping[str, Any], None] = None,
    ) -> RecipeOut:
        """Create a recipe at the end of the library."""
        title = _require_text(title, "title")
        styling = _coerce(Styling, styling, "styling")
        location = _coerce(GeoLocation, location, "location")

        with self._transaction("create_recipe") as db:
            recipe = self._new_recipe(db, title, styling, description, owner_id, location)
            RecipePartition(db).add_to_library(recipe)
            db.add(recipe)
            recipe_id, position = recipe.id, recipe.sort_order

        logger.info(f"Created recipe {title!r} at library position {position}")
        return self.get_recipe(recipe_id)

    def create_inbox_recipe(
        self,
        title: str,
        *,
        sender_name: str,
        styling: Union[Styling, Mapping[str, Any], None] = None,
        description: Optional[str] = None,
        owner_id: Optional[str] = None,
        location: Union[GeoLocation, Mapping[str, Any], None] = None,
    ) -> RecipeOut:
        """Create a "received" recipe in the inbox."""
        title = _require_text(title, "title")
        sender_name = _require_text(sender_name, "sender_name")
        styling = _coerce(Styling, styling, "styling")
        location = _coerce(GeoLocation, location, "location")

        with self._transaction("create_inbox_recipe") as db:
            recipe = self._new_recipe(db, title, styling, description, owner_id, location)
            recipe.sender_name = sender_name
            RecipePartition(db).add_to_inbox(recipe)
            db.add(recipe)
            recipe_id = recipe.id

        logger.info(f"Received recipe {title!r} from {sender_name!r} into inbox")
        return self.get_recipe(recipe_id)

    def update_recipe(self, recipe_id: str, patch: Union[RecipePatch, Mapping[str, Any]]) -> RecipeOut:
        """Apply the fields present in `patch`. Partition and ordering are untouched."""
        patch = _coerce(RecipePatch, patch, "patch")
        fields = patch.model_fields_set

        with self._transaction("update_recipe") as db:
            recipe = self._get_recipe(db, recipe_id)
            if "title" in fields:
                recipe.title = _require_text(patch.title, "title")
            if "description" in fields:
                recipe.description = patch.description or None
            if "styling" in fields and patch.styling is not None:
                recipe.symbol = patch.styling.symbol
                recipe.font_name = patch.styling.font.value
                recipe.accent_color = patch.styling.accent_color
                recipe.secondary_color = patch.styling.secondary_color
            if "owner_id" in fields:
                if patch.owner_id is not None and db.get(Owner, patch.owner_id) is None:
                    raise ValidationError(f"Owner {patch.owner_id} does not exist", field="owner_id")
                recipe.owner_id = patch.owner_id
            if "location" in fields:
                location = patch.location
                recipe.latitude = location.latitude if location else None
                recipe.longitude = location.longitude if location else None
                recipe.place_name = location.place_name if location else None

        logger.info(f"Updated recipe {recipe_id} ({', '.join(sorted(fields)) or 'no fields'})")
        return self.get_recipe(recipe_id)

    def delete_recipe(self, recipe_id: str) -> list[ResourceCleanupFailure]:
        """Delete a recipe, its children and its audio files.

        Audio files are deleted before the record. A failed file deletion is
        logged and returned, but never stops the record deletion: an orphaned
        file is preferred over an orphaned row.
        """
        failures: list[ResourceCleanupFailure] = []

        with self._transaction("delete_recipe") as db:
            recipe = self._get_recipe(db, recipe_id)
            title = recipe.title

            filenames = list(dict.fromkeys(n.filename for n in recipe.audio_notes if n.filename))
            for filename in filenames:
                failure = self._delete_audio_file(filename)
                if failure:
                    failures.append(failure)

            photo_refs = [p.blob_ref for p in recipe.photos]

            if not recipe.in_inbox:
                RecipePartition(db).remove_from_library(recipe)
            # cascade="all, delete-orphan" removes ingredients, steps,
            # ancestry steps, photos and audio notes
            db.delete(recipe)

        # Photo blobs are cleaned up after commit (best effort)
        for ref in photo_refs:
            self._delete_photo_blob(ref)

        logger.info(f"Deleted recipe {title!r} ({len(filenames)} audio files, {len(failures)} cleanup failures)")
        return failures

    def move_from_inbox_to_library(self, recipe_id: str, at_index: Optional[int] = None) -> RecipeOut:
        """Accept an inbox recipe into the library, at `at_index` or at the end."""
        with self._transaction("move_from_inbox_to_library") as db:
            recipe = self._get_recipe(db, recipe_id)
            RecipePartition(db).move_from_inbox_to_library(recipe, at_index)
            position = recipe.sort_order

        logger.info(f"Moved recipe {recipe_id} from inbox to library position {position}")
        return self.get_recipe(recipe_id)

    def reorder_library(self, from_index: int, to_index: int) -> RecipeViews:
        with self._transaction("reorder_library") as db:
            RecipePartition(db).reorder_library(from_index, to_index)

        logger.info(f"Reordered library {from_index} -> {to_index}")
        return self._views

    def move_random_library_recipe_to_inbox(self, rng: Optional[random.Random] = None) -> Optional[str]:
        """Simulate an incoming recipe by moving a random library recipe to the inbox.

        Only acts when the inbox is empty and the library is not. Returns the
        moved recipe id, or None when nothing was moved.
        """
        rng = rng or random.Random()

        with self._session_factory() as db:
            partition = RecipePartition(db)
            if partition.inbox():
                return None
            candidates = [r.id for r in partition.library()]
        if not candidates:
            return None

        recipe_id = rng.choice(candidates)
        with self._transaction("auto_inbox") as db:
            recipe = self._get_recipe(db, recipe_id)
            RecipePartition(db).move_to_inbox(recipe)
            if not recipe.sender_name and recipe.owner is not None:
                recipe.sender_name = recipe.owner.name

        logger.info(f"Auto-inbox moved recipe {recipe_id} into the inbox")
        return recipe_id

    # --- Ordered children ---

    def _build_child(self, kind: ChildKind, fields: Mapping[str, Any]):
        table = _CHILD_TABLES[kind]
        try:
            payload = table.payload.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {kind.value}: {e}", field=kind.value) from e

        data = payload.model_dump()
        data[table.required] = _require_text(data.get(table.required), table.required)
        child = table.model(id=generate_uuid(), **data)
        if kind is ChildKind.PHOTO:
            child.created_at = self._now()
        return child

    def add_child(self, recipe_id: str, kind: Union[ChildKind, str], **fields: Any):
        """Append a child at the end of its (recipe, kind) collection."""
        kind = _child_kind(kind)
        table = _CHILD_TABLES[kind]
        child = self._build_child(kind, fields)

        with self._transaction(f"add_{kind.value}") as db:
            recipe = self._get_recipe(db, recipe_id)
            OrderedCollection(getattr(recipe, table.relationship)).append(child)
            out = table.out.model_validate(child)

        logger.info(f"Added {kind.value} #{out.sort_order} to recipe {recipe_id}")
        return out

    def add_ingredient(self, recipe_id: str, name: str, quantity: Optional[str] = None) -> IngredientOut:
        return self.add_child(recipe_id, ChildKind.INGREDIENT, name=name, quantity=quantity)

    def add_step(self, recipe_id: str, instruction: str) -> StepOut:
        return self.add_child(recipe_id, ChildKind.STEP, instruction=instruction)

    def add_ancestry_step(
        self,
        recipe_id: str,
        country: str,
        region: Optional[str] = None,
        rough_date: Optional[str] = None,
        note: Optional[str] = None,
        generation: Optional[int] = None,
    ) -> AncestryStepOut:
        return self.add_child(
            recipe_id,
            ChildKind.ANCESTRY,
            country=country,
            region=region,
            rough_date=rough_date,
            note=note,
            generation=generation,
        )

    def add_photo(self, recipe_id: str, data: bytes) -> PhotoOut:
        """Store the blob, then append a reference to it."""
        if not data:
            raise ValidationError("Photo data is empty", field="data")
        ref = self.photo_store.store(data)
        try:
            return self.add_child(recipe_id, ChildKind.PHOTO, blob_ref=ref)
        except RecipeVoyageError:
            self._delete_photo_blob(ref)
            raise

    def reorder_children(self, recipe_id: str, kind: Union[ChildKind, str], from_index: int, to_index: int) -> list:
        kind = _child_kind(kind)
        table = _CHILD_TABLES[kind]

        with self._transaction(f"reorder_{kind.value}") as db:
            recipe = self._get_recipe(db, recipe_id)
            reordered = OrderedCollection(getattr(recipe, table.relationship)).reorder(from_index, to_index)
            out = [table.out.model_validate(c) for c in reordered]

        logger.info(f"Reordered {kind.value}s of recipe {recipe_id}: {from_index} -> {to_index}")
        return out

    def remove_child(self, recipe_id: str, kind: Union[ChildKind, str], child_id: str) -> list:
        """Delete one child and renumber the remaining siblings densely."""
        kind = _child_kind(kind)
        table = _CHILD_TABLES[kind]

        with self._transaction(f"remove_{kind.value}") as db:
            recipe = self._get_recipe(db, recipe_id)
            collection = getattr(recipe, table.relationship)
            child = next((c for c in collection if c.id == child_id), None)
            if child is None:
                raise ChildNotFound(f"{kind.value} {child_id} not found on recipe {recipe_id}")
            blob_ref = child.blob_ref if kind is ChildKind.PHOTO else None
            remaining = OrderedCollection(collection).remove(child)
            out = [table.out.model_validate(c) for c in remaining]

        if blob_ref:
            self._delete_photo_blob(blob_ref)
        logger.info(f"Removed {kind.value} {child_id} from recipe {recipe_id}")
        return out

    def replace_children(
        self,
        recipe_id: str,
        kind: Union[ChildKind, str],
        items: Iterable[Mapping[str, Any]],
    ) -> list:
        """Replace a whole collection, keeping the given order.

        Items whose required field is blank are skipped, matching the editor
        which drops empty rows on save.
        """
        kind = _child_kind(kind)
        table = _CHILD_TABLES[kind]
        children = []
        for item in items:
            if not str(item.get(table.required) or "").strip():
                continue
            children.append(self._build_child(kind, item))
        kept_refs = {c.blob_ref for c in children} if kind is ChildKind.PHOTO else set()

        with self._transaction(f"replace_{kind.value}s") as db:
            recipe = self._get_recipe(db, recipe_id)
            collection = getattr(recipe, table.relationship)
            old_refs = [c.blob_ref for c in collection] if kind is ChildKind.PHOTO else []
            collection.clear()
            ordered = OrderedCollection(collection)
            for child in children:
                ordered.append(child)
            out = [table.out.model_validate(c) for c in ordered.read_ordered()]

        for ref in old_refs:
            if ref not in kept_refs:
                self._delete_photo_blob(ref)
        logger.info(f"Replaced {kind.value}s of recipe {recipe_id} ({len(out)} items)")
        return out

    # --- Audio notes ---

    def add_audio_note(self, recipe_id: str, filename: str, duration: float) -> AudioNoteOut:
        filename = _require_text(filename, "filename")
        if duration is None or duration < 0:
            raise ValidationError("duration must be >= 0", field="duration")

        with self._transaction("add_audio_note") as db:
            recipe = self._get_recipe(db, recipe_id)
            note = RecipeAudioNote(
                id=generate_uuid(),
                recipe_id=recipe.id,
                filename=filename,
                duration=float(duration),
                created_at=self._now(),
            )
            recipe.audio_notes.append(note)
            out = AudioNoteOut.model_validate(note)

        logger.info(f"Added audio note {filename} ({duration:.1f}s) to recipe {recipe_id}")
        return out

    def delete_audio_note(self, note_id: str) -> Optional[ResourceCleanupFailure]:
        """Delete the backing file (best effort), then the record."""
        with self._transaction("delete_audio_note") as db:
            note = db.get(RecipeAudioNote, note_id)
            if note is None:
                raise ChildNotFound(f"Audio note {note_id} not found")
            failure = self._delete_audio_file(note.filename)
            note.recipe.audio_notes.remove(note)

        logger.info(f"Deleted audio note {note_id}")
        return failure

    def replace_primary_audio_note(
        self, recipe_id: str, filename: str, duration: float
    ) -> tuple[AudioNoteOut, Optional[ResourceCleanupFailure]]:
        """Swap the recipe's primary narration for a new recording.

        Returns the new note and, if the old recording's file could not be
        deleted, the cleanup failure (the old record is removed regardless).
        """
        filename = _require_text(filename, "filename")
        if duration is None or duration < 0:
            raise ValidationError("duration must be >= 0", field="duration")

        with self._transaction("replace_primary_audio_note") as db:
            recipe = self._get_recipe(db, recipe_id)
            failure = None
            old = recipe.primary_audio_note
            if old is not None:
                failure = self._delete_audio_file(old.filename)
                recipe.audio_notes.remove(old)
            note = RecipeAudioNote(
                id=generate_uuid(),
                recipe_id=recipe.id,
                filename=filename,
                duration=float(duration),
                created_at=self._now(),
            )
            recipe.audio_notes.append(note)
            out = AudioNoteOut.model_validate(note)

        logger.info(f"Replaced primary audio note of recipe {recipe_id} with {filename}")
        return out, failure

    # --- External resource cleanup ---

    def _delete_audio_file(self, filename: str) -> Optional[ResourceCleanupFailure]:
        try:
            deleted = self.audio_store.delete_file(filename)
        except Exception as e:
            failure = ResourceCleanupFailure(filename, str(e))
        else:
            if deleted:
                return None
            failure = ResourceCleanupFailure(filename, "audio store reported failure")
        logger.warning(f"{failure}; record deletion continues")
        return failure

    def _delete_photo_blob(self, ref: str) -> None:
        try:
            if not self.photo_store.delete(ref):
                logger.warning(f"Failed to delete photo blob {ref}")
        except Exception as e:
            logger.warning(f"Failed to delete photo blob {ref}: {e}")


def build_repository(database_url: Optional[str] = None, media_root: Optional[str] = None) -> RecipeRepository:
    """Wire a repository to the configured database and local file stores."""
    init_engine(database_url)
    create_schema()
    audio_root = photo_root = None
    if media_root:
        audio_root = Path(media_root) / settings.audio_dir
        photo_root = Path(media_root) / settings.photo_dir
    return RecipeRepository(
        SessionLocal(),
        audio_store=LocalAudioStore(audio_root),
        photo_store=LocalPhotoStore(photo_root),
    )
