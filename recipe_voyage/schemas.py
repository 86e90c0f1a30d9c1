"""Pydantic schemas for Recipe Voyage.

Value types validated at the repository boundary:
- HexColor, DecorativeFont, Styling, GeoLocation

Read snapshots handed to callers (never live ORM entities):
- Recipe aggregate with ordered children
- Library / inbox view rows
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

from .settings import settings


# --- Value types ---

def _normalize_hex(value: str) -> str:
    if not isinstance(value, str):
        return value
    value = value.strip()
    if value and not value.startswith("#"):
        value = "#" + value
    return value.upper()


HexColor = Annotated[
    str,
    BeforeValidator(_normalize_hex),
    Field(pattern=r"^#[0-9A-F]{6}$"),
]


class DecorativeFont(str, Enum):
    """Fonts available for a recipe's ornamental capital letter."""
    GEORGIA = "Georgia-Bold"
    BASKERVILLE = "Baskerville-Bold"
    DIDOT = "Didot-Bold"
    COPPERPLATE = "Copperplate"
    ZAPFINO = "Zapfino"
    SNELL_ROUNDHAND = "SnellRoundhand-Bold"


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class Styling(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: NonBlankStr = settings.default_symbol
    font: DecorativeFont = DecorativeFont(settings.default_font)
    accent_color: HexColor = settings.default_accent_color
    secondary_color: Optional[HexColor] = None


class GeoLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    place_name: Optional[str] = None


# --- Write payloads ---

class RecipePatch(BaseModel):
    """Fields to change on a recipe. Only provided fields are applied."""
    title: Optional[NonBlankStr] = None
    description: Optional[str] = None
    styling: Optional[Styling] = None
    owner_id: Optional[str] = None
    location: Optional[GeoLocation] = None


class IngredientIn(BaseModel):
    name: Optional[str] = None  # Required, checked by the repository
    quantity: Optional[str] = None


class StepIn(BaseModel):
    instruction: Optional[str] = None


class AncestryStepIn(BaseModel):
    country: Optional[str] = None
    region: Optional[str] = None
    rough_date: Optional[str] = None
    note: Optional[str] = None
    generation: Optional[int] = Field(None, ge=0)

    @field_validator("region", "rough_date", "note")
    @classmethod
    def _empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class PhotoIn(BaseModel):
    blob_ref: Optional[str] = None


# --- Read snapshots ---

class OwnerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    profile_photo_ref: Optional[str]
    created_at: datetime


class IngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    quantity: Optional[str]
    sort_order: int


class StepOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    instruction: str
    sort_order: int


class AncestryStepOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    country: str
    region: Optional[str]
    rough_date: Optional[str]
    note: Optional[str]
    generation: Optional[int]
    sort_order: int


class PhotoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    blob_ref: str
    sort_order: int
    created_at: datetime


class AudioNoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    recipe_id: str
    filename: str
    duration: float
    created_at: datetime


class RecipeSummaryOut(BaseModel):
    """One row of the library or inbox view."""
    id: str
    title: str
    styling: Styling
    in_inbox: bool
    sort_order: Optional[int]
    sender_name: Optional[str]
    created_at: datetime
    audio_note_count: int = 0


class RecipeOut(BaseModel):
    id: str
    title: str
    description: Optional[str]
    styling: Styling
    location: Optional[GeoLocation] = None
    owner: Optional[OwnerOut] = None
    in_inbox: bool
    sort_order: Optional[int]
    sender_name: Optional[str]
    created_at: datetime
    ingredients: list[IngredientOut] = []
    steps: list[StepOut] = []
    ancestry_steps: list[AncestryStepOut] = []
    photos: list[PhotoOut] = []
    audio_notes: list[AudioNoteOut] = []  # Newest first

    @property
    def primary_audio_note(self) -> Optional[AudioNoteOut]:
        return self.audio_notes[0] if self.audio_notes else None


class RecipeViews(BaseModel):
    """Point-in-time snapshot of both partitions after a commit."""
    model_config = ConfigDict(frozen=True)

    version: int
    library: tuple[RecipeSummaryOut, ...] = ()
    inbox: tuple[RecipeSummaryOut, ...] = ()
