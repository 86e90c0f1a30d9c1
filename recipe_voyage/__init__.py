"""Recipe Voyage: family recipe book persistence core."""

from recipe_voyage.errors import (
    ChildNotFound,
    InvalidState,
    RecipeNotFound,
    RecipeVoyageError,
    ResourceCleanupFailure,
    StoreFailure,
    ValidationError,
)
from recipe_voyage.repository import ChildKind, RecipeRepository

__all__ = [
    "ChildKind",
    "ChildNotFound",
    "InvalidState",
    "RecipeNotFound",
    "RecipeRepository",
    "RecipeVoyageError",
    "ResourceCleanupFailure",
    "StoreFailure",
    "ValidationError",
]
