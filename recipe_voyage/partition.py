"""Library / inbox partition of the recipe set.

- Library: in_inbox is False, ordered by sort_order (dense 0..N-1)
- Inbox: in_inbox is True, ordered by created_at, newest first

The only transition in normal use is inbox -> library. The reverse move exists
for the simulated "incoming mail" job and is not part of the user flow.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import InvalidState
from .models import Recipe
from .ordering import OrderedCollection


def library_query():
    return (
        select(Recipe)
        .where(Recipe.in_inbox.is_(False))
        .order_by(Recipe.sort_order, Recipe.id)
    )


def inbox_query():
    return (
        select(Recipe)
        .where(Recipe.in_inbox.is_(True))
        .order_by(Recipe.created_at.desc(), Recipe.id)
    )


class RecipePartition:
    def __init__(self, db: Session) -> None:
        self.db = db

    def library(self) -> list[Recipe]:
        return list(self.db.scalars(library_query()))

    def inbox(self) -> list[Recipe]:
        return list(self.db.scalars(inbox_query()))

    def library_collection(self) -> OrderedCollection[Recipe]:
        return OrderedCollection(self.library())

    def add_to_library(self, recipe: Recipe) -> Recipe:
        recipe.in_inbox = False
        return self.library_collection().append(recipe)

    def add_to_inbox(self, recipe: Recipe) -> Recipe:
        recipe.in_inbox = True
        recipe.sort_order = None
        return recipe

    def move_from_inbox_to_library(self, recipe: Recipe, at_index: Optional[int] = None) -> Recipe:
        if not recipe.in_inbox:
            raise InvalidState(f"Recipe {recipe.id} is not in the inbox")

        library = self.library_collection()
        if at_index is None:
            library.append(recipe)
        else:
            # Validates 0 <= at_index <= |library| before touching anything
            library.insert(recipe, at_index)
        recipe.in_inbox = False
        return recipe

    def reorder_library(self, from_index: int, to_index: int) -> list[Recipe]:
        return self.library_collection().reorder(from_index, to_index)

    def remove_from_library(self, recipe: Recipe) -> list[Recipe]:
        """Take a recipe out of the library ordering and close the gap."""
        library = self.library_collection()
        if recipe in library.read_ordered():
            return library.remove(recipe)
        return library.renumber()

    def move_to_inbox(self, recipe: Recipe) -> Recipe:
        if recipe.in_inbox:
            raise InvalidState(f"Recipe {recipe.id} is already in the inbox")
        self.remove_from_library(recipe)
        return self.add_to_inbox(recipe)
