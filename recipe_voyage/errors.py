"""Error taxonomy for the recipe repository.

- ValidationError: a required field is missing or malformed. Raised before
  any store mutation.
- InvalidState: an operation precondition does not hold (e.g. moving a recipe
  that is not in the inbox). Nothing is changed.
- StoreFailure: the transactional commit failed and was rolled back.
- ResourceCleanupFailure: a backing file could not be deleted. The repository
  logs these and carries on with the record deletion.
"""

from typing import Optional


class RecipeVoyageError(Exception):
    """Base class for all repository errors."""


class ValidationError(RecipeVoyageError):
    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidState(RecipeVoyageError):
    pass


class RecipeNotFound(InvalidState):
    pass


class ChildNotFound(InvalidState):
    pass


class StoreFailure(RecipeVoyageError):
    pass


class ResourceCleanupFailure(RecipeVoyageError):
    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"Failed to delete {resource}: {reason}")
        self.resource = resource
        self.reason = reason
