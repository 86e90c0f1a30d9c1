import logging
from typing import Callable

from ..schemas import RecipeViews

logger = logging.getLogger("recipe_voyage.views")

Listener = Callable[[RecipeViews], None]


class ViewsBus:
    """In-process publish/subscribe for refreshed library/inbox views."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, views: RecipeViews) -> None:
        for listener in list(self._listeners):
            try:
                listener(views)
            except Exception as e:
                logger.error(f"View listener {listener!r} failed on version {views.version}: {e}", exc_info=True)

    def __len__(self) -> int:
        return len(self._listeners)
