"""Dense 0-based ordering over sibling collections.

Used for a recipe's ingredients, steps, ancestry steps and photos, and for
the library partition of recipes. Every mutation leaves the sort orders of
the collection equal to exactly {0, ..., N-1}.
"""

from typing import Generic, Iterable, MutableSequence, Protocol, TypeVar

from .errors import InvalidState


class Ordered(Protocol):
    id: str
    sort_order: int


T = TypeVar("T", bound=Ordered)


def ordered_key(item: Ordered) -> tuple[int, str]:
    # id breaks ties so reads stay deterministic even on sparse/duplicate data
    return (item.sort_order if item.sort_order is not None else -1, str(item.id))


def is_dense(items: Iterable[Ordered]) -> bool:
    orders = [item.sort_order for item in items]
    return sorted(orders, key=lambda o: -1 if o is None else o) == list(range(len(orders)))


class OrderedCollection(Generic[T]):
    """Ordering operations over a mutable backing sequence.

    The backing sequence may be an ORM relationship list (appends and removals
    then flow through to the session) or a plain list of query results.
    """

    def __init__(self, items: MutableSequence[T]) -> None:
        self._items = items

    def __len__(self) -> int:
        return len(self._items)

    def read_ordered(self) -> list[T]:
        return sorted(self._items, key=ordered_key)

    def append(self, item: T) -> T:
        item.sort_order = len(self._items)
        self._items.append(item)
        return item

    def insert(self, item: T, at_index: int) -> T:
        """Insert at a position, shifting every item at or after it up by one."""
        count = len(self._items)
        if not 0 <= at_index <= count:
            raise InvalidState(f"Insert index {at_index} out of range 0..{count}")
        for existing in self._items:
            if existing.sort_order >= at_index:
                existing.sort_order += 1
        item.sort_order = at_index
        self._items.append(item)
        return item

    def reorder(self, from_index: int, to_index: int) -> list[T]:
        count = len(self._items)
        if from_index == to_index:
            raise InvalidState("Reorder source and destination are the same")
        if not (0 <= from_index < count and 0 <= to_index < count):
            raise InvalidState(
                f"Reorder indices ({from_index}, {to_index}) out of range for {count} items"
            )

        reordered = self.read_ordered()
        moved = reordered.pop(from_index)
        reordered.insert(to_index, moved)

        # Full renumbering pass, not just the span between the two indices
        for index, item in enumerate(reordered):
            item.sort_order = index
        return reordered

    def remove(self, item: T) -> list[T]:
        self._items.remove(item)
        return self.renumber()

    def renumber(self) -> list[T]:
        ordered = self.read_ordered()
        for index, item in enumerate(ordered):
            item.sort_order = index
        return ordered
