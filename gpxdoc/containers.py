"""Ordered containers for every one-to-many relationship in the model.

Each container is tied to one :class:`EntityKind`. The kind selects a row
of the behaviour table (stringify, destroy, compare), so the container never
needs to know the concrete entity class it holds.

Two container types exist:

* :class:`OrderedList` owns its elements. ``destroy_all`` runs the kind's
  destroy behaviour on every element exactly once, then releases the list.
* :class:`ListView` borrows elements owned elsewhere (query results).
  ``release`` drops the references and never destroys anything.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, NamedTuple, TypeVar

T = TypeVar("T")


class EntityKind(Enum):
    DOCUMENT = "document"
    TRACK = "track"
    TRACK_SEGMENT = "track_segment"
    ROUTE = "route"
    WAYPOINT = "waypoint"
    EXTENSION_FIELD = "extension_field"


class ElementBehaviour(NamedTuple):
    to_string: Callable[[Any], str]
    destroy: Callable[[Any], None]
    compare: Callable[[Any, Any], int]


_BEHAVIOURS: dict[EntityKind, ElementBehaviour] = {}


def register_behaviour(kind: EntityKind, to_string, destroy, compare) -> None:
    _BEHAVIOURS[kind] = ElementBehaviour(to_string, destroy, compare)


def behaviour_for(kind: EntityKind) -> ElementBehaviour:
    try:
        return _BEHAVIOURS[kind]
    except KeyError:
        raise ValueError(f"No element behaviour registered for {kind.value!r}") from None


class _End:
    """End-of-sequence marker returned by :meth:`ListIterator.next`."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"

    def __bool__(self) -> bool:
        return False


END = _End()


class ListIterator(Generic[T]):
    """Forward cursor over a snapshot-free view of a container's items.

    ``next()`` returns :data:`END` once exhausted; ``restart()`` rewinds.
    The iterator also speaks the Python iterator protocol.
    """

    def __init__(self, items: list[T]):
        self._items = items
        self._pos = 0

    def next(self):
        if self._pos >= len(self._items):
            return END
        item = self._items[self._pos]
        self._pos += 1
        return item

    def restart(self) -> None:
        self._pos = 0

    def __iter__(self) -> ListIterator[T]:
        return self

    def __next__(self) -> T:
        item = self.next()
        if item is END:
            raise StopIteration
        return item


class _OrderedSequence(Generic[T]):
    """Read surface shared by owning lists and borrowed views."""

    def __init__(self, kind: EntityKind, items: Iterable[T] = ()):
        self._kind = kind
        self._behaviour = behaviour_for(kind)
        self._items: list[T] = list(items)

    @property
    def kind(self) -> EntityKind:
        return self._kind

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._kind.value}, {len(self._items)} item(s))"

    def iterator(self) -> ListIterator[T]:
        return ListIterator(self._items)

    def first(self) -> T | None:
        return self._items[0] if self._items else None

    def last(self) -> T | None:
        return self._items[-1] if self._items else None

    def compare(self, first: T, second: T) -> int:
        return self._behaviour.compare(first, second)

    def find(self, probe: T) -> T | None:
        """First element that compares equal to ``probe``, in insertion order."""
        for item in self._items:
            if self._behaviour.compare(item, probe) == 0:
                return item
        return None

    def index(self, probe: T) -> int:
        for i, item in enumerate(self._items):
            if self._behaviour.compare(item, probe) == 0:
                return i
        return -1

    def to_string(self) -> str:
        return "".join(self._behaviour.to_string(item) for item in self._items)


class OrderedList(_OrderedSequence[T]):
    """Owning, insertion-ordered container."""

    def __init__(self, kind: EntityKind, items: Iterable[T] = ()):
        super().__init__(kind, items)
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def append(self, item: T) -> None:
        if self._released:
            raise RuntimeError(f"Cannot append to a released {self._kind.value} list")
        self._items.append(item)

    push_back = append

    def destroy_all(self) -> None:
        """Destroy every element, then release the list. Safe to call twice."""
        if self._released:
            return
        items, self._items = self._items, []
        self._released = True
        for item in items:
            self._behaviour.destroy(item)


class ListView(_OrderedSequence[T]):
    """Non-owning sequence aliasing elements held by an :class:`OrderedList`."""

    def release(self) -> None:
        self._items = []
