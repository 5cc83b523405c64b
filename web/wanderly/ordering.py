"""Drag-to-reorder bookkeeping for orderable catalog collections.

Reviews, blogs, countries, team members, visas, tour categories and tours all
share one contract: the admin drags an item to a new position, the list is
updated optimistically, and the *whole* resulting ID list is sent to the
backend, which alone assigns ``order`` values.  If that call fails the
canonical order is fetched again; there is no local undo log.

Nothing in this module performs I/O.  :class:`OrderIndexManager` only tracks
state; the network call belongs to the caller (see
:mod:`wanderly.client.reorder`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def item_id(item: Any) -> Any:
    """Return the identifier of a row, dict or API payload item."""
    value = _field(item, "id")
    if value is None:
        value = _field(item, "_id")
    return value


def clamp_index(index: int, length: int) -> int:
    """Clamp *index* into ``[0, length - 1]`` (0 for empty lists)."""
    if length <= 0:
        return 0
    return max(0, min(int(index), length - 1))


def move_element(items: Sequence[Any], source_index: int, target_index: int) -> List[Any]:
    """Return a copy of *items* with one element moved.

    The element at *source_index* is removed and reinserted at
    *target_index*; elements in between shift by one.  Indices past either
    end are clamped, so dragging the last row beyond the list is a no-op.
    """
    result = list(items)
    if len(result) <= 1:
        return result
    source = clamp_index(source_index, len(result))
    target = clamp_index(target_index, len(result))
    if source == target:
        return result
    moved = result.pop(source)
    result.insert(target, moved)
    return result


def sort_by_order(items: Iterable[Any]) -> List[Any]:
    """Sort fetched items ascending by ``order``.

    Items without an ``order`` come after every ordered item, the same as
    the server listing; ties are broken by fetch position so the result is
    always a total order.
    """
    indexed = list(enumerate(items))

    def key(pair: Tuple[int, Any]):
        index, item = pair
        order = _field(item, "order")
        return (order is None, order or 0, index)

    return [item for _, item in sorted(indexed, key=key)]


@dataclass(frozen=True)
class ReorderRequest:
    """What the caller must persist after a successful :meth:`drop`."""

    source_index: int
    target_index: int
    ids: List[Any]


class OrderIndexManager:
    """Optimistic ordering state for one rendered list.

    ``enabled=False`` is for views where a global order cannot be derived,
    i.e. whenever the list is filtered, searched or paginated.
    """

    def __init__(self, items: Iterable[Any] = (), *, enabled: bool = True):
        self.items: List[Any] = sort_by_order(items)
        self.enabled = enabled
        self.drag_source: Optional[int] = None
        self.drag_target: Optional[int] = None
        self.needs_refetch = False
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def can_drag(self) -> bool:
        return self.enabled and not self._in_flight and len(self.items) > 1

    @property
    def ids(self) -> List[Any]:
        return [item_id(item) for item in self.items]

    def load(self, items: Iterable[Any]) -> None:
        """Replace the list with canonical server state."""
        self.items = sort_by_order(items)
        self.needs_refetch = False
        self._reset_gesture()

    def begin_drag(self, source_index: int) -> None:
        if not self.can_drag:
            return
        self.drag_source = clamp_index(source_index, len(self.items))
        self.drag_target = self.drag_source

    def drag_over(self, target_index: int) -> None:
        # hover feedback only
        if self.drag_source is None:
            return
        self.drag_target = clamp_index(target_index, len(self.items))

    def drop(self, source_index: int, target_index: int) -> Optional[ReorderRequest]:
        """Apply the move locally and return the request to persist.

        Returns ``None`` when the gesture is a no-op: dragging disabled, a
        reorder already in flight, a list of one element, or the same
        position after clamping.
        """
        try:
            if not self.can_drag:
                return None
            source = clamp_index(source_index, len(self.items))
            target = clamp_index(target_index, len(self.items))
            if source == target:
                return None
            self.items = move_element(self.items, source, target)
            return ReorderRequest(source_index=source, target_index=target, ids=self.ids)
        finally:
            self._reset_gesture()

    def begin_persist(self) -> None:
        if self._in_flight:
            raise RuntimeError("a reorder request is already in flight")
        self._in_flight = True

    def end_persist(self, ok: bool) -> None:
        self._in_flight = False
        if not ok:
            self.needs_refetch = True

    def _reset_gesture(self) -> None:
        self.drag_source = None
        self.drag_target = None


@dataclass
class EditSession:
    """An in-progress edit of one catalog entity.

    Owned by the view that opened it and handed explicitly to the update
    call, instead of living in shared module state.
    """

    resource: str
    entity_id: Any
    changes: dict = field(default_factory=dict)

    def set(self, name: str, value: Any) -> "EditSession":
        self.changes[name] = value
        return self

    @property
    def dirty(self) -> bool:
        return bool(self.changes)
