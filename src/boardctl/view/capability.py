"""Drag-and-drop capability boundary.

The board view only needs droppable/draggable registration and two
events. Any pointer system can sit behind :class:`DragDropCapability`;
:class:`ScriptedDragDrop` drives it from explicit commands, which is
what a terminal host has instead of a pointer.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from boardctl.domain.drops import DropLocation


@dataclass(frozen=True)
class DragStartEvent:
    draggable_id: str
    source: DropLocation


@dataclass(frozen=True)
class DragEndEvent:
    draggable_id: str
    source: DropLocation
    destination: DropLocation | None


DragStartHandler = Callable[[DragStartEvent], None]
DragEndHandler = Callable[[DragEndEvent], Awaitable[object]]


class DragDropCapability(Protocol):
    """What the board view requires from a drag-and-drop implementation."""

    def bind(self, on_drag_start: DragStartHandler, on_drag_end: DragEndHandler) -> None: ...

    def reset(self) -> None: ...

    def register_droppable(self, stage_id: str) -> None: ...

    def register_draggable(
        self, card_id: str, stage_id: str, index: int, *, disabled: bool = False
    ) -> None: ...


class DragRejectedError(Exception):
    """A scripted gesture could not start (unknown or disabled card)."""


@dataclass
class _Draggable:
    stage_id: str
    index: int
    disabled: bool


class ScriptedDragDrop:
    """Capability driven by explicit ``drag``/``cancel`` calls.

    Registrations are replaced wholesale on every :meth:`reset`, mirroring
    a re-render. Gestures are serialized: a new drag cannot start while a
    previous drop is still being handled.
    """

    def __init__(self) -> None:
        self._droppables: list[str] = []
        self._draggables: dict[str, _Draggable] = {}
        self._on_drag_start: DragStartHandler | None = None
        self._on_drag_end: DragEndHandler | None = None
        self._in_gesture = False

    # -- capability protocol --

    def bind(self, on_drag_start: DragStartHandler, on_drag_end: DragEndHandler) -> None:
        self._on_drag_start = on_drag_start
        self._on_drag_end = on_drag_end

    def reset(self) -> None:
        self._droppables.clear()
        self._draggables.clear()

    def register_droppable(self, stage_id: str) -> None:
        self._droppables.append(stage_id)

    def register_draggable(
        self, card_id: str, stage_id: str, index: int, *, disabled: bool = False
    ) -> None:
        # First occurrence wins for duplicate ids.
        self._draggables.setdefault(card_id, _Draggable(stage_id, index, disabled))

    # -- introspection --

    @property
    def droppables(self) -> tuple[str, ...]:
        return tuple(self._droppables)

    def source_of(self, card_id: str) -> DropLocation | None:
        entry = self._draggables.get(card_id)
        if entry is None:
            return None
        return DropLocation(entry.stage_id, entry.index)

    def is_disabled(self, card_id: str) -> bool:
        entry = self._draggables.get(card_id)
        return entry is not None and entry.disabled

    # -- gestures --

    async def drag(self, card_id: str, stage_id: str | None, index: int | None = None) -> object:
        """Drag *card_id* and drop it at (*stage_id*, *index*).

        A *stage_id* that is not a registered droppable is a drop outside
        every stage, reported with no destination. A missing *index*
        means the end of the target stage.
        """
        source = self._start(card_id)
        destination: DropLocation | None = None
        if stage_id is not None and stage_id in self._droppables:
            if index is None:
                index = self._stage_size(stage_id)
                if stage_id == source.stage_id:
                    index -= 1
            destination = DropLocation(stage_id, index)
        return await self._end(DragEndEvent(card_id, source, destination))

    async def cancel(self, card_id: str) -> object:
        """Start dragging *card_id* and cancel the gesture."""
        source = self._start(card_id)
        return await self._end(DragEndEvent(card_id, source, None))

    def _stage_size(self, stage_id: str) -> int:
        return sum(1 for entry in self._draggables.values() if entry.stage_id == stage_id)

    def _start(self, card_id: str) -> DropLocation:
        if self._on_drag_start is None or self._on_drag_end is None:
            raise DragRejectedError("No board is bound to this capability")
        if self._in_gesture:
            raise DragRejectedError("Another drag is still being handled")
        source = self.source_of(card_id)
        if source is None:
            raise DragRejectedError(f"Card {card_id!r} is not on the board")
        if self.is_disabled(card_id):
            raise DragRejectedError(f"Card {card_id!r} cannot be dragged right now")
        self._in_gesture = True
        self._on_drag_start(DragStartEvent(card_id, source))
        return source

    async def _end(self, event: DragEndEvent) -> object:
        assert self._on_drag_end is not None
        try:
            return await self._on_drag_end(event)
        finally:
            self._in_gesture = False
