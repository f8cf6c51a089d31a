"""Board materialization — canonical records to stages and cards.

The board is never patched in place. Every refresh of the canonical
record list produces a new :class:`Board` through :func:`materialize`;
the previous one is simply dropped.

Invariants:
- Partition: each record whose stage value is a configured stage id
  appears in exactly one stage's ``card_ids``, once per occurrence in
  the input.
- Order: within a stage, cards keep the relative order of the input.
- Records with an unconfigured stage value are excluded, not rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from operator import itemgetter
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from boardctl.domain.errors import UnknownStageError
from boardctl.domain.stages import BoardDefinition, StageConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Card(Generic[T]):
    """A stable id paired with an opaque domain payload."""

    id: str
    data: T


@dataclass(frozen=True)
class Stage:
    """One column of a materialized board."""

    id: str
    card_ids: tuple[str, ...] = ()
    config: StageConfig | None = None

    @property
    def title(self) -> str:
        return self.config.label if self.config is not None else self.id

    def __len__(self) -> int:
        return len(self.card_ids)


@dataclass(frozen=True)
class Board(Generic[T]):
    """Ordered stages plus a card-id index independent of stage.

    Attributes:
        stages: Stages in configured order.
        cards: Card id to card, for lookup without scanning stages.
        excluded: Ids of records whose stage value matched no stage.
    """

    stages: tuple[Stage, ...]
    cards: Mapping[str, Card[T]] = field(default_factory=dict)
    excluded: tuple[str, ...] = ()

    @property
    def stage_ids(self) -> tuple[str, ...]:
        return tuple(stage.id for stage in self.stages)

    def stage(self, stage_id: str) -> Stage:
        for stage in self.stages:
            if stage.id == stage_id:
                return stage
        raise UnknownStageError(stage_id, self.stage_ids)

    def locate(self, card_id: str) -> tuple[str, int] | None:
        """Return ``(stage_id, index)`` of the first occurrence of *card_id*."""
        for stage in self.stages:
            if card_id in stage.card_ids:
                return stage.id, stage.card_ids.index(card_id)
        return None

    def counts(self) -> dict[str, int]:
        return {stage.id: len(stage.card_ids) for stage in self.stages}

    def __len__(self) -> int:
        return sum(len(stage.card_ids) for stage in self.stages)


def _default_id(record: Any) -> str:
    return str(record["id"])


def materialize(
    records: Iterable[T],
    stages: BoardDefinition | Sequence[str],
    *,
    id_of: Callable[[T], Any] | None = None,
    stage_of: Callable[[T], Any] | None = None,
) -> Board[T]:
    """Derive a :class:`Board` from *records* in a single pass.

    Args:
        records: Canonical record list, in the order cards should appear.
        stages: A board definition (stage configs are attached and its
            ``stage_field`` is the default stage accessor) or a plain
            sequence of stage ids.
        id_of: Record to card id. Defaults to ``record["id"]``.
        stage_of: Record to stage value. Defaults to
            ``record[definition.stage_field]`` or ``record["stage"]``.

    Duplicate ids are kept verbatim; the card map holds the last one.
    """
    if isinstance(stages, BoardDefinition):
        stage_order: Sequence[str] = stages.stage_order
        configs: Mapping[str, StageConfig] = stages.stages
        default_field = stages.stage_field
    else:
        stage_order = stages
        configs = {}
        default_field = "stage"

    get_id = id_of or _default_id
    get_stage = stage_of or itemgetter(default_field)

    columns: dict[str, list[str]] = {stage_id: [] for stage_id in stage_order}
    cards: dict[str, Card[T]] = {}
    excluded: list[str] = []

    for record in records:
        card_id = str(get_id(record))
        column = columns.get(get_stage(record))
        if column is None:
            excluded.append(card_id)
            continue
        column.append(card_id)
        cards[card_id] = Card(id=card_id, data=record)

    if excluded:
        logger.debug("Excluded %d records with unconfigured stage: %s", len(excluded), excluded)

    return Board(
        stages=tuple(
            Stage(id=stage_id, card_ids=tuple(ids), config=configs.get(stage_id))
            for stage_id, ids in columns.items()
        ),
        cards=MappingProxyType(cards),
        excluded=tuple(excluded),
    )
