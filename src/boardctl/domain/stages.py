"""Stage configuration registry.

A board is a fixed, ordered list of stages (columns). Each stage id maps
to display metadata; the table is closed and validated once, when the
board definition is built. A stage id without a config entry is a
startup error, never a render-time surprise.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from boardctl.domain.errors import StageConfigError, UnknownBoardError, UnknownStageError


class StageConfig(BaseModel):
    """Display metadata for one stage. Rich style strings, not behavior."""

    model_config = {"frozen": True}

    label: str
    text_color: str = "default"
    border_color: str = "grey50"
    badge_color: str = "dim"


class BoardDefinition(BaseModel):
    """A named board: which record field holds the stage, and the stage table.

    Attributes:
        name: Registry key (``"tareas"``).
        stage_field: Record key holding the stage value.
        title_field: Record key shown by the default card renderer.
        stage_order: Column order, left to right.
        stages: Stage id to display metadata. Must cover ``stage_order``
            exactly.
    """

    model_config = {"frozen": True}

    name: str
    stage_field: str = "stage"
    title_field: str = "title"
    stage_order: tuple[str, ...]
    stages: dict[str, StageConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_stage_table(self) -> BoardDefinition:
        if not self.stage_order:
            raise StageConfigError(f"Board {self.name!r} has no stages")
        seen: set[str] = set()
        for stage_id in self.stage_order:
            if stage_id in seen:
                raise StageConfigError(f"Board {self.name!r}: duplicate stage {stage_id!r}")
            seen.add(stage_id)
        missing = [s for s in self.stage_order if s not in self.stages]
        if missing:
            raise StageConfigError(f"Board {self.name!r}: no config for stages {missing}")
        extra = sorted(set(self.stages) - seen)
        if extra:
            raise StageConfigError(f"Board {self.name!r}: config for unknown stages {extra}")
        return self

    def get_config(self, stage_id: str) -> StageConfig:
        """Return the display config for *stage_id*."""
        try:
            return self.stages[stage_id]
        except KeyError:
            raise UnknownStageError(stage_id, self.stage_order) from None

    def has_stage(self, stage_id: str) -> bool:
        return stage_id in self.stages


# --- Built-in boards ---


class TareaEstado(StrEnum):
    """Task workflow states."""

    PENDIENTE = "Pendiente"
    EN_PROGRESO = "En Progreso"
    PAUSADA = "Pausada"
    TERMINADA = "Terminada"
    CANCELADA = "Cancelada"


class OportunidadEstado(StrEnum):
    """Sales opportunity workflow states."""

    ABIERTA = "abierta"
    EN_PROCESO = "en_proceso"
    GANADA = "ganada"
    PERDIDA = "perdida"
    CANCELADA = "cancelada"


class DocComercialEstado(StrEnum):
    """Commercial document workflow states."""

    NUEVA = "Nueva"
    EN_PROGRESO = "En Progreso"
    GANADA = "Ganada"
    PERDIDA = "Pérdida"
    DESCARTADA = "Descartada"


def _palette(label: str, color: str) -> StageConfig:
    return StageConfig(
        label=label,
        text_color=color,
        border_color=color,
        badge_color=f"bold {color}",
    )


TAREAS_BOARD = BoardDefinition(
    name="tareas",
    stage_field="estado",
    title_field="titulo",
    stage_order=tuple(s.value for s in TareaEstado),
    stages={
        TareaEstado.PENDIENTE: _palette("Pendiente", "grey50"),
        TareaEstado.EN_PROGRESO: _palette("En Progreso", "yellow"),
        TareaEstado.PAUSADA: _palette("Pausada", "dark_orange"),
        TareaEstado.TERMINADA: _palette("Terminada", "green"),
        TareaEstado.CANCELADA: _palette("Cancelada", "red"),
    },
)

OPORTUNIDADES_BOARD = BoardDefinition(
    name="oportunidades",
    stage_field="estado",
    title_field="codigo",
    stage_order=tuple(s.value for s in OportunidadEstado),
    stages={
        OportunidadEstado.ABIERTA: _palette("Abierta", "blue"),
        OportunidadEstado.EN_PROCESO: _palette("En Proceso", "yellow"),
        OportunidadEstado.GANADA: _palette("Ganada", "green"),
        OportunidadEstado.PERDIDA: _palette("Perdida", "bright_black"),
        OportunidadEstado.CANCELADA: _palette("Cancelada", "bright_black"),
    },
)

DOC_COMERCIALES_BOARD = BoardDefinition(
    name="doc_comerciales",
    stage_field="estado",
    title_field="codigo",
    stage_order=tuple(s.value for s in DocComercialEstado),
    stages={
        DocComercialEstado.NUEVA: _palette("Nueva", "blue"),
        DocComercialEstado.EN_PROGRESO: _palette("En Progreso", "yellow"),
        DocComercialEstado.GANADA: _palette("Ganada", "green"),
        DocComercialEstado.PERDIDA: _palette("Pérdida", "red"),
        DocComercialEstado.DESCARTADA: _palette("Descartada", "bright_black"),
    },
)

BUILTIN_BOARDS: tuple[BoardDefinition, ...] = (
    TAREAS_BOARD,
    OPORTUNIDADES_BOARD,
    DOC_COMERCIALES_BOARD,
)


class BoardRegistry:
    """Named board definitions: built-ins plus user-declared boards.

    User boards with a built-in's name replace it.
    """

    def __init__(self, boards: Iterable[BoardDefinition] = BUILTIN_BOARDS) -> None:
        self._boards: dict[str, BoardDefinition] = {}
        for board in boards:
            self._boards[board.name] = board

    @classmethod
    def from_config(cls, user_boards: Mapping[str, Mapping[str, object]]) -> BoardRegistry:
        """Build a registry from ``[boards.<name>]`` config tables.

        Every definition is validated here, so a bad table fails at startup.
        """
        boards = list(BUILTIN_BOARDS)
        for name, raw in user_boards.items():
            boards.append(BoardDefinition.model_validate({"name": name, **raw}))
        return cls(boards)

    def get(self, name: str) -> BoardDefinition:
        try:
            return self._boards[name]
        except KeyError:
            raise UnknownBoardError(name, self.names()) from None

    def names(self) -> tuple[str, ...]:
        return tuple(self._boards)

    def __contains__(self, name: object) -> bool:
        return name in self._boards

    def __iter__(self) -> Iterator[BoardDefinition]:
        return iter(self._boards.values())

    def __len__(self) -> int:
        return len(self._boards)
