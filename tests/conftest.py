"""Shared pytest fixtures for boardctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from boardctl.domain.stages import BoardRegistry
from boardctl.infrastructure.store import RecordStore

_TAREAS: list[dict[str, Any]] = [
    {"id": "T-1", "titulo": "Llamar al cliente", "estado": "Pendiente"},
    {"id": "T-2", "titulo": "Enviar propuesta", "estado": "Pendiente"},
    {"id": "T-3", "titulo": "Revisar contrato", "estado": "En Progreso"},
    {"id": "T-4", "titulo": "Cerrar trato", "estado": "Terminada"},
    {"id": "T-5", "titulo": "Registro viejo", "estado": "Archivada"},
]


@pytest.fixture
def tareas_records() -> list[dict[str, Any]]:
    """Sample task records; T-5 has a stage that is not on the board."""
    return [dict(r) for r in _TAREAS]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> BoardRegistry:
    """Registry holding only the built-in boards."""
    return BoardRegistry()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[RecordStore]:
    """Empty record store in a temp directory."""
    s = RecordStore(tmp_path / ".boardctl" / "boardctl.db")
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def seeded_store(store: RecordStore) -> RecordStore:
    """Record store with the sample tasks loaded on the ``tareas`` board."""
    store.add_many("tareas", _TAREAS, stage_field="estado")
    return store


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no inherited config.

    Use via ``@pytest.mark.usefixtures("_isolated_root")``.
    """
    monkeypatch.delenv("BOARDCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
