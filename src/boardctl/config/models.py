"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, boardctl.toml only contains
overrides. An empty (or absent) file gives the built-in boards and a
store under ``.boardctl/``.
"""

from __future__ import annotations

from pydantic import BaseModel

# --- boardctl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    path: str = ".boardctl/boardctl.db"


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    width: int = 120
    show_empty: bool = True
    max_cards: int = 50


class BoardSection(BaseModel):
    """[board] section."""

    model_config = {"frozen": True}

    default: str = "tareas"

