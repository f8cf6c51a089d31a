"""Locate ``boardctl.toml`` for the current invocation.

``BOARDCTL_CONFIG`` names the file explicitly; otherwise the nearest
``boardctl.toml`` in the start directory or one of its ancestors is used.
Parsing and validation belong to :class:`boardctl.config.settings.BoardSettings`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "boardctl.toml"
CONFIG_ENV_VAR = "BOARDCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None.

    An env override that points at a missing file disables discovery
    instead of falling back to the walk-up.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    return next(
        (d / CONFIG_FILENAME for d in (here, *here.parents) if (d / CONFIG_FILENAME).is_file()),
        None,
    )
