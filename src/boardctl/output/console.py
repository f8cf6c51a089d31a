"""Rich Console factory and theme for boardctl output.

Consoles render into a StringIO buffer so renderers return strings. In
non-TTY environments (tests, pipes) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BOARD_THEME = Theme(
    {
        "board.ok": "bold green",
        "board.error": "bold red",
        "board.warning": "bold yellow",
        "board.op": "bold cyan",
        "board.key": "dim",
        "board.id": "bold blue",
        "board.title": "bold",
        "board.count": "dim",
        "board.dragging": "reverse",
        "board.empty": "dim italic",
    }
)

_INTENT_STYLES: dict[str, str] = {
    "transition": "bold magenta",
    "reorder": "bold cyan",
    "noop": "dim",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps column layout stable).
    """
    return Console(
        file=StringIO(),
        theme=BOARD_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_intent(intent: str) -> str:
    """Return the Rich style for a mutation intent."""
    return _INTENT_STYLES.get(intent, "")
