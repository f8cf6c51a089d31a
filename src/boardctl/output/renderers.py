"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from itertools import zip_longest
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from boardctl.config.models import DisplayConfig
from boardctl.output.console import create_console, get_output, style_for_intent

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from boardctl.services.result import ServiceResult

    Renderer = Callable[[ServiceResult, Console, DisplayConfig, bool], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    display: DisplayConfig | None = None,
    verbose: bool = False,
) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    display = display or DisplayConfig()
    console = create_console(width=display.width)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, display, verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: ids for lists, one line otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "show_board":
        return "\n".join(
            card["id"] for stage in result.data.get("stages", []) for card in stage["cards"]
        )
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("id", item.get("board", ""))) for item in items)
    if result.op in ("move_card", "cancel_drag"):
        return f"{result.data.get('id')} {result.data.get('intent')}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="board.ok")
    op = Text(f"  {result.op}", style="board.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="board.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="board.id")
    elif key == "intent":
        v = Text(str(value), style=style_for_intent(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _location(loc: dict[str, Any] | None) -> str:
    if loc is None:
        return "(not on board)"
    return f"{loc['stage']} #{loc['index']}"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="board.error"),
        Text(f"  {result.op}", style="board.op"),
        " — ",
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Board renderers ───────────────────────────────────────────────────


def _render_board(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    """One table column per stage, cards in board order."""
    stages = [
        s for s in result.data.get("stages", []) if display.show_empty or s.get("count", 0) > 0
    ]
    console.print(Text(str(result.data.get("board", "")), style="board.title"))

    table = Table(show_header=True, show_lines=False, expand=True, pad_edge=False)
    columns: list[list[Text]] = []
    for stage in stages:
        color = stage.get("color") or "default"
        header = Text(stage["label"], style=f"bold {color}")
        header.append(f" ({stage['count']})", style="board.count")
        table.add_column(header, overflow="fold")

        cells: list[Text] = []
        cards = stage["cards"]
        for card in cards[: display.max_cards]:
            cell = Text(card["id"], style="board.id")
            if card.get("title") and card["title"] != card["id"]:
                cell.append(f" {card['title']}")
            if card.get("dragging"):
                cell.stylize("board.dragging")
            cells.append(cell)
        hidden = len(cards) - display.max_cards
        if hidden > 0:
            cells.append(Text(f"+{hidden} more", style="board.count"))
        if not cells:
            cells.append(Text("(empty)", style="board.empty"))
        columns.append(cells)

    for row in zip_longest(*columns, fillvalue=Text("")):
        table.add_row(*row)
    if stages:
        console.print(table)
    console.print(Text(f"{result.data.get('total', 0)} cards", style="board.count"))

    excluded = (result.meta or {}).get("excluded") or []
    if verbose and excluded:
        console.print(Text(f"excluded: {', '.join(excluded)}", style="board.warning"))


def _render_stages(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    _status_line(console, result)
    _field(console, "board", result.data.get("board"))
    _field(console, "stage_field", result.data.get("stage_field"))
    table = Table(show_header=True, pad_edge=False)
    table.add_column("#", justify="right", style="board.count")
    table.add_column("Stage", style="board.id")
    table.add_column("Label")
    table.add_column("Cards", justify="right")
    for pos, item in enumerate(result.data.get("items", [])):
        table.add_row(
            str(pos),
            item["id"],
            Text(item["label"], style=item.get("color") or ""),
            str(item["count"]),
        )
    console.print(table)


def _render_move(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    _field(console, "intent", d.get("intent"))
    _field(console, "from", _location(d.get("from")))
    _field(console, "to", _location(d.get("to")))
    if verbose and "write" in d:
        _field(console, "write", json.dumps(d["write"], separators=(",", ":")))


def _render_card(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    _field(console, "stage", f"{d.get('stage')} #{d.get('index')}")
    for key, value in (d.get("record") or {}).items():
        if key == "id":
            continue
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        _field(console, key, value)


def _render_records(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if not items:
        return
    table = Table(show_header=True, pad_edge=False)
    table.add_column("ID", style="board.id", no_wrap=True)
    table.add_column("Stage")
    table.add_column("Title", style="board.title")
    for item in items:
        table.add_row(str(item["id"]), str(item["stage"]), str(item["title"]))
    console.print(table)


def _render_boards(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False)
    table.add_column("Board", style="board.id")
    table.add_column("Records", justify="right")
    table.add_column("Registered")
    for item in result.data.get("items", []):
        table.add_row(item["board"], str(item["count"]), "yes" if item["registered"] else "no")
    console.print(table)


def _render_generic(
    result: ServiceResult, console: Console, display: DisplayConfig, verbose: bool
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "show_board": _render_board,
    "list_stages": _render_stages,
    "move_card": _render_move,
    "cancel_drag": _render_move,
    "show_card": _render_card,
    "list_records": _render_records,
    "list_boards": _render_boards,
    "import_records": _render_generic,
}
