"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from availctl.output.console import create_console, get_output, style_for_state

if TYPE_CHECKING:
    from rich.console import Console

    from availctl.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet`` mode: asset ids for lists, else a status line."""
    if not result.ok:
        code = result.error_code or "ERROR"
        code = result.error.code if result.error else "ERROR"
        return f"ERROR: {result.op} — {code}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("asset_id", "")) for item in items)
    expired = result.data.get("expired")
    if isinstance(expired, list):
        return "\n".join(expired)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="avl.ok"), Text(f"  {result.op}", style="avl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="avl.key")
    if key.endswith("_id"):
        v = Text(str(value), style="avl.id")
    elif key == "state":
        v = Text(str(value), style=style_for_state(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="avl.error")
    console.print(label, Text(f"  {result.op}", style="avl.op"), " — ", msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_asset(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render register/show/transition results."""
    d = result.data
    _status_line(console, result)
    _field(console, "asset_id", d.get("asset_id", ""))
    _field(console, "state", d.get("state", ""))
    lock = d.get("lock") or {}
    if lock.get("owner_id"):
        _field(console, "owner_id", lock["owner_id"])
        _field(console, "valid_until", lock.get("valid_until", ""))
    if "overdue" in d:
        _field(console, "overdue", d["overdue"])
    event = d.get("event")
    if event:
        _field(console, "event", event.get("type", ""))
    if verbose:
        _field(console, "version", d.get("version", ""))
        _render_meta(console, result)


def _render_asset_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text("No assets registered.", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Asset", style="avl.id", no_wrap=True)
    table.add_column("State")
    table.add_column("Owner")
    table.add_column("Valid Until")
    if verbose:
        table.add_column("Version", justify="right")
        table.add_column("Modified", style="dim")

    for item in items:
        state = str(item.get("state", ""))
        row: list[str | Text] = [
            str(item.get("asset_id", "")),
            Text(state, style=style_for_state(state)),
            str(item.get("owner_id") or ""),
            str(item.get("valid_until") or ""),
        ]
        if verbose:
            row.extend([str(item.get("version", "")), str(item.get("modified", ""))])
        table.add_row(*row)
    console.print(table)


def _render_expire(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "checked_at", result.data.get("checked_at", ""))
    _field(console, "expired", result.data.get("count", 0))
    for asset_id in result.data.get("expired", []):
        console.print(Text(f"    {asset_id}", style="avl.id"))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "register": _render_asset,
    "show": _render_asset,
    "activate": _render_asset,
    "withdraw": _render_asset,
    "lock": _render_asset,
    "lock_indefinitely": _render_asset,
    "unlock": _render_asset,
    "list": _render_asset_table,
    "expire": _render_expire,
}
