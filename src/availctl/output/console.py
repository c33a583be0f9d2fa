"""Rich Console factory and theme for availctl output.

Consoles render into a StringIO buffer so renderers return plain strings.
In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

AVL_THEME = Theme(
    {
        "avl.ok": "bold green",
        "avl.error": "bold red",
        "avl.warning": "bold yellow",
        "avl.op": "bold cyan",
        "avl.key": "dim",
        "avl.id": "bold blue",
        "avl.state.available": "green",
        "avl.state.maintenance": "yellow",
        "avl.state.withdrawn": "dim",
        "avl.state.locked": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=AVL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_state(state: str) -> str:
    return f"avl.state.{state}" if state else ""
