"""Shared utility functions for sqlscaffold.

Provides identifier case conversion, Rich-based console output and logging
setup.
"""

from __future__ import annotations

import logging
import re
import string

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])|([A-Z]+)([A-Z][a-z])")


def split_words(name: str) -> list[str]:
    """Split an identifier on case changes, underscores, hyphens and spaces.

    Examples::

        split_words("serverName_example") -> ["server", "Name", "example"]
        split_words("HTTPServer")         -> ["HTTP", "Server"]
    """
    spaced = _WORD_BOUNDARY.sub(
        lambda m: f"{m.group(1)} {m.group(2)}" if m.group(1) else f"{m.group(3)} {m.group(4)}",
        name,
    )
    return [w for w in re.split(r"[\s_\-.]+", spaced) if w]


def to_kebab_case(name: str) -> str:
    """Convert ``userService`` or ``user_service`` to ``user-service``."""
    return "-".join(w.lower() for w in split_words(name))


def to_snake_case(name: str) -> str:
    """Convert ``UserService`` or ``user-service`` to ``user_service``."""
    return "_".join(w.lower() for w in split_words(name))


def to_pascal_case(name: str) -> str:
    """Convert ``order_item`` to ``OrderItem``.

    Common initialisms are kept upper-case the way Go names them, so
    ``user_id`` becomes ``UserID``.
    """
    words = []
    for word in split_words(name):
        upper = word.upper()
        words.append(upper if upper in _INITIALISMS else word[:1].upper() + word[1:].lower())
    return "".join(words)


def to_camel_case(name: str) -> str:
    """Convert ``order_item`` to ``orderItem``."""
    words = split_words(name)
    if not words:
        return ""
    head = words[0].lower()
    return head + to_pascal_case("_".join(words[1:]))


def lower_first(value: str) -> str:
    """Lower-case the leading word of a Go identifier.

    A leading initialism is lowered as a whole, the way Go names unexported
    identifiers: ``UserExample`` -> ``userExample``, ``APIKey`` -> ``apiKey``,
    ``ID`` -> ``id``.
    """
    n = len(value) - len(value.lstrip(string.ascii_uppercase))
    if n < len(value) and value[n].islower():
        n -= 1
    n = max(n, 1)
    return value[:n].lower() + value[n:]


_INITIALISMS = frozenset({"API", "DB", "HTTP", "ID", "IP", "JSON", "SQL", "URL", "UUID"})


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_panel(message: str, title: str = "") -> None:
    """Print a message inside a bordered panel."""
    console.print(Panel(message, title=title or None, border_style="cyan"))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def setup_logging(verbose: bool = False) -> None:
    """Route the ``sqlscaffold`` loggers through a Rich handler on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    root = logging.getLogger("sqlscaffold")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False
