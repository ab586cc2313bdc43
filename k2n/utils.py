"""
Utility functions for k2n.

Includes:
- Console/UI helpers (banner, settings table, status messages)
- Logging setup
- Comma-separated path and extension parsing
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

# Global console instance. Bound to stderr so stdout only carries generated content.
console = Console(stderr=True)

LOGGER_NAME = "k2n"

SECRET_MASK = "***"


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{subtitle}[/italic]", expand=False))


def print_banner(version: str):
    print_header(f"k2n v{version}", "ai based code generation in your terminal or ci workflow")


def format_setting(value: str) -> str:
    """
    Render a setting value for the settings table.

    Empty values show as unset and boolean strings get a marker.
    """
    if value == "":
        return "[dim]⊘ unset[/dim]"
    if value == "true":
        return "[green]✓ true[/green]"
    if value == "false":
        return "[red]✗ false[/red]"
    return value


def print_settings_table(settings: dict[str, str], title: str | None = None):
    """Print a two-column table of setting names and values."""
    table = Table(title=title, show_header=False, box=None, pad_edge=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in settings.items():
        table.add_row(key, format_setting(value))

    console.print(table)


def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {msg}")

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {msg}")

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {msg}")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the k2n hierarchy."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Route k2n log records through rich on stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    # Avoid duplicate handlers when main() runs more than once in a process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(RichHandler(console=console, show_path=False, markup=False))
    return logger


# -----------------------------------------------------------------------------
# Path / extension lists
# -----------------------------------------------------------------------------

def split_and_trim_paths(csv: str | None) -> list[str]:
    """
    Split a comma-separated list of paths.

    Args:
        csv: e.g. "examples/a.yaml, examples/b.tf,"

    Returns:
        Trimmed, non-empty entries in their original order.
    """
    if not csv:
        return []
    return [p.strip() for p in csv.split(",") if p.strip()]


def split_and_trim_exts(csv: str | None) -> list[str]:
    """Split a comma-separated extension list like ".yaml, tf"."""
    return split_and_trim_paths(csv)


def normalize_extensions(exts) -> set[str]:
    """Lowercase each extension and make sure it starts with a dot."""
    normalized = set()
    for ext in exts:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith('.') else f'.{ext}')
    return normalized


def has_allowed_extension(path, allowed_exts) -> bool:
    """
    Check a file name against an extension allow-list (case-insensitive).

    Args:
        path: File path or name.
        allowed_exts: Extensions with or without a leading dot.
    """
    ext = os.path.splitext(str(path))[1].lower()
    return ext in normalize_extensions(allowed_exts)
