"""Terminal diagnostics using Rich.

Stdout carries the JSON envelope only; everything human-facing goes to the
stderr console through loguru.
"""

from __future__ import annotations

from loguru import logger as log
from rich.console import Console
from rich.logging import RichHandler

# Global console instance
console = Console(stderr=True)


def configure_logging(debug: bool = False) -> None:
    """Route loguru records to the stderr console.

    Debug mode shows everything; otherwise only warnings and errors.
    """
    log.remove()
    log.add(
        RichHandler(console=console, show_path=False, markup=False),
        level="DEBUG" if debug else "WARNING",
        format="{message}",
    )
