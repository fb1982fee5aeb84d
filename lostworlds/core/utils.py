"""
Console helpers for the combat engine.

All terminal output of the front end goes through one shared rich console,
so it can be captured as plain text in tests.
"""

from typing import Any

from rich.console import Console
from rich.rule import Rule

# Shared console for every sheet, table and prompt message.
_console = Console(markup=True, width=120, force_jupyter=False)


def cprint(*renderables: Any, **kwargs: Any) -> None:
    """Prints markup strings or rich renderables to the shared console."""
    _console.print(*renderables, **kwargs)


def crule(title: str = "", **kwargs: Any) -> None:
    """
    Prints a horizontal rule, optionally with a title.

    Args:
        title (str): Markup shown in the middle of the rule.
        **kwargs: Passed on to ``rich.rule.Rule`` (e.g. ``style``).

    """
    _console.print(Rule(title, **kwargs))


def ccapture(*renderables: Any) -> str:
    """
    Renders to a string instead of the terminal.

    Args:
        *renderables (Any): Markup strings or rich renderables.

    Returns:
        str: The rendered text, without a trailing newline.

    """
    with _console.capture() as capture:
        _console.print(*renderables, end="")
    return capture.get()
