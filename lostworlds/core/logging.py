"""
Logging configuration module for the combat engine.

Provides centralized logging setup with colored output using rich.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Sets up logging configuration with rich colored output.

    Args:
        level (int | str): The logging level to set, either as a number or as
            a level name such as "DEBUG". Defaults to logging.INFO.

    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    console = Console(width=120, stderr=True, force_jupyter=False)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    # force=True replaces handlers installed by an earlier call.
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Gets a logger instance under the engine namespace.

    Args:
        name (str): The name of the logger, e.g. "combat.initiative".

    Returns:
        logging.Logger: The configured logger instance.

    """
    if not name.startswith("lostworlds"):
        name = f"lostworlds.{name}"
    return logging.getLogger(name)


# Default logger for the engine
logger = get_logger("lostworlds")
