"""
Main entry point for the Lost Worlds combat tools.

Loads character snapshots from a JSON file and starts the interactive dice
calculator and initiative tracker.
"""

import argparse
import logging
import random
from pathlib import Path

from lostworlds.character import CharacterSnapshot, load_characters
from lostworlds.combat.controller import CombatController
from lostworlds.combat.dice_roller import DiceRoller
from lostworlds.core.logging import get_logger, setup_logging
from lostworlds.core.settings import load_settings
from lostworlds.ui.cli_interface import CombatInterface

logger = get_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lostworlds-cli",
        description="Dice calculator and initiative tracker for Lost Worlds.",
    )
    parser.add_argument(
        "characters",
        nargs="?",
        type=Path,
        help="JSON file with one character record or a list of records.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON settings file (defaults to $LOSTWORLDS_SETTINGS).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the dice for reproducible rolls.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings(args.settings)
    setup_logging(logging.DEBUG if args.debug else settings.log_level)

    characters: dict[str, CharacterSnapshot] = {}
    if args.characters:
        characters = load_characters(args.characters)
        logger.info(f"Loaded {len(characters)} character(s) from {args.characters}")

    controller = CombatController(
        roller=DiceRoller(random.Random(args.seed)),
        settings=settings,
    )
    CombatInterface(controller, characters).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
