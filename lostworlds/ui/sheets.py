"""
Module for rendering characters, rolls and the initiative list with rich.

The ``build_*`` functions return rich renderables so they can be captured
and tested; the ``print_*`` functions send them to the console.
"""

from rich.padding import Padding
from rich.table import Table

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.dice_pool import RollCalculation, describe_pool
from lostworlds.combat.dice_roller import DiceRollResult, RollHistory
from lostworlds.combat.initiative import CombatState
from lostworlds.core.constants import DIE_SIDES, StatCategory
from lostworlds.core.stats import dice_for, format_modifier, modifier_for
from lostworlds.core.utils import cprint


def build_stat_table(character: CharacterSnapshot) -> Table:
    """
    Builds the stat block of a character, grouped by category.

    Args:
        character (CharacterSnapshot): The character to display.

    Returns:
        Table: One row per stat with its value, dice and modifier.

    """
    table = Table(title=character.name, pad_edge=False)
    table.add_column("Category")
    table.add_column("Stat", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Dice", justify="right", style="cyan")
    table.add_column("Mod", justify="right", style="green")
    for category in StatCategory:
        for stat in category.stats:
            value = character.stat_value(stat)
            table.add_row(
                category.colored_name,
                f"{stat.display_name} ({stat.value})",
                str(value),
                f"{dice_for(value)}d{DIE_SIDES}",
                format_modifier(modifier_for(value)),
            )
    return table


def build_calculation_table(calculation: RollCalculation) -> Table:
    """
    Builds the breakdown of a calculated roll.

    Args:
        calculation (RollCalculation): The roll to display.

    Returns:
        Table: Where each die and the modifier come from.

    """
    # Wide enough for the title to stay on one line.
    table = Table(
        title=calculation.description,
        pad_edge=False,
        min_width=len(calculation.description) + 4,
    )
    table.add_column("Source", style="bold")
    table.add_column("Dice", justify="right", style="cyan")
    for source, amount in describe_pool(calculation):
        table.add_row(source, f"{amount}d{DIE_SIDES}")
    pool = calculation.dice_pool
    table.add_row()
    table.add_row("[bold]Total[/]", f"[bold]{pool}[/]")
    return table


def result_to_string(result: DiceRollResult) -> str:
    """
    Formats a roll result with its dice and outcome.

    Args:
        result (DiceRollResult): The result to format.

    Returns:
        str: The formatted result, with critical and fumble markers.

    """
    dice = ", ".join(
        f"[bold green]{r}[/]" if r == DIE_SIDES else f"[bold red]{r}[/]" if r == 1 else str(r)
        for r in result.rolls
    )
    text = f"🎲 [bold]{result.final_result}[/]"
    text += f" [dim]({dice or 'no dice'} {format_modifier(result.modifier)})[/]"
    if result.is_critical:
        text += " [bold green]CRITICAL![/]"
    if result.is_fumble:
        text += " [bold red]FUMBLE![/]"
    return text


def build_initiative_table(state: CombatState) -> Table:
    """
    Builds the turn order of an encounter.

    Args:
        state (CombatState): The encounter to display.

    Returns:
        Table: The combatants, with the current one highlighted.

    """
    status = f"Round {state.round}" if state.is_active else "Not in combat"
    table = Table(title=f"Initiative - {status}", pad_edge=False)
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Init", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Id", style="dim")
    for i, entry in enumerate(state.initiative, 1):
        marker = "▶" if entry.is_current_turn else ""
        table.add_row(
            f"{marker}{i}",
            str(entry.initiative),
            entry.name,
            "👤 Player" if entry.is_player else "👹 NPC",
            entry.id[:8],
            style="reverse" if entry.is_current_turn and state.is_active else None,
        )
    return table


def print_character_sheet(character: CharacterSnapshot) -> None:
    cprint(build_stat_table(character))
    if character.skills:
        skills = ", ".join(
            f"{skill_id} [cyan]{level}[/]" for skill_id, level in sorted(character.skills.items())
        )
        cprint(Padding(f"Skills: {skills}", (0, 2)))
    cprint(Padding(f"Initiative: {format_modifier(character.initiative_mod)}", (0, 2)))


def print_calculation(calculation: RollCalculation) -> None:
    cprint(build_calculation_table(calculation))


def print_roll_result(result: DiceRollResult) -> None:
    cprint(Padding(result_to_string(result), (0, 2)))


def print_roll_history(history: RollHistory) -> None:
    if not len(history):
        cprint(Padding("[dim]No rolls yet.[/]", (0, 2)))
        return
    for record in history:
        cprint(
            Padding(
                f"{record.calculation.description}: {result_to_string(record.result)}",
                (0, 2),
            )
        )


def print_initiative(state: CombatState) -> None:
    cprint(build_initiative_table(state))
