"""
Command-line interface for the combat engine.

A small command interpreter over a ``CombatController``: pick a character,
build a roll, roll it, and run the initiative list of an encounter. Input is
read with prompt_toolkit, output is rendered with rich.
"""

from collections.abc import Callable

from catchery import log_warning
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from rich.markup import escape

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.controller import CombatController
from lostworlds.combat.formulas import attack_formulas, defense_formulas
from lostworlds.core.constants import AttackType, CalculatorMode, CombatTab, Stat
from lostworlds.core.error_handling import CombatEngineError
from lostworlds.core.utils import cprint, crule
from lostworlds.ui.sheets import (
    print_calculation,
    print_character_sheet,
    print_initiative,
    print_roll_history,
    print_roll_result,
)

HELP_TEXT = """\
[bold]Characters[/]
  chars                      list the loaded characters
  select <#|id>              select the rolling character
  sheet                      show the selected character
[bold]Dice calculator[/]
  mode simple|combat         switch calculator mode
  tab attack|defense         switch between attack and defense formulas
  stat <MIT|GRT|...>         toggle a stat (simple mode)
  clear                      clear the selected stats
  attack <type>              choose physical, ranged or magical (combat mode)
  skill <id>                 toggle a skill
  skills                     list the character's skills
  bonus <n>                  add (or remove) bonus dice
  mod <n>                    add (or remove) to the bonus modifier
  preview                    show the current dice pool
  roll                       roll the current dice pool
  history                    show the last rolls
  forget                     clear the roll history
[bold]Initiative[/]
  init                       show the initiative list
  init add <name> <score> \\[player]
  init roll                  roll initiative for the selected character and add it
  init remove <#|id>         remove an entry
  start | end | next | prev  run the encounter
[bold]Other[/]
  help                       show this help
  quit                       leave"""


class CombatInterface:
    """
    Command interpreter for the dice calculator and the initiative tracker.

    ``handle_command`` executes a single line and can be used without a
    terminal; ``run`` reads lines with prompt_toolkit until the user quits.
    """

    def __init__(
        self,
        controller: CombatController,
        characters: dict[str, CharacterSnapshot] | None = None,
    ) -> None:
        """
        Initialize the interface.

        Args:
            controller (CombatController): The controller to drive.
            characters (dict[str, CharacterSnapshot] | None): The selectable
                characters, keyed by id.

        """
        self.controller: CombatController = controller
        self.characters: list[CharacterSnapshot] = list((characters or {}).values())
        self.commands: dict[str, Callable[[list[str]], None]] = {
            "help": self._cmd_help,
            "chars": self._cmd_chars,
            "select": self._cmd_select,
            "sheet": self._cmd_sheet,
            "mode": self._cmd_mode,
            "tab": self._cmd_tab,
            "stat": self._cmd_stat,
            "clear": self._cmd_clear,
            "attack": self._cmd_attack,
            "skill": self._cmd_skill,
            "skills": self._cmd_skills,
            "bonus": self._cmd_bonus,
            "mod": self._cmd_mod,
            "preview": self._cmd_preview,
            "roll": self._cmd_roll,
            "history": self._cmd_history,
            "forget": self._cmd_forget,
            "init": self._cmd_init,
            "start": self._cmd_start,
            "end": self._cmd_end,
            "next": self._cmd_next,
            "prev": self._cmd_prev,
        }

    # ============================================================================
    # MAIN LOOP
    # ============================================================================

    def run(self) -> None:
        """Reads and executes commands until the user quits."""
        completer = WordCompleter(
            [*self.commands, "quit"] + [s.value for s in Stat] + [a.value for a in AttackType],
            ignore_case=True,
        )
        session: PromptSession = PromptSession(completer=completer)
        crule("Lost Worlds - Combat", style="bold green")
        cprint("Type [bold]help[/] for the list of commands.")
        while True:
            try:
                line = session.prompt(self._prompt_text())
            except (EOFError, KeyboardInterrupt):
                break
            if not self.handle_command(line):
                break

    def handle_command(self, line: str) -> bool:
        """
        Executes a single command line.

        Args:
            line (str): The raw input.

        Returns:
            bool: False if the user asked to quit, True otherwise.

        """
        words = line.strip().split()
        if not words:
            return True
        name, args = words[0].lower(), words[1:]
        if name in ("quit", "exit", "q"):
            return False
        command = self.commands.get(name)
        if command is None:
            cprint(f"[red]Unknown command '{name}'.[/] Type [bold]help[/].")
            return True
        try:
            command(args)
        except (CombatEngineError, ValueError) as e:
            log_warning(f"Command '{line.strip()}' failed: {e}", {"command": name})
            cprint(f"[red]{escape(str(e))}[/]")
        return True

    def _prompt_text(self) -> str:
        character = self.controller.character
        who = character.name if character else "no character"
        mode = self.controller.calculator_state.mode.value
        return f"[{who} | {mode}] > "

    # ============================================================================
    # CHARACTERS
    # ============================================================================

    def _cmd_help(self, _: list[str]) -> None:
        cprint(HELP_TEXT)

    def _cmd_chars(self, _: list[str]) -> None:
        if not self.characters:
            cprint("[dim]No characters loaded.[/]")
            return
        for i, character in enumerate(self.characters, 1):
            cprint(f"  [cyan]{i}[/] {character.name} [dim]({character.id})[/]")

    def _find_character(self, key: str) -> CharacterSnapshot:
        if key.isdigit() and 1 <= int(key) <= len(self.characters):
            return self.characters[int(key) - 1]
        for character in self.characters:
            if character.id == key or character.name.lower() == key.lower():
                return character
        raise ValueError(f"No character '{key}'")

    def _require_character(self) -> CharacterSnapshot:
        if self.controller.character is None:
            raise ValueError("Select a character first")
        return self.controller.character

    def _cmd_select(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: select <#|id>")
        character = self._find_character(" ".join(args))
        self.controller.select_character(character)
        cprint(f"Selected [bold]{character.name}[/].")

    def _cmd_sheet(self, _: list[str]) -> None:
        print_character_sheet(self._require_character())

    # ============================================================================
    # CALCULATOR
    # ============================================================================

    def _cmd_mode(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: mode simple|combat")
        self.controller.set_mode(CalculatorMode(args[0].lower()))

    def _cmd_tab(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: tab attack|defense")
        tab = CombatTab(args[0].lower())
        self.controller.set_combat_tab(tab)
        formulas = defense_formulas() if tab.is_defense else attack_formulas()
        for formula in formulas:
            cprint(f"  {formula.attack_type.emoji} {formula}")

    def _cmd_stat(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: stat <MIT|GRT|SPD|KNW|FRS|COR|DET|AST|MAG|NAT>")
        if self.controller.calculator_state.mode != CalculatorMode.SIMPLE:
            raise ValueError("Stats are chosen by the formula in combat mode")
        for key in args:
            self.controller.toggle_stat(Stat.from_key(key))
        self._show_preview()

    def _cmd_clear(self, _: list[str]) -> None:
        self.controller.clear_stats()

    def _cmd_attack(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: attack physical|ranged|magical")
        if self.controller.calculator_state.mode != CalculatorMode.COMBAT:
            self.controller.set_mode(CalculatorMode.COMBAT)
        self.controller.select_attack_type(AttackType(args[0].lower()))
        self._show_preview()

    def _cmd_skill(self, args: list[str]) -> None:
        if not args:
            raise ValueError("Usage: skill <id>")
        character = self._require_character()
        if character.skill_level(args[0]) is None:
            raise ValueError(f"{character.name} has no skill '{args[0]}'")
        self.controller.toggle_skill(args[0])
        self._show_preview()

    def _cmd_skills(self, _: list[str]) -> None:
        self._require_character()
        options = self.controller.skill_options()
        if not options:
            cprint("[dim]No skills.[/]")
        for option in options:
            mark = "[green]✔[/]" if option.selected else " "
            cprint(
                f"  {mark} {option.name} [dim]({option.id}, level {option.level})[/] "
                f"[cyan]+{option.bonus_dice}d20[/]"
            )

    def _cmd_bonus(self, args: list[str]) -> None:
        self.controller.adjust_bonus_dice(self._parse_int(args, "bonus <n>"))
        self._show_preview()

    def _cmd_mod(self, args: list[str]) -> None:
        self.controller.adjust_bonus_modifier(self._parse_int(args, "mod <n>"))
        self._show_preview()

    def _cmd_preview(self, _: list[str]) -> None:
        self._show_preview()

    def _cmd_roll(self, _: list[str]) -> None:
        result = self.controller.roll()
        if result is None:
            raise ValueError("Nothing to roll: select a character and a stat or attack type")
        print_roll_result(result)

    def _cmd_history(self, _: list[str]) -> None:
        print_roll_history(self.controller.history)

    def _cmd_forget(self, _: list[str]) -> None:
        self.controller.clear_history()

    def _show_preview(self) -> None:
        calculation = self.controller.calculation
        if calculation is None:
            cprint("[dim]Nothing to roll yet.[/]")
            return
        print_calculation(calculation)

    # ============================================================================
    # INITIATIVE
    # ============================================================================

    def _cmd_init(self, args: list[str]) -> None:
        if not args:
            print_initiative(self.controller.combat_state)
            return
        action, rest = args[0].lower(), args[1:]
        if action == "add":
            if len(rest) < 2:
                raise ValueError("Usage: init add <name> <score> [player]")
            is_player = rest[-1].lower() == "player"
            if is_player:
                rest = rest[:-1]
            score = int(rest[-1])
            name = " ".join(rest[:-1])
            if not name:
                raise ValueError("Usage: init add <name> <score> [player]")
            state = self.controller.add_to_initiative(name, score, is_player=is_player)
        elif action == "roll":
            character = self._require_character()
            score = self.controller.roll_initiative_for(character)
            cprint(f"{character.name} rolls initiative: [bold]{score}[/]")
            state = self.controller.add_to_initiative(
                character.name,
                score,
                is_player=True,
                character_id=character.id,
            )
        elif action == "remove":
            if not rest:
                raise ValueError("Usage: init remove <#|id>")
            state = self.controller.remove_from_initiative(self._find_entry_id(rest[0]))
        else:
            raise ValueError(f"Unknown initiative action '{action}'")
        print_initiative(state)

    def _find_entry_id(self, key: str) -> str:
        entries = self.controller.combat_state.initiative
        if key.isdigit() and 1 <= int(key) <= len(entries):
            return entries[int(key) - 1].id
        for entry in entries:
            if entry.id.startswith(key):
                return entry.id
        raise ValueError(f"No initiative entry '{key}'")

    def _cmd_start(self, _: list[str]) -> None:
        print_initiative(self.controller.start_combat())

    def _cmd_end(self, _: list[str]) -> None:
        print_initiative(self.controller.end_combat())

    def _cmd_next(self, _: list[str]) -> None:
        state = self.controller.next_turn()
        self._announce_turn()
        print_initiative(state)

    def _cmd_prev(self, _: list[str]) -> None:
        state = self.controller.previous_turn()
        self._announce_turn()
        print_initiative(state)

    def _announce_turn(self) -> None:
        entry = self.controller.tracker.current_entry
        if entry is not None:
            cprint(
                f"⏱ Round {self.controller.combat_state.round}: "
                f"[bold]{entry.name}[/] (initiative {entry.initiative})"
            )

    # ============================================================================
    # HELPERS
    # ============================================================================

    @staticmethod
    def _parse_int(args: list[str], usage: str) -> int:
        if not args:
            raise ValueError(f"Usage: {usage}")
        return int(args[0])
