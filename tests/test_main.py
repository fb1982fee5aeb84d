"""
Tests for the command-line entry point.
"""

import json

from lostworlds.main import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.characters is None
    assert args.seed is None
    assert not args.debug


def test_main_loads_characters_and_runs_interface(tmp_path, mocker):
    path = tmp_path / "party.json"
    path.write_text(json.dumps([{"id": "kael", "name": "Kael", "stats": {"speed": 25}}]))
    interface = mocker.patch("lostworlds.main.CombatInterface")

    assert main([str(path), "--seed", "7"]) == 0

    controller, characters = interface.call_args.args
    assert list(characters) == ["kael"]
    assert controller.history.limit == 10
    interface.return_value.run.assert_called_once_with()
