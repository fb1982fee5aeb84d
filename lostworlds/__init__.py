"""
Lost Worlds combat engine.

This package contains the combat resolution engine of the Lost Worlds
character sheets: stat derivation, combat formulas, dice pools, dice rolling
and initiative tracking, plus a terminal front end.
"""

__version__ = "0.1.0"
