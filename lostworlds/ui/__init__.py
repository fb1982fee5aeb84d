"""
User interface module for the Lost Worlds combat engine.

Contains the rich sheets and the prompt_toolkit command-line interface.
"""
