"""Clue Server: LLM relay for the wildlife guessing game."""

__version__ = "0.1.0"
