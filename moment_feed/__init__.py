"""Moment Feed — Top Shot marketplace proxy for the game client."""

__version__ = "0.3.0"
