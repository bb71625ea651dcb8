"""Delphi - a chat oracle that describes roguelike items and monsters."""

__version__ = "0.3.0"
