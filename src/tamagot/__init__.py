"""Tamagot - a git activity tamagotchi for the terminal."""

__version__ = "0.1.0"
