"""Arcade Shooter - a single-screen click-to-shoot arcade game."""

__version__ = "0.1.0"
