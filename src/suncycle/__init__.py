"""Wallpapers that follow the sun and the moon."""

__version__ = "0.1.0"
