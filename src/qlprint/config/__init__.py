"""Configuration for qlprint."""

from .settings import SETTINGS, LabelSettings

__all__ = ["SETTINGS", "LabelSettings"]
