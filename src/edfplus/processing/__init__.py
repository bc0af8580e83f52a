"""Post-processing transforms over decoded signals."""

from .bilevel import BiLevelSignal, Level

__all__ = ["BiLevelSignal", "Level"]
