"""Brain module: the intention engine."""

from .engine import IntentionEngine

__all__ = ["IntentionEngine"]
