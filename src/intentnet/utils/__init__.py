"""Utility modules for intentnet."""

from .config import IntentNetConfig, load_config

__all__ = ["IntentNetConfig", "load_config"]
