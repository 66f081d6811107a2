"""Persistent knowledge: compatibility templates, frequency counts, learning."""

from .store import CompatibilityStore, DEFAULT_PRIOR
from .counts import CooccurrenceCounter
from .learner import TemplateLearner

__all__ = [
    "CompatibilityStore",
    "DEFAULT_PRIOR",
    "CooccurrenceCounter",
    "TemplateLearner",
]
