"""Co-occurrence counts of (category, action) pairs across built scenes."""

import logging
from collections import Counter
from typing import Dict, Tuple

from intentnet.core.enums import Action, Category


logger = logging.getLogger(__name__)


class CooccurrenceCounter:
    """Counts every object-action potential created by the scene builder.

    The counter outlives individual scenes so that frequencies reflect
    every recorded session.
    """

    def __init__(self):
        self._pairs: Counter = Counter()

    def increment(self, category: Category, action: Action, amount: int = 1) -> None:
        self._pairs[(category, action)] += amount

    @property
    def total(self) -> int:
        return sum(self._pairs.values())

    def pair_count(self, category: Category, action: Action) -> int:
        return self._pairs[(category, action)]

    def action_count(self, action: Action) -> int:
        return sum(n for (_, a), n in self._pairs.items() if a == action)

    def category_count(self, category: Category) -> int:
        return sum(n for (c, _), n in self._pairs.items() if c == category)

    def action_frequency(self, action: Action) -> float:
        total = self.total
        return self.action_count(action) / total if total else 0.0

    def category_frequency(self, category: Category) -> float:
        total = self.total
        return self.category_count(category) / total if total else 0.0

    def pair_score(self) -> float:
        """Uniform score shared by every observed pair."""
        total = self.total
        return 1.0 / total if total else 0.0

    def as_dict(self) -> Dict[Tuple[Category, Action], int]:
        return dict(self._pairs)

    def reset(self) -> None:
        self._pairs.clear()
        logger.debug("Co-occurrence counts cleared")

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"CooccurrenceCounter(pairs={len(self._pairs)}, total={self.total})"
