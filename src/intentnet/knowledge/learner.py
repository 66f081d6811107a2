"""Template learning: folds confirmed intentions back into the store."""

import logging
from typing import Dict, List, Mapping, Tuple

import numpy as np

from intentnet.core.enums import Action, Category
from .store import CompatibilityStore


logger = logging.getLogger(__name__)


BLEND_WEIGHT = 0.5


class TemplateLearner:
    """Updates a CompatibilityStore from session outcomes.

    Two independent paths:
    - ``observe``: add the learning rate to the (1,1) entry of one cell.
    - ``batch_update``: blend per-category averages of the potentials seen
      in one scene with the stored templates.
    """

    def __init__(self, store: CompatibilityStore):
        self.store = store
        self.observations: List[Tuple[Category, Action]] = []

    def observe(self, category: Category, action: Action) -> bool:
        """Record a confirmed (category, action) intention."""
        updated = self.store.increment(category, action)
        if updated:
            self.observations.append((category, action))
            logger.info(
                f"Learned {action.display_name}/{category.display_name} "
                f"(+{self.store.learning_rate})"
            )
        return updated

    def observe_by_index(self, category_index: int, action_index: int) -> bool:
        category = Category.from_index(category_index)
        action = Action.from_index(action_index)
        if category is None or action is None:
            logger.error(
                f"Ignoring observation with out-of-range index (category={category_index}, action={action_index})"
            )
            return False
        return self.observe(category, action)

    def batch_update(
        self, means: Mapping[Category, Mapping[Action, np.ndarray]]
    ) -> Dict[Tuple[Category, Action], np.ndarray]:
        """Blend scene averages 50/50 into the stored templates.

        Args:
            means: category -> action -> elementwise mean of that category's
                per-instance potentials in the current scene

        Returns:
            The new cell values keyed by (category, action)
        """
        updated: Dict[Tuple[Category, Action], np.ndarray] = {}
        for category, per_action in means.items():
            for action, mean in per_action.items():
                if not self.store.has_cell(category, action):
                    logger.error(
                        f"Skipping batch update for {category.display_name}/{action.display_name}: not afforded"
                    )
                    continue
                mean = np.asarray(mean, dtype=float)
                mean = mean / mean.sum()
                stored = self.store.normalized(category, action)
                blended = BLEND_WEIGHT * mean + (1.0 - BLEND_WEIGHT) * stored
                self.store.set_cell(category, action, blended)
                updated[(category, action)] = blended
        logger.info(f"Batch-updated {len(updated)} templates")
        return updated

    def clear_history(self) -> None:
        self.observations.clear()
