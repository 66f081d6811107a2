"""Per-scene bookkeeping collected while building an intention network."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from intentnet.core.enums import Action, Category


@dataclass
class CategoryPotentialAccumulator:
    """Object-action potentials grouped by category as they are created.

    ``samples[category][action]`` holds one normalized 4-vector per object
    instance of that category in the scene.
    """
    samples: Dict[Category, Dict[Action, List[np.ndarray]]] = field(default_factory=dict)

    def add(self, category: Category, action: Action, values: np.ndarray) -> None:
        per_action = self.samples.setdefault(category, {})
        per_action.setdefault(action, []).append(np.asarray(values, dtype=float).copy())

    def instance_count(self, category: Category, action: Action) -> int:
        return len(self.samples.get(category, {}).get(action, []))

    def mean(self, category: Category, action: Action) -> Optional[np.ndarray]:
        """Elementwise mean over all instances, None when nothing was recorded."""
        values = self.samples.get(category, {}).get(action)
        if not values:
            return None
        return np.mean(np.stack(values), axis=0)

    def means(self) -> Dict[Category, Dict[Action, np.ndarray]]:
        return {
            category: {action: np.mean(np.stack(values), axis=0)
                       for action, values in per_action.items() if values}
            for category, per_action in self.samples.items()
        }

    @property
    def categories(self) -> List[Category]:
        return list(self.samples.keys())

    def clear(self) -> None:
        self.samples.clear()


@dataclass
class SceneBookkeeping:
    """Maps from network indices back to domain identities.

    Attributes:
        instance_category: object node index -> category
        action_identity: action node index -> action
        category_instances: category -> object node indices, nearest first
        instance_names: object node index -> instance name ("Box1")
        proximity_of: object node index -> proximity node index
        accumulator: per-category object-action potentials for batch learning
    """
    instance_category: Dict[int, Category] = field(default_factory=dict)
    action_identity: Dict[int, Action] = field(default_factory=dict)
    category_instances: Dict[Category, List[int]] = field(default_factory=dict)
    instance_names: Dict[int, str] = field(default_factory=dict)
    proximity_of: Dict[int, int] = field(default_factory=dict)
    accumulator: CategoryPotentialAccumulator = field(default_factory=CategoryPotentialAccumulator)

    def record_instance(self, node_index: int, name: str, category: Category) -> int:
        """Register an object node; returns its 1-based instance number."""
        self.instance_category[node_index] = category
        self.instance_names[node_index] = name
        instances = self.category_instances.setdefault(category, [])
        instances.append(node_index)
        return len(instances)

    def next_instance_number(self, category: Category) -> int:
        return len(self.category_instances.get(category, [])) + 1

    def record_action(self, node_index: int, action: Action) -> None:
        self.action_identity[node_index] = action
