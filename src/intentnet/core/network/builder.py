"""Scene graph builder.

Turns one observed scene into an IntentionNetwork:

1. Observations are sorted nearest first.
2. ``max_distance`` is the largest observed distance plus a margin, and
   the near/far threshold is half of it.
3. Per observation: action nodes (shared by name), then the object node,
   then the proximity node.
4. Each object-action pair gets the normalized store template.
5. Each object-proximity pair gets the near/far heuristic potential.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from intentnet.core.affordances import AffordanceCatalog
from intentnet.core.enums import Category
from intentnet.core.exceptions import UnknownCategoryError
from intentnet.core.types import Observation, Scene
from intentnet.knowledge.counts import CooccurrenceCounter
from intentnet.knowledge.store import CompatibilityStore
from .bookkeeping import SceneBookkeeping
from .graph import IntentionNetwork


logger = logging.getLogger(__name__)


DEFAULT_DISTANCE_MARGIN = 0.02


@dataclass
class BuiltScene:
    """A constructed network together with its bookkeeping."""
    network: IntentionNetwork
    bookkeeping: SceneBookkeeping
    max_distance: float
    threshold: float


class SceneGraphBuilder:
    """Builds intention networks from scenes.

    Args:
        catalog: Which actions each category affords
        store: Source of object-action templates (read only here)
        counter: Optional frequency counter incremented per object-action potential
        distance_margin: Added to the largest observed distance
    """

    def __init__(self, catalog: AffordanceCatalog, store: CompatibilityStore,
                 counter: Optional[CooccurrenceCounter] = None,
                 distance_margin: float = DEFAULT_DISTANCE_MARGIN):
        self.catalog = catalog
        self.store = store
        self.counter = counter
        self.distance_margin = distance_margin

    def resolve_categories(self, scene: Scene) -> List[Tuple[Observation, Category]]:
        """Validate the scene and map every label to a category.

        Raises:
            InvalidSceneError: empty scene or bad distance
            UnknownCategoryError: a label the catalog does not know
        """
        scene.validate()
        resolved = []
        for observation in scene.sorted_by_distance():
            category = self.catalog.resolve(observation.label)
            if category is None:
                logger.error(f"Rejecting scene {scene.name!r}: unknown category {observation.label!r}")
                raise UnknownCategoryError(observation.label)
            resolved.append((observation, category))
        return resolved

    def build(self, scene: Scene) -> BuiltScene:
        """Construct the network for ``scene``.

        Every label is checked before the first node is created, so a bad
        scene never yields a partial network.
        """
        resolved = self.resolve_categories(scene)

        max_distance = scene.max_distance + self.distance_margin
        threshold = max_distance / 2.0

        network = IntentionNetwork(name=scene.name or "scene")
        bookkeeping = SceneBookkeeping()

        for observation, category in resolved:
            # Action nodes must exist before the object's potentials refer to them
            action_nodes = []
            for action in self.catalog.actions_for(category):
                node, created = network.add_action_node(action)
                if created:
                    bookkeeping.record_action(node.index, action)
                action_nodes.append(node)

            instance_number = bookkeeping.next_instance_number(category)
            name = f"{category.display_name}{instance_number}"
            near = observation.distance < threshold
            object_node = network.add_object_node(
                name, category, observation.distance, near=near, instance_number=instance_number
            )
            bookkeeping.record_instance(object_node.index, name, category)

            proximity_node = network.add_proximity_node(object_node)
            bookkeeping.proximity_of[object_node.index] = proximity_node.index

            for action_node in action_nodes:
                values = self.store.normalized(category, action_node.action)
                potential = network.add_object_action_potential(
                    object_node.index, action_node.index, values
                )
                bookkeeping.accumulator.add(category, action_node.action, potential.values)
                if self.counter is not None:
                    self.counter.increment(category, action_node.action)

            network.add_proximity_potential(
                object_node.index,
                proximity_node.index,
                observation.distance / max_distance,
                near,
            )

        logger.info(f"Built network for scene {network.name!r}: {network.summary()}")
        return BuiltScene(
            network=network,
            bookkeeping=bookkeeping,
            max_distance=max_distance,
            threshold=threshold,
        )

    def refresh_templates(self, built: BuiltScene) -> int:
        """Copy the current store templates into the network's potentials.

        Returns:
            Number of potentials updated
        """
        network = built.network
        updated = 0
        for potential in network.relevant_potentials:
            category = built.bookkeeping.instance_category[potential.first]
            action = built.bookkeeping.action_identity[potential.second]
            network.set_potential_values(potential.index, self.store.normalized(category, action))
            updated += 1
        logger.debug(f"Refreshed {updated} object-action potentials from the store")
        return updated
