"""Intention network: nodes, potentials and the scene graph builder."""

from .nodes import NetworkNode, ActionNode, ObjectNode, ProximityNode
from .potentials import Potential, PotentialKind, normalize, proximity_values
from .bookkeeping import SceneBookkeeping, CategoryPotentialAccumulator
from .graph import IntentionNetwork
from .builder import SceneGraphBuilder, BuiltScene, DEFAULT_DISTANCE_MARGIN

__all__ = [
    # Nodes
    "NetworkNode",
    "ActionNode",
    "ObjectNode",
    "ProximityNode",
    # Potentials
    "Potential",
    "PotentialKind",
    "normalize",
    "proximity_values",
    # Graph
    "SceneBookkeeping",
    "CategoryPotentialAccumulator",
    "IntentionNetwork",
    # Builder
    "SceneGraphBuilder",
    "BuiltScene",
    "DEFAULT_DISTANCE_MARGIN",
]
