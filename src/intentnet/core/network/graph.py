"""Intention network: the per-scene pairwise Markov network.

The network owns every node and potential. Nodes live in an arena
addressed by stable integer index; action nodes are additionally
reachable through a name lookup so that all object instances affording
the same action share one node.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from intentnet.core.enums import Action, Category, NodeKind
from .nodes import NetworkNode, ActionNode, ObjectNode, ProximityNode
from .potentials import Potential, PotentialKind, as_state_vector


logger = logging.getLogger(__name__)


class IntentionNetwork:
    """Arena of binary variables plus the pairwise potentials between them.

    Usage:
        network = IntentionNetwork()
        grasp, _ = network.add_action_node(Action.GRASP)
        box = network.add_object_node("Box1", Category.BOX, distance=0.3)
        network.add_object_action_potential(box.index, grasp.index, [1, 1, 1, 5])
    """

    def __init__(self, name: str = "scene"):
        self.name = name
        self._nodes: List[NetworkNode] = []
        self._action_lookup: Dict[str, int] = {}
        self._potentials: List[Potential] = []
        self._pair_lookup: Dict[Tuple[int, int], int] = {}

    # =========================================================================
    # Node Operations
    # =========================================================================

    def add_action_node(self, action: Action) -> Tuple[ActionNode, bool]:
        """Create the node for ``action`` or return the existing one.

        Returns:
            (node, created) where ``created`` is False on reuse
        """
        existing = self._action_lookup.get(action.display_name)
        if existing is not None:
            return self._nodes[existing], False

        node = ActionNode(index=len(self._nodes), name=action.display_name, action=action)
        self._nodes.append(node)
        self._action_lookup[action.display_name] = node.index
        logger.debug(f"Added action node {node.index}: {node.name}")
        return node, True

    def add_object_node(self, name: str, category: Category, distance: float,
                        near: bool = False, instance_number: int = 1) -> ObjectNode:
        node = ObjectNode(
            index=len(self._nodes),
            name=name,
            category=category,
            instance_number=instance_number,
            distance=distance,
            near=near,
        )
        self._nodes.append(node)
        logger.debug(f"Added object node {node.index}: {name} (d={distance:.3f}, near={near})")
        return node

    def add_proximity_node(self, object_node: ObjectNode) -> ProximityNode:
        node = ProximityNode(
            index=len(self._nodes),
            name=f"{object_node.name} Distance",
            object_index=object_node.index,
        )
        self._nodes.append(node)
        logger.debug(f"Added proximity node {node.index}: {node.name}")
        return node

    def get_node(self, index: int) -> NetworkNode:
        return self._nodes[index]

    def find_action_node(self, action: Action) -> Optional[ActionNode]:
        index = self._action_lookup.get(action.display_name)
        return self._nodes[index] if index is not None else None

    def find_node_by_name(self, name: str) -> Optional[NetworkNode]:
        for node in self._nodes:
            if node.name == name:
                return node
        return None

    def get_nodes_by_kind(self, kind: NodeKind) -> List[NetworkNode]:
        return [n for n in self._nodes if n.kind == kind]

    @property
    def action_nodes(self) -> List[ActionNode]:
        return [n for n in self._nodes if isinstance(n, ActionNode)]

    @property
    def object_nodes(self) -> List[ObjectNode]:
        return [n for n in self._nodes if isinstance(n, ObjectNode)]

    @property
    def proximity_nodes(self) -> List[ProximityNode]:
        return [n for n in self._nodes if isinstance(n, ProximityNode)]

    @property
    def nodes(self) -> List[NetworkNode]:
        return list(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    # =========================================================================
    # Potential Operations
    # =========================================================================

    def add_object_action_potential(self, object_index: int, action_index: int,
                                    values: Sequence[float]) -> Potential:
        self._check_kind(object_index, NodeKind.OBJECT)
        self._check_kind(action_index, NodeKind.ACTION)
        potential = Potential.object_action(len(self._potentials), object_index, action_index, values)
        return self._register(potential)

    def add_proximity_potential(self, object_index: int, proximity_index: int,
                                distance_ratio: float, near: bool) -> Potential:
        self._check_kind(object_index, NodeKind.OBJECT)
        self._check_kind(proximity_index, NodeKind.PROXIMITY)
        potential = Potential.object_proximity(
            len(self._potentials), object_index, proximity_index, distance_ratio, near
        )
        return self._register(potential)

    def _register(self, potential: Potential) -> Potential:
        self._potentials.append(potential)
        self._pair_lookup[potential.variables] = potential.index
        logger.debug(
            f"Added {potential.kind.name} potential {potential.index} "
            f"{potential.variables}: {np.round(potential.values, 4).tolist()}"
        )
        return potential

    def _check_kind(self, index: int, kind: NodeKind) -> None:
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"No node with index {index}")
        if self._nodes[index].kind != kind:
            raise ValueError(f"Node {index} is {self._nodes[index].kind.name}, expected {kind.name}")

    def get_potential(self, index: int) -> Potential:
        return self._potentials[index]

    def potential_between(self, first: int, second: int) -> Optional[Potential]:
        index = self._pair_lookup.get((first, second))
        if index is None:
            index = self._pair_lookup.get((second, first))
        return self._potentials[index] if index is not None else None

    def set_potential_values(self, index: int, values: Sequence[float]) -> None:
        """Replace the values of an existing potential (used before re-solving)."""
        self._potentials[index].values = as_state_vector(values)
        logger.debug(f"Updated potential {index}: {np.round(self._potentials[index].values, 4).tolist()}")

    def potentials_of(self, node_index: int) -> List[Potential]:
        return [p for p in self._potentials if p.involves(node_index)]

    def neighbors(self, node_index: int) -> List[int]:
        return [p.other(node_index) for p in self._potentials if p.involves(node_index)]

    @property
    def potentials(self) -> List[Potential]:
        return list(self._potentials)

    @property
    def relevant_potentials(self) -> List[Potential]:
        """Potentials joining exactly one object node and one action node."""
        return [p for p in self._potentials if p.kind == PotentialKind.OBJECT_ACTION]

    @property
    def potential_count(self) -> int:
        return len(self._potentials)

    def __iter__(self) -> Iterator[NetworkNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # =========================================================================
    # Export
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nodes": [n.to_dict() for n in self._nodes],
            "potentials": [p.to_dict() for p in self._potentials],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_dot(self) -> str:
        """Render the Markov graph in Graphviz DOT, one edge per potential."""
        shapes = {
            NodeKind.ACTION: "box",
            NodeKind.OBJECT: "ellipse",
            NodeKind.PROXIMITY: "diamond",
        }
        lines = [f'graph "{self.name}" {{']
        for node in self._nodes:
            lines.append(f'  n{node.index} [label="{node.name}", shape={shapes[node.kind]}];')
        for potential in self._potentials:
            lines.append(f"  n{potential.first} -- n{potential.second};")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def summary(self) -> str:
        return (
            f"{len(self.action_nodes)} actions, {len(self.object_nodes)} objects, "
            f"{len(self.proximity_nodes)} proximity nodes, {len(self._potentials)} potentials"
        )

    def __repr__(self) -> str:
        return f"IntentionNetwork(name={self.name!r}, nodes={len(self._nodes)}, potentials={len(self._potentials)})"
