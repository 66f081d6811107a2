"""Node types for the intention network.

Every node is a binary variable. Action nodes are shared by all object
instances that afford the action; object and proximity nodes exist once
per observed object instance.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from intentnet.core.enums import Action, Category, NodeKind


@dataclass
class NetworkNode:
    """Base class for all network nodes.

    Attributes:
        index: Stable position of the node in the network arena
        name: Human-readable name (e.g. "Grasp", "Box1", "Box1 Distance")
        kind: ACTION, OBJECT or PROXIMITY
    """
    index: int
    name: str
    kind: NodeKind = NodeKind.OBJECT  # Overridden in subclasses

    @property
    def cardinality(self) -> int:
        return 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "kind": self.kind.name,
        }


@dataclass
class ActionNode(NetworkNode):
    """Variable that is 1 when the person intends to perform ``action``."""
    action: Optional[Action] = None

    def __post_init__(self):
        self.kind = NodeKind.ACTION

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["action"] = self.action.value if self.action else None
        return data


@dataclass
class ObjectNode(NetworkNode):
    """Variable that is 1 when the person intends to use this object instance.

    Additional attributes:
        category: Object category of the instance
        instance_number: 1-based count of this category within the scene
        distance: Observed distance from the observer
        near: Whether the distance fell below the scene's near/far threshold
    """
    category: Optional[Category] = None
    instance_number: int = 1
    distance: float = 0.0
    near: bool = False

    def __post_init__(self):
        self.kind = NodeKind.OBJECT

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "category": self.category.value if self.category else None,
            "instance_number": self.instance_number,
            "distance": self.distance,
            "near": self.near,
        })
        return data


@dataclass
class ProximityNode(NetworkNode):
    """Variable describing whether an object instance is close to the observer."""
    object_index: int = -1

    def __post_init__(self):
        self.kind = NodeKind.PROXIMITY

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["object_index"] = self.object_index
        return data
