"""Pairwise potentials for the intention network.

A potential couples two binary variables ``(first, second)``. Its four
values are indexed by the joint state in the order
(0,0), (1,0), (0,1), (1,1), i.e. ``index = s_first + 2 * s_second``.

- Object-action potentials: first = object node, second = action node,
  values copied from the compatibility store.
- Object-proximity potentials: first = object node, second = proximity
  node, values from the near/far heuristic.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Sequence, Tuple

import numpy as np


STATE_COUNT = 4
BOTH_ON = 3  # index of the (1,1) state


class PotentialKind(Enum):
    """Which pair of node kinds a potential connects."""
    OBJECT_ACTION = auto()
    OBJECT_PROXIMITY = auto()


def as_state_vector(values: Sequence[float]) -> np.ndarray:
    """Copy ``values`` into a float vector of the four joint states."""
    vector = np.asarray(values, dtype=float).reshape(-1).copy()
    if vector.shape != (STATE_COUNT,):
        raise ValueError(f"Expected {STATE_COUNT} potential values, got {vector.shape[0]}")
    if np.any(vector < 0) or not np.all(np.isfinite(vector)):
        raise ValueError(f"Potential values must be finite and non-negative: {vector}")
    return vector


def normalize(values: Sequence[float]) -> np.ndarray:
    """Scale a state vector to sum 1."""
    vector = as_state_vector(values)
    total = vector.sum()
    if total <= 0:
        raise ValueError("Cannot normalize a potential whose values sum to zero")
    return vector / total


def proximity_values(distance_ratio: float, near: bool) -> np.ndarray:
    """Near/far heuristic for the (object, proximity) potential.

    Near objects reward the consistent states (both off, both on); far
    objects reward the mixed ones.
    """
    d = float(distance_ratio)
    if near:
        return np.array([1.0 - d, d, d, 1.0 - d])
    return np.array([d, 1.0 - d, 1.0 - d, d])


@dataclass
class Potential:
    """Pairwise factor between two network nodes.

    Attributes:
        index: Position of the potential in the network
        variables: (first, second) node indices
        values: The four joint-state values
        kind: OBJECT_ACTION or OBJECT_PROXIMITY
    """
    index: int
    variables: Tuple[int, int]
    values: np.ndarray
    kind: PotentialKind

    def __post_init__(self):
        self.values = as_state_vector(self.values)

    @property
    def first(self) -> int:
        return self.variables[0]

    @property
    def second(self) -> int:
        return self.variables[1]

    @property
    def table(self) -> np.ndarray:
        """2x2 view indexed as ``table[s_first, s_second]``."""
        return self.values.reshape(2, 2, order="F")

    def value(self, s_first: int, s_second: int) -> float:
        return float(self.values[s_first + 2 * s_second])

    def normalized(self) -> np.ndarray:
        return normalize(self.values)

    def involves(self, node_index: int) -> bool:
        return node_index in self.variables

    def other(self, node_index: int) -> int:
        """Index of the node on the other side of this potential."""
        if node_index == self.first:
            return self.second
        if node_index == self.second:
            return self.first
        raise ValueError(f"Node {node_index} is not part of potential {self.index}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "variables": list(self.variables),
            "values": self.values.tolist(),
            "kind": self.kind.name,
        }

    @classmethod
    def object_action(cls, index: int, object_node: int, action_node: int,
                      values: Sequence[float]) -> "Potential":
        """Create an object-action compatibility potential."""
        return cls(
            index=index,
            variables=(object_node, action_node),
            values=normalize(values),
            kind=PotentialKind.OBJECT_ACTION,
        )

    @classmethod
    def object_proximity(cls, index: int, object_node: int, proximity_node: int,
                         distance_ratio: float, near: bool) -> "Potential":
        """Create an object-proximity potential from the near/far heuristic."""
        return cls(
            index=index,
            variables=(object_node, proximity_node),
            values=proximity_values(distance_ratio, near),
            kind=PotentialKind.OBJECT_PROXIMITY,
        )
