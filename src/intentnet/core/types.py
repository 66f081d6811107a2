"""Core data types for the intentnet framework."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Tuple

from .enums import Action, Category
from .exceptions import InvalidSceneError


# ============================================================================
# Scene Types
# ============================================================================

@dataclass(frozen=True)
class Observation:
    """One object seen in the scene.

    Attributes:
        label: Category display name as reported by perception
        distance: Normalized distance from the observer (smaller is closer)
    """
    label: str
    distance: float


@dataclass
class Scene:
    """Snapshot of the objects visible to the observer.

    Labels need not be unique: a scene may hold two "Box" observations.
    """
    observations: List[Observation] = field(default_factory=list)
    name: str = ""

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, float]], name: str = "") -> "Scene":
        """Create a scene from (label, distance) pairs."""
        return cls(
            observations=[Observation(label, float(distance)) for label, distance in pairs],
            name=name,
        )

    def add(self, label: str, distance: float) -> None:
        self.observations.append(Observation(label, float(distance)))

    def sorted_by_distance(self) -> List[Observation]:
        """Observations nearest first; equal distances keep scene order."""
        return sorted(self.observations, key=lambda o: o.distance)

    def validate(self) -> None:
        """Raise InvalidSceneError if the scene cannot be modelled."""
        if not self.observations:
            raise InvalidSceneError("Scene contains no observations")
        for obs in self.observations:
            if not obs.label or not obs.label.strip():
                raise InvalidSceneError("Observation with empty label")
            if not math.isfinite(obs.distance) or obs.distance <= 0:
                raise InvalidSceneError(
                    f"Observation {obs.label!r} has non-positive distance {obs.distance}"
                )

    @property
    def max_distance(self) -> float:
        return max(o.distance for o in self.observations)

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.observations)


# ============================================================================
# Intention Types
# ============================================================================

@dataclass(frozen=True)
class Intention:
    """A confirmed (object, action) pair."""
    object_name: str
    category: Category
    action: Action
    confirmed_at: datetime = field(default_factory=datetime.now, compare=False)

    def describe(self) -> str:
        return f"{self.action.phrase} {self.object_name}"


@dataclass
class SessionRecord:
    """Summary of one finished interactive session."""
    scene_name: str
    interactions: int
    resolved: bool
    intention: Optional[Intention] = None
