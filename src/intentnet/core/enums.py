"""Core enumerations for the intentnet framework."""

from enum import Enum, auto
from typing import Optional


class Category(Enum):
    """Object categories the system can reason about.

    Values are the canonical display names; ``index`` is the stable
    position used by the compatibility store file.
    """
    BOTTLE = "Bottle"
    BOWL = "Bowl"
    BOX = "Box"
    CAN = "Can"
    CARTON = "Carton"
    CUP = "Cup"
    MUG = "Mug"
    SPRAYCAN = "SprayCan"
    TIN = "Tin"
    TUBE = "Tube"
    TUB = "Tub"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return list(Category).index(self)

    @classmethod
    def from_index(cls, index: int) -> Optional["Category"]:
        """Look up a category by store index, None when out of range."""
        members = list(cls)
        if 0 <= index < len(members):
            return members[index]
        return None

    @classmethod
    def from_name(cls, name: str) -> Optional["Category"]:
        """Look up a category by display name (case-insensitive)."""
        key = name.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class Action(Enum):
    """Actions a person may perform on an object."""
    DRINK = "Drink"
    GRASP = "Grasp"
    MOVE = "Move"
    OPEN = "Open"
    POUR = "Pour"
    PUSH = "Push"
    SQUEEZE = "Squeeze"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return list(Action).index(self)

    @property
    def phrase(self) -> str:
        """Verb phrase used when asking about this action."""
        if self in (Action.DRINK, Action.POUR):
            return f"{self.value} from"
        return self.value

    @classmethod
    def from_index(cls, index: int) -> Optional["Action"]:
        members = list(cls)
        if 0 <= index < len(members):
            return members[index]
        return None

    @classmethod
    def from_name(cls, name: str) -> Optional["Action"]:
        key = name.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class NodeKind(Enum):
    """Kinds of variables in an intention network."""
    ACTION = auto()
    OBJECT = auto()
    PROXIMITY = auto()


class QueryKind(Enum):
    """What a query candidate asks about."""
    ACTION = auto()     # "Do you want to Grasp something?"
    OBJECT = auto()     # "Do you want to use the Box1?"
    FULL = auto()       # "Do you want to Grasp Box1?"


class SessionState(Enum):
    """States of an interactive query session."""
    ACTIVE = auto()
    PROPOSED = auto()
    RESOLVED = auto()
    EXHAUSTED = auto()
    CANCELLED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.RESOLVED, SessionState.EXHAUSTED, SessionState.CANCELLED)


class RankingPolicy(str, Enum):
    """Ordering policies for the query list."""
    BELIEF = "belief"
    COUNT = "count"
    UNRANKED = "unranked"


class TieBreak(str, Enum):
    """How belief ranking orders tied action/object candidates."""
    RANDOM = "random"
    NAME = "name"
