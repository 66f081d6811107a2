"""Query candidates.

A candidate is one yes/no question. Three variants exist:

- ActionQuery: "Do you want to Grasp something?"
- ObjectQuery: "Do you want to use the Box1?"
- FullQuery:   "Do you want to Grasp Box1?"

``index`` records generation order and serves as the candidate's
identity inside a session; ``score`` is what ranking orders by.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from intentnet.core.enums import Action, Category, QueryKind


@dataclass
class QueryCandidate(ABC):
    """Base class for all query candidates."""
    index: int
    score: float

    @property
    @abstractmethod
    def kind(self) -> QueryKind:
        ...

    @property
    def has_object(self) -> bool:
        return False

    @property
    def has_action(self) -> bool:
        return False

    @property
    def object_name(self) -> Optional[str]:
        return None

    @property
    def action(self) -> Optional[Action]:
        return None

    @property
    @abstractmethod
    def question(self) -> str:
        ...

    @property
    @abstractmethod
    def label(self) -> str:
        """Short name used for name-based tie breaking and display."""
        ...

    def __str__(self) -> str:
        return f"[{self.kind.name} {self.score:.6f}] {self.question}"


@dataclass
class ActionQuery(QueryCandidate):
    """Asks only about an action."""
    query_action: Action = Action.GRASP
    node_index: Optional[int] = None

    @property
    def kind(self) -> QueryKind:
        return QueryKind.ACTION

    @property
    def has_action(self) -> bool:
        return True

    @property
    def action(self) -> Action:
        return self.query_action

    @property
    def question(self) -> str:
        return f"Do you want to {self.query_action.phrase} something?"

    @property
    def label(self) -> str:
        return self.query_action.display_name


@dataclass
class ObjectQuery(QueryCandidate):
    """Asks only about an object instance."""
    instance_name: str = ""
    category: Optional[Category] = None
    node_index: Optional[int] = None

    @property
    def kind(self) -> QueryKind:
        return QueryKind.OBJECT

    @property
    def has_object(self) -> bool:
        return True

    @property
    def object_name(self) -> str:
        return self.instance_name

    @property
    def question(self) -> str:
        return f"Do you want to use the {self.instance_name}?"

    @property
    def label(self) -> str:
        return self.instance_name


@dataclass
class FullQuery(QueryCandidate):
    """Asks about an (object, action) pair."""
    instance_name: str = ""
    category: Optional[Category] = None
    query_action: Action = Action.GRASP
    object_index: Optional[int] = None
    action_index: Optional[int] = None
    potential_index: Optional[int] = None

    @property
    def kind(self) -> QueryKind:
        return QueryKind.FULL

    @property
    def has_object(self) -> bool:
        return True

    @property
    def has_action(self) -> bool:
        return True

    @property
    def object_name(self) -> str:
        return self.instance_name

    @property
    def action(self) -> Action:
        return self.query_action

    @property
    def question(self) -> str:
        return f"Do you want to {self.query_action.phrase} {self.instance_name}?"

    @property
    def label(self) -> str:
        return f"{self.query_action.display_name} {self.instance_name}"
