"""A simulated person who wants one specific (object, action) pair."""

from dataclasses import dataclass

from intentnet.core.enums import Action, QueryKind
from intentnet.queries.candidates import QueryCandidate


@dataclass
class SimulatedUser:
    """Answers queries truthfully for a fixed desired intention.

    Attributes:
        object_name: Desired object instance, e.g. "Box1"
        action: Desired action
    """
    object_name: str
    action: Action

    def __post_init__(self):
        if isinstance(self.action, str):
            resolved = Action.from_name(self.action)
            if resolved is None:
                raise ValueError(f"Unknown action: {self.action!r}")
            self.action = resolved

    def answer(self, query: QueryCandidate) -> bool:
        if query.kind == QueryKind.FULL:
            return query.object_name == self.object_name and query.action == self.action
        if query.kind == QueryKind.OBJECT:
            return query.object_name == self.object_name
        return query.action == self.action

    def __call__(self, query: QueryCandidate) -> bool:
        return self.answer(query)

    def describe(self) -> str:
        return f"{self.action.display_name}-{self.object_name}"
