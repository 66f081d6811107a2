"""Affordance catalog.

Static authored knowledge about which actions each object category
supports. The catalog is built once and never mutated afterwards; the
compatibility store and the scene graph builder only read from it.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .enums import Action, Category


logger = logging.getLogger(__name__)


DEFAULT_AFFORDANCES: Dict[Category, Tuple[Action, ...]] = {
    Category.BOTTLE: (Action.DRINK, Action.GRASP, Action.MOVE, Action.OPEN, Action.POUR),
    Category.BOWL: (Action.GRASP, Action.MOVE, Action.PUSH),
    Category.BOX: (Action.GRASP, Action.MOVE, Action.OPEN, Action.PUSH),
    Category.CAN: (Action.DRINK, Action.GRASP, Action.MOVE, Action.POUR),
    Category.CARTON: (Action.GRASP, Action.MOVE, Action.OPEN, Action.POUR),
    Category.CUP: (Action.DRINK, Action.GRASP, Action.MOVE),
    Category.MUG: (Action.DRINK, Action.GRASP, Action.MOVE),
    Category.SPRAYCAN: (Action.GRASP,),
    Category.TIN: (Action.GRASP, Action.MOVE, Action.OPEN, Action.POUR),
    Category.TUBE: (Action.GRASP, Action.SQUEEZE),
    Category.TUB: (Action.GRASP, Action.OPEN, Action.PUSH),
}


class AffordanceCatalog:
    """Immutable mapping from object category to the actions it affords.

    Usage:
        catalog = AffordanceCatalog.create_default()
        catalog.actions_for(Category.BOX)      # (GRASP, MOVE, OPEN, PUSH)
        catalog.affords(Category.TUBE, Action.SQUEEZE)  # True
    """

    def __init__(self, table: Mapping[Category, Sequence[Action]]):
        table_copy: Dict[Category, Tuple[Action, ...]] = {}
        for category, actions in table.items():
            # Keep authored order, drop duplicates
            ordered: List[Action] = []
            for action in actions:
                if action not in ordered:
                    ordered.append(action)
            table_copy[category] = tuple(ordered)
        self._table = MappingProxyType(table_copy)
        logger.debug(f"AffordanceCatalog built with {len(self._table)} categories")

    @classmethod
    def create_default(cls) -> "AffordanceCatalog":
        """Catalog with the eleven household categories and seven actions."""
        return cls(DEFAULT_AFFORDANCES)

    @property
    def categories(self) -> List[Category]:
        return list(self._table.keys())

    @property
    def actions(self) -> List[Action]:
        """Every action afforded by at least one category, in enum order."""
        used = {a for actions in self._table.values() for a in actions}
        return [a for a in Action if a in used]

    def actions_for(self, category: Category) -> Tuple[Action, ...]:
        """Actions a category affords, empty if the category is unknown."""
        return self._table.get(category, ())

    def affords(self, category: Category, action: Action) -> bool:
        return action in self._table.get(category, ())

    def has_category(self, category: Category) -> bool:
        return category in self._table

    def resolve(self, label: str) -> Optional[Category]:
        """Map a perception label to a catalog category, None if unknown."""
        category = Category.from_name(label)
        if category is None or category not in self._table:
            return None
        return category

    def pairs(self) -> Iterator[Tuple[Category, Action]]:
        """All afforded (category, action) pairs in catalog order."""
        for category, actions in self._table.items():
            for action in actions:
                yield category, action

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, category: object) -> bool:
        return category in self._table

    def __repr__(self) -> str:
        return f"AffordanceCatalog(categories={len(self._table)}, pairs={sum(1 for _ in self.pairs())})"
