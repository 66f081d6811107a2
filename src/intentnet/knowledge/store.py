"""Compatibility store: learned object-action templates.

One 4-value cell exists per (category, action) pair the affordance
catalog permits. Values are indexed by the joint state of
(object, action) in the order (0,0), (1,0), (0,1), (1,1).

In memory a cell may drift away from sum 1 (single-observation updates
add the learning rate to the (1,1) entry without renormalizing). Cells
are normalized when read through ``normalized()``, when loaded from
disk and when written to disk.

File format, one line per pair:

    categoryIndex categoryName actionIndex actionName v0 v1 v2 v3
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from intentnet.core.affordances import AffordanceCatalog
from intentnet.core.enums import Action, Category


logger = logging.getLogger(__name__)


DEFAULT_PRIOR: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 5.0)
BOTH_ON = 3

CellKey = Tuple[Category, Action]


def _to_cell(values: Sequence[float]) -> np.ndarray:
    cell = np.asarray(values, dtype=float).reshape(-1).copy()
    if cell.shape != (4,):
        raise ValueError(f"A compatibility cell needs 4 values, got {cell.shape[0]}")
    if np.any(cell < 0) or not np.all(np.isfinite(cell)):
        raise ValueError(f"Compatibility values must be finite and non-negative: {cell}")
    return cell


def _normalized(cell: np.ndarray) -> np.ndarray:
    total = cell.sum()
    if total <= 0:
        raise ValueError("Compatibility cell sums to zero")
    return cell / total


class CompatibilityStore:
    """Persistent table of per-(category, action) potentials.

    The store is an explicitly owned object. Exactly one writer per
    process is assumed; callers that share a store between sessions must
    serialize access themselves.

    Usage:
        store = CompatibilityStore(catalog, path="ObjectActionMap.map")
        store.load()
        store.increment(Category.BOX, Action.GRASP)
        store.save()
    """

    def __init__(self, catalog: AffordanceCatalog,
                 path: Optional[Union[str, Path]] = None,
                 learning_rate: float = 1.0,
                 default_prior: Sequence[float] = DEFAULT_PRIOR):
        self.catalog = catalog
        self.path = Path(path) if path is not None else None
        self.learning_rate = learning_rate
        self.default_prior = _to_cell(default_prior)
        _normalized(self.default_prior)  # reject an all-zero prior early
        self._cells: Dict[CellKey, np.ndarray] = {}
        self.reset_to_default()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @learning_rate.setter
    def learning_rate(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"Learning rate must be non-negative, got {value}")
        self._learning_rate = float(value)

    # =========================================================================
    # Cell Access
    # =========================================================================

    def cell(self, category: Category, action: Action) -> np.ndarray:
        """Copy of the raw (possibly unnormalized) cell."""
        return self._cells[(category, action)].copy()

    def normalized(self, category: Category, action: Action) -> np.ndarray:
        return _normalized(self._cells[(category, action)])

    def set_cell(self, category: Category, action: Action, values: Sequence[float]) -> None:
        if not self.catalog.affords(category, action):
            raise KeyError(f"{category.display_name} does not afford {action.display_name}")
        cell = _to_cell(values)
        _normalized(cell)  # reject an all-zero cell
        self._cells[(category, action)] = cell

    def has_cell(self, category: Category, action: Action) -> bool:
        return (category, action) in self._cells

    def items(self) -> Iterator[Tuple[CellKey, np.ndarray]]:
        for key, cell in self._cells.items():
            yield key, cell.copy()

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    # =========================================================================
    # Updates
    # =========================================================================

    def reset_to_default(self) -> None:
        """Set every afforded pair back to the default prior."""
        self._cells = {
            (category, action): self.default_prior.copy()
            for category, action in self.catalog.pairs()
        }
        logger.debug(f"Reset {len(self._cells)} compatibility cells to {self.default_prior.tolist()}")

    def increment(self, category: Category, action: Action,
                  amount: Optional[float] = None) -> bool:
        """Add ``amount`` (default: the learning rate) to the (1,1) entry.

        Returns False, after logging, when the pair is not afforded.
        """
        key = (category, action)
        if key not in self._cells:
            logger.error(
                f"Cannot update template: {category.display_name} does not afford {action.display_name}"
            )
            return False
        step = self._learning_rate if amount is None else float(amount)
        self._cells[key][BOTH_ON] += step
        logger.debug(
            f"Template {category.display_name}/{action.display_name} (1,1) += {step}: "
            f"{self._cells[key].tolist()}"
        )
        return True

    def increment_by_index(self, category_index: int, action_index: int,
                           amount: Optional[float] = None) -> bool:
        """Index-based ``increment``; out-of-range indices are a logged no-op."""
        category = Category.from_index(category_index)
        action = Action.from_index(action_index)
        if category is None or action is None:
            logger.error(
                f"Cannot update template: index out of range (category={category_index}, action={action_index})"
            )
            return False
        return self.increment(category, action, amount)

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self, path: Optional[Union[str, Path]] = None) -> bool:
        """Load cells from a store file.

        Pairs missing from the file keep the default prior. An unreadable
        file leaves the whole store at defaults.

        Returns:
            True if the file was read
        """
        path = Path(path) if path is not None else self.path
        self.reset_to_default()
        if path is None:
            logger.warning("No compatibility store path configured; using default templates")
            return False

        self.path = path
        try:
            with open(path, "r") as f:
                lines = f.readlines()
        except OSError as e:
            logger.warning(f"Could not read compatibility store {path}: {e}; using default templates")
            return False

        loaded = 0
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            parsed = self._parse_line(line)
            if parsed is None:
                logger.warning(f"{path}:{line_number}: skipping malformed template line")
                continue
            key, values = parsed
            self._cells[key] = values
            loaded += 1

        logger.info(f"Loaded {loaded} templates from {path}")
        return True

    def _parse_line(self, line: str) -> Optional[Tuple[CellKey, np.ndarray]]:
        fields = line.split()
        if len(fields) != 8:
            return None
        try:
            category_index = int(fields[0])
            action_index = int(fields[2])
            values = _to_cell([float(v) for v in fields[4:]])
            values = _normalized(values)
        except ValueError:
            return None

        category = Category.from_index(category_index)
        action = Action.from_index(action_index)
        if category is None or action is None:
            return None
        if not self.catalog.affords(category, action):
            return None
        return (category, action), values

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write every cell, normalized, in catalog order."""
        path = Path(path) if path is not None else self.path
        if path is None:
            raise ValueError("No path given and no store path configured")
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            for category, action in self.catalog.pairs():
                values = self.normalized(category, action)
                f.write(self.format_line(category, action, values) + "\n")

        self.path = path
        logger.info(f"Saved {len(self._cells)} templates to {path}")
        return path

    @staticmethod
    def format_line(category: Category, action: Action, values: Sequence[float]) -> str:
        numbers = " ".join(f"{v:19.16f}" for v in values)
        return (
            f"{category.index:3d} {category.display_name:>10s} "
            f"{action.index:3d} {action.display_name:>10s} {numbers}"
        )

    def __repr__(self) -> str:
        return f"CompatibilityStore(cells={len(self._cells)}, learning_rate={self._learning_rate}, path={self.path})"
