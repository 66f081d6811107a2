"""Inference over intention networks.

Any object with a ``solve(network, evidence)`` method returning an
``InferenceResult`` can serve as the inference engine. The bundled
``LoopyBeliefPropagation`` runs flooding-schedule message passing on the
pairwise binary network with numpy.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

import numpy as np

from intentnet.core.network.graph import IntentionNetwork


logger = logging.getLogger(__name__)


SUM_PRODUCT = "sumprod"
MAX_PRODUCT = "maxprod"


@dataclass
class InferenceResult:
    """Beliefs returned by an inference engine.

    Attributes:
        variable_beliefs: P(node = 1), indexed by node index
        factor_beliefs: P(first = 1, second = 1), indexed by potential index
        iterations: Message-passing sweeps performed
        converged: Whether the message change fell below tolerance
    """
    variable_beliefs: np.ndarray
    factor_beliefs: np.ndarray
    iterations: int = 0
    converged: bool = True

    def belief(self, node_index: int) -> float:
        return float(self.variable_beliefs[node_index])

    def factor_belief(self, potential_index: int) -> float:
        return float(self.factor_beliefs[potential_index])


class InferenceEngine(Protocol):
    """Contract for the inference collaborator."""

    def solve(self, network: IntentionNetwork,
              evidence: Optional[Mapping[int, int]] = None) -> InferenceResult:
        ...


class LoopyBeliefPropagation:
    """Loopy belief propagation on a pairwise binary Markov network.

    Args:
        algorithm: "sumprod" for marginals, "maxprod" for max-marginals
        tolerance: Convergence threshold on the largest message change
        max_iterations: Upper bound on sweeps
        damping: Weight of the previous message in each update, in [0, 1)
    """

    def __init__(self, algorithm: str = SUM_PRODUCT, tolerance: float = 1e-8,
                 max_iterations: int = 1000, damping: float = 0.0):
        if algorithm not in (SUM_PRODUCT, MAX_PRODUCT):
            raise ValueError(f"Unknown inference algorithm: {algorithm}")
        if not 0.0 <= damping < 1.0:
            raise ValueError(f"Damping must be in [0, 1), got {damping}")
        self.algorithm = algorithm
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.damping = damping

    def _reduce(self, table: np.ndarray, axis: int) -> np.ndarray:
        if self.algorithm == MAX_PRODUCT:
            return table.max(axis=axis)
        return table.sum(axis=axis)

    @staticmethod
    def _normalize(vector: np.ndarray, what: str) -> np.ndarray:
        total = vector.sum()
        if total <= 0 or not np.isfinite(total):
            logger.warning(f"Zero-sum {what}; falling back to uniform")
            return np.full_like(vector, 1.0 / vector.size)
        return vector / total

    def _unary(self, node_count: int, evidence: Optional[Mapping[int, int]]) -> np.ndarray:
        unary = np.ones((node_count, 2))
        for node_index, state in (evidence or {}).items():
            if not 0 <= node_index < node_count:
                raise IndexError(f"Evidence for unknown node {node_index}")
            if state not in (0, 1):
                raise ValueError(f"Evidence state must be 0 or 1, got {state}")
            # numpy reads a bool index as a mask
            state = int(state)
            unary[node_index] = 0.0
            unary[node_index, state] = 1.0
        return unary

    def solve(self, network: IntentionNetwork,
              evidence: Optional[Mapping[int, int]] = None) -> InferenceResult:
        node_count = network.node_count
        potentials = network.potentials
        unary = self._unary(node_count, evidence)

        tables = [p.table for p in potentials]
        pairs: List[Tuple[int, int]] = [p.variables for p in potentials]

        # incident[v] lists (potential index, side) with side 0 for first, 1 for second
        incident: Dict[int, List[Tuple[int, int]]] = {v: [] for v in range(node_count)}
        for f, (i, j) in enumerate(pairs):
            incident[i].append((f, 0))
            incident[j].append((f, 1))

        # messages[f, 0]: first -> second (over the second's states)
        # messages[f, 1]: second -> first (over the first's states)
        messages = np.full((len(potentials), 2, 2), 0.5)

        def gathered(v: int, exclude: Optional[int], msgs: np.ndarray) -> np.ndarray:
            product = unary[v].copy()
            for f, side in incident[v]:
                if f != exclude:
                    product *= msgs[f, 1 - side]
            return product

        converged = len(potentials) == 0
        iterations = 0
        sweeps = range(1, self.max_iterations + 1) if potentials else range(0)
        for iterations in sweeps:
            updated = np.empty_like(messages)
            for f, (i, j) in enumerate(pairs):
                table = tables[f]
                from_first = gathered(i, f, messages)
                from_second = gathered(j, f, messages)
                updated[f, 0] = self._normalize(self._reduce(table * from_first[:, None], 0), "message")
                updated[f, 1] = self._normalize(self._reduce(table * from_second[None, :], 1), "message")

            if self.damping > 0:
                updated = (1.0 - self.damping) * updated + self.damping * messages

            delta = float(np.max(np.abs(updated - messages)))
            messages = updated
            if delta < self.tolerance:
                converged = True
                break

        if not converged:
            logger.warning(f"Belief propagation did not converge after {self.max_iterations} iterations")

        variable_beliefs = np.empty(node_count)
        for v in range(node_count):
            belief = self._normalize(gathered(v, None, messages), f"belief for node {v}")
            variable_beliefs[v] = belief[1]

        factor_beliefs = np.empty(len(potentials))
        for f, (i, j) in enumerate(pairs):
            joint = tables[f] * np.outer(gathered(i, f, messages), gathered(j, f, messages))
            joint = self._normalize(joint.reshape(-1), f"belief for potential {f}").reshape(2, 2)
            factor_beliefs[f] = joint[1, 1]

        logger.debug(
            f"{self.algorithm} finished after {iterations} iterations (converged={converged})"
        )
        return InferenceResult(
            variable_beliefs=variable_beliefs,
            factor_beliefs=factor_beliefs,
            iterations=iterations,
            converged=converged,
        )
