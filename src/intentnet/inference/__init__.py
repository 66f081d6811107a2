"""Inference engine contract, belief propagation and belief extraction."""

from .solver import (
    InferenceEngine,
    InferenceResult,
    LoopyBeliefPropagation,
    SUM_PRODUCT,
    MAX_PRODUCT,
)
from .beliefs import (
    BeliefSet,
    NodeBelief,
    PairBelief,
    BeliefExtractor,
    InferredBeliefExtractor,
    FrequencyBeliefExtractor,
)

__all__ = [
    "InferenceEngine",
    "InferenceResult",
    "LoopyBeliefPropagation",
    "SUM_PRODUCT",
    "MAX_PRODUCT",
    "BeliefSet",
    "NodeBelief",
    "PairBelief",
    "BeliefExtractor",
    "InferredBeliefExtractor",
    "FrequencyBeliefExtractor",
]
