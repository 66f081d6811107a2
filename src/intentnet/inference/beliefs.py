"""Belief extraction.

Both strategies read a network and its bookkeeping without modifying
them and produce the same three lists: per action node, per object node
and per object-action potential.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from intentnet.core.enums import Action, Category
from intentnet.core.network.bookkeeping import SceneBookkeeping
from intentnet.core.network.graph import IntentionNetwork
from intentnet.knowledge.counts import CooccurrenceCounter
from .solver import InferenceResult


logger = logging.getLogger(__name__)


@dataclass
class NodeBelief:
    """Score attached to one action or object node."""
    node_index: int
    name: str
    score: float
    category: Optional[Category] = None
    action: Optional[Action] = None


@dataclass
class PairBelief:
    """Score attached to one object-action potential."""
    potential_index: int
    object_index: int
    action_index: int
    object_name: str
    category: Category
    action: Action
    score: float


@dataclass
class BeliefSet:
    """The three belief lists, each in network order."""
    actions: List[NodeBelief] = field(default_factory=list)
    objects: List[NodeBelief] = field(default_factory=list)
    pairs: List[PairBelief] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.actions) + len(self.objects) + len(self.pairs)

    def best_pair(self) -> Optional[PairBelief]:
        if not self.pairs:
            return None
        return max(self.pairs, key=lambda p: p.score)


class BeliefExtractor(ABC):
    """Produces a BeliefSet for a built network."""

    @abstractmethod
    def action_score(self, node_index: int, action: Action) -> float:
        ...

    @abstractmethod
    def object_score(self, node_index: int, category: Category) -> float:
        ...

    @abstractmethod
    def pair_score(self, potential_index: int) -> float:
        ...

    def extract(self, network: IntentionNetwork, bookkeeping: SceneBookkeeping) -> BeliefSet:
        beliefs = BeliefSet()
        for node in network.action_nodes:
            beliefs.actions.append(NodeBelief(
                node_index=node.index,
                name=node.name,
                score=self.action_score(node.index, node.action),
                action=node.action,
            ))
        for node in network.object_nodes:
            beliefs.objects.append(NodeBelief(
                node_index=node.index,
                name=node.name,
                score=self.object_score(node.index, node.category),
                category=node.category,
            ))
        for potential in network.relevant_potentials:
            object_index, action_index = potential.variables
            beliefs.pairs.append(PairBelief(
                potential_index=potential.index,
                object_index=object_index,
                action_index=action_index,
                object_name=bookkeeping.instance_names[object_index],
                category=bookkeeping.instance_category[object_index],
                action=bookkeeping.action_identity[action_index],
                score=self.pair_score(potential.index),
            ))
        logger.debug(
            f"{type(self).__name__}: {len(beliefs.actions)} actions, "
            f"{len(beliefs.objects)} objects, {len(beliefs.pairs)} pairs"
        )
        return beliefs


class InferredBeliefExtractor(BeliefExtractor):
    """Scores are the probabilities returned by the inference engine."""

    def __init__(self, result: InferenceResult):
        self.result = result

    def action_score(self, node_index: int, action: Action) -> float:
        return self.result.belief(node_index)

    def object_score(self, node_index: int, category: Category) -> float:
        return self.result.belief(node_index)

    def pair_score(self, potential_index: int) -> float:
        return self.result.factor_belief(potential_index)


class FrequencyBeliefExtractor(BeliefExtractor):
    """Scores are relative frequencies from the co-occurrence counter.

    Every pair gets the same low score ``1 / total``.
    """

    def __init__(self, counter: CooccurrenceCounter):
        self.counter = counter

    def action_score(self, node_index: int, action: Action) -> float:
        return self.counter.action_frequency(action)

    def object_score(self, node_index: int, category: Category) -> float:
        return self.counter.category_frequency(category)

    def pair_score(self, potential_index: int) -> float:
        return self.counter.pair_score()
