"""Query ranking.

Candidates are generated actions first, then objects, then object-action
pairs, and then ordered under one of three policies:

- BELIEF: descending score, scores within ``epsilon`` count as tied.
  Tied FULL candidates precede ACTION/OBJECT ones; ties between two
  ACTION/OBJECT candidates are broken by a single coin flip per sort
  (``TieBreak.RANDOM``) or by label (``TieBreak.NAME``).
- COUNT: ACTION before OBJECT before FULL, then descending score.
  Ties keep generation order.
- UNRANKED: shuffled.
"""

import logging
import random
from functools import cmp_to_key
from typing import Callable, List, Optional

from intentnet.core.affordances import AffordanceCatalog
from intentnet.core.enums import QueryKind, RankingPolicy, TieBreak
from intentnet.inference.beliefs import BeliefSet
from .candidates import QueryCandidate, ActionQuery, ObjectQuery, FullQuery


logger = logging.getLogger(__name__)


DEFAULT_EPSILON = 1e-8

COUNT_PRIORITY = {
    QueryKind.ACTION: 0,
    QueryKind.OBJECT: 1,
    QueryKind.FULL: 2,
}


def build_candidates(beliefs: BeliefSet) -> List[QueryCandidate]:
    """One candidate per action node, object node and object-action potential."""
    candidates: List[QueryCandidate] = []
    for belief in beliefs.actions:
        candidates.append(ActionQuery(
            index=len(candidates),
            score=belief.score,
            query_action=belief.action,
            node_index=belief.node_index,
        ))
    for belief in beliefs.objects:
        candidates.append(ObjectQuery(
            index=len(candidates),
            score=belief.score,
            instance_name=belief.name,
            category=belief.category,
            node_index=belief.node_index,
        ))
    for pair in beliefs.pairs:
        candidates.append(FullQuery(
            index=len(candidates),
            score=pair.score,
            instance_name=pair.object_name,
            category=pair.category,
            query_action=pair.action,
            object_index=pair.object_index,
            action_index=pair.action_index,
            potential_index=pair.potential_index,
        ))
    return candidates


def catalog_candidates(catalog: AffordanceCatalog) -> List[QueryCandidate]:
    """Scene-independent candidates covering the whole catalog, all scored 1.0.

    Each category appears as a single instance named "<Category>1".
    """
    candidates: List[QueryCandidate] = []
    for category in catalog.categories:
        candidates.append(ObjectQuery(
            index=len(candidates),
            score=1.0,
            instance_name=f"{category.display_name}1",
            category=category,
        ))
    for action in catalog.actions:
        candidates.append(ActionQuery(index=len(candidates), score=1.0, query_action=action))
    for category, action in catalog.pairs():
        candidates.append(FullQuery(
            index=len(candidates),
            score=1.0,
            instance_name=f"{category.display_name}1",
            category=category,
            query_action=action,
        ))
    return candidates


class QueryRanker:
    """Orders query candidates.

    Args:
        policy: Default ranking policy
        tie_break: How tied ACTION/OBJECT candidates are ordered under BELIEF
        epsilon: Scores closer than this are considered equal
        rng: Random source for coin flips and shuffling
    """

    def __init__(self, policy: RankingPolicy = RankingPolicy.BELIEF,
                 tie_break: TieBreak = TieBreak.RANDOM,
                 epsilon: float = DEFAULT_EPSILON,
                 rng: Optional[random.Random] = None):
        self.policy = RankingPolicy(policy)
        self.tie_break = TieBreak(tie_break)
        self.epsilon = epsilon
        self.rng = rng or random.Random()

    def rank(self, candidates: List[QueryCandidate],
             policy: Optional[RankingPolicy] = None) -> List[QueryCandidate]:
        """Return a new list ordered under ``policy`` (default: the ranker's)."""
        policy = RankingPolicy(policy) if policy is not None else self.policy
        if policy == RankingPolicy.BELIEF:
            ranked = sorted(candidates, key=cmp_to_key(self._belief_comparator()))
        elif policy == RankingPolicy.COUNT:
            ranked = sorted(candidates, key=cmp_to_key(self._count_compare))
        else:
            ranked = list(candidates)
            self.rng.shuffle(ranked)
        logger.debug(f"Ranked {len(ranked)} candidates with policy {policy.value}")
        return ranked

    def rank_beliefs(self, beliefs: BeliefSet,
                     policy: Optional[RankingPolicy] = None) -> List[QueryCandidate]:
        return self.rank(build_candidates(beliefs), policy)

    def _score_compare(self, a: QueryCandidate, b: QueryCandidate) -> int:
        if a.score - b.score > self.epsilon:
            return -1
        if b.score - a.score > self.epsilon:
            return 1
        return 0

    def _belief_comparator(self) -> Callable[[QueryCandidate, QueryCandidate], int]:
        # One decision per sort keeps the comparator consistent
        ascending = self.rng.random() < 0.5

        def compare(a: QueryCandidate, b: QueryCandidate) -> int:
            by_score = self._score_compare(a, b)
            if by_score:
                return by_score
            a_full = a.kind == QueryKind.FULL
            b_full = b.kind == QueryKind.FULL
            if a_full and b_full:
                return 0
            if a_full:
                return -1
            if b_full:
                return 1
            if self.tie_break == TieBreak.NAME:
                if a.label != b.label:
                    return -1 if a.label < b.label else 1
                return a.index - b.index
            return a.index - b.index if ascending else b.index - a.index

        return compare

    def _count_compare(self, a: QueryCandidate, b: QueryCandidate) -> int:
        priority = COUNT_PRIORITY[a.kind] - COUNT_PRIORITY[b.kind]
        if priority:
            return priority
        return self._score_compare(a, b)
