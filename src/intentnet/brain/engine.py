"""Intention Engine - the orchestrator of intentnet.

The engine owns one compatibility store and wires the pipeline:

    scene -> SceneGraphBuilder -> inference -> BeliefExtractor
          -> QueryRanker -> QuerySession -> TemplateLearner -> store

The store and the co-occurrence counter live for the lifetime of the
engine; the network, its beliefs and any evidence are per scene and are
dropped by ``reinitialize()``.
"""

import logging
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from intentnet.core.affordances import AffordanceCatalog
from intentnet.core.enums import Action, Category, RankingPolicy, SessionState
from intentnet.core.exceptions import IntentNetError
from intentnet.core.network import BuiltScene, IntentionNetwork, SceneGraphBuilder
from intentnet.core.types import Scene, SessionRecord
from intentnet.inference import (
    BeliefSet,
    FrequencyBeliefExtractor,
    InferenceEngine,
    InferenceResult,
    InferredBeliefExtractor,
    LoopyBeliefPropagation,
)
from intentnet.knowledge import CompatibilityStore, CooccurrenceCounter, TemplateLearner
from intentnet.queries import QueryCandidate, QueryRanker, QuerySession, build_candidates, catalog_candidates
from intentnet.utils.config import IntentNetConfig


logger = logging.getLogger(__name__)


class IntentionEngine:
    """Predicts a person's intended (object, action) pair by asking questions.

    Usage:
        engine = IntentionEngine.from_config(load_config())
        engine.construct_network(Scene.from_pairs([("Box", 0.3), ("Cup", 0.5)]))
        session = engine.start_session()
        while not session.is_finished:
            query = session.select_query()
            session.evaluate(ask(query.question))
        engine.finish_session(session)
        engine.write_templates()
    """

    def __init__(self, config: Optional[IntentNetConfig] = None,
                 catalog: Optional[AffordanceCatalog] = None,
                 store: Optional[CompatibilityStore] = None,
                 solver: Optional[InferenceEngine] = None,
                 rng: Optional[random.Random] = None):
        """Initialize the engine.

        Args:
            config: Engine configuration, defaults when None
            catalog: Affordance catalog, the default catalog when None
            store: Compatibility store; a fresh store at default templates when None
            solver: Inference engine; loopy belief propagation when None
            rng: Random source for ranking; seeded from ``ranking.random_seed`` when None
        """
        self.config = config or IntentNetConfig()
        self.catalog = catalog or AffordanceCatalog.create_default()
        self.store = store or CompatibilityStore(
            self.catalog,
            path=self.config.store.path,
            learning_rate=self.config.store.learning_rate,
            default_prior=self.config.store.default_prior,
        )

        self.counter = CooccurrenceCounter()
        self.builder = SceneGraphBuilder(
            self.catalog, self.store, self.counter,
            distance_margin=self.config.network.distance_margin,
        )
        self.solver = solver or LoopyBeliefPropagation(
            algorithm=self.config.inference.algorithm,
            tolerance=self.config.inference.tolerance,
            max_iterations=self.config.inference.max_iterations,
            damping=self.config.inference.damping,
        )
        self.rng = rng or random.Random(self.config.ranking.random_seed)
        self.ranker = QueryRanker(
            policy=self.config.ranking.policy,
            tie_break=self.config.ranking.tie_break,
            epsilon=self.config.ranking.epsilon,
            rng=self.rng,
        )
        self.learner = TemplateLearner(self.store)

        # Per-scene state
        self.built: Optional[BuiltScene] = None
        self.result: Optional[InferenceResult] = None
        self.evidence: Dict[int, int] = {}
        self.session: Optional[QuerySession] = None

        # Across scenes
        self.records: List[SessionRecord] = []

        logger.info(f"IntentionEngine initialized ({self.store!r})")

    @classmethod
    def from_config(cls, config: IntentNetConfig,
                    catalog: Optional[AffordanceCatalog] = None,
                    solver: Optional[InferenceEngine] = None,
                    rng: Optional[random.Random] = None) -> "IntentionEngine":
        """Create an engine and load its store from ``config.store.path``."""
        engine = cls(config=config, catalog=catalog, solver=solver, rng=rng)
        engine.store.load()
        return engine

    # =========================================================================
    # Network
    # =========================================================================

    @property
    def network(self) -> IntentionNetwork:
        if self.built is None:
            raise IntentNetError("No scene has been constructed")
        return self.built.network

    def construct_network(self, scene: Scene) -> BuiltScene:
        """Build and solve the network for ``scene``, replacing any previous one."""
        self.reinitialize()
        self.built = self.builder.build(scene)
        self.solve()
        return self.built

    def solve(self) -> InferenceResult:
        """Run inference on the current network with the current evidence."""
        self.result = self.solver.solve(self.network, self.evidence)
        logger.debug(
            f"Inference: {self.result.iterations} iterations, converged={self.result.converged}"
        )
        return self.result

    def observe(self, node_index: int, state: int) -> InferenceResult:
        """Clamp a node to ``state`` and re-infer.

        The evidence is only kept if inference accepts it.
        """
        if not 0 <= node_index < self.network.node_count:
            raise IndexError(f"No node with index {node_index}")
        if state not in (0, 1):
            raise ValueError(f"Evidence state must be 0 or 1, got {state}")
        evidence = dict(self.evidence)
        evidence[node_index] = int(state)
        result = self.solver.solve(self.network, evidence)

        self.evidence = evidence
        self.result = result
        logger.info(f"Observed {self.network.get_node(node_index).name} = {int(state)}")
        return result

    def clear_evidence(self) -> InferenceResult:
        self.evidence.clear()
        return self.solve()

    def to_dot(self) -> str:
        return self.network.to_dot()

    # =========================================================================
    # Beliefs and Queries
    # =========================================================================

    def beliefs(self, use_counts: bool = False) -> BeliefSet:
        """Belief lists for the current network.

        Args:
            use_counts: Score from co-occurrence frequencies instead of inference
        """
        if use_counts:
            extractor = FrequencyBeliefExtractor(self.counter)
        else:
            if self.result is None:
                self.solve()
            extractor = InferredBeliefExtractor(self.result)
        return extractor.extract(self.network, self.built.bookkeeping)

    def generate_query_set(self, policy: Optional[RankingPolicy] = None) -> List[QueryCandidate]:
        """Ranked candidates for the current scene.

        COUNT scores come from the co-occurrence counter; BELIEF and
        UNRANKED use the inferred beliefs.
        """
        policy = RankingPolicy(policy) if policy is not None else self.ranker.policy
        beliefs = self.beliefs(use_counts=policy == RankingPolicy.COUNT)
        candidates = self.ranker.rank(build_candidates(beliefs), policy)
        logger.info(f"Generated {len(candidates)} queries ({policy.value})")
        return candidates

    def generate_random_query_set(self) -> List[QueryCandidate]:
        """Shuffled candidates for the whole catalog, independent of the scene."""
        return self.ranker.rank(catalog_candidates(self.catalog), RankingPolicy.UNRANKED)

    # =========================================================================
    # Sessions
    # =========================================================================

    def start_session(self, policy: Optional[RankingPolicy] = None,
                      candidates: Optional[List[QueryCandidate]] = None) -> QuerySession:
        """Open a query session over ``candidates`` or a freshly generated set."""
        if candidates is None:
            candidates = self.generate_query_set(policy)
        self.session = QuerySession(
            candidates,
            learner=self.learner,
            learn_on_resolve=self.config.session.learn_on_resolve,
        )
        return self.session

    def finish_session(self, session: Optional[QuerySession] = None) -> SessionRecord:
        """Record the outcome of a session; writes the store when autosave is on."""
        session = session or self.session
        if session is None:
            raise IntentNetError("No session to finish")
        if session.state == SessionState.ACTIVE or session.state == SessionState.PROPOSED:
            session.cancel()

        record = SessionRecord(
            scene_name=self.built.network.name if self.built else "",
            interactions=session.interactions,
            resolved=session.is_resolved,
            intention=session.intention,
        )
        self.records.append(record)
        if record.resolved and self.config.store.autosave and self.store.path is not None:
            self.write_templates()
        logger.info(
            f"Session finished: resolved={record.resolved}, interactions={record.interactions}"
        )
        return record

    # =========================================================================
    # Learning and Persistence
    # =========================================================================

    def update_templates_using_observations(self) -> Dict[Tuple[Category, Action], np.ndarray]:
        """Blend the scene's per-category averages into the store, then re-solve."""
        if self.built is None:
            raise IntentNetError("No scene has been constructed")
        updated = self.learner.batch_update(self.built.bookkeeping.accumulator.means())
        self.builder.refresh_templates(self.built)
        self.solve()
        return updated

    def write_templates(self, path: Optional[Union[str, Path]] = None) -> Path:
        return self.store.save(path)

    def reset_templates(self) -> None:
        """Reset every template to the default prior and persist it."""
        self.store.reset_to_default()
        if self.store.path is not None:
            self.store.save()
        logger.info("Templates reset to default")

    def reinitialize(self) -> None:
        """Drop per-scene state; the store and the counter are kept."""
        self.built = None
        self.result = None
        self.evidence.clear()
        self.session = None
