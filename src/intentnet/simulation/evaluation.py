"""Batch evaluation: run one simulated session per scene and count questions."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from intentnet.core.enums import RankingPolicy
from intentnet.core.types import Scene, SessionRecord
from intentnet.brain.engine import IntentionEngine
from intentnet.queries.candidates import QueryCandidate


logger = logging.getLogger(__name__)


Answerer = Callable[[QueryCandidate], bool]


@dataclass
class EvaluationReport:
    """Outcome of an evaluation run, one record per scene."""
    label: str = ""
    records: List[SessionRecord] = field(default_factory=list)

    @property
    def interaction_counts(self) -> List[int]:
        return [r.interactions for r in self.records]

    @property
    def resolved_count(self) -> int:
        return sum(1 for r in self.records if r.resolved)

    @property
    def mean_interactions(self) -> float:
        counts = self.interaction_counts
        return sum(counts) / len(counts) if counts else 0.0

    def summary(self) -> str:
        return (
            f"{self.label or 'evaluation'}: {len(self.records)} scenes, "
            f"{self.resolved_count} resolved, {self.mean_interactions:.2f} questions on average"
        )

    def append_to(self, path: Union[str, Path]) -> None:
        """Append the run as two lines: scene numbers, then interaction counts."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a") as f:
            scene_numbers = " ".join(str(i + 1) for i in range(len(self.records)))
            f.write(f"{self.label} {scene_numbers}\n")
            f.write(" " + " ".join(str(n) for n in self.interaction_counts) + "\n")


def run_session(engine: IntentionEngine, scene: Scene, answer: Answerer,
                policy: Optional[RankingPolicy] = None,
                learn: bool = True) -> SessionRecord:
    """Build ``scene``, then ask questions until the session terminates."""
    engine.construct_network(scene)
    session = engine.start_session(policy)
    session.learn_on_resolve = learn

    while not session.is_finished:
        query = session.select_query()
        session.evaluate(answer(query))

    return engine.finish_session(session)


def run_evaluation(engine: IntentionEngine, scenes: Sequence[Scene], user: Answerer,
                   policy: Optional[RankingPolicy] = None, learn: bool = True,
                   batch_learning: bool = False, label: str = "") -> EvaluationReport:
    """Run one session per scene with the same engine.

    Args:
        engine: Engine whose store accumulates what is learned
        scenes: Scenes to evaluate, in order
        user: Answers each proposed query
        policy: Ranking policy, the engine's default when None
        learn: Update templates when a session resolves
        batch_learning: Also blend per-scene template averages after each session
        label: Name for the report, e.g. "Grasp-Box1"
    """
    report = EvaluationReport(label=label)
    for i, scene in enumerate(scenes):
        record = run_session(engine, scene, user, policy=policy, learn=learn)
        if batch_learning:
            engine.update_templates_using_observations()
        report.records.append(record)
        logger.debug(f"Scene {i + 1}/{len(scenes)}: {record.interactions} interactions")
    logger.info(report.summary())
    return report
