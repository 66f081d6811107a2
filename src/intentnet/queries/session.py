"""Interactive query session.

Holds the ranked candidate list and the currently proposed candidate,
and prunes the list after every answer until an object-action pair is
confirmed (RESOLVED) or nothing is left to ask (EXHAUSTED).

Pruning after an answer:

    accepted FULL    -> RESOLVED
    accepted ACTION  -> keep FULL candidates with that action
    accepted OBJECT  -> keep FULL candidates with that object
    rejected FULL    -> drop it and the ACTION/OBJECT candidates sharing
                        its action or object
    rejected ACTION  -> drop every candidate with that action
    rejected OBJECT  -> drop every candidate with that object
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from intentnet.core.enums import QueryKind, SessionState
from intentnet.core.exceptions import NoCandidatesError, SessionClosedError
from intentnet.core.types import Intention
from intentnet.knowledge.learner import TemplateLearner
from .candidates import QueryCandidate


logger = logging.getLogger(__name__)


@dataclass
class AnsweredQuery:
    """One question asked during a session and the answer it got."""
    candidate: QueryCandidate
    accepted: bool


class QuerySession:
    """State machine driving the question/answer loop.

    Usage:
        session = QuerySession(ranked_candidates, learner=learner)
        while not session.is_finished:
            query = session.select_query()
            session.evaluate(ask_user(query.question))
        print(session.intention)

    Args:
        candidates: Ranked candidates; the first is proposed first
        learner: Receives the confirmed pair when the session resolves
        learn_on_resolve: Set False to resolve without updating templates
    """

    def __init__(self, candidates: List[QueryCandidate],
                 learner: Optional[TemplateLearner] = None,
                 learn_on_resolve: bool = True):
        self._candidates: List[QueryCandidate] = list(candidates)
        self.learner = learner
        self.learn_on_resolve = learn_on_resolve
        self.current: Optional[QueryCandidate] = None
        self.intention: Optional[Intention] = None
        self.history: List[AnsweredQuery] = []
        self.state = SessionState.ACTIVE if self._candidates else SessionState.EXHAUSTED

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def candidates(self) -> List[QueryCandidate]:
        return list(self._candidates)

    def size(self) -> int:
        return len(self._candidates)

    @property
    def interactions(self) -> int:
        """Number of questions answered so far."""
        return len(self.history)

    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    @property
    def is_resolved(self) -> bool:
        return self.state == SessionState.RESOLVED

    # =========================================================================
    # Protocol
    # =========================================================================

    def _check_open(self) -> None:
        if self.state in (SessionState.RESOLVED, SessionState.CANCELLED):
            raise SessionClosedError(f"Session is {self.state.name.lower()}")
        if not self._candidates:
            raise NoCandidatesError("No query candidates remain")

    def select_query(self) -> QueryCandidate:
        """Propose the top-ranked candidate."""
        self._check_open()
        self.current = self._candidates[0]
        self.state = SessionState.PROPOSED
        logger.debug(f"Proposed: {self.current.question}")
        return self.current

    def evaluate(self, accepted: bool) -> SessionState:
        """Apply the answer to the proposed candidate and prune.

        If nothing has been proposed yet, the top candidate is proposed
        first.

        Returns:
            The new session state
        """
        self._check_open()
        if self.current is None:
            self.select_query()

        current = self.current
        self.history.append(AnsweredQuery(candidate=current, accepted=accepted))
        logger.info(f"{current.question} -> {'yes' if accepted else 'no'}")

        if accepted and current.kind == QueryKind.FULL:
            self._resolve(current)
            return self.state

        before = len(self._candidates)
        if accepted:
            self._candidates = [c for c in self._candidates
                                if c.kind == QueryKind.FULL and self._shares_target(c, current)]
        elif current.kind == QueryKind.FULL:
            self._candidates = [c for c in self._candidates
                                if c.index != current.index and not self._is_orphan(c, current)]
        else:
            self._candidates = [c for c in self._candidates if not self._shares_target(c, current)]
        logger.debug(f"Pruned {before - len(self._candidates)} candidates, {len(self._candidates)} remain")

        if self._candidates:
            self.current = self._candidates[0]
            self.state = SessionState.PROPOSED
        else:
            self.current = None
            self.state = SessionState.EXHAUSTED
            logger.info(f"Session exhausted after {self.interactions} interactions")
        return self.state

    def cancel(self) -> None:
        """Abort the session without touching the compatibility store."""
        if self.state.is_terminal:
            raise SessionClosedError(f"Session is already {self.state.name.lower()}")
        self.state = SessionState.CANCELLED
        self.current = None
        logger.info(f"Session cancelled after {self.interactions} interactions")

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _shares_target(candidate: QueryCandidate, current: QueryCandidate) -> bool:
        """True if ``candidate`` mentions what an ACTION/OBJECT ``current`` asks about."""
        if current.kind == QueryKind.ACTION:
            return candidate.has_action and candidate.action == current.action
        return candidate.has_object and candidate.object_name == current.object_name

    @staticmethod
    def _is_orphan(candidate: QueryCandidate, rejected: QueryCandidate) -> bool:
        if candidate.kind == QueryKind.OBJECT:
            return candidate.object_name == rejected.object_name
        if candidate.kind == QueryKind.ACTION:
            return candidate.action == rejected.action
        return False

    def _resolve(self, current: QueryCandidate) -> None:
        self.intention = Intention(
            object_name=current.object_name,
            category=current.category,
            action=current.action,
        )
        self.state = SessionState.RESOLVED
        logger.info(f"Intention resolved: {self.intention.describe()}")
        if self.learner is not None and self.learn_on_resolve:
            self.learner.observe(current.category, current.action)
