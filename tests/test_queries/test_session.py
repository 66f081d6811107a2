"""Tests for the interactive query session."""

import random

import pytest

from intentnet.core import (
    Action,
    Category,
    NoCandidatesError,
    QueryKind,
    SessionClosedError,
    SessionState,
)
from intentnet.queries import ActionQuery, FullQuery, ObjectQuery, QuerySession


def make_candidates():
    """Grasp 0, Open 1, Box1 2, Carton1 3, then every pair 4..7."""
    candidates = [
        ActionQuery(0, 0.9, query_action=Action.GRASP),
        ActionQuery(1, 0.8, query_action=Action.OPEN),
        ObjectQuery(2, 0.7, instance_name="Box1", category=Category.BOX),
        ObjectQuery(3, 0.6, instance_name="Carton1", category=Category.CARTON),
    ]
    pairs = [
        ("Box1", Category.BOX, Action.GRASP),
        ("Box1", Category.BOX, Action.OPEN),
        ("Carton1", Category.CARTON, Action.GRASP),
        ("Carton1", Category.CARTON, Action.OPEN),
    ]
    for name, category, action in pairs:
        candidates.append(FullQuery(
            len(candidates), 0.5, instance_name=name, category=category, query_action=action
        ))
    return candidates


def _first(session, index):
    """Move candidate ``index`` to the front and propose it."""
    session._candidates.sort(key=lambda c: c.index != index)
    return session.select_query()


def remaining(session):
    return sorted(c.index for c in session.candidates)


class TestPruning:
    def test_accept_full_resolves(self, store, learner):
        session = QuerySession(make_candidates(), learner=learner)
        _first(session, 4)
        assert session.evaluate(True) == SessionState.RESOLVED
        assert session.is_resolved and session.is_finished
        assert session.intention.object_name == "Box1"
        assert session.intention.action == Action.GRASP
        assert store.cell(Category.BOX, Action.GRASP)[3] == pytest.approx(6.0)

    def test_accept_action_keeps_matching_pairs(self):
        session = QuerySession(make_candidates())
        session.evaluate(True)  # Grasp is first
        assert remaining(session) == [4, 6]
        assert all(c.kind == QueryKind.FULL for c in session.candidates)
        assert session.state == SessionState.PROPOSED

    def test_accept_object_keeps_matching_pairs(self):
        session = QuerySession(make_candidates())
        _first(session, 2)
        session.evaluate(True)
        assert remaining(session) == [4, 5]

    def test_reject_full_drops_orphans(self):
        session = QuerySession(make_candidates())
        _first(session, 4)
        session.evaluate(False)
        assert remaining(session) == [1, 3, 5, 6, 7]

    def test_reject_action(self):
        session = QuerySession(make_candidates())
        session.evaluate(False)
        assert remaining(session) == [1, 2, 3, 5, 7]

    def test_reject_object(self):
        session = QuerySession(make_candidates())
        _first(session, 2)
        session.evaluate(False)
        assert remaining(session) == [0, 1, 3, 6, 7]

    def test_next_proposal_is_head_of_list(self):
        session = QuerySession(make_candidates())
        session.evaluate(False)
        assert session.current.index == 1


class TestLifecycle:
    def test_empty_list_is_exhausted(self):
        session = QuerySession([])
        assert session.state == SessionState.EXHAUSTED
        with pytest.raises(NoCandidatesError):
            session.select_query()

    def test_rejecting_everything_exhausts(self):
        session = QuerySession(make_candidates())
        while not session.is_finished:
            session.select_query()
            session.evaluate(False)
        assert session.state == SessionState.EXHAUSTED
        assert session.intention is None
        assert session.size() == 0
        with pytest.raises(NoCandidatesError):
            session.evaluate(False)

    def test_closed_session_rejects_operations(self):
        session = QuerySession(make_candidates())
        _first(session, 5)
        session.evaluate(True)
        with pytest.raises(SessionClosedError):
            session.select_query()
        with pytest.raises(SessionClosedError):
            session.evaluate(True)

    def test_cancel_leaves_store_untouched(self, store, learner):
        session = QuerySession(make_candidates(), learner=learner)
        session.evaluate(True)
        session.cancel()
        assert session.state == SessionState.CANCELLED
        assert store.cell(Category.BOX, Action.GRASP)[3] == pytest.approx(5.0)
        assert learner.observations == []
        with pytest.raises(SessionClosedError):
            session.evaluate(True)
        with pytest.raises(SessionClosedError):
            session.cancel()

    def test_learning_can_be_disabled(self, store, learner):
        session = QuerySession(make_candidates(), learner=learner, learn_on_resolve=False)
        _first(session, 4)
        session.evaluate(True)
        assert session.is_resolved
        assert store.cell(Category.BOX, Action.GRASP)[3] == pytest.approx(5.0)

    def test_interactions_are_counted(self):
        session = QuerySession(make_candidates())
        session.evaluate(True)   # Grasp -> yes
        session.evaluate(False)  # Grasp Box1 -> no
        session.evaluate(True)   # Grasp Carton1 -> yes
        assert session.interactions == 3
        assert session.intention.object_name == "Carton1"
        assert [a.accepted for a in session.history] == [True, False, True]

    def test_candidates_is_a_copy(self):
        session = QuerySession(make_candidates())
        session.candidates.clear()
        assert session.size() == 8

    @pytest.mark.parametrize("seed", range(25))
    def test_any_answers_terminate(self, seed):
        rng = random.Random(seed)
        candidates = make_candidates()
        session = QuerySession(candidates)
        steps = 0
        while not session.is_finished:
            before = session.size()
            session.select_query()
            session.evaluate(rng.random() < 0.5)
            steps += 1
            assert session.is_finished or session.size() < before
        assert steps <= len(candidates)
        assert session.state in (SessionState.RESOLVED, SessionState.EXHAUSTED)
