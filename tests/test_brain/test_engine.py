"""Tests for the IntentionEngine orchestrator."""

import random

import numpy as np
import pytest

from intentnet.brain import IntentionEngine
from intentnet.core import (
    Action,
    Category,
    IntentNetError,
    QueryKind,
    RankingPolicy,
    Scene,
    SessionState,
    UnknownCategoryError,
)
from intentnet.simulation import SimulatedUser
from intentnet.utils.config import IntentNetConfig


@pytest.fixture
def engine(config):
    return IntentionEngine(config=config, rng=random.Random(0))


class TestConstruction:
    def test_box_carton_candidates(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        candidates = engine.generate_query_set()

        assert len(candidates) == 15
        kinds = [c.kind for c in candidates]
        assert kinds.count(QueryKind.ACTION) == 5
        assert kinds.count(QueryKind.OBJECT) == 2
        assert kinds.count(QueryKind.FULL) == 8
        # Default templates put every belief at 1, so pairs win the ties
        assert all(k == QueryKind.FULL for k in kinds[:8])

    def test_network_layout(self, engine, box_carton_scene):
        built = engine.construct_network(box_carton_scene)
        network = built.network
        assert [n.name for n in network.action_nodes] == ["Grasp", "Move", "Open", "Push", "Pour"]
        assert [n.name for n in network.object_nodes] == ["Box1", "Carton1"]
        assert network.potential_count == 10
        assert built.max_distance == pytest.approx(0.32)

    def test_unknown_category_leaves_no_network(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        with pytest.raises(UnknownCategoryError):
            engine.construct_network(Scene.from_pairs([("Box", 0.3), ("Spoon", 0.4)]))
        assert engine.built is None
        with pytest.raises(IntentNetError):
            engine.network

    def test_reinitialize_keeps_store_and_counter(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        engine.store.increment(Category.BOX, Action.GRASP)
        engine.reinitialize()

        assert engine.built is None and engine.result is None
        assert engine.counter.total == 8
        assert engine.store.cell(Category.BOX, Action.GRASP)[3] == pytest.approx(6.0)

    def test_to_dot(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        dot = engine.to_dot()
        assert dot.startswith('graph "box-carton" {')
        assert '[label="Carton1", shape=ellipse];' in dot
        assert dot.count(" -- ") == 10


class TestInference:
    def test_observation_changes_beliefs(self, store_path, box_carton_scene):
        config = IntentNetConfig(
            store={"path": str(store_path), "default_prior": [1, 1, 1, 5]},
            logging={"log_to_file": False},
        )
        engine = IntentionEngine(config=config, rng=random.Random(0))
        engine.construct_network(box_carton_scene)
        grasp = engine.network.find_action_node(Action.GRASP).index
        box = engine.network.find_node_by_name("Box1").index
        before = engine.result.belief(grasp)

        result = engine.observe(box, 0)
        assert result.belief(box) == pytest.approx(0.0)
        assert result.belief(grasp) < before

        restored = engine.clear_evidence()
        assert restored.belief(grasp) == pytest.approx(before)

    def test_observe_unknown_node(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        with pytest.raises(IndexError):
            engine.observe(99, 1)

    def test_rejected_evidence_is_not_kept(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        grasp = engine.network.find_action_node(Action.GRASP).index
        before = engine.result

        with pytest.raises(ValueError):
            engine.observe(grasp, 2)

        assert engine.evidence == {}
        assert engine.result is before
        assert engine.solve().converged
        assert len(engine.generate_query_set()) == 15

    def test_boolean_evidence(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        box = engine.network.find_node_by_name("Box1").index
        result = engine.observe(box, False)
        assert engine.evidence == {box: 0}
        assert result.belief(box) == pytest.approx(0.0)

    def test_count_policy_starts_with_actions(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        candidates = engine.generate_query_set(RankingPolicy.COUNT)
        assert candidates[0].kind == QueryKind.ACTION
        assert candidates[0].action == Action.GRASP
        assert candidates[-1].kind == QueryKind.FULL

    def test_random_query_set_covers_catalog(self, engine):
        candidates = engine.generate_random_query_set()
        assert len(candidates) == 54


class TestLearning:
    def test_simulated_session_learns(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        session = engine.start_session()
        user = SimulatedUser("Box1", "Grasp")
        while not session.is_finished:
            session.evaluate(user(session.select_query()))

        record = engine.finish_session(session)
        assert record.resolved
        assert record.intention.action == Action.GRASP
        assert record.scene_name == "box-carton"
        assert engine.store.cell(Category.BOX, Action.GRASP)[3] == pytest.approx(6.0)
        assert engine.records == [record]

    def test_finish_active_session_cancels(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        session = engine.start_session()
        session.select_query()
        record = engine.finish_session()
        assert session.state == SessionState.CANCELLED
        assert not record.resolved
        np.testing.assert_array_equal(engine.store.cell(Category.BOX, Action.GRASP), [0, 0, 0, 5])

    def test_autosave_writes_store(self, store_path, box_carton_scene):
        config = IntentNetConfig(
            store={"path": str(store_path), "autosave": True},
            logging={"log_to_file": False},
        )
        engine = IntentionEngine(config=config, rng=random.Random(0))
        engine.construct_network(box_carton_scene)
        session = engine.start_session()
        session.evaluate(True)
        engine.finish_session(session)
        assert store_path.exists()

    def test_batch_update_blends_and_refreshes(self, engine, box_carton_scene):
        engine.construct_network(box_carton_scene)
        engine.store.set_cell(Category.BOX, Action.GRASP, [1, 1, 1, 1])

        updated = engine.update_templates_using_observations()

        expected = [0.125, 0.125, 0.125, 0.625]
        np.testing.assert_allclose(updated[(Category.BOX, Action.GRASP)], expected)
        np.testing.assert_allclose(engine.store.cell(Category.BOX, Action.GRASP), expected)
        box = engine.network.find_node_by_name("Box1").index
        grasp = engine.network.find_action_node(Action.GRASP).index
        np.testing.assert_allclose(engine.network.potential_between(box, grasp).values, expected)
        np.testing.assert_allclose(engine.store.cell(Category.CARTON, Action.POUR), [0, 0, 0, 1])

    def test_batch_update_needs_scene(self, engine):
        with pytest.raises(IntentNetError):
            engine.update_templates_using_observations()


class TestPersistence:
    def test_write_and_reload(self, config, engine, store_path):
        engine.store.increment(Category.CUP, Action.DRINK)
        engine.write_templates()

        reloaded = IntentionEngine.from_config(config)
        np.testing.assert_allclose(reloaded.store.cell(Category.CUP, Action.DRINK), [0, 0, 0, 1])
        assert reloaded.store.path == store_path

    def test_reset_templates(self, engine, store_path):
        engine.store.set_cell(Category.BOX, Action.GRASP, [1, 2, 3, 4])
        engine.reset_templates()
        np.testing.assert_array_equal(engine.store.cell(Category.BOX, Action.GRASP), [0, 0, 0, 5])
        assert store_path.exists()

    def test_from_config_without_file_uses_defaults(self, config):
        engine = IntentionEngine.from_config(config)
        np.testing.assert_array_equal(engine.store.cell(Category.TUB, Action.OPEN), [0, 0, 0, 5])
