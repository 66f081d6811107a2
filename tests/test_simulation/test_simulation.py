"""Tests for scene simulation, simulated users and evaluation runs."""

import random

import pytest

from intentnet.brain import IntentionEngine
from intentnet.core import Action, Category, RankingPolicy, Scene, SessionRecord
from intentnet.io import load_scene_list
from intentnet.queries import ActionQuery, FullQuery, ObjectQuery
from intentnet.simulation import (
    FIXED_SCENE,
    EvaluationReport,
    SceneSimulator,
    SimulatedUser,
    run_evaluation,
    run_session,
)
from intentnet.utils.config import IntentNetConfig


@pytest.fixture
def simulator():
    return SceneSimulator(rng=random.Random(5))


class TestSceneSimulator:
    def test_fixed_scene(self, simulator):
        scene = simulator.fixed_scene()
        assert len(scene) == 8
        assert [(o.label, o.distance) for o in scene] == list(FIXED_SCENE)

    def test_positions_scene(self, simulator):
        scene = simulator.fixed_objects_random_positions()
        assert len(scene) == 13
        assert all(0.2 <= o.distance < 1.0 for o in scene)

    def test_mixed_scene_adds_other_categories(self, simulator):
        scene = simulator.mixed_scene()
        labels = [o.label for o in scene]
        assert labels[:5] == ["Box", "Carton", "Can", "Cup", "Bottle"]
        assert len(labels) == 13
        assert not set(labels[5:]) & {"Box", "Carton", "Can", "Cup", "Bottle"}

    def test_random_scene_size(self, simulator):
        for _ in range(20):
            scene = simulator.random_scene()
            assert 5 + 3 <= len(scene) <= 5 + 14

    def test_complete_scene(self, simulator):
        scene = simulator.complete_scene()
        labels = [o.label for o in scene]
        assert labels[:2] == ["Carton", "Box"]
        assert all(1 / 3 <= o.distance < 1.33 for o in list(scene)[2:])

    def test_reproducible(self):
        first = SceneSimulator(rng=random.Random(9)).generate("random", 3)
        second = SceneSimulator(rng=random.Random(9)).generate("random", 3)
        assert [[(o.label, o.distance) for o in s] for s in first] == \
            [[(o.label, o.distance) for o in s] for s in second]

    def test_unknown_kind(self, simulator):
        with pytest.raises(ValueError):
            simulator.generate("crowded")

    def test_test_suite_files(self, simulator, tmp_path):
        written = simulator.generate_test_suite(
            tmp_path, sessions={name: 2 for name in (
                "Group_01_Position_Test", "Group_02_Position_Test", "Group_03_Position_Test",
                "Group_04_Position_Test", "Group_01_Objects_Test", "Group_02_Objects_Test",
                "Group_03_Objects_Test", "Group_04_Objects_Test", "Group_Learning_Test",
            )},
        )
        assert len(written) == 9
        scenes = load_scene_list(written["Group_01_Position_Test"])
        assert len(scenes) == 2
        assert len(scenes[0]) == 13


class TestSimulatedUser:
    def test_answers(self):
        user = SimulatedUser("Box1", Action.GRASP)
        assert user(ActionQuery(0, 1.0, query_action=Action.GRASP))
        assert not user(ActionQuery(0, 1.0, query_action=Action.OPEN))
        assert user(ObjectQuery(0, 1.0, instance_name="Box1"))
        assert not user(ObjectQuery(0, 1.0, instance_name="Box2"))
        assert user(FullQuery(0, 1.0, instance_name="Box1", query_action=Action.GRASP))
        assert not user(FullQuery(0, 1.0, instance_name="Box1", query_action=Action.OPEN))

    def test_action_by_name(self):
        user = SimulatedUser("Cup1", "drink")
        assert user.action == Action.DRINK
        assert user.describe() == "Drink-Cup1"
        with pytest.raises(ValueError):
            SimulatedUser("Cup1", "Juggle")


class TestEvaluation:
    def test_run_session_resolves(self, config):
        engine = IntentionEngine(config=config, rng=random.Random(0))
        scene = Scene.from_pairs([("Box", 0.3), ("Cup", 0.5), ("Tube", 0.7)])
        record = run_session(engine, scene, SimulatedUser("Tube1", Action.SQUEEZE))

        assert record.resolved
        assert record.intention.object_name == "Tube1"
        assert record.interactions >= 1
        assert engine.store.cell(Category.TUBE, Action.SQUEEZE)[3] == pytest.approx(6.0)

    @pytest.mark.parametrize("policy", list(RankingPolicy))
    def test_every_policy_resolves(self, config, policy):
        engine = IntentionEngine(config=config, rng=random.Random(1))
        scenes = SceneSimulator(rng=random.Random(2)).generate("fixed", 3)
        report = run_evaluation(engine, scenes, SimulatedUser("Box1", Action.OPEN), policy=policy)
        assert report.resolved_count == 3

    def test_learning_raises_pair_belief(self, store_path):
        config = IntentNetConfig(
            store={"path": str(store_path), "default_prior": [1, 1, 1, 5]},
            logging={"log_to_file": False},
        )
        engine = IntentionEngine(config=config, rng=random.Random(3))
        scene = SceneSimulator().fixed_scene()

        def mug_drink_belief():
            network = engine.network
            mug = network.find_node_by_name("Mug1").index
            drink = network.find_action_node(Action.DRINK).index
            return engine.result.factor_belief(network.potential_between(mug, drink).index)

        engine.construct_network(scene)
        before = mug_drink_belief()
        report = run_evaluation(engine, [scene], SimulatedUser("Mug1", Action.DRINK), label="Drink-Mug1")
        engine.construct_network(scene)

        assert report.resolved_count == 1
        assert mug_drink_belief() > before

    def test_no_learning_leaves_store(self, config):
        engine = IntentionEngine(config=config, rng=random.Random(3))
        scenes = SceneSimulator().generate("fixed", 2)
        run_evaluation(engine, scenes, SimulatedUser("Mug1", Action.DRINK), learn=False)
        assert engine.store.cell(Category.MUG, Action.DRINK)[3] == pytest.approx(5.0)

    def test_batch_learning_runs(self, config):
        engine = IntentionEngine(config=config, rng=random.Random(3))
        scenes = SceneSimulator(rng=random.Random(6)).generate("random", 2)
        report = run_evaluation(engine, scenes, SimulatedUser("Box1", Action.GRASP), batch_learning=True)
        assert len(report.records) == 2

    def test_report_file(self, tmp_path):
        report = EvaluationReport(label="Grasp-Box1")
        report.records = [SessionRecord("0", 3, True), SessionRecord("1", 1, True)]
        path = tmp_path / "results.txt"
        report.append_to(path)
        report.append_to(path)

        assert path.read_text().splitlines() == ["Grasp-Box1 1 2", " 3 1"] * 2
        assert report.mean_interactions == pytest.approx(2.0)
        assert "2 resolved" in report.summary()
