"""Tests for belief extraction."""

import numpy as np
import pytest

from intentnet.core import Action, Category, Scene
from intentnet.core.network import SceneGraphBuilder
from intentnet.inference import (
    FrequencyBeliefExtractor,
    InferenceResult,
    InferredBeliefExtractor,
)


@pytest.fixture
def box_scene(catalog, store, counter):
    """Box1 alone: Grasp 0, Move 1, Open 2, Push 3, Box1 4, Box1 Distance 5."""
    return SceneGraphBuilder(catalog, store, counter).build(Scene.from_pairs([("Box", 0.5)]))


class TestInferredBeliefExtractor:
    def test_scores_come_from_result(self, box_scene):
        result = InferenceResult(
            variable_beliefs=np.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6]),
            factor_beliefs=np.array([0.7, 0.8, 0.9, 0.15, 0.0]),
        )
        beliefs = InferredBeliefExtractor(result).extract(box_scene.network, box_scene.bookkeeping)

        assert [(b.name, b.score) for b in beliefs.actions] == [
            ("Grasp", 0.1), ("Move", 0.2), ("Open", 0.3), ("Push", 0.4)
        ]
        assert [(b.name, b.score, b.category) for b in beliefs.objects] == [("Box1", 0.5, Category.BOX)]
        assert [(p.action, p.score) for p in beliefs.pairs] == [
            (Action.GRASP, 0.7), (Action.MOVE, 0.8), (Action.OPEN, 0.9), (Action.PUSH, 0.15)
        ]
        assert all(p.object_name == "Box1" for p in beliefs.pairs)
        assert beliefs.best_pair().action == Action.OPEN
        assert len(beliefs) == 9

    def test_network_untouched(self, box_scene):
        before = [p.values.copy() for p in box_scene.network.potentials]
        result = InferenceResult(np.full(6, 0.5), np.full(5, 0.25))
        InferredBeliefExtractor(result).extract(box_scene.network, box_scene.bookkeeping)
        after = [p.values for p in box_scene.network.potentials]
        for a, b in zip(before, after):
            np.testing.assert_array_equal(a, b)
        assert box_scene.network.node_count == 6


class TestFrequencyBeliefExtractor:
    def test_frequencies(self, catalog, store, counter, box_carton_scene):
        built = SceneGraphBuilder(catalog, store, counter).build(box_carton_scene)
        beliefs = FrequencyBeliefExtractor(counter).extract(built.network, built.bookkeeping)

        scores = {b.name: b.score for b in beliefs.actions}
        assert scores["Grasp"] == pytest.approx(2 / 8)
        assert scores["Pour"] == pytest.approx(1 / 8)
        assert scores["Push"] == pytest.approx(1 / 8)

        objects = {b.name: b.score for b in beliefs.objects}
        assert objects == {"Box1": pytest.approx(0.5), "Carton1": pytest.approx(0.5)}

        assert len(beliefs.pairs) == 8
        assert all(p.score == pytest.approx(1 / 8) for p in beliefs.pairs)

    def test_counts_accumulate_across_scenes(self, catalog, store, counter, box_carton_scene):
        builder = SceneGraphBuilder(catalog, store, counter)
        builder.build(box_carton_scene)
        built = builder.build(Scene.from_pairs([("Cup", 0.4)]))
        beliefs = FrequencyBeliefExtractor(counter).extract(built.network, built.bookkeeping)

        assert counter.total == 11
        assert {b.name: b.score for b in beliefs.objects} == {"Cup1": pytest.approx(3 / 11)}
