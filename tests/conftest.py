"""Pytest configuration for intentnet tests."""

import random

import pytest

from intentnet.core import AffordanceCatalog, Scene
from intentnet.knowledge import CompatibilityStore, CooccurrenceCounter, TemplateLearner
from intentnet.utils.config import IntentNetConfig


@pytest.fixture
def catalog():
    return AffordanceCatalog.create_default()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "ObjectActionMap.map"


@pytest.fixture
def store(catalog, store_path):
    """Store at default templates, backed by a temporary file."""
    return CompatibilityStore(catalog, path=store_path)


@pytest.fixture
def counter():
    return CooccurrenceCounter()


@pytest.fixture
def learner(store):
    return TemplateLearner(store)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config(store_path):
    """Default config that never writes log files."""
    return IntentNetConfig(
        store={"path": str(store_path)},
        logging={"log_to_file": False},
    )


@pytest.fixture
def box_carton_scene():
    return Scene.from_pairs([("Box", 0.3), ("Carton", 0.3)], name="box-carton")
