"""Simulated scenes for evaluation runs.

Distances are drawn as ``randint(50, 249) / 250`` unless noted, so every
simulated object lies in [0.2, 0.996]. All randomness comes from the
injected ``random.Random``.
"""

import logging
import random
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from intentnet.core.affordances import AffordanceCatalog
from intentnet.core.enums import Category
from intentnet.core.types import Scene
from intentnet.io.scenes import save_scene_list


logger = logging.getLogger(__name__)


FIXED_SCENE = (
    ("Tub", 0.521),
    ("Bowl", 0.593),
    ("Carton", 0.609),
    ("Mug", 0.623),
    ("Bottle", 0.712),
    ("Can", 0.792),
    ("Box", 0.817),
    ("Cup", 0.834),
)

POSITION_TEST_OBJECTS = (
    "SprayCan", "Tube", "Box", "Tin", "Bottle", "Carton", "Bowl",
    "Cup", "Tub", "Mug", "Bottle", "Tub", "Can",
)

RANDOM_TEST_OBJECTS = ("Box", "Carton", "Can", "Cup", "Bottle")

COMPLETE_SCENE_OBJECTS = ("Carton", "Box")

MIXED_RANDOM_COUNT = 8
MIXED_MAX_DRAWS = 100
RANDOM_MAX_DRAWS = 500


class SceneSimulator:
    """Generates scenes of household objects at random distances.

    Args:
        rng: Random source; pass a seeded instance for reproducible scenes
        catalog: Categories to draw random objects from
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 catalog: Optional[AffordanceCatalog] = None):
        self.rng = rng or random.Random()
        self.catalog = catalog or AffordanceCatalog.create_default()

    def random_distance(self) -> float:
        return self.rng.randint(50, 249) / 250.0

    def _random_category(self) -> Category:
        return self.rng.choice(self.catalog.categories)

    def fixed_scene(self) -> Scene:
        """Eight objects at fixed distances."""
        return Scene.from_pairs(FIXED_SCENE, name="fixed")

    def fixed_objects_random_positions(self, objects: Sequence[str] = POSITION_TEST_OBJECTS) -> Scene:
        """The given objects, each at a fresh random distance."""
        scene = Scene(name="positions")
        for label in objects:
            scene.add(label, self.random_distance())
        return scene

    def _add_random_objects(self, scene: Scene, fixed: Sequence[str],
                            wanted: int, max_draws: int) -> None:
        excluded = {label.lower() for label in fixed}
        added = 0
        draws = 0
        while added < wanted and draws < max_draws:
            category = self._random_category()
            distance = self.random_distance()
            if category.display_name.lower() not in excluded:
                scene.add(category.display_name, distance)
                added += 1
            draws += 1

    def mixed_scene(self, fixed: Sequence[str] = RANDOM_TEST_OBJECTS) -> Scene:
        """The fixed objects plus eight random objects of other categories."""
        scene = self.fixed_objects_random_positions(fixed)
        scene.name = "mixed"
        self._add_random_objects(scene, fixed, MIXED_RANDOM_COUNT, MIXED_MAX_DRAWS)
        return scene

    def random_scene(self, fixed: Sequence[str] = RANDOM_TEST_OBJECTS) -> Scene:
        """The fixed objects plus 3 to 14 random objects of other categories."""
        wanted = self.rng.randint(3, 14)
        scene = self.fixed_objects_random_positions(fixed)
        scene.name = "random"
        self._add_random_objects(scene, fixed, wanted, RANDOM_MAX_DRAWS)
        return scene

    def complete_scene(self) -> Scene:
        """A Carton and a Box plus 3 to 14 other objects.

        The extra objects are drawn at ``randint(50, 199) / 150``.
        """
        wanted = self.rng.randint(3, 14)
        scene = self.fixed_objects_random_positions(COMPLETE_SCENE_OBJECTS)
        scene.name = "complete"
        excluded = {label.lower() for label in COMPLETE_SCENE_OBJECTS}
        added = 0
        draws = 0
        while added < wanted and draws < RANDOM_MAX_DRAWS:
            category = self._random_category()
            distance = self.rng.randint(50, 199) / 150.0
            if category.display_name.lower() not in excluded:
                scene.add(category.display_name, distance)
                added += 1
            draws += 1
        return scene

    def generate_test_suite(self, directory: Union[str, Path],
                            sessions: Optional[Dict[str, int]] = None) -> Dict[str, Path]:
        """Write the standard evaluation scene lists into ``directory``.

        Args:
            sessions: Number of sessions per file, keyed by file stem

        Returns:
            File stem -> written path
        """
        counts = {
            "Group_01_Position_Test": 100,
            "Group_02_Position_Test": 80,
            "Group_03_Position_Test": 80,
            "Group_04_Position_Test": 80,
            "Group_01_Objects_Test": 100,
            "Group_02_Objects_Test": 80,
            "Group_03_Objects_Test": 80,
            "Group_04_Objects_Test": 80,
            "Group_Learning_Test": 50,
        }
        if sessions:
            counts.update(sessions)

        directory = Path(directory)
        written: Dict[str, Path] = {}
        for stem, count in counts.items():
            if "Position" in stem:
                scenes = [self.fixed_objects_random_positions() for _ in range(count)]
            else:
                scenes = [self.random_scene() for _ in range(count)]
            written[stem] = save_scene_list(directory / f"{stem}.txt", scenes)
        logger.info(f"Generated {len(written)} scene lists in {directory}")
        return written

    def generate(self, kind: str, count: int = 1) -> List[Scene]:
        """Generate ``count`` scenes of one kind by name."""
        factories = {
            "fixed": self.fixed_scene,
            "positions": self.fixed_objects_random_positions,
            "mixed": self.mixed_scene,
            "random": self.random_scene,
            "complete": self.complete_scene,
        }
        if kind not in factories:
            raise ValueError(f"Unknown scene kind {kind!r}; expected one of {sorted(factories)}")
        return [factories[kind]() for _ in range(count)]
