"""Scene-list files.

Layout:

    N                   number of sessions
                        (blank)
    0                   session index
    3                   object count
        Box 0.42        one "name distance" line per object
       Cup 0.3
       Tub 0.9
                        (blank line between sessions)
    1
    ...

Blank lines are separators only. Any malformed record aborts the load
with a SceneFileError naming the offending line.
"""

import logging
import math
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple, Union

from intentnet.core.exceptions import SceneFileError
from intentnet.core.types import Scene


logger = logging.getLogger(__name__)


def _content_lines(text: str) -> Iterator[Tuple[int, str]]:
    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped:
            yield line_number, stripped


def _parse_count(path: str, line_number: int, text: str, what: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise SceneFileError(path, line_number, f"expected {what}, got {text!r}")
    if value <= 0:
        raise SceneFileError(path, line_number, f"{what} must be positive, got {value}")
    return value


def load_scene_list(path: Union[str, Path]) -> List[Scene]:
    """Read every session of a scene-list file.

    Raises:
        SceneFileError: the file is missing or malformed
    """
    path_str = str(path)
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise SceneFileError(path_str, 0, f"cannot read file: {e}")

    lines = _content_lines(text)
    last_line = 0

    def next_line(expected: str) -> Tuple[int, str]:
        try:
            return next(lines)
        except StopIteration:
            raise SceneFileError(path_str, last_line, f"unexpected end of file, expected {expected}")

    last_line, header = next_line("session count")
    session_count = _parse_count(path_str, last_line, header, "session count")

    scenes: List[Scene] = []
    for _ in range(session_count):
        last_line, index_text = next_line("session index")
        try:
            session_index = int(index_text)
        except ValueError:
            raise SceneFileError(path_str, last_line, f"expected session index, got {index_text!r}")

        last_line, count_text = next_line("object count")
        object_count = _parse_count(path_str, last_line, count_text, "object count")

        scene = Scene(name=str(session_index))
        for _ in range(object_count):
            last_line, record = next_line("object line")
            fields = record.split()
            if len(fields) != 2:
                raise SceneFileError(path_str, last_line, f"expected 'name distance', got {record!r}")
            name, distance_text = fields
            try:
                distance = float(distance_text)
            except ValueError:
                raise SceneFileError(path_str, last_line, f"invalid distance {distance_text!r}")
            if not math.isfinite(distance) or distance <= 0:
                raise SceneFileError(path_str, last_line, f"distance must be positive, got {distance}")
            scene.add(name, distance)
        scenes.append(scene)

    for line_number, extra in lines:
        logger.warning(f"{path_str}:{line_number}: ignoring content after the last session: {extra!r}")
        break

    logger.info(f"Loaded {len(scenes)} scenes from {path_str}")
    return scenes


def save_scene_list(path: Union[str, Path], scenes: Sequence[Scene]) -> Path:
    """Write scenes in the layout read by ``load_scene_list``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(f"{len(scenes)}\n\n")
        for i, scene in enumerate(scenes):
            f.write(f"{i}\n")
            f.write(f"{len(scene)}\n")
            for observation in scene:
                f.write(f"{observation.label:>10s} {observation.distance:.5g}\n")
            f.write("\n")
    logger.info(f"Saved {len(scenes)} scenes to {path}")
    return path
