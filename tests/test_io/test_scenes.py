"""Tests for scene-list files."""

import logging

import pytest

from intentnet.core import Scene, SceneFileError
from intentnet.io import load_scene_list, save_scene_list


SAMPLE = """2

0
2
       Box 0.42
       Cup 0.3

1
1
    Carton 0.7
"""


class TestLoad:
    def test_sample(self, tmp_path):
        path = tmp_path / "scenes.txt"
        path.write_text(SAMPLE)
        scenes = load_scene_list(path)

        assert len(scenes) == 2
        assert scenes[0].name == "0"
        assert [(o.label, o.distance) for o in scenes[0]] == [("Box", 0.42), ("Cup", 0.3)]
        assert [(o.label, o.distance) for o in scenes[1]] == [("Carton", 0.7)]

    def test_blank_lines_are_optional(self, tmp_path):
        path = tmp_path / "compact.txt"
        path.write_text("1\n0\n1\nTub 0.5\n")
        assert len(load_scene_list(path)[0]) == 1

    def test_trailing_content_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "extra.txt"
        path.write_text(SAMPLE + "\nleftover\n")
        with caplog.at_level(logging.WARNING):
            scenes = load_scene_list(path)
        assert len(scenes) == 2
        assert "ignoring content" in caplog.text

    def test_round_trip(self, tmp_path):
        scenes = [
            Scene.from_pairs([("Box", 0.42), ("SprayCan", 0.25)]),
            Scene.from_pairs([("Tub", 0.996)]),
        ]
        path = save_scene_list(tmp_path / "out" / "scenes.txt", scenes)
        loaded = load_scene_list(path)

        assert [s.name for s in loaded] == ["0", "1"]
        for original, restored in zip(scenes, loaded):
            assert [(o.label, o.distance) for o in original] == [(o.label, o.distance) for o in restored]

    def test_written_layout(self, tmp_path):
        path = save_scene_list(tmp_path / "layout.txt", [Scene.from_pairs([("Box", 0.5)])])
        assert path.read_text() == "1\n\n0\n1\n       Box 0.5\n\n"


class TestMalformed:
    @pytest.mark.parametrize("text, line", [
        ("", 0),
        ("two\n", 1),
        ("0\n", 1),
        ("1\n\nx\n1\nBox 0.5\n", 3),
        ("1\n0\n-1\nBox 0.5\n", 3),
        ("1\n0\n2\nBox 0.5\n", 4),
        ("1\n0\n1\nBox\n", 4),
        ("1\n0\n1\nBox 0.5 extra\n", 4),
        ("1\n0\n1\nBox far\n", 4),
        ("1\n0\n1\nBox 0\n", 4),
        ("1\n0\n1\nBox nan\n", 4),
    ])
    def test_errors_name_the_line(self, tmp_path, text, line):
        path = tmp_path / "bad.txt"
        path.write_text(text)
        with pytest.raises(SceneFileError) as excinfo:
            load_scene_list(path)
        assert excinfo.value.line_number == line
        assert str(path) in str(excinfo.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneFileError):
            load_scene_list(tmp_path / "missing.txt")
