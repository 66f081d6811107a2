"""File formats: scene lists."""

from .scenes import load_scene_list, save_scene_list

__all__ = ["load_scene_list", "save_scene_list"]
