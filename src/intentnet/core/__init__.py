"""Core types and enums for intentnet."""

from .enums import (
    Category,
    Action,
    NodeKind,
    QueryKind,
    SessionState,
    RankingPolicy,
    TieBreak,
)

from .types import (
    Observation,
    Scene,
    Intention,
    SessionRecord,
)

from .exceptions import (
    IntentNetError,
    UnknownCategoryError,
    InvalidSceneError,
    SceneFileError,
    NoCandidatesError,
    SessionClosedError,
)

from .affordances import AffordanceCatalog, DEFAULT_AFFORDANCES

__all__ = [
    # Enums
    "Category",
    "Action",
    "NodeKind",
    "QueryKind",
    "SessionState",
    "RankingPolicy",
    "TieBreak",
    # Types
    "Observation",
    "Scene",
    "Intention",
    "SessionRecord",
    # Errors
    "IntentNetError",
    "UnknownCategoryError",
    "InvalidSceneError",
    "SceneFileError",
    "NoCandidatesError",
    "SessionClosedError",
    # Knowledge
    "AffordanceCatalog",
    "DEFAULT_AFFORDANCES",
]
