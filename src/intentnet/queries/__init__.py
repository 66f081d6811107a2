"""Query candidates, ranking and the interactive session."""

from .candidates import QueryCandidate, ActionQuery, ObjectQuery, FullQuery
from .ranker import QueryRanker, build_candidates, catalog_candidates, DEFAULT_EPSILON
from .session import QuerySession, AnsweredQuery

__all__ = [
    "QueryCandidate",
    "ActionQuery",
    "ObjectQuery",
    "FullQuery",
    "QueryRanker",
    "build_candidates",
    "catalog_candidates",
    "DEFAULT_EPSILON",
    "QuerySession",
    "AnsweredQuery",
]
