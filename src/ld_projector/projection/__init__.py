"""Projection of RDF entities into fixed-shape JSON records."""

from .context import VocabularyContext, active_context, default_context, load_context
from .enumerator import EntityEnumerator
from .paths import Path, PathEvaluator
from .pipeline import ProjectionRun, RunState, fetch_quads, project_businesses
from .projector import RecordProjector
from .shapes import BUSINESS_SHAPE, ENTITY_SHAPE, Gated, Nested, RecordShape, Repeated, Scalar, Types

__all__ = [
    "BUSINESS_SHAPE",
    "ENTITY_SHAPE",
    "EntityEnumerator",
    "Gated",
    "Nested",
    "Path",
    "PathEvaluator",
    "ProjectionRun",
    "RecordProjector",
    "RecordShape",
    "Repeated",
    "RunState",
    "Scalar",
    "Types",
    "VocabularyContext",
    "active_context",
    "default_context",
    "fetch_quads",
    "load_context",
    "project_businesses",
]
