"""Request-scoped pipelines: raw quads, and entity enumeration + projection."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import MissingParameter
from ..rdf.collector import collect
from ..rdf.dereference import Dereferencer
from ..rdf.query import SparqlQueryEngine
from ..rdf.terms import Quad
from ..settings import settings
from .context import VocabularyContext, active_context
from .enumerator import EntityEnumerator
from .paths import PathEvaluator
from .projector import RecordProjector
from .shapes import BUSINESS_SHAPE, RecordShape

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    PROJECTING = "projecting"
    DONE = "done"
    FAILED = "failed"


def require_url(url: str | None) -> str:
    if url is None or not url.strip():
        raise MissingParameter("url")
    return url.strip()


async def fetch_quads(
    url: str | None, dereferencer: Dereferencer, headers: dict[str, str] | None = None
) -> list[Quad]:
    url = require_url(url)
    stream = await dereferencer.dereference(url, headers=headers)
    return await collect(stream, url=url)


@dataclass
class ProjectionRun:
    """One linear, non-resumable enumerate-then-project pass over a source.

    Entities are projected one after another in enumeration order. Any
    failure aborts the run and no records are kept.
    """

    url: str | None
    dereferencer: Dereferencer
    shape: RecordShape = BUSINESS_SHAPE
    type_iri: str = field(default_factory=lambda: settings.business_type)
    context: VocabularyContext | None = None
    headers: dict[str, str] = field(default_factory=dict)
    reuse_source: bool = field(default_factory=lambda: settings.reuse_source)
    union_graphs: bool = field(default_factory=lambda: settings.union_graphs)

    state: RunState = RunState.IDLE
    position: int = 0
    records: list[dict[str, Any]] = field(default_factory=list)

    async def run(self) -> list[dict[str, Any]]:
        if self.state is not RunState.IDLE:
            raise RuntimeError(f"projection run for {self.url} already {self.state.value}")
        try:
            url = require_url(self.url)
        except MissingParameter:
            self.state = RunState.FAILED
            raise

        t0 = time.perf_counter()
        engine = SparqlQueryEngine(
            url,
            self.dereferencer,
            headers=self.headers,
            reuse_source=self.reuse_source,
            union_graphs=self.union_graphs,
        )
        projector = RecordProjector(PathEvaluator(engine, self.context or active_context()))
        try:
            self.state = RunState.ENUMERATING
            entities = [e async for e in EntityEnumerator(engine).find_entities(self.type_iri)]

            self.state = RunState.PROJECTING
            for i, entity in enumerate(entities, start=1):
                self.position = i
                self.records.append(await projector.project(entity, self.shape))
        except Exception:
            self.state = RunState.FAILED
            self.records = []
            raise

        self.state = RunState.DONE
        logger.info(
            f"Projected {len(self.records)} <{self.type_iri}> records from {url} "
            f"({engine.queries_executed} queries, {(time.perf_counter() - t0) * 1000:.1f} ms)"
        )
        return self.records


async def project_businesses(
    url: str | None,
    dereferencer: Dereferencer,
    *,
    context: VocabularyContext | None = None,
    reuse_source: bool | None = None,
) -> list[dict[str, Any]]:
    run = ProjectionRun(
        url,
        dereferencer,
        context=context,
        reuse_source=settings.reuse_source if reuse_source is None else reuse_source,
    )
    return await run.run()
