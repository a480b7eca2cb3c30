"""Request-scoped SPARQL engine over a dereferenced source."""

from __future__ import annotations

import asyncio
import logging
import re
import sys
from dataclasses import dataclass
from typing import AsyncIterator, Mapping, Protocol

from rdflib import BNode, Dataset, Graph, URIRef

from ..errors import QueryFailure
from ..settings import settings
from .collector import collect
from .dereference import Dereferencer
from .terms import Quad, Term

logger = logging.getLogger(__name__)

BindingSet = dict[str, Term]
Statement = tuple[Term, URIRef, Term]

_ORDER_BY = re.compile(r"\border\s+by\b", re.IGNORECASE)


class QueryEngine(Protocol):
    """Graph-pattern query capability bound to one source."""

    def execute(
        self, query_text: str, bindings: Mapping[str, Term] | None = None
    ) -> AsyncIterator[BindingSet]: ...

    def objects(self, subject: Term, predicate: URIRef) -> AsyncIterator[Term]: ...


@dataclass
class SourceGraph:
    """A materialized source plus the document order of its statements.

    Blank nodes are relabelled by first appearance, so parsing the same
    document twice yields the same labels. rdflib's memory store answers
    patterns from hash sets: step results are re-sorted by the arrival of
    their statement, generic rows by where their bound terms first appear.

    Only the default graph is visible unless ``union_graphs`` is set.
    """

    dataset: Dataset
    graph: Graph
    statement_ranks: dict[Statement, int]
    term_ranks: dict[Term, int]

    @classmethod
    def from_quads(cls, quads: list[Quad], *, union_graphs: bool = False) -> "SourceGraph":
        ds = Dataset(default_union=union_graphs)
        labels: dict[BNode, BNode] = {}

        def stable(term):
            if isinstance(term, BNode):
                if term not in labels:
                    labels[term] = BNode(f"b{len(labels)}")
                return labels[term]
            return term

        statement_ranks: dict[Statement, int] = {}
        term_ranks: dict[Term, int] = {}
        for i, q in enumerate(quads):
            triple = (stable(q.subject), q.predicate, stable(q.object))
            name = stable(q.graph)
            if name is None:
                ds.add(triple)
            else:
                ds.graph(name).add(triple)
            if name is None or union_graphs:
                statement_ranks.setdefault(triple, i)
            for offset, term in enumerate(triple):
                term_ranks.setdefault(term, 3 * i + offset)

        graph = ds if union_graphs else ds.default_context
        return cls(dataset=ds, graph=graph, statement_ranks=statement_ranks, term_ranks=term_ranks)

    def query(self, query_text: str, bindings: Mapping[str, Term] | None = None) -> list[BindingSet]:
        result = self.graph.query(query_text, initBindings=dict(bindings or {}))
        variables = [str(v) for v in (result.vars or [])]
        rows: list[BindingSet] = []
        for row in result:
            rows.append({str(k): v for k, v in row.asdict().items() if v is not None})
        if not _ORDER_BY.search(query_text):
            rows.sort(key=lambda r: tuple(self.term_ranks.get(r.get(v), sys.maxsize) for v in variables))
        return rows

    def objects(self, subject: Term, predicate: URIRef) -> list[Term]:
        ranked = [
            (self.statement_ranks.get((s, p, o), sys.maxsize), o)
            for s, p, o in self.graph.triples((subject, predicate, None))
        ]
        ranked.sort(key=lambda pair: pair[0])
        return [o for _, o in ranked]


class SparqlQueryEngine:
    """Evaluates SPARQL SELECT queries with rdflib against one source URL.

    The engine belongs to a single request. With ``reuse_source`` the
    source is dereferenced once and the graph reused for every query;
    without it each query dereferences the source again. Blank-node
    labels are stable across those re-reads of an unchanged document.
    """

    def __init__(
        self,
        url: str,
        dereferencer: Dereferencer | None,
        *,
        headers: dict[str, str] | None = None,
        reuse_source: bool = True,
        union_graphs: bool | None = None,
    ):
        self.url = url
        self.headers = dict(headers or {})
        self.reuse_source = reuse_source
        self.union_graphs = settings.union_graphs if union_graphs is None else union_graphs
        self._dereferencer = dereferencer
        self._source: SourceGraph | None = None
        self.queries_executed = 0

    @classmethod
    def from_quads(
        cls,
        quads: list[Quad],
        url: str = "urn:ld-projector:memory",
        *,
        union_graphs: bool = False,
    ) -> "SparqlQueryEngine":
        """Engine over an already materialized graph; never dereferences."""
        engine = cls(url, dereferencer=None, union_graphs=union_graphs)
        engine._source = SourceGraph.from_quads(quads, union_graphs=union_graphs)
        return engine

    async def _load(self) -> SourceGraph:
        if self._source is not None:
            return self._source
        if self._dereferencer is None:
            raise QueryFailure("engine has neither a graph nor a dereferencer", url=self.url)
        stream = await self._dereferencer.dereference(self.url, headers=self.headers)
        source = SourceGraph.from_quads(
            await collect(stream, url=self.url), union_graphs=self.union_graphs
        )
        if self.reuse_source:
            self._source = source
        return source

    async def _run(self, fn, *args):
        source = await self._load()
        self.queries_executed += 1
        try:
            return await asyncio.to_thread(getattr(source, fn), *args)
        except Exception as e:
            logger.error(f"Query against {self.url} failed: {e}")
            raise QueryFailure(f"query failed: {e}", url=self.url) from e

    async def execute(
        self, query_text: str, bindings: Mapping[str, Term] | None = None
    ) -> AsyncIterator[BindingSet]:
        for row in await self._run("query", query_text, bindings):
            yield row

    async def objects(self, subject: Term, predicate: URIRef) -> AsyncIterator[Term]:
        """Terms linked from ``subject`` by ``predicate``, in statement order."""
        for term in await self._run("objects", subject, predicate):
            yield term
