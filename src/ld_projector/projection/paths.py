"""Property paths and their evaluation against a query engine.

A ``Path`` is an ordered list of property names. ``PathEvaluator`` walks
it one step (one engine lookup) at a time; an intermediate step with
several bindings fans out and the remaining path is evaluated for each
binding in statement order, so results come out depth-first, left to right.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterator

from rdflib import Literal, URIRef

from ..errors import UnknownProperty
from ..rdf.query import QueryEngine
from ..rdf.terms import Term
from .context import VocabularyContext


@dataclass(frozen=True, slots=True)
class Path:
    segments: tuple[str, ...]

    def __post_init__(self):
        if not self.segments or not all(self.segments):
            raise UnknownProperty(".".join(self.segments))

    @classmethod
    def of(cls, *segments: str) -> "Path":
        return cls(tuple(segments))

    @classmethod
    def parse(cls, text: str) -> "Path":
        return cls(tuple(text.split(".")))

    def __str__(self) -> str:
        return ".".join(self.segments)


def as_path(value: Path | str) -> Path:
    return value if isinstance(value, Path) else Path.parse(value)


class PathEvaluator:
    def __init__(self, engine: QueryEngine, context: VocabularyContext):
        self.engine = engine
        self.context = context

    def resolve(self, path: Path) -> tuple[URIRef, ...]:
        return tuple(self.context.resolve(s) for s in path.segments)

    async def evaluate(self, start: Term | None, path: Path | str) -> AsyncIterator[Term]:
        # resolve up front: a bad path is an error even when data is absent
        predicates = self.resolve(as_path(path))
        async for term in self._walk(start, predicates):
            yield term

    async def _walk(self, start: Term | None, predicates: tuple[URIRef, ...]) -> AsyncIterator[Term]:
        if start is None or isinstance(start, Literal):
            return
        head, rest = predicates[0], predicates[1:]
        async for term in self.engine.objects(start, head):
            if not rest:
                yield term
                continue
            async for leaf in self._walk(term, rest):
                yield leaf

    async def evaluate_one(self, start: Term | None, path: Path | str) -> Term | None:
        terms = self.evaluate(start, path)
        try:
            async for term in terms:
                return term
        finally:
            await terms.aclose()
        return None

    async def evaluate_all(self, start: Term | None, path: Path | str) -> list[Term]:
        return [term async for term in self.evaluate(start, path)]
