from __future__ import annotations

from typing import AsyncIterator

from rdflib import URIRef

from ..rdf.query import QueryEngine
from ..rdf.terms import Term


def entities_of_type_query(type_iri: str) -> str:
    return f"SELECT DISTINCT ?entity WHERE {{ ?entity a {URIRef(type_iri).n3()} }}"


class EntityEnumerator:
    """Finds the starting entities of a projection with a single query.

    Results come back in engine order; callers that need a stable order
    across engines must sort.
    """

    def __init__(self, engine: QueryEngine):
        self.engine = engine

    async def find_entities(self, type_iri: str) -> AsyncIterator[Term]:
        async for row in self.engine.execute(entities_of_type_query(type_iri)):
            entity = row.get("entity")
            if entity is not None:
                yield entity
