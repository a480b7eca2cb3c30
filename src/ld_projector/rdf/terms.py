"""RDF terms, quads and their scalar/JSON projections.

Terms are plain rdflib terms: ``URIRef`` for named nodes, ``Literal`` and
``BNode``. A quad's graph is ``None`` when the statement lives in the
default graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF, XSD

Term = Union[URIRef, Literal, BNode]


@dataclass(frozen=True, slots=True)
class Quad:
    subject: URIRef | BNode
    predicate: URIRef
    object: Term
    graph: URIRef | BNode | None = None

    def __post_init__(self) -> None:
        if isinstance(self.subject, Literal):
            raise ValueError(f"literal {self.subject!r} cannot be a quad subject")
        if not isinstance(self.predicate, URIRef):
            raise ValueError(f"predicate must be a named node, got {self.predicate!r}")


def value_of(term: Term | None) -> str | None:
    """Scalar value of a term: lexical form, IRI or blank node id."""
    if term is None:
        return None
    return str(term)


def term_type(term: Term | None) -> str:
    if term is None:
        return "DefaultGraph"
    if isinstance(term, Literal):
        return "Literal"
    if isinstance(term, BNode):
        return "BlankNode"
    return "NamedNode"


def term_to_json(term: Term | None) -> dict[str, Any]:
    """RDF/JS-style JSON object for a term (``None`` is the default graph)."""
    if term is None:
        return {"termType": "DefaultGraph", "value": ""}
    out: dict[str, Any] = {"termType": term_type(term), "value": str(term)}
    if isinstance(term, Literal):
        if term.datatype is not None:
            datatype = term.datatype
        elif term.language:
            datatype = RDF.langString
        else:
            datatype = XSD.string
        out["language"] = term.language or ""
        out["datatype"] = {"termType": "NamedNode", "value": str(datatype)}
    return out


def quad_to_json(quad: Quad) -> dict[str, Any]:
    return {
        "subject": term_to_json(quad.subject),
        "predicate": term_to_json(quad.predicate),
        "object": term_to_json(quad.object),
        "graph": term_to_json(quad.graph),
    }
