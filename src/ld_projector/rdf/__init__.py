"""RDF access: dereferencing, quad collection and SPARQL evaluation."""

from .collector import collect
from .dereference import Dereferencer, QuadStream
from .query import QueryEngine, SparqlQueryEngine
from .terms import Quad, Term, quad_to_json, term_to_json, value_of

__all__ = [
    "Dereferencer",
    "Quad",
    "QuadStream",
    "QueryEngine",
    "SparqlQueryEngine",
    "Term",
    "collect",
    "quad_to_json",
    "term_to_json",
    "value_of",
]
