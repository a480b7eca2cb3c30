import asyncio

import pytest
from rdflib import Literal, URIRef

from ld_projector.errors import DereferenceError
from ld_projector.rdf.collector import collect
from ld_projector.rdf.dereference import QuadStream
from ld_projector.rdf.terms import Quad


def _quad(i: int) -> Quad:
    return Quad(URIRef(f"http://e/s{i}"), URIRef("http://e/p"), Literal(str(i)))


async def _source(quads, error: Exception | None = None):
    for q in quads:
        await asyncio.sleep(0)
        yield q
    if error is not None:
        raise error


def test_collect_preserves_arrival_order_and_duplicates():
    quads = [_quad(3), _quad(1), _quad(2), _quad(1)]
    assert asyncio.run(collect(_source(quads))) == quads


def test_collect_empty_source():
    assert asyncio.run(collect(_source([]))) == []


def test_collect_fails_whole_operation_on_mid_stream_error():
    err = DereferenceError("boom", url="http://e/doc")
    with pytest.raises(DereferenceError) as exc:
        asyncio.run(collect(_source([_quad(1), _quad(2)], error=err), url="http://e/doc"))
    assert exc.value is err


def test_collect_wraps_foreign_errors():
    with pytest.raises(DereferenceError) as exc:
        asyncio.run(collect(_source([_quad(1)], error=OSError("reset")), url="http://e/doc"))
    assert exc.value.url == "http://e/doc"
    assert isinstance(exc.value.__cause__, OSError)


def test_quad_stream_is_single_use():
    stream = QuadStream("http://e/doc", "nt", "<http://e/s> <http://e/p> \"x\" .\n")
    first = asyncio.run(collect(stream))
    assert len(first) == 1
    with pytest.raises(RuntimeError):
        asyncio.run(collect(stream))


def test_quad_stream_syntax_error_surfaces_while_consuming():
    stream = QuadStream("http://e/doc", "turtle", "this is not turtle")
    with pytest.raises(DereferenceError):
        asyncio.run(collect(stream))
