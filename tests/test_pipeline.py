import asyncio

import pytest

from ld_projector.errors import DereferenceError, MissingParameter
from ld_projector.projection.enumerator import EntityEnumerator
from ld_projector.projection.pipeline import ProjectionRun, RunState, fetch_quads, project_businesses
from ld_projector.projection.shapes import ENTITY_SHAPE
from ld_projector.rdf.dereference import Dereferencer
from ld_projector.rdf.query import SparqlQueryEngine

from .conftest import BUSINESS_URL, FakeWeb

EX = "http://example.org/"


def _run(coro_factory, web: FakeWeb):
    async def run():
        d = Dereferencer(transport=web.transport)
        try:
            return await coro_factory(d)
        finally:
            await d.aclose()

    return asyncio.run(run())


def test_enumerates_entities_of_type(web):
    async def find(d):
        engine = SparqlQueryEngine(BUSINESS_URL, d)
        return [e async for e in EntityEnumerator(engine).find_entities("http://schema.org/LocalBusiness")]

    entities = _run(find, web)
    assert [str(e) for e in entities] == [EX + "biz1", EX + "biz2"]


def test_project_businesses_end_to_end(web):
    records = _run(lambda d: project_businesses(BUSINESS_URL, d), web)
    assert [r["name"] for r in records] == ["Cafe", "Bakery"]
    assert len(records[0]["openingHoursSpecifications"]) == 2
    assert len(web.requests) == 1


def test_without_source_reuse_every_query_refetches(web):
    records = _run(lambda d: project_businesses(BUSINESS_URL, d, reuse_source=False), web)
    assert len(records) == 2
    assert len(web.requests) > 1


def test_source_reuse_does_not_change_records(web):
    reused = _run(lambda d: project_businesses(BUSINESS_URL, d, reuse_source=True), web)
    refetched = _run(lambda d: project_businesses(BUSINESS_URL, d, reuse_source=False), web)
    assert refetched == reused
    assert refetched[0]["location"]["geo"]["latitude"] == "51.05"


def test_generic_entity_projection(web):
    async def run(d):
        return await ProjectionRun(
            BUSINESS_URL, d, shape=ENTITY_SHAPE, type_iri="http://schema.org/Person"
        ).run()

    assert _run(run, web) == [{"uri": EX + "person1", "types": ["http://schema.org/Person"], "name": "Ada"}]


def test_run_states_and_single_use(web):
    async def run(d):
        pr = ProjectionRun(BUSINESS_URL, d)
        assert pr.state is RunState.IDLE
        records = await pr.run()
        assert pr.state is RunState.DONE
        assert pr.position == len(records)
        with pytest.raises(RuntimeError):
            await pr.run()
        return records

    assert len(_run(run, web)) == 2


def test_failed_run_keeps_no_records():
    web = FakeWeb()
    web.unreachable.add(BUSINESS_URL)

    async def run(d):
        pr = ProjectionRun(BUSINESS_URL, d)
        with pytest.raises(DereferenceError):
            await pr.run()
        return pr

    pr = _run(run, web)
    assert pr.state is RunState.FAILED
    assert pr.records == []


@pytest.mark.parametrize("url", [None, "", "   "])
def test_missing_url_is_rejected_before_io(web, url):
    with pytest.raises(MissingParameter):
        _run(lambda d: project_businesses(url, d), web)
    with pytest.raises(MissingParameter):
        _run(lambda d: fetch_quads(url, d), web)
    assert web.requests == []


def test_fetch_quads(web):
    quads = _run(lambda d: fetch_quads(BUSINESS_URL, d), web)
    assert len(quads) > 10
