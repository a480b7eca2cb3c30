import json

import pytest
from rdflib import URIRef
from rdflib.namespace import RDF

from ld_projector.errors import UnknownProperty
from ld_projector.projection.context import VocabularyContext, default_context, load_context


def test_default_context_resolves_schema_terms():
    ctx = default_context()
    assert ctx.resolve("name") == URIRef("http://schema.org/name")
    assert ctx.resolve("openingHoursSpecification") == URIRef("http://schema.org/openingHoursSpecification")
    assert ctx.resolve("type") == RDF.type
    assert ctx.resolve("schema:sameAs") == URIRef("http://schema.org/sameAs")


def test_unknown_name_is_rejected():
    ctx = default_context()
    with pytest.raises(UnknownProperty) as exc:
        ctx.resolve("favouriteColour")
    assert exc.value.name == "favouriteColour"
    assert "favouriteColour" not in ctx


def test_from_jsonld_expands_curies_and_id_definitions():
    ctx = VocabularyContext.from_jsonld(
        {
            "foaf": "http://xmlns.com/foaf/0.1/",
            "nick": "foaf:nick",
            "knows": {"@id": "foaf:knows", "@type": "@id"},
            "homepage": "http://xmlns.com/foaf/0.1/homepage",
        }
    )
    assert ctx.resolve("nick") == URIRef("http://xmlns.com/foaf/0.1/nick")
    assert ctx.resolve("knows") == URIRef("http://xmlns.com/foaf/0.1/knows")
    assert ctx.resolve("homepage") == URIRef("http://xmlns.com/foaf/0.1/homepage")
    assert ctx.resolve("foaf:mbox") == URIRef("http://xmlns.com/foaf/0.1/mbox")
    with pytest.raises(UnknownProperty):
        ctx.resolve("name")


def test_vocab_fallback_only_when_declared():
    ctx = VocabularyContext.from_jsonld({"@vocab": "http://schema.org/"})
    assert ctx.resolve("servesCuisine") == URIRef("http://schema.org/servesCuisine")


def test_context_is_read_only():
    ctx = default_context()
    with pytest.raises(TypeError):
        ctx.terms["name"] = "http://evil/"


def test_load_context_from_file(tmp_path):
    path = tmp_path / "ctx.jsonld"
    path.write_text(json.dumps({"@context": {"label": "http://www.w3.org/2000/01/rdf-schema#label"}}))
    ctx = load_context(str(path))
    assert ctx.resolve("label") == URIRef("http://www.w3.org/2000/01/rdf-schema#label")
