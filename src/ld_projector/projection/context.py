"""Vocabulary context: short property names to canonical IRIs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from rdflib import URIRef
from rdflib.namespace import RDF

from ..errors import UnknownProperty
from ..settings import settings

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
TYPE_NAMES = ("type", "@type", "a")

SCHEMA_TERMS = (
    "name",
    "description",
    "telephone",
    "email",
    "url",
    "image",
    "logo",
    "priceRange",
    "location",
    "address",
    "streetAddress",
    "postalCode",
    "postOfficeBoxNumber",
    "addressLocality",
    "addressRegion",
    "addressCountry",
    "geo",
    "latitude",
    "longitude",
    "openingHoursSpecification",
    "opens",
    "closes",
    "dayOfWeek",
    "validFrom",
    "validThrough",
)


def _is_prefix_iri(value: str) -> bool:
    return value.endswith(("/", "#", ":"))


@dataclass(frozen=True)
class VocabularyContext:
    terms: Mapping[str, str] = field(default_factory=dict)
    prefixes: Mapping[str, str] = field(default_factory=dict)
    vocab: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "terms", MappingProxyType(dict(self.terms)))
        object.__setattr__(self, "prefixes", MappingProxyType(dict(self.prefixes)))

    @classmethod
    def from_jsonld(cls, ctx: Mapping[str, Any]) -> "VocabularyContext":
        """Build a context from a JSON-LD ``@context`` object.

        Term values may be IRIs, CURIEs over prefixes declared in the same
        context, or ``{"@id": ...}`` definitions. Other keywords are ignored.
        """
        vocab = ctx.get("@vocab")
        raw: dict[str, str] = {}
        for key, value in ctx.items():
            if key.startswith("@"):
                continue
            if isinstance(value, Mapping):
                value = value.get("@id")
            if isinstance(value, str):
                raw[key] = value

        prefixes = {k: v for k, v in raw.items() if ":" not in k and _is_prefix_iri(v)}

        def expand(value: str) -> str:
            head, sep, tail = value.partition(":")
            if sep and head in prefixes and not tail.startswith("//"):
                return prefixes[head] + tail
            return value

        terms = {k: expand(v) for k, v in raw.items() if k not in prefixes}
        return cls(terms=terms, prefixes=prefixes, vocab=vocab)

    def resolve(self, name: str) -> URIRef:
        if name in TYPE_NAMES:
            return RDF.type
        if name in self.terms:
            return URIRef(self.terms[name])
        prefix, sep, local = name.partition(":")
        if sep and prefix in self.prefixes:
            return URIRef(self.prefixes[prefix] + local)
        if self.vocab and name and not sep:
            return URIRef(self.vocab + name)
        raise UnknownProperty(name)

    def __contains__(self, name: str) -> bool:
        try:
            self.resolve(name)
        except UnknownProperty:
            return False
        return True


def default_context(vocab_base: str | None = None) -> VocabularyContext:
    """The built-in schema.org context used for business projection."""
    base = vocab_base or settings.vocab_base
    return VocabularyContext(
        terms={t: base + t for t in SCHEMA_TERMS},
        prefixes={"schema": base, "rdf": RDF_NS},
    )


@lru_cache(maxsize=8)
def load_context(path: str) -> VocabularyContext:
    data = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    ctx = data.get("@context", data) if isinstance(data, dict) else data
    if not isinstance(ctx, dict):
        raise ValueError(f"{path}: expected a JSON-LD context object")
    return VocabularyContext.from_jsonld(ctx)


def active_context() -> VocabularyContext:
    if settings.context_path:
        return load_context(settings.context_path)
    return default_context()
