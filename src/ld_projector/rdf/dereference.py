"""Dereference a URL into a live stream of quads.

The body is fetched with httpx and parsed with rdflib. HTML pages are
scanned for embedded ``<script type="application/ld+json">`` blocks;
each block is parsed as a separate JSON-LD document against the page URL.
"""

from __future__ import annotations

import asyncio
import logging
from html.parser import HTMLParser
from typing import AsyncIterator
from urllib.parse import urlparse

import httpx
from rdflib import Dataset, Graph
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.plugins.stores.memory import Memory
from rdflib.util import guess_format

from ..errors import DereferenceError
from ..http import HttpClientFactory
from ..settings import settings
from .terms import Quad

logger = logging.getLogger(__name__)

_MEDIA_TYPE_FORMATS = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/n-triples": "nt",
    "application/n-quads": "nquads",
    "application/trig": "trig",
    "application/rdf+xml": "xml",
    "text/n3": "n3",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
}
_HTML_MEDIA_TYPES = {"text/html", "application/xhtml+xml"}
_QUAD_FORMATS = {"nquads", "trig", "json-ld"}


class _JsonLdScriptCollector(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.blocks: list[str] = []
        self._buf: list[str] | None = None

    def handle_starttag(self, tag, attrs):
        if tag != "script":
            return
        kind = (dict(attrs).get("type") or "").split(";")[0].strip().lower()
        if kind == "application/ld+json":
            self._buf = []

    def handle_data(self, data):
        if self._buf is not None:
            self._buf.append(data)

    def handle_endtag(self, tag):
        if tag == "script" and self._buf is not None:
            self.blocks.append("".join(self._buf))
            self._buf = None


def extract_json_ld_blocks(html: str) -> list[str]:
    collector = _JsonLdScriptCollector()
    collector.feed(html)
    collector.close()
    return [b for b in collector.blocks if b.strip()]


def _format_for(media_type: str, url: str) -> str | None:
    if media_type in _HTML_MEDIA_TYPES:
        return "html"
    fmt = _MEDIA_TYPE_FORMATS.get(media_type)
    if fmt:
        return fmt
    guessed = guess_format(urlparse(url).path)
    if guessed == "rdfa":
        return "html"
    return guessed


class _ArrivalRecorder(Memory):
    """Memory store that keeps every asserted statement in the order parsers add it.

    The store itself is set based; ``arrivals`` keeps document order and
    repeated statements.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.arrivals: list[tuple[tuple, object]] = []

    def add(self, triple, context, quoted=False):
        if not quoted:
            self.arrivals.append((triple, getattr(context, "identifier", context)))
        super().add(triple, context, quoted)


def _parse_document(data: str | bytes, fmt: str, base: str) -> list[Quad]:
    store = _ArrivalRecorder()
    if fmt not in _QUAD_FORMATS:
        Graph(store=store).parse(data=data, format=fmt, publicID=base)
        return [Quad(s, p, o) for (s, p, o), _ in store.arrivals]

    Dataset(store=store).parse(data=data, format=fmt, publicID=base)
    quads = []
    for (s, p, o), name in store.arrivals:
        if name == DATASET_DEFAULT_GRAPH_ID:
            name = None
        quads.append(Quad(s, p, o, name))
    return quads


class QuadStream:
    """Finite, single-use async sequence of the quads of one document.

    Parsing happens while the stream is consumed, so a syntax error shows
    up as a ``DereferenceError`` raised mid-iteration.
    """

    def __init__(self, url: str, fmt: str, body: str | bytes, base: str | None = None):
        self.url = url
        self.format = fmt
        self.base = base or url
        self._body = body
        self._consumed = False

    def _documents(self) -> list[tuple[str | bytes, str]]:
        if self.format != "html":
            return [(self._body, self.format)]
        html = self._body.decode("utf-8", errors="replace") if isinstance(self._body, bytes) else self._body
        return [(block, "json-ld") for block in extract_json_ld_blocks(html)]

    def __aiter__(self) -> AsyncIterator[Quad]:
        if self._consumed:
            raise RuntimeError(f"quad stream for {self.url} was already consumed")
        self._consumed = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Quad]:
        for data, fmt in self._documents():
            try:
                quads = await asyncio.to_thread(_parse_document, data, fmt, self.base)
            except Exception as e:
                raise DereferenceError(f"could not parse {self.url} as {fmt}: {e}", url=self.url) from e
            for quad in quads:
                yield quad


class Dereferencer:
    """Fetches a source document and exposes it as a ``QuadStream``.

    The ``Accept`` header defaults to ``text/html``; caller headers win.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        accept: str | None = None,
        max_body_bytes: int | None = None,
    ):
        self._owns_client = client is None
        self._client = client or HttpClientFactory.client(transport=transport)
        self.accept = accept or settings.accept_header
        self.max_body_bytes = max_body_bytes or settings.max_body_bytes

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def _read_limited(self, r: httpx.Response, url: str) -> bytes:
        chunks: list[bytes] = []
        size = 0
        async for chunk in r.aiter_bytes():
            size += len(chunk)
            if size > self.max_body_bytes:
                raise DereferenceError(f"body of {url} exceeds {self.max_body_bytes} bytes", url=url)
            chunks.append(chunk)
        return b"".join(chunks)

    async def dereference(self, url: str, headers: dict[str, str] | None = None) -> QuadStream:
        request_headers = {"Accept": self.accept}
        request_headers.update(headers or {})
        try:
            async with self._client.stream("GET", url, headers=request_headers) as r:
                r.raise_for_status()
                content = await self._read_limited(r, url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Failed to fetch url {url}: {e}")
            raise DereferenceError(f"could not fetch {url}: {e}", url=url) from e

        final_url = str(r.url)
        media_type = r.headers.get("content-type", "").split(";")[0].strip().lower()
        fmt = _format_for(media_type, final_url)
        if fmt is None:
            raise DereferenceError(f"no RDF parser for media type {media_type!r}", url=url)

        body: str | bytes = content
        if fmt in ("html", "json-ld"):
            body = content.decode(r.encoding or "utf-8", errors="replace")
        logger.debug(f"Dereferenced {url} ({media_type or 'unknown'} -> {fmt})")
        return QuadStream(url=url, fmt=fmt, body=body, base=final_url)
