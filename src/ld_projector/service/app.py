from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ld_projector import __version__
from ld_projector.errors import MissingParameter
from ld_projector.projection.context import VocabularyContext
from ld_projector.projection.pipeline import ProjectionRun, fetch_quads
from ld_projector.projection.shapes import BUSINESS_SHAPE, ENTITY_SHAPE
from ld_projector.rdf.dereference import Dereferencer
from ld_projector.rdf.terms import quad_to_json
from ld_projector.settings import settings

logger = logging.getLogger(__name__)

DEREFERENCE_FAILED = "Something went wrong while getting the URL dereferenced."
PROJECTION_FAILED = "Something went wrong while projecting entities from the URL."


class ErrorOut(BaseModel):
    status: int
    message: str


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content=ErrorOut(status=status, message=message).model_dump())


def create_app(
    transport: httpx.AsyncBaseTransport | None = None,
    context: VocabularyContext | None = None,
) -> FastAPI:
    """Build the HTTP surface.

    ``transport`` replaces the network for every dereference (tests);
    ``context`` overrides the configured vocabulary context.
    """

    app = FastAPI(title="LD Projector", version=__version__)

    async def _project(url: str | None, shape, type_iri: str) -> JSONResponse:
        dereferencer = Dereferencer(transport=transport)
        try:
            records = await ProjectionRun(
                url, dereferencer, shape=shape, type_iri=type_iri, context=context
            ).run()
        except MissingParameter as e:
            return _error(400, str(e))
        except Exception:
            logger.exception(f"Error occurred calculating response for url {url}")
            return _error(500, PROJECTION_FAILED)
        finally:
            await dereferencer.aclose()
        return JSONResponse(records)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/")
    @app.get("/triples")
    async def triples(url: str | None = None):
        dereferencer = Dereferencer(transport=transport)
        try:
            quads = await fetch_quads(url, dereferencer)
        except Exception:
            logger.exception(f"Error occurred calculating response for url {url}")
            return _error(500, DEREFERENCE_FAILED)
        finally:
            await dereferencer.aclose()
        return JSONResponse([quad_to_json(q) for q in quads])

    @app.get("/business")
    async def business(url: str | None = None):
        return await _project(url, BUSINESS_SHAPE, settings.business_type)

    @app.get("/entities")
    async def entities(url: str | None = None, type: str | None = None):
        if not type:
            return _error(400, str(MissingParameter("type")))
        return await _project(url, ENTITY_SHAPE, type)

    return app
