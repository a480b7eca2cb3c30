from __future__ import annotations

import logging
from typing import AsyncIterable

from ..errors import DereferenceError, LinkedDataError
from .terms import Quad

logger = logging.getLogger(__name__)


async def collect(source: AsyncIterable[Quad], *, url: str | None = None) -> list[Quad]:
    """Materialize a quad stream in arrival order.

    Either the whole sequence is returned or the first error is raised;
    quads gathered before the error are dropped.
    """

    # reusing a consumed stream raises here, outside source-error handling
    stream = aiter(source)
    quads: list[Quad] = []
    try:
        async for quad in stream:
            quads.append(quad)
    except LinkedDataError:
        logger.warning(f"Failed to pass through url {url}")
        raise
    except Exception as e:
        logger.warning(f"Failed to pass through url {url}")
        raise DereferenceError(f"quad stream failed: {e}", url=url) from e
    return quads
