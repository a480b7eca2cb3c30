from __future__ import annotations

import httpx

from .settings import settings


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.connect_timeout,
        read=settings.read_timeout,
        write=settings.write_timeout,
        pool=settings.pool_timeout,
    )


def default_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
    )


class HttpClientFactory:
    """Creates httpx clients with sane defaults.

    There is no retry policy: a transient failure surfaces to the caller
    immediately and fails the request that triggered it.
    """

    @staticmethod
    def client(
        headers: dict | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> httpx.AsyncClient:
        base_headers = {"User-Agent": settings.user_agent}
        base_headers.update(headers or {})
        return httpx.AsyncClient(
            headers=base_headers,
            timeout=default_timeout(),
            limits=default_limits(),
            follow_redirects=True,
            transport=transport,
        )
