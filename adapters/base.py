"""Utility helpers for adapters."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class GraphQLTransport(Protocol):
    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]: ...


@asynccontextmanager
async def tracked_call(source: str, endpoint: str):
    """Log status, size and latency of an upstream API call.

    Parameters
    ----------
    source:
        Identifier for the calling adapter, e.g. ``"github"``.
    endpoint:
        Endpoint or URL being hit.

    Usage::

        async with tracked_call("github", url) as log:
            resp = await client.post(url, json=payload)
            log(resp)

    Calls that raise, or never hand a response to ``log``, are logged as
    warnings with status 0.
    """

    start = time.perf_counter()
    container: dict[str, Any] = {}

    def _store(resp: Any) -> None:
        container["resp"] = resp

    try:
        yield _store
    finally:
        resp = container.get("resp")
        latency = int((time.perf_counter() - start) * 1000)
        status = getattr(resp, "status_code", 0)
        size = len(getattr(resp, "content", b""))
        level = logging.INFO if 0 < status < 400 else logging.WARNING
        logger.log(
            level,
            "%s call to %s returned %s",
            source,
            endpoint,
            status,
            extra={
                "source": source,
                "endpoint": endpoint,
                "status": status,
                "bytes": size,
                "latency_ms": latency,
            },
        )
