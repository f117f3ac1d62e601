"""GitHub GraphQL adapter used for Projects (v2) automation."""

from __future__ import annotations

import os
from typing import Any

import httpx

from api.errors import InvalidConfiguration, MissingRequiredInput, RemoteApiError

from .base import tracked_call

USER_AGENT = os.getenv("GITHUB_UA", "project-status-sync/0.1")
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"


def graphql_url() -> str:
    # Actions runners export GITHUB_GRAPHQL_URL, including on GitHub Enterprise.
    return os.getenv("GITHUB_GRAPHQL_URL") or DEFAULT_GRAPHQL_URL


def _timeout_seconds() -> float:
    raw = os.getenv("GITHUB_TIMEOUT_SECONDS", "30")
    try:
        return max(float(raw), 1.0)
    except ValueError:
        raise InvalidConfiguration("GITHUB_TIMEOUT_SECONDS", raw) from None


class GitHubGraphQLClient:
    """Authenticated GraphQL client; use as ``async with``.

    HTTP failures surface as ``httpx.HTTPStatusError`` and GraphQL level
    failures as :class:`RemoteApiError`. Nothing is retried.
    """

    def __init__(
        self,
        token: str,
        *,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token:
            raise MissingRequiredInput("github-token")
        self._token = token
        self._url = url or graphql_url()
        self._timeout = timeout if timeout is not None else _timeout_seconds()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> GitHubGraphQLClient:
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        return False

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run one GraphQL document and return its ``data`` object."""
        if self._client is None:
            raise RuntimeError("GitHubGraphQLClient must be entered with 'async with'")
        async with tracked_call("github", self._url) as log:
            r = await self._client.post(
                self._url, json={"query": query, "variables": variables or {}}
            )
            log(r)
        r.raise_for_status()
        try:
            payload = r.json()
        except ValueError:
            raise RemoteApiError(
                [{"message": f"response is not JSON (HTTP {r.status_code})"}]
            ) from None
        if not isinstance(payload, dict):
            raise RemoteApiError([{"message": "response is not a JSON object"}])
        data = payload.get("data")
        errors = payload.get("errors")
        if errors:
            raise RemoteApiError(errors, data)
        return data or {}
