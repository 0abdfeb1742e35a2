"""GitHub GraphQL client.

Thin async wrapper over ``httpx.AsyncClient``: post a query document, get
the ``data`` object back, or a ``GitHubApiError`` for anything else. The
client does not retry.

Usage::

    async with GitHubClient(token="ghp_...") as github:
        data = await github.graphql("query { viewer { login } }")
"""

from __future__ import annotations

from typing import Any

import httpx

from opsbot.core.errors import GitHubApiError
from opsbot.framework.logging import get_logger, timed_block

logger = get_logger(__name__)

DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"


class GitHubClient:
    """Async GraphQL client for the GitHub API."""

    def __init__(
        self,
        token: str | None = None,
        *,
        url: str = DEFAULT_GRAPHQL_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "opsbot",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Execute a query or mutation and return its ``data`` object.

        Raises:
            GitHubApiError: transport failure, non-2xx status, or GraphQL errors
        """
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        with timed_block("github.graphql") as timer:
            try:
                response = await self._client.post(self.url, json=body, headers=self._headers)
            except httpx.HTTPError as e:
                raise GitHubApiError(f"GraphQL request failed: {e}", cause=e).with_context(url=self.url) from e

        logger.debug(
            "github.graphql",
            status_code=response.status_code,
            duration_ms=round(timer.duration_ms, 2),
        )

        if response.is_error:
            raise GitHubApiError(
                f"GraphQL request returned HTTP {response.status_code}",
                http_status=response.status_code,
            ).with_context(url=self.url)

        try:
            payload = response.json()
        except ValueError as e:
            raise GitHubApiError(
                "GraphQL response is not JSON", http_status=response.status_code, cause=e
            ).with_context(url=self.url) from e

        if payload.get("errors"):
            messages = "; ".join(err.get("message", "unknown error") for err in payload["errors"])
            raise GitHubApiError(
                f"GraphQL errors: {messages}",
                http_status=response.status_code,
                errors=payload["errors"],
            ).with_context(url=self.url)

        return payload.get("data") or {}

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
