"""Shared HTTP plumbing for the REST and GraphQL clients."""

from typing import Any, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from github_badges._version import version as __version__
from github_badges.config import Config
from github_badges.utils.rate_limiter import RateLimiter

USER_AGENT = f"github-badges/{__version__}"

# Timeouts and refused connections are retried; HTTP error statuses are not
retry_transport_errors = retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)


class BaseGitHubClient:
    """Owns one lazily created httpx.AsyncClient and the caller's rate limiter.

    Args:
        config: Application configuration
        rate_limiter: Budget tracker shared with sibling clients (a private one if omitted)
        transport: Optional httpx transport, used by tests to stub GitHub
    """

    def __init__(
        self,
        config: Config,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.rate_limiter = rate_limiter or RateLimiter()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        raise NotImplementedError

    def _client_options(self) -> dict[str, Any]:
        """Extra httpx.AsyncClient arguments, such as base_url."""
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
                transport=self._transport,
                **self._client_options(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
