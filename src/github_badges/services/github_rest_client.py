"""GitHub REST API client."""

import logging
from typing import Any, AsyncIterator, Optional

import httpx

from github_badges.exceptions import (
    GitHubAPIError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from github_badges.models.rate_limit import RateLimitResource
from github_badges.services.base_client import (
    USER_AGENT,
    BaseGitHubClient,
    retry_transport_errors,
)
from github_badges.utils.pagination import get_next_page_url

logger = logging.getLogger(__name__)

# The commit search endpoint only answers with this preview media type
COMMITS_SEARCH_ACCEPT = "application/vnd.github.cloak-preview"


def _json_body(response: httpx.Response) -> dict:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def raise_for_status(response: httpx.Response, endpoint: str) -> None:
    """Map an error response to the matching GitHubAPIError subclass.

    403 and 429 are rate limit errors when GitHub says so (429 always is);
    any other 403 is a plain permission error.
    """
    status = response.status_code
    if status < 400:
        return

    if status == 404:
        raise GitHubNotFoundError(
            f"Resource not found: {endpoint}",
            response_body=_json_body(response) or None,
        )
    if status >= 500:
        raise GitHubAPIError(f"Server error: {status}", status_code=status)

    body = _json_body(response)
    message = body.get("message", "Unknown error")
    if status == 429 or (status == 403 and "rate limit" in message.lower()):
        reset = response.headers.get("x-ratelimit-reset")
        raise GitHubRateLimitError(
            f"Rate limit exceeded: {message}",
            status_code=status,
            response_body=body,
            reset_time=float(reset) if reset else None,
        )
    prefix = "Forbidden" if status == 403 else "API error"
    raise GitHubAPIError(f"{prefix}: {message}", status_code=status, response_body=body)


class GitHubRestClient(BaseGitHubClient):
    """Async client for GitHub REST API."""

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": USER_AGENT,
        }
        if self.config.github_token:
            headers["Authorization"] = f"Bearer {self.config.github_token}"
        return headers

    def _client_options(self) -> dict[str, Any]:
        return {"base_url": self.config.github_api_url}

    @retry_transport_errors
    async def _request(
        self,
        method: str,
        endpoint: str,
        bucket: str = "core",
        **kwargs,
    ) -> httpx.Response:
        """Make an API request with rate limiting and retries.

        Args:
            method: HTTP method
            endpoint: Path relative to the API base URL
            bucket: Rate limit bucket the request is charged to
        """
        await self.rate_limiter.acquire(bucket)

        client = await self._get_client()
        response = await client.request(method, endpoint, **kwargs)

        self.rate_limiter.update_from_headers(bucket, response.headers)
        raise_for_status(response, endpoint)
        return response

    async def get(self, endpoint: str, **kwargs) -> dict[str, Any]:
        """Make a GET request and return JSON response."""
        response = await self._request("GET", endpoint, **kwargs)
        return response.json()

    async def iter_pages(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        per_page: Optional[int] = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield pages of a list endpoint until it is exhausted.

        Stops on an empty page or when the Link header offers no next page.
        Errors on any page propagate; a partial listing is never reported as
        complete.
        """
        page = 1
        per_page = per_page or self.config.default_per_page

        while True:
            query = {**(params or {}), "per_page": per_page, "page": page}
            response = await self._request("GET", endpoint, params=query)
            items = response.json()
            logger.debug("Fetched page %d of %s with %d items", page, endpoint, len(items))

            if not items:
                break
            yield items

            if get_next_page_url(response.headers.get("Link")) is None:
                break
            page += 1

    async def iter_items(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield every item of a paginated list endpoint."""
        async for items in self.iter_pages(endpoint, params):
            for item in items:
                yield item

    # Convenience methods for common endpoints

    async def get_user(self, login: str) -> dict[str, Any]:
        """Get user profile data."""
        return await self.get(f"/users/{login}")

    def iter_owner_repos(self, login: str) -> AsyncIterator[dict[str, Any]]:
        """Repositories owned by the user."""
        return self.iter_items(f"/users/{login}/repos", {"type": "owner"})

    def iter_pull_requests(self, owner: str, repo: str) -> AsyncIterator[list[dict[str, Any]]]:
        """Pages of pull requests in any state."""
        return self.iter_pages(f"/repos/{owner}/{repo}/pulls", {"state": "all"})

    async def count_reviews(self, owner: str, repo: str, number: int) -> int:
        """Count the reviews on one pull request across all review pages."""
        total = 0
        async for reviews in self.iter_pages(f"/repos/{owner}/{repo}/pulls/{number}/reviews"):
            total += len(reviews)
        return total

    async def search_commit_count(self, query: str) -> int:
        """Total number of commits matching a search query.

        Args:
            query: Search query (e.g., "author:username")

        Returns:
            The search's total_count
        """
        response = await self._request(
            "GET",
            "/search/commits",
            bucket="search",
            params={"q": query, "per_page": 1},
            headers={"Accept": COMMITS_SEARCH_ACCEPT},
        )
        return _json_body(response).get("total_count") or 0

    async def get_rate_limits(self) -> list[RateLimitResource]:
        """Get the current usage of every rate limit bucket."""
        data = await self.get("/rate_limit")
        return [
            RateLimitResource.from_api(name, limits)
            for name, limits in (data.get("resources") or {}).items()
        ]
