"""Tests for the REST and GraphQL API clients."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from conftest import json_response
from github_badges.exceptions import (
    GitHubAPIError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    RateLimitExceededError,
)
from github_badges.services.github_graphql_client import (
    GitHubGraphQLClient,
    format_datetime,
)
from github_badges.services.github_rest_client import (
    COMMITS_SEARCH_ACCEPT,
    GitHubRestClient,
)
from github_badges.utils.rate_limiter import RateLimiter


def graphql_variables(request: httpx.Request) -> dict:
    return json.loads(request.content).get("variables") or {}


class TestRestClientErrors:
    """Tests for REST status code mapping."""

    @pytest.mark.asyncio
    async def test_not_found(self, test_config, mock_transport):
        """Test that 404 raises GitHubNotFoundError."""
        transport = mock_transport(lambda r: json_response({"message": "Not Found"}, 404))

        async with GitHubRestClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubNotFoundError) as exc_info:
                await client.get_user("ghost")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_rate_limited(self, test_config, mock_transport):
        """Test that a 403 rate limit message raises GitHubRateLimitError with the reset time."""
        transport = mock_transport(
            lambda r: json_response(
                {"message": "API rate limit exceeded for user"},
                403,
                headers={"x-ratelimit-reset": "1700000000"},
            )
        )

        async with GitHubRestClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubRateLimitError) as exc_info:
                await client.get_user("octocat")

        assert exc_info.value.reset_time == 1700000000.0

    @pytest.mark.asyncio
    async def test_429_is_rate_limit(self, test_config, mock_transport):
        """Test that 429 always maps to a rate limit error."""
        transport = mock_transport(lambda r: json_response({"message": "slow down"}, 429))

        async with GitHubRestClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubRateLimitError):
                await client.get_user("octocat")

    @pytest.mark.asyncio
    async def test_forbidden(self, test_config, mock_transport):
        """Test that a plain 403 raises GitHubAPIError but not a rate limit error."""
        transport = mock_transport(lambda r: json_response({"message": "Resource not accessible"}, 403))

        async with GitHubRestClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_user("octocat")

        assert not isinstance(exc_info.value, GitHubRateLimitError)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_server_error(self, test_config, mock_transport):
        """Test that 5xx raises GitHubAPIError."""
        transport = mock_transport(lambda r: httpx.Response(502, text="Bad Gateway"))

        async with GitHubRestClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_user("octocat")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_local_limiter_refuses(self, test_config, mock_transport):
        """Test that an exhausted local budget raises before any request is sent."""
        transport = mock_transport(lambda r: json_response({}))
        limiter = RateLimiter()
        limiter.budget("core").remaining = 0

        async with GitHubRestClient(test_config, rate_limiter=limiter, transport=transport) as client:
            with pytest.raises(RateLimitExceededError):
                await client.get_user("octocat")

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, test_config, mock_transport):
        """Test that a connection failure is retried before succeeding."""
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return json_response({"login": "octocat", "followers": 3})

        async with GitHubRestClient(test_config, transport=mock_transport(handler)) as client:
            user = await client.get_user("octocat")

        assert user["followers"] == 3
        assert len(attempts) == 2


class TestRestClientPagination:
    """Tests for REST page iteration."""

    @pytest.mark.asyncio
    async def test_follows_link_header(self, test_config, mock_transport):
        """Test that pages are requested until the Link header has no next page."""

        def handler(request):
            page = int(request.url.params["page"])
            headers = {}
            if page < 3:
                headers["Link"] = f'<https://api.github.com/users/octocat/repos?page={page + 1}>; rel="next"'
            return json_response([{"name": f"repo{page}"}], headers=headers)

        transport = mock_transport(handler)
        async with GitHubRestClient(test_config, transport=transport) as client:
            repos = [repo async for repo in client.iter_owner_repos("octocat")]

        assert [r["name"] for r in repos] == ["repo1", "repo2", "repo3"]
        assert all(r.url.params["type"] == "owner" for r in transport.requests)
        assert all(r.url.params["per_page"] == "100" for r in transport.requests)

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self, test_config, mock_transport):
        """Test that an empty page ends iteration even if a next link is present."""
        link = {"Link": '<https://api.github.com/x?page=2>; rel="next"'}
        transport = mock_transport(lambda r: json_response([], headers=link))

        async with GitHubRestClient(test_config, transport=transport) as client:
            pages = [page async for page in client.iter_pull_requests("octocat", "hello")]

        assert pages == []
        assert len(transport.requests) == 1
        assert transport.requests[0].url.params["state"] == "all"

    @pytest.mark.asyncio
    async def test_error_on_later_page_propagates(self, test_config, mock_transport):
        """Test that a failing page is not reported as the end of the listing."""

        def handler(request):
            if request.url.params["page"] == "2":
                return httpx.Response(500)
            return json_response(
                [{"id": 1}],
                headers={"Link": '<https://api.github.com/x?page=2>; rel="next"'},
            )

        async with GitHubRestClient(test_config, transport=mock_transport(handler)) as client:
            with pytest.raises(GitHubAPIError):
                async for _ in client.iter_items("/users/octocat/repos"):
                    pass

    @pytest.mark.asyncio
    async def test_count_reviews(self, test_config, mock_transport):
        """Test that reviews are counted across review pages."""

        def handler(request):
            assert request.url.path == "/repos/octocat/hello/pulls/7/reviews"
            if request.url.params["page"] == "1":
                return json_response(
                    [{"id": 1}, {"id": 2}],
                    headers={"Link": '<https://api.github.com/x?page=2>; rel="next"'},
                )
            return json_response([{"id": 3}])

        async with GitHubRestClient(test_config, transport=mock_transport(handler)) as client:
            assert await client.count_reviews("octocat", "hello", 7) == 3


class TestRestClientEndpoints:
    """Tests for individual REST endpoints."""

    @pytest.mark.asyncio
    async def test_search_commit_count(self, test_config, mock_transport):
        """Test commit search uses the preview media type and a single-item page."""
        transport = mock_transport(lambda r: json_response({"total_count": 1234, "items": []}))

        async with GitHubRestClient(test_config, transport=transport) as client:
            count = await client.search_commit_count("author:octocat")

        request = transport.requests[0]
        assert count == 1234
        assert request.url.path == "/search/commits"
        assert request.url.params["q"] == "author:octocat"
        assert request.url.params["per_page"] == "1"
        assert request.headers["Accept"] == COMMITS_SEARCH_ACCEPT

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"text": "<html>maintenance</html>"}, {"json": []}],
    )
    async def test_search_commit_count_malformed_body(self, test_config, mock_transport, body):
        """Test that a 200 answer that is not a JSON object counts as zero commits."""
        transport = mock_transport(lambda r: httpx.Response(200, **body))

        async with GitHubRestClient(test_config, transport=transport) as client:
            assert await client.search_commit_count("author:octocat") == 0

    @pytest.mark.asyncio
    async def test_auth_header(self, test_config, mock_transport):
        """Test that the token is sent as a bearer token."""
        transport = mock_transport(lambda r: json_response({"followers": 1}))

        async with GitHubRestClient(test_config, transport=transport) as client:
            await client.get_user("octocat")

        assert transport.requests[0].headers["Authorization"] == "Bearer test_token"

    @pytest.mark.asyncio
    async def test_get_rate_limits(self, test_config, mock_transport):
        """Test parsing every bucket from /rate_limit."""
        transport = mock_transport(
            lambda r: json_response(
                {
                    "resources": {
                        "core": {"limit": 5000, "remaining": 4000, "reset": 1700000000},
                        "search": {"limit": 30, "remaining": 30, "reset": 1700000000},
                        "graphql": {"limit": 5000, "remaining": 100, "reset": 1700000000},
                    }
                }
            )
        )

        async with GitHubRestClient(test_config, transport=transport) as client:
            resources = await client.get_rate_limits()

        by_name = {r.name: r for r in resources}
        assert set(by_name) == {"core", "search", "graphql"}
        assert by_name["core"].used == 1000
        assert by_name["graphql"].usage_percent == 98

    @pytest.mark.asyncio
    async def test_updates_limiter_from_headers(self, test_config, mock_transport):
        """Test that response headers refresh the local rate limit state."""
        transport = mock_transport(
            lambda r: json_response(
                {},
                headers={
                    "x-ratelimit-limit": "5000",
                    "x-ratelimit-remaining": "42",
                    "x-ratelimit-reset": "1700000000",
                },
            )
        )
        limiter = RateLimiter()

        async with GitHubRestClient(test_config, rate_limiter=limiter, transport=transport) as client:
            await client.get_user("octocat")

        assert limiter.budget("core").remaining == 42


class TestGraphQLClient:
    """Tests for the GraphQL client."""

    @pytest.mark.asyncio
    async def test_errors_payload_raises(self, test_config, mock_transport):
        """Test that an errors array raises GitHubGraphQLError."""
        transport = mock_transport(
            lambda r: json_response({"errors": [{"message": "Something went wrong"}]})
        )

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubGraphQLError, match="Something went wrong") as exc_info:
                await client.get_account_created_at("octocat")

        assert exc_info.value.errors == [{"message": "Something went wrong"}]

    @pytest.mark.asyncio
    async def test_non_200_raises(self, test_config, mock_transport):
        """Test that a failed HTTP response raises GitHubGraphQLError."""
        transport = mock_transport(lambda r: httpx.Response(401, text="Bad credentials"))

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubGraphQLError, match="401"):
                await client.get_account_created_at("octocat")

    @pytest.mark.asyncio
    async def test_missing_user_raises(self, test_config, mock_transport):
        """Test that a null user raises GitHubGraphQLError."""
        transport = mock_transport(lambda r: json_response({"data": {"user": None}}))

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubGraphQLError, match="ghost"):
                await client.get_contribution_window(
                    "ghost",
                    datetime(2024, 1, 1, tzinfo=timezone.utc),
                    datetime(2024, 6, 1, tzinfo=timezone.utc),
                )

    def test_token_required(self, test_config):
        """Test that building headers without a token fails."""
        test_config.github_token = None
        client = GitHubGraphQLClient(test_config)

        with pytest.raises(GitHubGraphQLError, match="token"):
            client._get_headers()

    @pytest.mark.asyncio
    async def test_repository_pages_use_cursor(self, test_config, mock_transport):
        """Test that the repository connection is paged forward by endCursor."""

        def handler(request):
            after = graphql_variables(request).get("after")
            if after is None:
                connection = {
                    "totalCount": 2,
                    "nodes": [{"stargazerCount": 1}],
                    "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
                }
            else:
                assert after == "c1"
                connection = {
                    "totalCount": 2,
                    "nodes": [{"stargazerCount": 2}],
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                }
            user = {
                "repositories": connection,
                "pullRequests": {"totalCount": 9},
                "issues": {"totalCount": 4},
            }
            return json_response({"data": {"user": user}})

        transport = mock_transport(handler)
        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            pages = [page async for page in client.iter_stats_pages("octocat")]

        assert len(pages) == 2
        assert pages[0].totals.pull_requests == 9
        assert pages[0].totals.issues == 4
        assert pages[1].totals is None
        assert graphql_variables(transport.requests[0])["perPage"] == 100

    @pytest.mark.asyncio
    async def test_next_page_without_cursor_raises(self, test_config, mock_transport):
        """Test that a page promising more without an endCursor is an error, not the end."""
        connection = {
            "nodes": [{"name": "app", "languages": {"edges": []}}],
            "pageInfo": {"hasNextPage": True, "endCursor": None},
        }
        transport = mock_transport(
            lambda r: json_response({"data": {"user": {"repositories": connection}}})
        )

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            with pytest.raises(GitHubGraphQLError, match="endCursor"):
                async for _ in client.iter_language_pages("octocat"):
                    pass

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_contribution_window(self, test_config, mock_transport):
        """Test that window bounds are sent as GraphQL DateTimes."""
        calendar = {
            "totalContributions": 3,
            "weeks": [{"contributionDays": [{"date": "2024-01-01", "contributionCount": 3}]}],
        }
        transport = mock_transport(
            lambda r: json_response(
                {"data": {"user": {"contributionsCollection": {"contributionCalendar": calendar}}}}
            )
        )

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            window = await client.get_contribution_window(
                "octocat",
                datetime(2024, 1, 1, tzinfo=timezone.utc),
                datetime(2024, 12, 31, tzinfo=timezone.utc),
            )

        variables = graphql_variables(transport.requests[0])
        assert variables["from"] == "2024-01-01T00:00:00Z"
        assert variables["to"] == "2024-12-31T00:00:00Z"
        assert window.total_contributions == 3

    @pytest.mark.asyncio
    async def test_account_created_at(self, test_config, mock_transport):
        """Test parsing the account creation timestamp."""
        transport = mock_transport(
            lambda r: json_response({"data": {"user": {"createdAt": "2019-03-04T05:06:07Z"}}})
        )

        async with GitHubGraphQLClient(test_config, transport=transport) as client:
            created = await client.get_account_created_at("octocat")

        assert created == datetime(2019, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class TestFormatDatetime:
    """Tests for format_datetime."""

    def test_converts_to_utc(self):
        """Test that aware datetimes are converted to UTC."""
        from datetime import timedelta

        value = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_datetime(value) == "2024-01-01T00:00:00Z"
