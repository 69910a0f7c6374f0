"""Errors raised while gathering card data or rendering cards.

GitHubBadgesError
├── ConfigurationError       username or token missing; raised before any request
├── UnknownThemeError        card requested with a theme that has no color table
├── GitHubAPIError           REST answered with an error status
│   ├── GitHubRateLimitError 429, or 403 whose message mentions the rate limit
│   └── GitHubNotFoundError  404
├── GitHubGraphQLError       non-200 status or an `errors` array in the body
└── RateLimitExceededError   local budget spent; the request was never sent

The card boundary turns any of these into an error glyph, so callers outside
`cards.build_card` only see them through the SDK and the CLI.
"""

__all__ = [
    "GitHubBadgesError",
    "ConfigurationError",
    "UnknownThemeError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "GitHubGraphQLError",
    "RateLimitExceededError",
]


class GitHubBadgesError(Exception):
    """Base class for every error this package raises."""


class ConfigurationError(GitHubBadgesError):
    """The account identity or access token is not configured."""


class UnknownThemeError(GitHubBadgesError):
    """A card was requested in a theme that does not exist."""

    def __init__(self, theme: str, known: tuple[str, ...] = ()):
        message = f"Unknown theme: {theme}"
        if known:
            message += f" (expected one of {', '.join(known)})"
        super().__init__(message)
        self.theme = theme


class GitHubAPIError(GitHubBadgesError):
    """REST API error carrying the HTTP status and the decoded body, if any."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubRateLimitError(GitHubAPIError):
    """GitHub refused the request because a rate limit bucket is empty.

    `reset_time` is the x-ratelimit-reset timestamp when GitHub sent one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        response_body: dict | None = None,
        reset_time: float | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.reset_time = reset_time


class GitHubNotFoundError(GitHubAPIError):
    """The requested user or resource does not exist."""

    def __init__(self, message: str, response_body: dict | None = None):
        super().__init__(message, status_code=404, response_body=response_body)


class GitHubGraphQLError(GitHubBadgesError):
    """GraphQL request failed; `errors` holds the server's error objects."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class RateLimitExceededError(GitHubBadgesError):
    """The local rate limiter refused a request before it was sent."""
