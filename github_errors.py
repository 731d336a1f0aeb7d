"""Error kinds raised by the GitHub GraphQL client."""

from __future__ import annotations
from typing import Any, Optional


class GitHubError(RuntimeError):
    """Base for every failure surfaced by the client."""


class MissingTokenError(GitHubError):
    pass


class TransportError(GitHubError):
    """Connection, DNS, timeout, or unreadable response body."""


class GraphQLError(GitHubError):
    """The server answered with a top-level `errors` list. Never retried."""

    def __init__(self, tag: str, errors: Any):
        self.errors = errors
        if isinstance(errors, list):
            messages = ' | '.join(
                e.get('message', '') if isinstance(e, dict) else str(e) for e in errors
            )
        else:
            messages = str(errors)
        super().__init__(f"{tag} GraphQL errors: {messages}")


class RateLimitError(GitHubError):
    def __init__(self, tag: str, attempts: int):
        self.attempts = attempts
        super().__init__(f"{tag}: rate limited (HTTP 429), gave up after {attempts} attempts")


class HTTPStatusError(GitHubError):
    def __init__(self, tag: str, status: int, body: Optional[Any]):
        self.status = status
        self.body = body
        super().__init__(f"{tag} failed: HTTP {status} {str(body)[:300]}")


class ServerError(HTTPStatusError):
    """5xx still failing once the attempt budget is spent."""


class DecodeError(GitHubError):
    """A field required to continue is missing from the response."""
