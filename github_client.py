"""
GitHub GraphQL client for the profile card.

Layers, from the wire up:
  _post()       one POST, no retries
  graphql()     bounded retry: 429 honours Retry-After, 5xx backs off
                exponentially, GraphQL `errors` fail at once
  statistics    one query + decoder per card value
  repo_loc()    cursor paging over a repository's default-branch history
  scan_loc()    repo_loc() over every owned repository; a failing repository
                is reported and skipped

Environment Variables:
  ACCESS_TOKEN      : Bearer token. Falls back to GITHUB_TOKEN in Actions.
  GQL_MAX_ATTEMPTS  : Total attempts per GraphQL call. Default 4.
  GQL_TIMEOUT       : Per-request timeout in seconds. Default 30.
  DEBUG             : '1' => print [DEBUG] lines.
"""

from __future__ import annotations
import os
import sys
import time
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import requests
from requests.structures import CaseInsensitiveDict

from github_decode import (
    decode_commit_contributions,
    decode_contributed_repos,
    decode_followers,
    decode_history_page,
    decode_owned_repo_count,
    decode_owned_repos,
    decode_stars,
)
from github_errors import (
    DecodeError,
    GitHubError,
    GraphQLError,
    HTTPStatusError,
    MissingTokenError,
    RateLimitError,
    ServerError,
    TransportError,
)
from github_queries import (
    commit_contributions_query,
    contributed_repos_query,
    followers_query,
    history_page_query,
    owned_repo_count_query,
    owned_repos_query,
    stars_query,
)
from stats_model import HistoryPage, LocStats

__all__ = [
    "GithubClient", "accumulate_history", "retry_after_seconds", "debug", "warn",
    "GitHubError", "MissingTokenError", "TransportError", "GraphQLError",
    "RateLimitError", "HTTPStatusError", "ServerError", "DecodeError",
]

# ------------------ Config & Env ------------------
GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "profile-card-stats"
MAX_ATTEMPTS = int(os.environ.get("GQL_MAX_ATTEMPTS", "4"))
REQUEST_TIMEOUT = float(os.environ.get("GQL_TIMEOUT", "30"))
DEFAULT_RETRY_AFTER = 2
BACKOFF_BASE = 0.25  # seconds; doubles per attempt
DEBUG = os.environ.get("DEBUG", "0") == "1"


def debug(msg: str):
    if DEBUG:
        print(f"[DEBUG] {msg}")


def warn(msg: str):
    print(f"[WARN] {msg}", file=sys.stderr)


def retry_after_seconds(headers: Optional[Mapping[str, str]]) -> int:
    value = CaseInsensitiveDict(headers or {}).get("Retry-After")
    try:
        return max(0, int(str(value).strip()))
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER


def accumulate_history(pages: Iterable[HistoryPage], login: str,
                       stats: Optional[LocStats] = None) -> LocStats:
    """Add up the commits in `pages` authored by exactly `login`.

    Commits from other authors, such as merged external contributions, are
    left out. Page boundaries do not affect the result.
    """
    stats = stats if stats is not None else LocStats()
    for page in pages:
        for commit in page.commits:
            if commit.author_login == login:
                stats.record_commit(commit.additions, commit.deletions)
    return stats


class GithubClient:
    """Holds the credential and HTTP session for one run."""

    def __init__(self, token: Optional[str] = None, session: Optional[requests.Session] = None,
                 max_attempts: int = MAX_ATTEMPTS, timeout: float = REQUEST_TIMEOUT):
        token = token or os.environ.get("ACCESS_TOKEN") or os.environ.get("GITHUB_TOKEN")
        if not token:
            raise MissingTokenError("ACCESS_TOKEN environment variable not set")
        self._token = token
        self._session = session if session is not None else requests.Session()
        self._headers = {
            "Authorization": f"bearer {token}",
            "User-Agent": USER_AGENT,
        }
        self.max_attempts = max(1, max_attempts)
        self.timeout = timeout
        self.query_count: Dict[str, int] = {}

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _count_query(self, tag: str):
        self.query_count[tag] = self.query_count.get(tag, 0) + 1

    # ------------------ Transport ------------------
    def _post(self, query: str, tag: str) -> Tuple[int, Mapping[str, str], Any]:
        try:
            r = self._session.post(
                GRAPHQL_URL,
                json={"query": query},
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{tag}: network error sending GraphQL request: {e}") from e
        try:
            body = r.json()
        except ValueError as e:
            raise TransportError(f"{tag}: failed to parse JSON from GitHub (HTTP {r.status_code}): {e}") from e
        return r.status_code, r.headers, body

    # ------------------ Retry policy ------------------
    def graphql(self, query: str, tag: str) -> Any:
        self._count_query(tag)
        for attempt in range(1, self.max_attempts + 1):
            status, headers, body = self._post(query, tag)
            if isinstance(body, dict) and "errors" in body:
                raise GraphQLError(tag, body["errors"])
            if 200 <= status < 300:
                return body
            if status == 429:
                if attempt >= self.max_attempts:
                    raise RateLimitError(tag, attempt)
                wait = retry_after_seconds(headers)
                debug(f"{tag}: 429 rate limited, sleeping {wait}s (attempt {attempt})")
                time.sleep(wait)
                continue
            if 500 <= status < 600:
                if attempt < self.max_attempts:
                    delay = BACKOFF_BASE * 2 ** (attempt - 1)
                    debug(f"{tag}: HTTP {status}, retry in {delay}s (attempt {attempt})")
                    time.sleep(delay)
                    continue
                raise ServerError(tag, status, body)
            raise HTTPStatusError(tag, status, body)
        # Fallback (should not reach)
        raise GitHubError(f"{tag} failed without a response")

    # ------------------ Statistics ------------------
    def owned_repo_count(self, login: str) -> int:
        return decode_owned_repo_count(self.graphql(owned_repo_count_query(login), "owned_repo_count"))

    def list_owned_repos(self, login: str) -> List[str]:
        return decode_owned_repos(self.graphql(owned_repos_query(login), "list_owned_repos"))

    def follower_count(self, login: str) -> int:
        return decode_followers(self.graphql(followers_query(login), "followers"))

    def contributed_repos(self, login: str) -> int:
        return decode_contributed_repos(self.graphql(contributed_repos_query(login), "contributed_repos"))

    def commit_count(self, login: str) -> int:
        return decode_commit_contributions(self.graphql(commit_contributions_query(login), "commit_count"))

    def star_count(self, login: str) -> int:
        return decode_stars(self.graphql(stars_query(login), "stars"))

    # ------------------ Commit history & LOC ------------------
    def iter_history_pages(self, login: str, repo: str) -> Iterator[HistoryPage]:
        cursor: Optional[str] = None
        while True:
            payload = self.graphql(history_page_query(login, repo, cursor), "repo_history")
            page = decode_history_page(payload, f"{login}/{repo}")
            debug(f"{login}/{repo}: page of {len(page.commits)} commits, more={page.page_info.has_next_page}")
            yield page
            if not page.page_info.has_next_page:
                return
            cursor = page.page_info.end_cursor

    def repo_loc(self, login: str, repo: str) -> LocStats:
        return accumulate_history(self.iter_history_pages(login, repo), login)

    def scan_loc(self, login: str) -> Tuple[LocStats, Dict[str, Exception]]:
        """Return (total, failures) across every owned repository."""
        repos = self.list_owned_repos(login)
        total = LocStats()
        failures: Dict[str, Exception] = {}
        for name in repos:
            try:
                loc = self.repo_loc(login, name)
            except Exception as e:
                warn(f"failed to get LOC for repo {name}: {e}")
                failures[name] = e
                continue
            debug(f"[LOC] {name}: commits={loc.commits} add={loc.additions} del={loc.deletions}")
            total += loc
        return total, failures

    def total_loc(self, login: str) -> LocStats:
        total, _ = self.scan_loc(login)
        return total
