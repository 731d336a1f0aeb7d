"""LOC aggregation across owned repositories with mocked GraphQL.

Run: pytest -q
"""
import pytest
import requests

from github_client import GithubClient, TransportError
from stats_model import LocStats
from fakes import RoutingSession, history, ok

USER = "alice"

REPO_LIST = ok({"user": {"repositories": {"nodes": [{"name": "a"}, {"name": "b"}]}}})


def alice_route(query):
    if "nodes{ name }" in query:
        return REPO_LIST
    if 'name: "a"' in query and "after: null" in query:
        return history([(USER, 10, 2), (USER, 5, 1), ("mallory", 99, 99)], has_next=True, cursor="c1")
    if 'name: "a"' in query and 'after: "c1"' in query:
        return history([(USER, 7, 3)])
    if 'name: "b"' in query:
        return requests.ConnectionError("connection reset by peer")
    raise AssertionError(f"unexpected query: {query}")


def test_failing_repo_is_skipped_not_fatal(capsys):
    session = RoutingSession(alice_route)
    client = GithubClient(token="t", session=session)

    total, failures = client.scan_loc(USER)

    assert total == LocStats(additions=22, deletions=6, commits=3)
    assert list(failures) == ["b"]
    assert isinstance(failures["b"], TransportError)
    assert "[WARN] failed to get LOC for repo b" in capsys.readouterr().err
    assert client.query_count == {"list_owned_repos": 1, "repo_history": 3}


def test_total_loc_returns_only_successful_repos():
    client = GithubClient(token="t", session=RoutingSession(alice_route))
    assert client.total_loc(USER) == LocStats(additions=22, deletions=6, commits=3)


def test_every_repo_failing_still_returns_zero_total():
    def route(query):
        if "nodes{ name }" in query:
            return REPO_LIST
        return ok({"repository": None})

    total, failures = GithubClient(token="t", session=RoutingSession(route)).scan_loc(USER)
    assert total == LocStats()
    assert sorted(failures) == ["a", "b"]


def test_repo_listing_failure_propagates():
    def route(query):
        return requests.Timeout("read timed out")

    client = GithubClient(token="t", session=RoutingSession(route))
    with pytest.raises(TransportError):
        client.total_loc(USER)
