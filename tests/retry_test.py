"""Retry/backoff policy of GithubClient.graphql, with time.sleep mocked out."""
from unittest.mock import patch

import pytest
import requests

import github_client
from github_client import (
    GithubClient,
    GraphQLError,
    HTTPStatusError,
    MissingTokenError,
    RateLimitError,
    ServerError,
    TransportError,
    retry_after_seconds,
)
from fakes import FakeResp, ScriptedSession, ok

SUCCESS = {"data": {"user": {"followers": {"totalCount": 3}}}}


def make_client(script, **kwargs):
    session = ScriptedSession(script)
    return GithubClient(token="tkn", session=session, **kwargs), session


@patch("github_client.time.sleep")
def test_rate_limit_honours_retry_after(mock_sleep):
    client, session = make_client([
        FakeResp({}, 429, {"Retry-After": "1"}),
        FakeResp({}, 429, {"Retry-After": "1"}),
        FakeResp(SUCCESS),
    ])
    assert client.graphql("query{}", "followers") == SUCCESS
    assert mock_sleep.call_count == 2
    assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 1]
    assert len(session.calls) == 3


@patch("github_client.time.sleep")
def test_rate_limit_exhausted(mock_sleep):
    client, session = make_client([FakeResp({}, 429) for _ in range(4)])
    with pytest.raises(RateLimitError) as exc:
        client.graphql("query{}", "followers")
    assert exc.value.attempts == 4
    assert len(session.calls) == 4
    # default wait when Retry-After is absent
    assert [c.args[0] for c in mock_sleep.call_args_list] == [2, 2, 2]


@patch("github_client.time.sleep")
def test_server_errors_back_off_exponentially(mock_sleep):
    client, session = make_client([FakeResp({"message": "boom"}, 500) for _ in range(5)])
    with pytest.raises(ServerError) as exc:
        client.graphql("query{}", "stars")
    assert len(session.calls) == 4
    assert len(session.script) == 1
    assert exc.value.status == 500
    assert exc.value.body == {"message": "boom"}
    assert [c.args[0] for c in mock_sleep.call_args_list] == [0.25, 0.5, 1.0]


@patch("github_client.time.sleep")
def test_server_error_then_success(mock_sleep):
    client, _ = make_client([FakeResp({"message": "Bad Gateway"}, 502), FakeResp(SUCCESS)])
    assert client.follower_count("alice") == 3
    mock_sleep.assert_called_once_with(0.25)


@patch("github_client.time.sleep")
def test_non_json_error_body_is_transport_error(mock_sleep):
    client, session = make_client([FakeResp(None, 502, raw="<html>Bad Gateway</html>") for _ in range(4)])
    with pytest.raises(TransportError) as exc:
        client.graphql("q", "followers")
    assert "HTTP 502" in str(exc.value)
    assert len(session.calls) == 1
    mock_sleep.assert_not_called()


@patch("github_client.time.sleep")
def test_graphql_errors_are_not_retried(mock_sleep):
    body = {"data": None, "errors": [{"message": "Field 'nope' doesn't exist"}]}
    client, session = make_client([FakeResp(body, 200), FakeResp(SUCCESS)])
    with pytest.raises(GraphQLError) as exc:
        client.graphql("query{ nope }", "followers")
    assert "doesn't exist" in str(exc.value)
    assert exc.value.errors == body["errors"]
    assert len(session.calls) == 1
    mock_sleep.assert_not_called()


@patch("github_client.time.sleep")
def test_errors_field_wins_over_retryable_status(mock_sleep):
    client, session = make_client([FakeResp({"errors": [{"message": "x"}]}, 502)])
    with pytest.raises(GraphQLError):
        client.graphql("query{}", "followers")
    assert len(session.calls) == 1


@patch("github_client.time.sleep")
def test_client_error_status_fails_immediately(mock_sleep):
    client, session = make_client([FakeResp({"message": "Bad credentials"}, 401)])
    with pytest.raises(HTTPStatusError) as exc:
        client.graphql("query{}", "followers")
    assert not isinstance(exc.value, ServerError)
    assert exc.value.status == 401
    assert "Bad credentials" in str(exc.value)
    mock_sleep.assert_not_called()


def test_network_failure_is_transport_error():
    client, session = make_client([requests.ConnectionError("dns failure")])
    with pytest.raises(TransportError):
        client.graphql("query{}", "followers")
    assert len(session.calls) == 1


def test_malformed_success_body_is_transport_error():
    client, _ = make_client([FakeResp(None, 200, raw="not json")])
    with pytest.raises(TransportError):
        client.graphql("query{}", "followers")


def test_request_carries_credential_and_client_header():
    client, session = make_client([ok({"user": None})], timeout=12)
    client.graphql("query{ x }", "followers")
    call = session.calls[0]
    assert call["url"] == github_client.GRAPHQL_URL
    assert call["json"] == {"query": "query{ x }"}
    assert call["headers"]["Authorization"] == "bearer tkn"
    assert call["headers"]["User-Agent"] == github_client.USER_AGENT
    assert call["timeout"] == 12


def test_query_count_per_tag():
    client, _ = make_client([ok({}), ok({}), ok({})])
    client.graphql("q", "followers")
    client.graphql("q", "followers")
    client.graphql("q", "stars")
    assert client.query_count == {"followers": 2, "stars": 1}


@patch("github_client.time.sleep")
def test_retries_count_as_one_query(mock_sleep):
    client, session = make_client([FakeResp({}, 503), FakeResp({}, 429), FakeResp(SUCCESS)])
    client.graphql("q", "followers")
    assert len(session.calls) == 3
    assert client.query_count == {"followers": 1}


def test_missing_token(monkeypatch):
    monkeypatch.delenv("ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    with pytest.raises(MissingTokenError):
        GithubClient(session=ScriptedSession([]))


def test_token_from_environment(monkeypatch):
    monkeypatch.delenv("ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "from-actions")
    session = ScriptedSession([ok({})])
    GithubClient(session=session).graphql("q", "t")
    assert session.calls[0]["headers"]["Authorization"] == "bearer from-actions"


@pytest.mark.parametrize("headers,expected", [
    ({"Retry-After": "7"}, 7),
    ({"retry-after": "3"}, 3),
    ({"Retry-After": "soon"}, 2),
    ({}, 2),
    (None, 2),
])
def test_retry_after_parsing(headers, expected):
    assert retry_after_seconds(headers) == expected
