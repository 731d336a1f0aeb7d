"""
Decoders turning raw GraphQL payloads into typed results.

Optional fields fall back to zero or empty values. Only the commit history
container is required, since paging cannot go on without it.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from github_errors import DecodeError
from stats_model import CommitRecord, HistoryPage, PageInfo


# ------------------ Field helpers ------------------
def _obj(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _count(value: Any) -> int:
    # bool is an int subclass; a flag is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(value, 0)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _user(payload: Any) -> Dict[str, Any]:
    return _obj(_obj(_obj(payload).get("data")).get("user"))


def _total(container: Any) -> int:
    return _count(_obj(container).get("totalCount"))


# ------------------ Per-query decoders ------------------
def decode_owned_repo_count(payload: Any) -> int:
    return _total(_user(payload).get("repositories"))


def decode_owned_repos(payload: Any) -> List[str]:
    nodes = _list(_obj(_user(payload).get("repositories")).get("nodes"))
    return [n["name"] for n in nodes if isinstance(n, dict) and isinstance(n.get("name"), str)]


def decode_followers(payload: Any) -> int:
    return _total(_user(payload).get("followers"))


def decode_contributed_repos(payload: Any) -> int:
    return _total(_user(payload).get("repositories"))


def decode_commit_contributions(payload: Any) -> int:
    collection = _obj(_user(payload).get("contributionsCollection"))
    return _count(collection.get("totalCommitContributions"))


def decode_stars(payload: Any) -> int:
    nodes = _list(_obj(_user(payload).get("repositories")).get("nodes"))
    return sum(_total(_obj(n).get("stargazers")) for n in nodes)


def decode_commit_record(node: Any) -> CommitRecord:
    node = _obj(node)
    login = _obj(_obj(node.get("author")).get("user")).get("login")
    return CommitRecord(
        additions=_count(node.get("additions")),
        deletions=_count(node.get("deletions")),
        author_login=_str(login),
    )


def decode_history_page(payload: Any, where: str = "repository") -> HistoryPage:
    repository = _obj(_obj(payload).get("data")).get("repository")
    ref = _obj(repository).get("defaultBranchRef")
    target = _obj(ref).get("target")
    history = _obj(target).get("history")
    if not isinstance(history, dict):
        raise DecodeError(f"Missing commit history for {where}")

    raw_info = _obj(history.get("pageInfo"))
    has_next = raw_info.get("hasNextPage") is True
    cursor: Optional[str] = raw_info.get("endCursor") if isinstance(raw_info.get("endCursor"), str) else None
    if has_next and cursor is None:
        raise DecodeError(f"Commit history for {where} reports more pages but no endCursor")
    if not has_next:
        cursor = None

    commits = [decode_commit_record(n) for n in _list(history.get("nodes"))]
    return HistoryPage(commits=commits, page_info=PageInfo(has_next_page=has_next, end_cursor=cursor))
