"""
Typed records shared by the GraphQL client, the card renderer and the updater.

Everything here lives for one run only; nothing is persisted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

U64_MAX = 2 ** 64 - 1


def saturating_add(a: int, b: int) -> int:
    """Add two non-negative counters, clamping at U64_MAX."""
    return min(a + b, U64_MAX)


@dataclass(frozen=True)
class CommitRecord:
    additions: int = 0
    deletions: int = 0
    author_login: str = ""


@dataclass(frozen=True)
class PageInfo:
    has_next_page: bool = False
    end_cursor: Optional[str] = None


@dataclass(frozen=True)
class HistoryPage:
    commits: List[CommitRecord] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)


@dataclass
class LocStats:
    additions: int = 0
    deletions: int = 0
    commits: int = 0

    def record_commit(self, additions: int, deletions: int):
        self.commits = saturating_add(self.commits, 1)
        self.additions = saturating_add(self.additions, additions)
        self.deletions = saturating_add(self.deletions, deletions)

    def merge(self, other: "LocStats") -> "LocStats":
        self.additions = saturating_add(self.additions, other.additions)
        self.deletions = saturating_add(self.deletions, other.deletions)
        self.commits = saturating_add(self.commits, other.commits)
        return self

    def __iadd__(self, other: "LocStats") -> "LocStats":
        return self.merge(other)

    def __add__(self, other: "LocStats") -> "LocStats":
        return LocStats(self.additions, self.deletions, self.commits).merge(other)


@dataclass(frozen=True)
class ProfileStats:
    """Flat snapshot handed to the card renderer."""
    repos: int = 0
    stars: int = 0
    followers: int = 0
    commits: int = 0
    contributed: int = 0
    loc_add: int = 0
    loc_del: int = 0

    @property
    def loc_net(self) -> int:
        return self.loc_add - self.loc_del

    @classmethod
    def from_counts(cls, repos: int, stars: int, followers: int, commits: int,
                    contributed: int, loc: LocStats) -> "ProfileStats":
        return cls(
            repos=repos,
            stars=stars,
            followers=followers,
            commits=commits,
            contributed=contributed,
            loc_add=loc.additions,
            loc_del=loc.deletions,
        )
