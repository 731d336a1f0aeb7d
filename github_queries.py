"""GraphQL query text for every statistic the profile card shows.

All builders are pure: they only format strings. User supplied values are
emitted as quoted GraphQL string literals.
"""

from __future__ import annotations
import json
from typing import Optional

PAGE_SIZE = 100


def gql_string(value: str) -> str:
    # JSON string escaping is a valid GraphQL string literal
    return json.dumps(value)


def owned_repo_count_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        repositories(ownerAffiliations: OWNER){{ totalCount }}
      }}
    }}"""


def owned_repos_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        repositories(first: {PAGE_SIZE}, ownerAffiliations: OWNER){{
          nodes{{ name }}
        }}
      }}
    }}"""


def followers_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        followers{{ totalCount }}
      }}
    }}"""


def contributed_repos_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        repositories(first: 1, ownerAffiliations: [OWNER, COLLABORATOR, ORGANIZATION_MEMBER]){{
          totalCount
        }}
      }}
    }}"""


def commit_contributions_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        contributionsCollection{{ totalCommitContributions }}
      }}
    }}"""


def stars_query(login: str) -> str:
    return f"""
    query{{
      user(login: {gql_string(login)}){{
        repositories(first: {PAGE_SIZE}, ownerAffiliations: OWNER){{
          nodes{{
            stargazers{{ totalCount }}
          }}
        }}
      }}
    }}"""


def history_page_query(owner: str, repo: str, cursor: Optional[str] = None) -> str:
    """One page of default-branch commit history, starting after `cursor`."""
    after = gql_string(cursor) if cursor is not None else "null"
    return f"""
    query{{
      repository(owner: {gql_string(owner)}, name: {gql_string(repo)}){{
        defaultBranchRef{{
          target{{
            ... on Commit {{
              history(first: {PAGE_SIZE}, after: {after}){{
                pageInfo{{ hasNextPage endCursor }}
                nodes{{
                  additions
                  deletions
                  author{{ user{{ login }} }}
                }}
              }}
            }}
          }}
        }}
      }}
    }}"""
