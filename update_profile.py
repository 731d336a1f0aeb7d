#!/usr/bin/env python3
"""
Dynamic profile card updater.

Card values:
- Age/Uptime
- Repo count (and contributed repositories)
- Star count
- Commit contributions
- Follower count
- Lines of Code (add/del/net over user-authored commits in owned repos)

Environment Variables:
  ACCESS_TOKEN  : Personal token (required). Falls back to GITHUB_TOKEN in Actions.
  USER_NAME     : GitHub login. Defaults to actor / repository owner.
  BIRTHDATE     : YYYY-MM-DD. Default 1992-06-14.
  OUTPUT_DIR    : Where dark.svg and light.svg are written. Default '.'.
  ASCII_ART     : Text file drawn in the left column. Default ascii.txt next to this script.
  DEBUG         : '1' => print [DEBUG] lines.

Output SVG files (dark/light): dark.svg, light.svg
"""

from __future__ import annotations
import os
import sys
import time
import datetime
from pathlib import Path
from typing import Dict, Optional

from card_age import rel_age
from card_svg import render_cards
from github_client import GithubClient, GitHubError, MissingTokenError, debug, warn
from stats_model import ProfileStats

# ------------------ Config & Env ------------------
GITHUB_REPOSITORY = os.environ.get("GITHUB_REPOSITORY", "")
DEFAULT_OWNER = GITHUB_REPOSITORY.split("/")[0] if "/" in GITHUB_REPOSITORY else ""
USER_NAME = os.environ.get("USER_NAME") or os.environ.get("GITHUB_ACTOR") or DEFAULT_OWNER

DEFAULT_BIRTHDATE = datetime.date(1992, 6, 14)
BIRTHDATE_STR = os.environ.get("BIRTHDATE", DEFAULT_BIRTHDATE.isoformat())
try:
    BIRTHDATE = datetime.date.fromisoformat(BIRTHDATE_STR)
except ValueError:
    warn(f"Invalid BIRTHDATE format. Expected YYYY-MM-DD. Using default {DEFAULT_BIRTHDATE.isoformat()}.")
    BIRTHDATE = DEFAULT_BIRTHDATE

REPO_ROOT = Path(__file__).resolve().parent
OUTPUT_DIR = Path(os.environ.get("OUTPUT_DIR", "."))
ASCII_ART_PATH = Path(os.environ.get("ASCII_ART") or REPO_ROOT / "ascii.txt")

SVG_FILES: Dict[str, str] = {"dark": "dark.svg", "light": "light.svg"}


def load_ascii_art(path: Path = ASCII_ART_PATH) -> Optional[str]:
    if not path.exists():
        debug(f"ASCII art {path} not found; rendering without left column.")
        return None
    return path.read_text(encoding="utf-8").rstrip("\n")


# ------------------ Data Collection ------------------
def collect_stats(client: GithubClient, login: str) -> ProfileStats:
    """Fetch every card value. Any top-level failure propagates."""
    loc, failures = client.scan_loc(login)
    if failures:
        warn(f"LOC totals skip {len(failures)} repo(s): {', '.join(sorted(failures))}")
    return ProfileStats.from_counts(
        repos=client.owned_repo_count(login),
        stars=client.star_count(login),
        followers=client.follower_count(login),
        commits=client.commit_count(login),
        contributed=client.contributed_repos(login),
        loc=loc,
    )


# ------------------ SVG Output ------------------
def write_svgs(stats: ProfileStats, age: str, login: str, out_dir: Path = OUTPUT_DIR):
    out_dir.mkdir(parents=True, exist_ok=True)
    cards = render_cards(stats, age, login, load_ascii_art())
    for theme, svg_file in SVG_FILES.items():
        with open(out_dir / svg_file, 'wb') as f:
            f.write(cards[theme])


# ------------------ Main ------------------
def main() -> int:
    if not USER_NAME:
        print("ERROR: Cannot infer USER_NAME. Set USER_NAME env variable.", file=sys.stderr)
        return 1

    print("Collecting stats...")
    t0 = time.time()
    try:
        client = GithubClient()
    except MissingTokenError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    with client:
        try:
            stats = collect_stats(client, USER_NAME)
        except GitHubError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    write_svgs(stats, rel_age(BIRTHDATE), USER_NAME)

    print("Generated {} in {:.2f}s".format(", ".join(SVG_FILES.values()), time.time() - t0))
    print("GraphQL query counts:", client.query_count)
    return 0


def run():
    raise SystemExit(main())


if __name__ == "__main__":
    run()
