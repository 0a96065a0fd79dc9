"""Read-only queries against the monitored git repository."""

import logging
import subprocess
import time
from datetime import datetime, timezone
from pathlib import Path

from tamagot.models import ActivitySample, LastCommit

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 3600
HOUR_SECONDS = 3600


class RepositoryError(Exception):
    """The given path is not a usable git working tree."""


def _git(repo: Path, *args: str) -> str:
    """Run a git command in repo and return stripped stdout."""
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _git_date(epoch: float) -> str:
    """Absolute date string git understands for --since."""
    return datetime.fromtimestamp(int(epoch), timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")


def resolve_repository(path: str | Path) -> Path:
    """Validate that path is a git working tree and return it resolved."""
    repo = Path(path).expanduser()
    if not repo.is_dir():
        raise RepositoryError(f"{path} is not a directory.")

    try:
        inside = _git(repo, "rev-parse", "--is-inside-work-tree")
    except FileNotFoundError:
        raise RepositoryError("git was not found on PATH.")
    except subprocess.CalledProcessError:
        raise RepositoryError(f"{path} is not a git repository.")

    if inside != "true":
        raise RepositoryError(f"{path} is not a git working tree.")
    return repo.resolve()


def repository_name(repo: Path) -> str:
    """Short display name for the repository."""
    try:
        toplevel = _git(repo, "rev-parse", "--show-toplevel")
    except (OSError, subprocess.CalledProcessError):
        return repo.name
    return Path(toplevel).name or repo.name


def count_commits_since(repo: Path, since: float) -> int:
    """Number of commits reachable from HEAD committed at or after `since`."""
    try:
        output = _git(repo, "rev-list", "--count", f"--since={_git_date(since)}", "HEAD")
        return int(output or 0)
    except (OSError, subprocess.CalledProcessError, ValueError) as e:
        # Empty repositories have no HEAD; that is just zero activity.
        logger.debug("Commit count failed for %s: %s", repo, e)
        return 0


def last_commit(repo: Path) -> LastCommit | None:
    """Timestamp and relative age of the newest commit, or None without commits."""
    try:
        output = _git(repo, "log", "-1", "--format=%ct%x00%cr")
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("Last commit lookup failed for %s: %s", repo, e)
        return None

    if not output:
        return None

    timestamp, _, relative = output.partition("\x00")
    try:
        return LastCommit(timestamp=int(timestamp), relative=relative or "unknown")
    except ValueError:
        logger.debug("Unparsable commit timestamp from %s: %r", repo, output)
        return None


def sample_activity(repo: Path, now: float | None = None) -> ActivitySample:
    """
    Sample commit activity for one tick.

    Both windows trail the same `now`. Git failures are reported as zero
    activity and no last commit, so this never raises.
    """
    if now is None:
        now = time.time()

    return ActivitySample(
        commits_24h=count_commits_since(repo, now - DAY_SECONDS),
        commits_1h=count_commits_since(repo, now - HOUR_SECONDS),
        sampled_at=now,
        last_commit=last_commit(repo),
    )
