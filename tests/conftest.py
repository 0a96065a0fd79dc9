"""Shared fixtures: throwaway git repositories and art directories."""

import os
import subprocess
from datetime import datetime, timezone
from pathlib import Path

import pytest


def run_git(repo: Path, *args: str, env: dict | None = None) -> subprocess.CompletedProcess:
    """Run a git command in repo."""
    return subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **(env or {})},
    )


def commit_at(repo: Path, timestamp: float, message: str = "work") -> None:
    """Create an empty commit authored and committed at timestamp."""
    date = datetime.fromtimestamp(int(timestamp), timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000")
    run_git(
        repo,
        "-c", "commit.gpgsign=false",
        "commit", "--allow-empty", "-m", message,
        env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
    )


@pytest.fixture
def empty_repo(tmp_path):
    """A git repo with no commits."""
    repo = tmp_path / "pet-repo"
    repo.mkdir()
    run_git(repo, "init")
    run_git(repo, "config", "user.email", "test@test.com")
    run_git(repo, "config", "user.name", "Test")
    return repo


ART = {
    "dead.txt": "x_x\n",
    "sad.txt": "._.\n",
    "sad2.txt": "(._.)\n",
    "neutral.txt": "-_-\n",
    "happy.txt": "\\o/\n |\n/ \\\n",
    "happy_2.txt": " ^_^ \n",
    "happy-3.txt": "(^_^)\n",
}


@pytest.fixture
def assets_dir(tmp_path):
    """A small art directory with one or more variants per mood."""
    path = tmp_path / "assets"
    path.mkdir()
    for name, content in ART.items():
        (path / name).write_text(content)
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's ~/.tamagot config and environment out of tests."""
    from tamagot import config as config_module
    config_file = tmp_path / "home" / "config.yaml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.delenv("TAMAGOT_ASSETS", raising=False)
    return config_file
