"""Tests for the command line surface."""

import os
import select
import signal
import subprocess
import sys
import time
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import commit_at
from tamagot.cli import build_context, main
from tamagot.frames import DEFAULT_ASSETS_DIR


class TestUsage:
    """Argument count errors exit 1 with usage on stderr."""

    def test_no_arguments(self):
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 1
        assert "Usage:" in result.output

    def test_too_many_arguments(self, empty_repo):
        result = CliRunner().invoke(main, [str(empty_repo), str(empty_repo)])
        assert result.exit_code == 1
        assert "Usage:" in result.output

    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "REPO_PATH" in result.output


class TestSetupErrors:
    """Precondition failures exit 1 before the loop starts."""

    def test_missing_path(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_not_a_repository(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path)])
        assert result.exit_code == 1
        assert "not a git repository" in result.output

    def test_long_path_error_stays_on_one_line(self, tmp_path):
        """Errors are never wrapped, so the path can be copied whole."""
        deep = tmp_path / ("a" * 60) / ("b" * 60)
        deep.mkdir(parents=True)

        result = CliRunner().invoke(main, [str(deep)])

        assert result.exit_code == 1
        assert f"Error: {deep} is not a git repository." in result.output.splitlines()

    def test_malformed_manifest(self, empty_repo, assets_dir):
        (assets_dir / "manifest.yaml").write_text("dead: 5\n")

        result = CliRunner().invoke(main, [str(empty_repo), "--assets", str(assets_dir)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error: manifest.yaml: dead must be a file name or list of file names" in result.output

    def test_invalid_config_file(self, empty_repo, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("bar_width: [unclosed\n")

        result = CliRunner().invoke(main, [str(empty_repo), "--once"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid YAML" in result.output

    def test_missing_assets(self, empty_repo, tmp_path):
        result = CliRunner().invoke(main, [str(empty_repo), "--assets", str(tmp_path / "none")])
        assert result.exit_code == 1
        assert "Assets directory not found" in result.output

    def test_mood_without_art(self, empty_repo, assets_dir):
        (assets_dir / "sad.txt").unlink()
        (assets_dir / "sad2.txt").unlink()
        result = CliRunner().invoke(main, [str(empty_repo), "--assets", str(assets_dir)])
        assert result.exit_code == 1
        assert "sad" in result.output


class TestOnce:
    """Single-frame rendering against real repositories."""

    def test_empty_repo_is_dead(self, empty_repo):
        result = CliRunner().invoke(main, [str(empty_repo), "--once", "--no-center"])
        assert result.exit_code == 0, result.output
        assert "Mood: dead" in result.output
        assert "No commits yet" in result.output
        assert "Repo: pet-repo" in result.output

    def test_recent_commits_are_happy(self, empty_repo):
        now = time.time()
        for minutes in (600, 300, 120, 9):
            commit_at(empty_repo, now - minutes * 60)

        result = CliRunner().invoke(main, [str(empty_repo), "--once", "--bar-width", "12"])

        assert result.exit_code == 0, result.output
        assert "Mood: happy" in result.output
        assert "9 minutes ago" in result.output
        assert "[##########--]" in result.output

    def test_custom_assets(self, empty_repo, assets_dir):
        result = CliRunner().invoke(main, [str(empty_repo), "--once", "--assets", str(assets_dir)])
        assert result.exit_code == 0, result.output
        assert "x_x" in result.output

    def test_log_file(self, empty_repo, tmp_path):
        log = tmp_path / "pet.log"
        result = CliRunner().invoke(main, [str(empty_repo), "--once", "-v", "--log-file", str(log)])
        assert result.exit_code == 0, result.output
        assert "tick=" in log.read_text()

    def test_config_file_defaults(self, empty_repo, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("bar_width: 7\n")
        result = CliRunner().invoke(main, [str(empty_repo), "--once"])
        assert result.exit_code == 0, result.output
        assert "[-------]" in result.output


class TestBuildContext:
    """The frozen run context."""

    def test_defaults_to_bundled_art(self, empty_repo):
        ctx = build_context(str(empty_repo), None, 30, True, False)
        assert ctx.repo_name == "pet-repo"
        assert ctx.manifest.paths()[0].parent == DEFAULT_ASSETS_DIR
        assert ctx.canvas.width > 0 and ctx.canvas.height > 0


def read_terminal(fd: int, until: bytes | None = None, timeout: float = 10.0) -> bytes:
    """Read from a pty master until `until` appears, the child hangs up, or output stops."""
    data = b""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        ready, _, _ = select.select([fd], [], [], 0.2)
        if not ready:
            if until is None:
                break
            continue
        try:
            chunk = os.read(fd, 4096)
        except OSError:  # EIO once the child has closed the terminal
            break
        if not chunk:
            break
        data += chunk
        if until is not None and until in data:
            break
    return data


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX pty and signals")
class TestInterrupt:
    """The installed command running in a real terminal."""

    @pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
    def test_signal_exits_zero_with_cursor_shown(self, empty_repo, tmp_path, sig):
        import pty

        src = Path(__file__).resolve().parents[1] / "src"
        env = {
            **os.environ,
            "PYTHONPATH": os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")])),
            "TAMAGOT_HOME": str(tmp_path / "home"),
            "COLUMNS": "80",
            "LINES": "25",
        }
        master, slave = pty.openpty()
        proc = subprocess.Popen(
            [sys.executable, "-m", "tamagot.cli", str(empty_repo)],
            stdin=slave, stdout=slave, stderr=slave, env=env, close_fds=True,
        )
        os.close(slave)

        try:
            output = read_terminal(master, until=b"Mood: dead")
            assert b"Mood: dead" in output
            proc.send_signal(sig)
            proc.wait(timeout=10)
            output += read_terminal(master)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            os.close(master)

        assert proc.returncode == 0
        assert output.count(b"\x1b[?25l") == 1
        assert output.rfind(b"\x1b[?25h") > output.rfind(b"\x1b[?25l")
