"""Data models for Tamagot."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tamagot.frames import FrameManifest


HUNGER_WINDOW = 3600  # Seconds a commit keeps the pet fed


class MoodState(Enum):
    """Discrete mood derived from recent commit activity."""
    DEAD = "dead"
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"


@dataclass(frozen=True)
class LastCommit:
    """The newest commit reachable from HEAD."""

    timestamp: int  # Commit time, epoch seconds
    relative: str  # Git's own rendering, e.g. "3 hours ago"


@dataclass(frozen=True)
class ActivitySample:
    """Commit counts captured for a single tick."""

    commits_24h: int
    commits_1h: int
    sampled_at: float
    last_commit: LastCommit | None = None


@dataclass(frozen=True)
class FrameAsset:
    """One art variant for a mood."""

    mood: MoodState
    variant_index: int
    path: Path
    lines: tuple[str, ...]

    @property
    def width(self) -> int:
        """Longest line, in characters."""
        return max((len(line) for line in self.lines), default=0)

    @property
    def height(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class Canvas:
    """Fixed character grid every frame is padded to."""

    width: int
    height: int


@dataclass(frozen=True)
class HungerState:
    """Time left before the pet gets hungry."""

    elapsed: float
    window: float = HUNGER_WINDOW

    @property
    def remaining(self) -> float:
        return max(0.0, self.window - self.elapsed)


@dataclass(frozen=True)
class RunContext:
    """Read-only configuration handed to the display loop."""

    repo_path: Path
    repo_name: str
    manifest: "FrameManifest"
    canvas: Canvas
    bar_width: int = 30
    center: bool = True
    alternate_screen: bool = False
