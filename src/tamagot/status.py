"""Status panel under the pet: mood, repo, last commit and hunger bar."""

from tamagot.models import HUNGER_WINDOW, HungerState, LastCommit, MoodState

# Progress bar characters
FILLED = "#"
EMPTY = "-"

BAR_WIDTH = 30
RULE = "=" * 48
NO_COMMITS = "No commits yet"


def hunger_state(last_commit: LastCommit | None, now: float, window: float = HUNGER_WINDOW) -> HungerState:
    """Hunger derived from the newest commit; no commits means already starving."""
    if last_commit is None:
        return HungerState(elapsed=window, window=window)
    elapsed = max(0.0, now - last_commit.timestamp)
    return HungerState(elapsed=elapsed, window=window)


def progress_bar(remaining: float, total: float, width: int = BAR_WIDTH) -> str:
    """Bar whose filled part represents time remaining."""
    if total <= 0:
        return EMPTY * width
    remaining = min(max(remaining, 0), total)
    filled = int(remaining * width // total)
    return FILLED * filled + EMPTY * (width - filled)


def format_duration(seconds: float) -> str:
    """Render seconds as `1h 01m 01s`, `1m 05s` or `7s`."""
    s = max(0, int(seconds))
    hours, rest = divmod(s, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    elif minutes > 0:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def render_status(
    repo_name: str,
    mood: MoodState,
    last_commit_relative: str | None,
    hunger: HungerState,
    bar_width: int = BAR_WIDTH,
) -> list[str]:
    """Build the status panel lines."""
    bar = progress_bar(hunger.remaining, hunger.window, bar_width)
    return [
        RULE,
        f"Mood: {mood.value}",
        f"Repo: {repo_name}",
        f"Last committed: {last_commit_relative or NO_COMMITS}",
        f"Hungry in: [{bar}] {format_duration(hunger.remaining)}",
        RULE,
    ]
