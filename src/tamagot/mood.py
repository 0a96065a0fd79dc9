"""Mood classification from commit counts."""

from tamagot.models import ActivitySample, MoodState


def classify(commits_24h: int, commits_1h: int) -> MoodState:
    """
    Map commit counts over the last day and hour to a mood.

    Three or more commits in a day only count as happy if at least one
    landed in the last hour; otherwise the pet is capped at neutral.
    """
    commits_24h = max(0, commits_24h)
    commits_1h = max(0, commits_1h)

    if commits_24h == 0:
        return MoodState.DEAD
    elif commits_24h == 1:
        return MoodState.SAD
    elif commits_24h == 2:
        return MoodState.NEUTRAL
    elif commits_1h == 0:
        return MoodState.NEUTRAL  # curveball cap
    return MoodState.HAPPY


def sample_mood(sample: ActivitySample) -> MoodState:
    """Mood for a captured activity sample."""
    return classify(sample.commits_24h, sample.commits_1h)
