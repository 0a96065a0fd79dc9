"""Flicker-free terminal rendering and the once-a-second refresh loop."""

import asyncio
import functools
import logging
import signal
import time
from typing import Callable

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType

from tamagot.activity import sample_activity
from tamagot.compositor import compose
from tamagot.frames import tick_for
from tamagot.models import ActivitySample, RunContext
from tamagot.mood import sample_mood
from tamagot.status import hunger_state, render_status

logger = logging.getLogger(__name__)

REFRESH_SECONDS = 1.0
ERASE_TO_EOL = Control((ControlType.ERASE_IN_LINE, 0))


class TerminalDisplay:
    """Owns the cursor and writes whole frames over the previous one in place."""

    def __init__(self, console: Console, alternate_screen: bool = False):
        self.console = console
        self.alternate_screen = alternate_screen
        self.active = False

    def initialize(self) -> None:
        """Hide the cursor and clear the screen once."""
        if self.alternate_screen:
            self.console.control(Control.alt_screen(True))
        self.console.control(Control.show_cursor(False), Control.clear(), Control.home())
        self.active = True

    def draw(self, rows: list[str]) -> None:
        """Home the cursor and overwrite every row, clearing leftovers to end of line."""
        with self.console:  # buffer so the frame goes out in one write
            self.console.control(Control.home())
            for i, row in enumerate(rows):
                if i:
                    self.console.out("", highlight=False)
                self.console.out(row, end="", highlight=False)
                self.console.control(ERASE_TO_EOL)

    def restore(self) -> None:
        """Show the cursor again and leave the terminal on a fresh line."""
        if not self.active:
            return
        self.active = False
        self.console.control(Control.show_cursor(True))
        if self.alternate_screen:
            self.console.control(Control.alt_screen(False))
        self.console.out("", highlight=False)


def left_margin(ctx: RunContext, terminal_width: int | None) -> int:
    """Spaces needed to center the block horizontally in the terminal."""
    if not ctx.center or not terminal_width:
        return 0
    return max(0, (terminal_width - ctx.canvas.width) // 2)


def build_frame(
    ctx: RunContext,
    sample: ActivitySample,
    now: float,
    terminal_width: int | None = None,
) -> list[str]:
    """Compose pet art and status panel rows for one tick."""
    mood = sample_mood(sample)
    asset = ctx.manifest.select(mood, tick_for(now))
    hunger = hunger_state(sample.last_commit, now)
    relative = sample.last_commit.relative if sample.last_commit else None

    rows = compose(asset, ctx.canvas) + render_status(
        ctx.repo_name, mood, relative, hunger, ctx.bar_width
    )
    pad = " " * left_margin(ctx, terminal_width)
    return [pad + row for row in rows]


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, task: asyncio.Task) -> list[int]:
    """Route SIGINT/SIGTERM to task cancellation where the loop supports it."""
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
            installed.append(sig)
        except (NotImplementedError, RuntimeError) as e:
            # Windows or a non-main thread; Ctrl+C still arrives as KeyboardInterrupt
            logger.debug("No handler for %s: %s", sig, e)
    return installed


async def run_display(
    ctx: RunContext,
    console: Console | None = None,
    max_ticks: int | None = None,
    sampler: Callable[..., ActivitySample] = sample_activity,
    clock: Callable[[], float] = time.time,
) -> None:
    """
    Run the pet until cancelled.

    Each tick samples the repository (in the default executor), renders
    the frame and sleeps to the next whole second. Cancellation, whether
    from a signal or the caller, may land at any await point; the cursor
    is restored either way.

    Args:
        ctx: Read-only run configuration
        console: Console to draw on (defaults to stdout)
        max_ticks: Stop after this many frames; None runs forever
        sampler: Callable taking (repo_path, now) returning an ActivitySample
        clock: Source of epoch seconds
    """
    console = console or Console(highlight=False)
    display = TerminalDisplay(console, alternate_screen=ctx.alternate_screen)
    loop = asyncio.get_running_loop()
    installed = _install_signal_handlers(loop, asyncio.current_task())

    display.initialize()
    ticks = 0
    try:
        while max_ticks is None or ticks < max_ticks:
            now = clock()
            sample = await loop.run_in_executor(
                None, functools.partial(sampler, ctx.repo_path, now)
            )
            logger.debug(
                "tick=%d 24h=%d 1h=%d mood=%s",
                tick_for(now), sample.commits_24h, sample.commits_1h, sample_mood(sample).value,
            )
            display.draw(build_frame(ctx, sample, now, console.width))
            ticks += 1

            if max_ticks is not None and ticks >= max_ticks:
                break
            await asyncio.sleep(REFRESH_SECONDS - (clock() % REFRESH_SECONDS))
    except asyncio.CancelledError:
        logger.info("Display stopped after %d frames", ticks)
    finally:
        display.restore()
        for sig in installed:
            loop.remove_signal_handler(sig)
