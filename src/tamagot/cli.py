"""CLI interface for Tamagot."""

import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from tamagot import __version__
from tamagot.activity import RepositoryError, repository_name, resolve_repository
from tamagot.compositor import measure_canvas
from tamagot.config import ConfigError, configure_logging, load_config
from tamagot.display import run_display
from tamagot.frames import DEFAULT_ASSETS_DIR, AssetError, discover_manifest
from tamagot.models import RunContext


err_console = Console(stderr=True)


def fail(message: str) -> None:
    """Report a setup error and exit 1."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(1)


def build_context(
    repo_path: str,
    assets_dir: str | Path | None,
    bar_width: int,
    center: bool,
    alternate_screen: bool,
) -> RunContext:
    """Validate the repository and assets, and freeze everything the loop reads."""
    repo = resolve_repository(repo_path)
    manifest = discover_manifest(Path(assets_dir).expanduser() if assets_dir else DEFAULT_ASSETS_DIR)
    canvas = measure_canvas(manifest.assets())

    return RunContext(
        repo_path=repo,
        repo_name=repository_name(repo),
        manifest=manifest,
        canvas=canvas,
        bar_width=bar_width,
        center=center,
        alternate_screen=alternate_screen,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("repo_path", nargs=-1, metavar="REPO_PATH")
@click.option("--assets", "-a", "assets_dir", type=click.Path(), help="Directory of mood art files")
@click.option("--bar-width", "-w", type=click.IntRange(min=1), help="Hunger bar width (default: 30)")
@click.option("--center/--no-center", default=None, help="Center the pet in the terminal")
@click.option("--alt-screen/--no-alt-screen", "alt_screen", default=None, help="Draw on the alternate screen")
@click.option("--once", is_flag=True, help="Render a single frame and exit")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
@click.option("--verbose", "-v", is_flag=True, help="Debug-level logging")
@click.version_option(__version__)
@click.pass_context
def main(
    ctx: click.Context,
    repo_path: tuple[str, ...],
    assets_dir: str | None,
    bar_width: int | None,
    center: bool | None,
    alt_screen: bool | None,
    once: bool,
    log_file: str | None,
    verbose: bool,
):
    """Git activity tamagotchi: watch REPO_PATH's commits as a pet's mood.

    The pet is dead with no commits in the last 24 hours, sad with one,
    neutral with two, and happy with three or more as long as one landed
    in the last hour. Press Ctrl+C to stop.
    """
    if len(repo_path) != 1:
        click.echo(ctx.get_usage(), err=True)
        sys.exit(1)

    try:
        config = load_config()
    except ConfigError as e:
        fail(str(e))

    configure_logging(
        log_file or config["log_file"],
        "DEBUG" if verbose else config["log_level"],
    )

    try:
        run_ctx = build_context(
            repo_path[0],
            assets_dir or config["assets_dir"],
            bar_width or config["bar_width"],
            config["center"] if center is None else center,
            config["alternate_screen"] if alt_screen is None else alt_screen,
        )
    except (RepositoryError, AssetError) as e:
        fail(str(e))

    try:
        asyncio.run(run_display(run_ctx, max_ticks=1 if once else None))
    except KeyboardInterrupt:
        pass  # cursor already restored by the display loop


if __name__ == "__main__":
    main()
