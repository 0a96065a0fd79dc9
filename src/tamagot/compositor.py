"""Pad and center art into a fixed-size canvas."""

from tamagot.frames import AssetError
from tamagot.models import Canvas, FrameAsset


def measure_canvas(assets: list[FrameAsset]) -> Canvas:
    """Size the canvas to the largest asset so frame swaps never reflow the screen."""
    width = max((a.width for a in assets), default=0)
    height = max((a.height for a in assets), default=0)
    if width <= 0 or height <= 0:
        raise AssetError("No frames found in assets.")
    return Canvas(width=width, height=height)


def center_line(line: str, width: int) -> str:
    """
    Center a line inside `width` characters.

    Characters past the width are dropped, never wrapped. Width is measured
    in characters, so double-width glyphs can still overhang in a terminal.
    """
    line = line[:width]
    left = (width - len(line)) // 2
    right = width - len(line) - left
    return " " * left + line + " " * right


def compose(asset: FrameAsset, canvas: Canvas) -> list[str]:
    """Return exactly canvas.height lines, each exactly canvas.width characters."""
    lines = list(asset.lines[:canvas.height])
    top = (canvas.height - len(lines)) // 2
    bottom = canvas.height - len(lines) - top
    blank = " " * canvas.width

    return (
        [blank] * top
        + [center_line(line, canvas.width) for line in lines]
        + [blank] * bottom
    )
