"""Art asset discovery and per-tick frame selection."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from tamagot.models import FrameAsset, MoodState

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.yaml"
DEFAULT_ASSETS_DIR = Path(__file__).parent / "assets"


class AssetError(Exception):
    """Art assets are missing or unusable."""


def tick_for(now: float) -> int:
    """Whole seconds since the epoch; drives animation independently of loop jitter."""
    return int(now)


def load_asset(mood: MoodState, variant_index: int, path: Path) -> FrameAsset:
    """Read an art file verbatim into a FrameAsset."""
    text = path.read_text(encoding="utf-8", errors="replace")
    return FrameAsset(
        mood=mood,
        variant_index=variant_index,
        path=path,
        lines=tuple(text.splitlines()),
    )


@dataclass(frozen=True)
class FrameManifest:
    """Ordered art variants for every mood, fixed at startup."""

    variants: dict[MoodState, tuple[Path, ...]]

    def paths(self) -> list[Path]:
        """Every asset path across all moods."""
        return [path for mood in MoodState for path in self.variants[mood]]

    def assets(self) -> list[FrameAsset]:
        """Load every asset in the manifest."""
        return [
            load_asset(mood, i, path)
            for mood in MoodState
            for i, path in enumerate(self.variants[mood])
        ]

    def select(self, mood: MoodState, tick: int) -> FrameAsset:
        """Pick the variant for this tick; periodic in the number of variants."""
        candidates = self.variants[mood]
        index = tick % len(candidates)
        return load_asset(mood, index, candidates[index])


def _variant_key(mood: MoodState):
    pattern = re.compile(rf"^{mood.value}(?:[_-]?(\d+))?\.txt$")

    def key(path: Path) -> tuple[int, str] | None:
        match = pattern.match(path.name)
        if not match:
            return None
        number = match.group(1)
        return (int(number) if number is not None else -1, path.name)

    return key


def _scan_variants(assets_dir: Path) -> dict[MoodState, tuple[Path, ...]]:
    """Match files strictly by mood name plus an optional variant number."""
    files = [p for p in assets_dir.iterdir() if p.is_file()]
    variants = {}
    for mood in MoodState:
        key = _variant_key(mood)
        matched = [(key(p), p) for p in files if key(p) is not None]
        variants[mood] = tuple(p for _, p in sorted(matched))
    return variants


def _read_manifest(assets_dir: Path, manifest_path: Path) -> dict[MoodState, tuple[Path, ...]]:
    """Read an explicit mood -> files mapping."""
    try:
        with open(manifest_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise AssetError(f"Invalid {MANIFEST_FILE}: {e}")

    if not isinstance(data, dict):
        raise AssetError(f"{MANIFEST_FILE} must map mood names to file lists")

    variants = {}
    for mood in MoodState:
        entries = data.get(mood.value) or []
        if isinstance(entries, str):
            entries = [entries]
        if not isinstance(entries, list) or any(isinstance(e, (dict, list)) for e in entries):
            raise AssetError(f"{MANIFEST_FILE}: {mood.value} must be a file name or list of file names")
        paths = []
        for entry in entries:
            path = assets_dir / str(entry)
            if not path.is_file():
                raise AssetError(f"{MANIFEST_FILE} lists missing file for {mood.value}: {entry}")
            paths.append(path)
        variants[mood] = tuple(paths)
    return variants


def discover_manifest(assets_dir: Path) -> FrameManifest:
    """
    Build the mood -> variants mapping once at startup.

    An explicit manifest.yaml in the assets directory wins; otherwise files
    named `<mood>.txt`, `<mood>2.txt`, `<mood>_1.txt` or `<mood>-3.txt` are
    collected per mood. Raises AssetError if any mood ends up with no art.
    """
    assets_dir = Path(assets_dir)
    if not assets_dir.is_dir():
        raise AssetError(f"Assets directory not found at {assets_dir}")

    manifest_path = assets_dir / MANIFEST_FILE
    if manifest_path.is_file():
        variants = _read_manifest(assets_dir, manifest_path)
    else:
        variants = _scan_variants(assets_dir)

    missing = [mood.value for mood in MoodState if not variants[mood]]
    if missing:
        raise AssetError(f"No frames found in {assets_dir} for: {', '.join(missing)}")

    for mood in MoodState:
        logger.debug("%s frames: %s", mood.value, [p.name for p in variants[mood]])
    return FrameManifest(variants=variants)
