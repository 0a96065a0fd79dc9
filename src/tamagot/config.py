"""Configuration management for Tamagot."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
import yaml

# Load .env from multiple locations
_project_root = Path(__file__).parent.parent.parent
load_dotenv(_project_root / ".env")  # Project directory
load_dotenv(Path.home() / ".tamagot" / ".env")  # Config directory


CONFIG_DIR = Path(os.environ.get("TAMAGOT_HOME", Path.home() / ".tamagot"))
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class ConfigError(Exception):
    """The config file cannot be used."""


DEFAULT_CONFIG = {
    "assets_dir": None,  # None uses the art bundled with the package
    "bar_width": 30,
    "center": True,  # Center the pet horizontally in the terminal
    "alternate_screen": False,
    "log_file": None,  # stdout is the display, so logs only go to a file
    "log_level": "WARNING",
}


def load_config(config_file: Path | None = None) -> dict:
    """Load configuration from file, merged over the defaults."""
    config_file = config_file or CONFIG_FILE
    config = {}

    if config_file.exists():
        try:
            with open(config_file) as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_file}: {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"{config_file} must contain a mapping of settings")

    # Merge with defaults for any missing keys
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    # Environment overrides the file
    env_assets = os.environ.get("TAMAGOT_ASSETS")
    if env_assets:
        config["assets_dir"] = env_assets

    return config


def configure_logging(log_file: str | Path | None, level: str | int = "WARNING") -> logging.Logger:
    """Attach a file handler to the package logger, or silence it."""
    logger = logging.getLogger("tamagot")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    else:
        logger.addHandler(logging.NullHandler())

    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
