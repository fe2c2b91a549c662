"""Configuration constants and user settings for epresent."""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from loguru import logger

from epresent.errors import ConfigParseError

# Document-level directive declaring the page granularity.
FRAME_LEVEL_KEYWORD = "EPRESENT_FRAME_LEVEL"
DEFAULT_FRAME_LEVEL = 1

# Per-node properties.
SHOW_FILE = "SHOW_FILE"
SHOW_VIDEO = "SHOW_VIDEO"
SHOW_BELOW = "SHOW_BELOW"
SHOW_SIZE = "SHOW_SIZE"
SHOW_AUTO = "SHOW_AUTO"
MUTE = "MUTE"
HIDE = "HIDE"
SLIDE_IN = "SLIDE_IN"
STEPWISE = "STEPWISE"
VISIBILITY = "VISIBILITY"

# VISIBILITY values that keep a child expanded on page entry.
VISIBLE_BY_DEFAULT = frozenset({"all", "children", "content", "showall"})

# Keyword lines shown as styled text rather than hidden as comments.
STYLED_KEYWORDS: dict[str, str] = {"TITLE": "title", "AUTHOR": "author", "DATE": "date"}

# Config file location. First file found is used.
CONFIG_FILES: list[Path] = [
    Path("~/.config/epresent.json").expanduser(),
    Path("~/.epresent.json").expanduser(),
]


@dataclass(frozen=True)
class PresentationConfig:
    """User-tunable presentation settings."""

    hide_todos: bool = True
    hide_tags: bool = True
    hide_properties: bool = True
    hide_comments: bool = True
    hide_stars: bool = True
    style_bullets: bool = True
    src_blocks_visible: bool = False
    indicators: bool = True
    words_per_minute: int = 150
    slide_in_steps: int = 10
    slide_in_delay: float = 0.02
    viewer_command: str = "xdg-open"
    player_command: str = "mpv"


def parse_config(data: Any) -> PresentationConfig:
    """Build a PresentationConfig from decoded JSON.

    Raises:
        ConfigParseError: If data is not an object or a value has the wrong type.
    """
    if not isinstance(data, dict):
        msg = f"Config must be a JSON object, got {type(data).__name__}"
        raise ConfigParseError(msg)

    defaults = PresentationConfig()
    values: dict[str, Any] = {}
    for f in fields(PresentationConfig):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(getattr(defaults, f.name))
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if type(value) is not expected:
            msg = f"Config field {f.name!r} must be {expected.__name__}, got {value!r}"
            raise ConfigParseError(msg)
        values[f.name] = value

    unknown = sorted(set(data) - {f.name for f in fields(PresentationConfig)})
    if unknown:
        logger.warning("Ignoring unknown config keys: {}", ", ".join(unknown))
    return PresentationConfig(**values)


def load_config(path: Path | None = None) -> PresentationConfig:
    """Load settings from ``path`` or the first existing file in CONFIG_FILES.

    Malformed files are logged and replaced by the defaults.
    """
    candidates = [path] if path is not None else CONFIG_FILES
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            try:
                data = json.loads(candidate.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                msg = f"{candidate}: {e}"
                raise ConfigParseError(msg) from e
            config = parse_config(data)
        except ConfigParseError as e:
            logger.warning("Invalid config, using defaults: {}", e)
            return PresentationConfig()
        logger.debug("Loaded config from {}", candidate)
        return config
    return PresentationConfig()
