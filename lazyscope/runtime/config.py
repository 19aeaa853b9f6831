"""Persistent JSON settings.

Stores cursor tracking, clip lengths, the alert deadline, the lens lineup and
relationship filters. Loading is defensive: a missing or malformed file, or a
value of the wrong type, falls back to the default for that field.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigError
from ..lenses import BUILTIN_LENS_NAMES, DEFAULT_STYLE
from ..panels.tree_panel import CURSOR_TRACKING_POLICIES, FLEXIBLE_RANGE
from ..row_model.providers import RelationshipPolicy
from ..row_model.rendering import KEY_CLIP_LENGTH, VALUE_CLIP_LENGTH
from .progress import ALERT_SECONDS

logger = logging.getLogger(__name__)

APP_NAME = "lazyscope"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass
class Settings:
    cursor_tracking: str = FLEXIBLE_RANGE
    key_clip_length: int = KEY_CLIP_LENGTH
    value_clip_length: int = VALUE_CLIP_LENGTH
    alert_seconds: float = ALERT_SECONDS
    pygments_style: str = DEFAULT_STYLE
    theme: str = "default"
    lens_names: list[str] = field(default_factory=lambda: list(BUILTIN_LENS_NAMES))
    include_empty_relationships: bool = False
    include_through_relationships: bool = True
    include_scoped_relationships: bool = False

    def validate(self) -> Settings:
        """Raise ``ConfigError`` for values the runtime cannot use; return ``self``."""
        if self.cursor_tracking not in CURSOR_TRACKING_POLICIES:
            raise ConfigError(
                f"cursor_tracking must be one of {', '.join(CURSOR_TRACKING_POLICIES)}, "
                f"got {self.cursor_tracking!r}"
            )
        if self.key_clip_length < 1 or self.value_clip_length < 1:
            raise ConfigError("clip lengths must be positive")
        if self.alert_seconds <= 0:
            raise ConfigError(f"alert_seconds must be positive, got {self.alert_seconds}")
        unknown = [name for name in self.lens_names if name not in BUILTIN_LENS_NAMES]
        if unknown:
            raise ConfigError(f"unknown lens names: {', '.join(unknown)}")
        if not self.lens_names:
            raise ConfigError("lens_names must name at least one lens")
        return self

    def relationship_policy(self) -> RelationshipPolicy:
        return RelationshipPolicy(
            include_empty=self.include_empty_relationships,
            include_through=self.include_through_relationships,
            include_scoped=self.include_scoped_relationships,
        )


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so that a read-only
    config directory never breaks a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _coerce(value: object, default: object) -> object:
    """Accept ``value`` only when its JSON type matches the default's type."""
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, int):
        return value if isinstance(value, int) and not isinstance(value, bool) else default
    if isinstance(default, float):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return default
    if isinstance(default, str):
        return value.strip() if isinstance(value, str) and value.strip() else default
    if isinstance(default, list):
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        return default
    return default


def load_settings() -> Settings:
    """Build ``Settings`` from the config file, field by field."""
    data = load_config()
    defaults = Settings()
    values = {
        item.name: _coerce(data.get(item.name, getattr(defaults, item.name)), getattr(defaults, item.name))
        for item in fields(Settings)
    }
    return Settings(**values)


def save_settings(settings: Settings) -> None:
    """Merge ``settings`` into the config file, keeping unrelated keys."""
    config = load_config()
    config.update(asdict(settings))
    save_config(config)
