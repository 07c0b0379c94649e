"""User-tunable settings and their persistence."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_ENEMY_SPEED = 3.0
DEFAULT_ANIM_SPEED_MS = 150

# Lower bounds applied where tunables enter the core
MIN_ENEMY_SPEED = 0.1
MIN_ANIM_SPEED_MS = 1

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "arcade_shooter" / "settings.json"


def _finite(value: Any, default: float) -> float:
    """Convert to float, replacing NaN and infinities with a default."""
    number = float(value)
    return number if math.isfinite(number) else float(default)


@dataclass(frozen=True)
class GameSettings:
    """The two tunables the player controls.

    Attributes:
        enemy_speed: Horizontal enemy speed in pixels per tick.
        anim_speed_ms: Duration of one animation frame in milliseconds.
    """

    enemy_speed: float = DEFAULT_ENEMY_SPEED
    anim_speed_ms: int = DEFAULT_ANIM_SPEED_MS

    def clamped(self) -> "GameSettings":
        """Return a copy with both values forced to safe positive minimums."""
        speed = _finite(self.enemy_speed, DEFAULT_ENEMY_SPEED)
        anim_speed = _finite(self.anim_speed_ms, DEFAULT_ANIM_SPEED_MS)
        return GameSettings(
            enemy_speed=max(MIN_ENEMY_SPEED, speed),
            anim_speed_ms=max(MIN_ANIM_SPEED_MS, int(anim_speed)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameSettings":
        """Build settings from a dict, ignoring bad or unknown keys.

        Args:
            data: Raw settings, e.g. parsed from JSON.

        Returns:
            Clamped settings. Missing, non-numeric or infinite values use
            defaults.
        """
        settings = cls()
        for key, cast in (("enemy_speed", float), ("anim_speed_ms", int)):
            if key not in data:
                continue
            try:
                value = float(data[key])
                if not math.isfinite(value):
                    raise ValueError(f"{key} is not finite")
                settings = replace(settings, **{key: cast(value)})
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid setting %s=%r", key, data[key])
        return settings.clamped()


class SettingsStore:
    """Loads and saves GameSettings as a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the store.

        Args:
            path: Settings file location. Defaults to the user config dir.
        """
        self.path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
        self.settings = GameSettings()

    def load(self) -> GameSettings:
        """Load settings from disk.

        Returns:
            The loaded settings, or defaults if the file is missing or corrupt.
        """
        if not self.path.exists():
            self.settings = GameSettings()
            return self.settings

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read settings from %s", self.path)
            data = {}

        if not isinstance(data, dict):
            logger.warning("Settings file %s does not hold an object", self.path)
            data = {}

        self.settings = GameSettings.from_dict(data)
        return self.settings

    def save(self) -> None:
        """Write current settings to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.settings.to_dict(), indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Could not save settings to %s", self.path)

    def update(self, **changes: Any) -> GameSettings:
        """Change one or more settings and persist them.

        Args:
            **changes: Field values to replace.

        Returns:
            The new, clamped settings.
        """
        self.settings = replace(self.settings, **changes).clamped()
        self.save()
        return self.settings
