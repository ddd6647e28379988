"""
Persistent display settings for StrikeGuard notices.

The settings live in a small JSON file that is always read and written whole.
Every access holds an ``fcntl`` lock on the file: shared for reads, exclusive
for writes and for the read-modify-write cycle used by the settings panel, so
two writers can never interleave and leave a truncated file behind.
"""

from __future__ import annotations

import fcntl
import json
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, IO

from strikeguard.configuration.app_configuration import app_config
from strikeguard.util.logger import get_logger

logger = get_logger("display_settings")


DEFAULT_COLOR = "#00ff88"
COLOR_CYCLE: tuple[str, ...] = ("#00ff88", "#00bfff", "#ff8800")


@dataclass(slots=True)
class DisplaySettings:
    """How public spam notices are rendered."""

    color: str = DEFAULT_COLOR
    show_creator: bool = True
    show_icon: bool = True

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "DisplaySettings":
        """Build settings from a decoded JSON object, ignoring unknown keys."""
        defaults = cls()
        color = data.get("color", defaults.color)
        return cls(
            color=color if isinstance(color, str) and color else defaults.color,
            show_creator=bool(data.get("show_creator", defaults.show_creator)),
            show_icon=bool(data.get("show_icon", defaults.show_icon)),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def color_value(self) -> int:
        """Return the colour as an integer for ``discord.Color``; falls back to the default."""
        try:
            return int(self.color.lstrip("#"), 16)
        except ValueError:
            return int(DEFAULT_COLOR.lstrip("#"), 16)


def next_color(current: str) -> str:
    """Return the colour after ``current`` in the panel's colour cycle."""
    try:
        index = COLOR_CYCLE.index(current)
    except ValueError:
        return COLOR_CYCLE[0]
    return COLOR_CYCLE[(index + 1) % len(COLOR_CYCLE)]


class DisplaySettingsStore:
    """Whole-file JSON store for :class:`DisplaySettings` guarded by file locks."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @contextmanager
    def _locked(self, mode: str, lock_type: int) -> Iterator[IO[str]]:
        with self.path.open(mode, encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), lock_type)
            try:
                yield handle
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

    def _decode(self, raw: str) -> DisplaySettings:
        if not raw.strip():
            return DisplaySettings()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("[DISPLAY SETTINGS] Malformed settings file %s (%s); using defaults", self.path, exc)
            return DisplaySettings()
        if not isinstance(payload, dict):
            logger.warning("[DISPLAY SETTINGS] Settings file %s does not hold an object; using defaults", self.path)
            return DisplaySettings()
        return DisplaySettings.from_mapping(payload)

    @staticmethod
    def _write(handle: IO[str], settings: DisplaySettings) -> None:
        handle.seek(0)
        handle.truncate()
        json.dump(settings.as_dict(), handle, indent=2)
        handle.flush()

    def load(self) -> DisplaySettings:
        """Read the settings file, returning defaults when it is missing or malformed."""
        try:
            with self._locked("r", fcntl.LOCK_SH) as handle:
                return self._decode(handle.read())
        except FileNotFoundError:
            logger.debug("[DISPLAY SETTINGS] No settings file at %s; using defaults", self.path)
            return DisplaySettings()
        except OSError as exc:
            logger.error("[DISPLAY SETTINGS] Failed to read %s: %s", self.path, exc)
            return DisplaySettings()

    def save(self, settings: DisplaySettings) -> None:
        """Rewrite the whole settings file under an exclusive lock."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # "a+" so the file is not truncated before the lock is held
        with self._locked("a+", fcntl.LOCK_EX) as handle:
            self._write(handle, settings)
        logger.debug("[DISPLAY SETTINGS] Saved settings to %s", self.path)

    def update(self, mutator: Callable[[DisplaySettings], None]) -> DisplaySettings:
        """Load, mutate and save the settings while holding one exclusive lock.

        Args:
            mutator: Callable that edits the loaded settings in place.

        Returns:
            DisplaySettings: The settings as written to disk.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._locked("a+", fcntl.LOCK_EX) as handle:
            handle.seek(0)
            settings = self._decode(handle.read())
            mutator(settings)
            self._write(handle, settings)
        logger.info("[DISPLAY SETTINGS] Updated settings: %s", settings.as_dict())
        return settings

    # --------------------------
    # Panel operations
    # --------------------------
    def toggle_icon(self) -> DisplaySettings:
        def _toggle(settings: DisplaySettings) -> None:
            settings.show_icon = not settings.show_icon
        return self.update(_toggle)

    def toggle_creator(self) -> DisplaySettings:
        def _toggle(settings: DisplaySettings) -> None:
            settings.show_creator = not settings.show_creator
        return self.update(_toggle)

    def cycle_color(self) -> DisplaySettings:
        def _cycle(settings: DisplaySettings) -> None:
            settings.color = next_color(settings.color)
        return self.update(_cycle)


# Shared store backed by the configured settings file
display_settings_store = DisplaySettingsStore(app_config.settings_path)
