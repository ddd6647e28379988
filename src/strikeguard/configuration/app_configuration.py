from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import fcntl
import os
from typing import Any, Dict
import yaml

from strikeguard.configuration.spam_settings import SpamDetectionSettings
from strikeguard.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()
DEFAULT_SETTINGS_PATH = "./data/settings.json"
DEFAULT_KEEP_ALIVE_HOST = "0.0.0.0"
DEFAULT_KEEP_ALIVE_PORT = 3000
MAX_PORT = 65535


@dataclass(frozen=True, slots=True)
class KeepAliveSettings:
    """Where (and whether) to serve the HTTP keep-alive endpoint."""

    enabled: bool = False
    host: str = DEFAULT_KEEP_ALIVE_HOST
    port: int = DEFAULT_KEEP_ALIVE_PORT


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed views over the sections StrikeGuard reads. A missing or malformed
    file is logged and treated as an empty mapping, so every accessor falls
    back to its default.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _section(self, key: str) -> Dict[str, Any]:
        section = self._data.get(key, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the cached configuration mapping. Callers should not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def spam_detection(self) -> SpamDetectionSettings:
        """Return the spam detector constants from the ``spam_detection`` section."""
        return SpamDetectionSettings.from_mapping(self._section("spam_detection"))

    @property
    def settings_path(self) -> Path:
        """Return the location of the display settings JSON file."""
        value = self._data.get("settings_file") or DEFAULT_SETTINGS_PATH
        return Path(str(value)).resolve()

    @property
    def keep_alive(self) -> KeepAliveSettings:
        """Return the keep-alive web server settings.

        The ``PORT`` environment variable, when set, overrides the configured
        port; hosting platforms use it to tell the service where to listen.
        """
        section = self._section("keep_alive")
        port_raw = os.getenv("PORT") or section.get("port", DEFAULT_KEEP_ALIVE_PORT)
        try:
            port = int(port_raw)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid keep-alive port %r; using %d", port_raw, DEFAULT_KEEP_ALIVE_PORT)
            port = DEFAULT_KEEP_ALIVE_PORT

        if not 0 <= port <= MAX_PORT:
            logger.warning("[APP CONFIGURATION] Keep-alive port %d out of range; using %d", port, DEFAULT_KEEP_ALIVE_PORT)
            port = DEFAULT_KEEP_ALIVE_PORT

        return KeepAliveSettings(
            enabled=bool(section.get("enabled", False)),
            host=str(section.get("host") or DEFAULT_KEEP_ALIVE_HOST),
            port=port,
        )


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
