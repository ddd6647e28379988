from dataclasses import dataclass
from typing import Any, Dict, Optional

from strikeguard.util.logger import get_logger

logger = get_logger("spam_settings")


DEFAULT_WINDOW_MS = 10_000
DEFAULT_THRESHOLD = 5
DEFAULT_BASE_MINUTES = 5
DEFAULT_MULTIPLIER = 2


def _coerce_positive_int(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    try:
        coerced = int(value)
    except (TypeError, ValueError):
        logger.warning("[SPAM SETTINGS] Invalid value %r for %s; using default %s", value, key, default)
        return default
    if coerced <= 0:
        logger.warning("[SPAM SETTINGS] Non-positive value %r for %s; using default %s", value, key, default)
        return default
    return coerced


@dataclass(frozen=True, slots=True)
class SpamDetectionSettings:
    """Tuning constants for the rolling spam detector.

    All values are fixed at startup. ``strike_decay_ms`` is None unless strike
    decay is explicitly configured.
    """

    window_ms: int = DEFAULT_WINDOW_MS
    threshold: int = DEFAULT_THRESHOLD
    base_minutes: int = DEFAULT_BASE_MINUTES
    multiplier: int = DEFAULT_MULTIPLIER
    strike_decay_ms: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Dict[str, Any] | None) -> "SpamDetectionSettings":
        """Build settings from the ``spam_detection`` config mapping.

        Missing keys take their defaults; invalid or non-positive values are
        logged and replaced by the default.
        """
        if not isinstance(data, dict):
            data = {}

        decay_raw = data.get("strike_decay_ms")
        strike_decay_ms = None
        if decay_raw is not None:
            strike_decay_ms = _coerce_positive_int(data, "strike_decay_ms", 0) or None

        return cls(
            window_ms=_coerce_positive_int(data, "window_ms", DEFAULT_WINDOW_MS),
            threshold=_coerce_positive_int(data, "threshold", DEFAULT_THRESHOLD),
            base_minutes=_coerce_positive_int(data, "base_minutes", DEFAULT_BASE_MINUTES),
            multiplier=_coerce_positive_int(data, "multiplier", DEFAULT_MULTIPLIER),
            strike_decay_ms=strike_decay_ms,
        )
