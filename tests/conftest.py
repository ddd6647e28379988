"""
Pytest configuration and fixtures for StrikeGuard tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from strikeguard.configuration.display_settings import DisplaySettingsStore  # noqa: E402
from strikeguard.configuration.spam_settings import SpamDetectionSettings  # noqa: E402


@pytest.fixture()
def spam_settings() -> SpamDetectionSettings:
    return SpamDetectionSettings(window_ms=10_000, threshold=5, base_minutes=5, multiplier=2)


@pytest.fixture()
def settings_store(tmp_path: Path) -> DisplaySettingsStore:
    return DisplaySettingsStore(tmp_path / "data" / "settings.json")
