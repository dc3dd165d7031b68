"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test runs against a throwaway config directory: SPROUT_TRACK_CONFIG_DIR
points into tmp_path and the cached environment settings are cleared, so no
test can read or overwrite the developer's real settings file.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from sprout_track.core.config import get_settings


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the CLI at an empty config directory for the duration of a test."""
    config_dir = tmp_path / "sprout-track"
    monkeypatch.setenv("SPROUT_TRACK_CONFIG_DIR", str(config_dir))
    for name in ("SPROUT_TRACK_LOG_LEVEL", "SPROUT_TRACK_LOG_FORMAT", "SPROUT_TRACK_LOG_FILE", "SPROUT_TRACK_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield config_dir
    get_settings.cache_clear()
