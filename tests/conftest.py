"""
Pytest configuration and common fixtures for weather resolver tests.

Upstream weather APIs are replaced with httpx.MockTransport serving
canned responses per city, all fixtures follow camelCase naming convention.
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from tests.utils import FakeWeatherUpstream


@pytest.fixture
def fakeUpstream() -> FakeWeatherUpstream:
    """Provide fake upstream weather APIs."""
    return FakeWeatherUpstream()


@pytest.fixture
def configFactory(tmp_path: Path) -> Callable[[Optional[str]], Path]:
    """
    Provide function writing config file with memory cache and two providers.

    Extra TOML passed to the function is appended to the base config.
    """

    def createConfig(extra: Optional[str] = None) -> Path:
        content = """
[logging]
level = "DEBUG"

[cache]
type = "memory"
lock-retry-interval = "20ms"
lock-max-wait = "2s"

[resolver]
request-timeout = "5s"

[[providers]]
type = "weatherapi"
api-key = "wa-secret"

[[providers]]
type = "openweathermap"
api-key = "owm-secret"
"""
        if extra:
            content += extra
        configPath = tmp_path / "config.toml"
        configPath.write_text(content)
        return configPath

    return createConfig
