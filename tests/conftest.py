"""Shared test fixtures for prowl."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

# Console colors are fixed at import; keep output assertions plain.
os.environ.setdefault("NO_COLOR", "1")

from prowl.config import SiteConfig, WatchOptions
from prowl.config_loader import ConfigManager
from prowl.server import ServerSupervisor


class RecordingEngine:
    """Engine stand-in created by ``RecordingEngineFactory``."""

    def __init__(self, factory: RecordingEngineFactory, config: SiteConfig) -> None:
        self._factory = factory
        self._config = config

    def process(self) -> None:
        self._factory.processed.append(self._config)
        if self._factory.error is not None:
            raise self._factory.error

    def serve(self) -> None:
        self._factory.served.append(self._config)


class RecordingEngineFactory:
    """Records every build; raises ``error`` from ``process()`` when set."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.processed: list[SiteConfig] = []
        self.served: list[SiteConfig] = []

    def __call__(self, config: SiteConfig) -> RecordingEngine:
        return RecordingEngine(self, config)


class FakeUnit:
    """In-memory server unit with the Process methods the supervisor uses."""

    def __init__(self) -> None:
        self.alive = True
        self.terminated = False

    def is_alive(self) -> bool:
        return self.alive

    def terminate(self) -> None:
        self.terminated = True
        self.alive = False


class FakeLauncher:
    """Launcher that hands out FakeUnits and remembers them."""

    def __init__(self) -> None:
        self.units: list[FakeUnit] = []
        self.configs: list[SiteConfig] = []

    def __call__(self, config: SiteConfig) -> FakeUnit:
        unit = FakeUnit()
        self.units.append(unit)
        self.configs.append(config)
        return unit

    @property
    def alive(self) -> list[FakeUnit]:
        return [u for u in self.units if u.is_alive()]


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal source tree, set as the working directory.

    Layout::

        _config.yml        exclude: ["secret*"]
        index.md
        css/site.css
        img/logo.png
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PROWL_IGNORE_FILES", raising=False)

    (tmp_path / "_config.yml").write_text("exclude:\n  - 'secret*'\n")
    (tmp_path / "index.md").write_text("# Home\n")
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "site.css").write_text("body { margin: 0; }\n")
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "logo.png").write_bytes(b"\x89PNG")
    return tmp_path


@pytest.fixture
def configs(site_root: Path) -> ConfigManager:
    return ConfigManager(WatchOptions())


@pytest.fixture
def engine() -> RecordingEngineFactory:
    return RecordingEngineFactory()


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def supervisor(configs: ConfigManager, launcher: FakeLauncher) -> ServerSupervisor:
    return ServerSupervisor(configs, launcher=launcher)
