"""Tests for prowl.sync.build: BuildCoordinator."""

from __future__ import annotations

from pathlib import Path

import pytest

from prowl._errors import BuildFailure
from prowl._types import Failed, Ok
from prowl.config import WatchOptions
from prowl.config_loader import ConfigManager
from prowl.observability import BuildCompleted, BuildFailed, EventLog
from prowl.server import ServerSupervisor
from prowl.sync.build import BuildCoordinator

from .conftest import FakeLauncher, RecordingEngineFactory


@pytest.fixture
def builder(
    configs: ConfigManager,
    supervisor: ServerSupervisor,
    engine: RecordingEngineFactory,
) -> BuildCoordinator:
    return BuildCoordinator(configs, supervisor, engine_factory=engine)


class TestBuildSuccess:
    """Successful builds: one engine run, completion line."""

    def test_runs_engine_once(
        self, builder: BuildCoordinator, engine: RecordingEngineFactory,
    ) -> None:
        assert builder.build() == Ok()
        assert len(engine.processed) == 1

    def test_engine_gets_current_config(
        self,
        builder: BuildCoordinator,
        configs: ConfigManager,
        engine: RecordingEngineFactory,
    ) -> None:
        builder.build()
        assert engine.processed[0] is configs.current

    def test_completion_line(
        self, builder: BuildCoordinator, capsys: pytest.CaptureFixture[str],
    ) -> None:
        builder.build()
        err = capsys.readouterr().err
        assert "Prowl building..." in err
        assert "Prowl build completed in " in err
        assert "./ → _site" in err

    def test_elapsed_rounded(
        self, builder: BuildCoordinator, capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        ticks = iter([10.0, 11.23456])
        monkeypatch.setattr("prowl.sync.build.time.perf_counter", lambda: next(ticks, 11.23456))
        builder.build()
        assert "completed in 1.23s" in capsys.readouterr().err

    def test_display_lines_with_markers(
        self, builder: BuildCoordinator, capsys: pytest.CaptureFixture[str],
    ) -> None:
        builder.build(["index.md", "about.md"], "added")
        err = capsys.readouterr().err
        assert "Files added: building..." in err
        assert "|  + index.md" in err
        assert "|  + about.md" in err

    @pytest.mark.parametrize(
        ("kind", "reason", "mark"),
        [
            ("modified", "Files changed: ", "~"),
            ("removed", "Files removed: ", "x"),
        ],
    )
    def test_reason_and_marker_per_kind(
        self,
        builder: BuildCoordinator,
        capsys: pytest.CaptureFixture[str],
        kind: str,
        reason: str,
        mark: str,
    ) -> None:
        builder.build(["index.md"], kind)  # type: ignore[arg-type]
        err = capsys.readouterr().err
        assert reason in err
        assert f"|  {mark} index.md" in err

    def test_batch_does_not_scope_build(
        self, builder: BuildCoordinator, engine: RecordingEngineFactory,
    ) -> None:
        builder.build(["a.md", "b.md", "c.md"], "modified")
        assert len(engine.processed) == 1

    def test_silent_hides_status(
        self,
        site_root: Path,
        supervisor: ServerSupervisor,
        engine: RecordingEngineFactory,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        configs = ConfigManager(WatchOptions(silent=True))
        BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        err = capsys.readouterr().err
        assert "building" not in err
        assert "completed" not in err

    def test_custom_prefix(
        self,
        site_root: Path,
        supervisor: ServerSupervisor,
        engine: RecordingEngineFactory,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        configs = ConfigManager(WatchOptions(msg_prefix="Blog"))
        BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        assert "Blog build completed" in capsys.readouterr().err

    def test_records_event(
        self,
        configs: ConfigManager,
        supervisor: ServerSupervisor,
        engine: RecordingEngineFactory,
    ) -> None:
        log = EventLog()
        BuildCoordinator(configs, supervisor, engine_factory=engine, events=log).build(
            ["index.md"], "modified",
        )
        [event] = log.query(event_type=BuildCompleted)
        assert event.trigger_count == 1
        assert event.destination == "_site"


class TestBuildFailure:
    """Engine RuntimeError: error output, server stopped, Failed result."""

    def test_returns_failed(
        self, configs: ConfigManager, supervisor: ServerSupervisor,
    ) -> None:
        engine = RecordingEngineFactory(error=RuntimeError("Liquid syntax error"))
        result = BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        assert isinstance(result, Failed)
        assert isinstance(result.error, BuildFailure)
        assert "Liquid syntax error" in str(result.error)

    def test_stops_server(
        self,
        configs: ConfigManager,
        supervisor: ServerSupervisor,
        launcher: FakeLauncher,
    ) -> None:
        supervisor.start()
        engine = RecordingEngineFactory(error=RuntimeError("boom"))
        BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        assert not supervisor.is_running
        assert launcher.units[0].terminated

    def test_no_completion_line(
        self,
        configs: ConfigManager,
        supervisor: ServerSupervisor,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        engine = RecordingEngineFactory(error=RuntimeError("boom"))
        BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        err = capsys.readouterr().err
        assert "Prowl build has failed" in err
        assert "boom" in err
        assert "completed" not in err

    def test_message_shown_when_silent(
        self,
        site_root: Path,
        supervisor: ServerSupervisor,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        configs = ConfigManager(WatchOptions(silent=True))
        engine = RecordingEngineFactory(error=RuntimeError("missing layout"))
        BuildCoordinator(configs, supervisor, engine_factory=engine).build()
        err = capsys.readouterr().err
        assert "missing layout" in err
        assert "build has failed" not in err

    def test_other_exceptions_propagate(
        self, configs: ConfigManager, supervisor: ServerSupervisor,
    ) -> None:
        engine = RecordingEngineFactory(error=KeyError("unexpected"))
        with pytest.raises(KeyError):
            BuildCoordinator(configs, supervisor, engine_factory=engine).build()

    def test_records_event(
        self, configs: ConfigManager, supervisor: ServerSupervisor,
    ) -> None:
        log = EventLog()
        engine = RecordingEngineFactory(error=RuntimeError("boom"))
        BuildCoordinator(configs, supervisor, engine_factory=engine, events=log).build()
        [event] = log.query(event_type=BuildFailed)
        assert event.message == "boom"
