"""Tests for prowl.config_loader: config files and ConfigManager."""

from __future__ import annotations

from pathlib import Path

import pytest

from prowl._errors import ConfigError
from prowl.config import WatchOptions
from prowl.config_loader import ConfigManager, load_config, read_config_file


class TestReadConfigFile:
    """read_config_file: YAML and TOML parsing."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert read_config_file(tmp_path / "_config.yml") == {}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.yml"
        path.write_text("destination: public\nport: 4001\n")
        assert read_config_file(path) == {"destination": "public", "port": 4001}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.yml"
        path.write_text("")
        assert read_config_file(path) == {}

    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.toml"
        path.write_text('destination = "public"\nexclude = ["*.bak"]\n')
        assert read_config_file(path) == {"destination": "public", "exclude": ["*.bak"]}

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.yml"
        path.write_text("exclude: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to read configuration"):
            read_config_file(path)

    def test_malformed_toml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.toml"
        path.write_text("destination = \n")
        with pytest.raises(ConfigError):
            read_config_file(path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "_config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            read_config_file(path)


class TestLoadConfig:
    """load_config: merging files, options, and engine defaults."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        config = load_config(WatchOptions(), cwd=str(tmp_path))
        assert config.source == "./"
        assert config.destination == "_site"
        assert config.config_files == ("_config.yml",)

    def test_file_values_applied(self, tmp_path: Path) -> None:
        (tmp_path / "_config.yml").write_text(
            "source: src\ndestination: public\nexclude:\n  - 'drafts/*'\n"
        )
        config = load_config(WatchOptions(), cwd=str(tmp_path))
        assert config.source == "src"
        assert config.destination == "public"
        assert config.exclude == ("drafts/*",)

    def test_later_files_override_earlier(self, tmp_path: Path) -> None:
        (tmp_path / "a.yml").write_text("port: 1000\nhost: 0.0.0.0\n")
        (tmp_path / "b.yml").write_text("port: 2000\n")
        config = load_config(WatchOptions(config=("a.yml", "b.yml")), cwd=str(tmp_path))
        assert config.port == 2000
        assert config.host == "0.0.0.0"

    def test_config_hash_overrides_files(self, tmp_path: Path) -> None:
        (tmp_path / "_config.yml").write_text("destination: public\n")
        options = WatchOptions(config_hash={"destination": "out"})
        config = load_config(options, cwd=str(tmp_path))
        assert config.destination == "out"

    def test_config_hash_names_files(self, tmp_path: Path) -> None:
        (tmp_path / "site.yml").write_text("port: 5000\n")
        options = WatchOptions(config_hash={"config": "site.yml"})
        config = load_config(options, cwd=str(tmp_path))
        assert config.port == 5000
        assert config.config_files == ("site.yml",)

    def test_drafts_override(self, tmp_path: Path) -> None:
        (tmp_path / "_config.yml").write_text("show_drafts: false\n")
        config = load_config(WatchOptions(drafts=True), cwd=str(tmp_path))
        assert config.show_drafts is True


class TestConfigManager:
    """ConfigManager: current snapshot, reload, and config-file detection."""

    def test_reload_replaces_snapshot(
        self, site_root: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        manager = ConfigManager(WatchOptions())
        before = manager.current
        (site_root / "_config.yml").write_text("destination: public\n")

        after = manager.reload()

        assert after is manager.current
        assert before.destination == "_site"
        assert after.destination == "public"
        assert "Reloading Prowl configuration!" in capsys.readouterr().err

    def test_touches_config(self, site_root: Path) -> None:
        manager = ConfigManager(WatchOptions())
        assert manager.touches_config(["index.md", "_config.yml"])
        assert not manager.touches_config(["index.md"])
        assert not manager.touches_config([])

    def test_touches_any_configured_file(self, site_root: Path) -> None:
        manager = ConfigManager(WatchOptions(config=("_config.yml", "_local.yml")))
        assert manager.touches_config(["_local.yml"])
