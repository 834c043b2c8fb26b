"""Tests for config discovery and loading."""

import tomllib
from pathlib import Path

import pytest

from envbind.config.discovery import CONFIG_FILENAME, ConfigError, find_config, load_config


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENVBIND_CONFIG", raising=False)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[defaults]\nPORT = 8080\n")
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[defaults]\n")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[defaults]\n")
        monkeypatch.setenv("ENVBIND_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("ENVBIND_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_loads_tables(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(
            'verbose = true\n[defaults]\nPORT = 8080\nHOSTS = ["a", "b"]\n'
        )
        assert load_config(config_file) == {
            "verbose": True,
            "defaults": {"PORT": 8080, "HOSTS": ["a", "b"]},
        }

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("not = [valid\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config(config_file)

    def test_no_defaults_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("quiet = true\n")
        assert load_config(config_file) == {"quiet": True}

    def test_defaults_must_be_a_table(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('defaults = "PORT=1"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(config_file)

    def test_defaults_must_be_flat(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[defaults]\nPORT = 1\n[defaults.db]\nHOST = "x"\n')
        with pytest.raises(ConfigError, match=r"cannot be tables \(db\)"):
            load_config(config_file)
