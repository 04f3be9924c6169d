"""Unit tests for app configuration loading."""

from pathlib import Path

import pytest

from booru_tag_converter.app_config import CONFIG_ENV_VAR, AppConfig, load_app_config, resolve_config_path
from booru_tag_converter.core.simplify import SimplifyMode


class TestLoadAppConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_app_config(tmp_path / "missing.yml")
        assert config.store_backend == "sqlite"
        assert config.simplify_mode == SimplifyMode.STRICT
        assert config.log_level == "INFO"

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text(
            f"store_backend: json\nstore_path: {tmp_path / 'settings.json'}\nsimplify_mode: legacy\nlog_level: debug\n",
            encoding="utf-8",
        )
        config = load_app_config(path)
        assert config.store_backend == "json"
        assert config.store_path == tmp_path / "settings.json"
        assert config.simplify_mode == SimplifyMode.LEGACY
        assert config.log_level == "DEBUG"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")
        assert load_app_config(path) == AppConfig()

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("store_backend: memory\ncolor: blue\n", encoding="utf-8")
        assert load_app_config(path).store_backend == "memory"

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("simplify_mode: fuzzy\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid config file"):
            load_app_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("store_backend: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_app_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_app_config(path)


class TestResolveConfigPath:
    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.yml"))
        assert resolve_config_path() == tmp_path / "env.yml"

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.yml"))
        assert resolve_config_path(tmp_path / "cli.yml") == tmp_path / "cli.yml"


class TestAppConfig:
    def test_invalid_backend(self) -> None:
        with pytest.raises(ValueError, match="store_backend"):
            AppConfig(store_backend="redis")

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValueError, match="log_level"):
            AppConfig(log_level="loud")
