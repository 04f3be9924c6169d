"""アプリケーション設定（YAML）.

設定ファイルの例:

    store_backend: sqlite        # sqlite / json / memory
    store_path: ~/.booru_tag_converter/settings.db
    simplify_mode: strict        # strict / legacy
    log_level: INFO
    log_file: null

ファイルが無ければ既定値で動く。設定ファイルのパスは `--config` か
環境変数 `BOORU_TAG_CONVERTER_CONFIG` で指定する。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml
from loguru import logger

from booru_tag_converter.core.simplify import SimplifyMode
from booru_tag_converter.stores import STORE_BACKENDS

CONFIG_ENV_VAR = "BOORU_TAG_CONVERTER_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.booru_tag_converter/config.yml")
DEFAULT_STORE_PATH = Path("~/.booru_tag_converter/settings.db")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    store_backend: str = "sqlite"
    store_path: Path = DEFAULT_STORE_PATH
    simplify_mode: SimplifyMode = SimplifyMode.STRICT
    log_level: str = "INFO"
    log_file: Path | None = None

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(f"Invalid store_backend: {self.store_backend!r} (valid: {STORE_BACKENDS})")
        self.store_path = Path(self.store_path).expanduser()
        self.simplify_mode = SimplifyMode(self.simplify_mode)
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level!r}")
        if self.log_file is not None:
            self.log_file = Path(self.log_file).expanduser()


def resolve_config_path(path: Path | str | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_app_config(path: Path | str | None = None) -> AppConfig:
    """YAML からアプリケーション設定を読み込む.

    Args:
        path: 設定ファイルのパス（省略時は環境変数 → 既定パス）

    Returns:
        アプリケーション設定（ファイルが無ければ既定値）

    Raises:
        ValueError: YAML が不正、または値が不正な場合
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        logger.debug(f"App config not found, using defaults: {config_path}")
        return AppConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {config_path}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {unknown}")

    try:
        config = AppConfig(**{k: v for k, v in data.items() if k in known})
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    logger.info(f"Loaded app config from {config_path}")
    return config
