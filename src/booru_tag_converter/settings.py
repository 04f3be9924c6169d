"""フィルタ設定の読み込み・変更・保存.

FilterSettings はストア（BaseStore）とフィルタ設定（FilterConfig）の間を取り持つ。
設定を変更する操作は全て、その場でストアへ保存する。

読み込みの優先順:
    1. 現行キー（STORAGE_KEY）
    2. 旧キー（LEGACY_STORAGE_KEY）→ 現行形式へ移行して保存
    3. どちらも無い/壊れている → 既定値（壊れていた場合は LoadResult で失敗を返す）
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from loguru import logger

from booru_tag_converter.core.exceptions import ConfigValidationError
from booru_tag_converter.core.filter_config import (
    FilterConfig,
    FilterGroup,
    load_config_payload,
    migrate_legacy_config,
    normalize_keywords,
)
from booru_tag_converter.core.replacement import replacement_error
from booru_tag_converter.core.transfer import ImportMode, ImportResult, dumps_export, import_config
from booru_tag_converter.stores import BaseStore

STORAGE_KEY = "tagConverter_filterGroups"
LEGACY_STORAGE_KEY = "tagConverter_filterSettings"

_UPDATABLE_FIELDS = {"name", "enabled", "keywords", "replacement"}


@dataclass(frozen=True)
class LoadResult:
    success: bool
    config: FilterConfig
    error: str | None = None
    migrated: bool = False


class FilterSettings:
    """永続化付きのフィルタ設定.

    Args:
        store: 保存先ストア
        auto_load: True なら生成時にストアから読み込む
    """

    def __init__(self, store: BaseStore, auto_load: bool = True) -> None:
        self.store = store
        self.config = FilterConfig.default()
        self.last_load: LoadResult | None = None
        if auto_load:
            self.load()

    # --- 読み込み/保存 ------------------------------------------------

    def _decode(self, raw: str) -> object:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Stored filter settings are not valid JSON: {e.msg}") from e

    def load(self) -> LoadResult:
        """ストアから設定を読み込む（壊れていても例外にせず既定値へ戻す）."""
        # ConfigValidationError も ValueError のサブクラス（ストア側の読み込み失敗と同じ扱い）
        try:
            raw = self.store.get(STORAGE_KEY)
            legacy_raw = None if raw is not None else self.store.get(LEGACY_STORAGE_KEY)

            if raw is not None:
                result = LoadResult(success=True, config=load_config_payload(self._decode(raw)))
            elif legacy_raw is not None:
                data = self._decode(legacy_raw)
                if not isinstance(data, dict):
                    raise ConfigValidationError("Legacy filter settings must be an object")
                result = LoadResult(success=True, config=migrate_legacy_config(data), migrated=True)
            else:
                result = LoadResult(success=True, config=FilterConfig.default())
        except ValueError as e:
            logger.warning(f"Ignoring corrupt filter settings, falling back to defaults: {e}")
            result = LoadResult(success=False, config=FilterConfig.default(), error=str(e))

        self.config = result.config
        self.last_load = result
        if result.migrated:
            logger.info(f"Migrated legacy filter settings into {len(self.config.groups)} group(s)")
            self.save()
        return result

    def save(self) -> None:
        self.store.set(STORAGE_KEY, json.dumps(self.config.to_dict(), ensure_ascii=False))
        logger.debug(f"Saved filter settings ({len(self.config.groups)} groups)")

    # --- グループ操作 -------------------------------------------------

    def add_group(
        self,
        name: str = "",
        keywords: list[str] | tuple[str, ...] = (),
        replacement: str = "",
        enabled: bool = True,
    ) -> FilterGroup:
        """グループを末尾に追加する."""
        error = replacement_error(replacement)
        if error:
            logger.warning(f"Invalid replacement for group '{name}' (will delete only): {error}")

        group = self.config.add_group(
            FilterGroup(
                name=name.strip(),
                enabled=enabled,
                keywords=normalize_keywords(list(keywords)),
                replacement=replacement,
            )
        )
        self.save()
        logger.info(f"Added filter group '{group.name}' ({group.id})")
        return group

    def update_group(self, group_id: str, **fields: object) -> FilterGroup:
        """グループのフィールドを更新する（id は変更不可）.

        Raises:
            KeyError: グループが存在しない場合
            ValueError: 更新できないフィールドが指定された場合
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update group fields: {sorted(unknown)}")

        group = self.config.get_group(group_id)
        if "name" in fields:
            name = str(fields["name"] or "").strip()
            group.name = name or group.name
        if "enabled" in fields:
            group.enabled = bool(fields["enabled"])
        if "keywords" in fields:
            group.keywords = normalize_keywords(fields["keywords"])
        if "replacement" in fields:
            replacement = str(fields["replacement"] or "")
            error = replacement_error(replacement)
            if error:
                logger.warning(f"Invalid replacement for group '{group.name}' (will delete only): {error}")
            group.replacement = replacement

        self.save()
        return group

    def remove_group(self, group_id: str) -> FilterGroup:
        group = self.config.remove_group(group_id)
        self.save()
        logger.info(f"Removed filter group '{group.name}' ({group.id})")
        return group

    def move_group(self, group_id: str, new_index: int) -> None:
        self.config.move_group(group_id, new_index)
        self.save()

    def set_group_enabled(self, group_id: str, enabled: bool) -> FilterGroup:
        return self.update_group(group_id, enabled=enabled)

    def set_master_enabled(self, enabled: bool) -> None:
        self.config.master_enabled = bool(enabled)
        self.save()

    def set_simplify_enabled(self, enabled: bool) -> None:
        self.config.simplify_enabled = bool(enabled)
        self.save()

    def reset(self) -> None:
        """既定値へ戻す（グループと統計は全て失われる）."""
        self.config = FilterConfig.default()
        self.save()
        logger.info("Filter settings reset to defaults")

    # --- インポート/エクスポート --------------------------------------

    def import_document(self, payload: str | bytes | dict, mode: ImportMode = ImportMode.REPLACE) -> ImportResult:
        """インポート文書を取り込み、成功したら保存する."""
        result = import_config(self.config, payload, mode)
        if result.success and result.config is not None:
            self.config = result.config
            self.save()
        return result

    def export_document(self) -> str:
        return dumps_export(self.config)
