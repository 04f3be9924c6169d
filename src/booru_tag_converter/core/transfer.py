"""フィルタ設定のインポート/エクスポート（JSON文書）.

エクスポート文書は FilterConfig の辞書に `exportedAt` を加えたもの:

    {
        "masterEnabled": true,
        "simplifyEnabled": false,
        "groups": [{"id": "...", "name": "...", "enabled": true, "keywords": [...], "replacement": ""}],
        "schemaVersion": 2,
        "exportedAt": "2025-01-01T00:00:00+00:00"
    }

インポートは REPLACE（丸ごと置き換え）と APPEND（現在の設定を保持し、
グループだけ新しいIDで末尾に追加）の2モード。不正な文書は例外にせず
ImportResult(success=False) で返す。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from loguru import logger

from .exceptions import ConfigValidationError
from .filter_config import CURRENT_SCHEMA_VERSION, FilterConfig, default_group_name, generate_group_id


class ImportMode(str, Enum):
    """インポート方法."""

    REPLACE = "replace"
    APPEND = "append"


@dataclass(frozen=True)
class ImportResult:
    success: bool
    config: FilterConfig | None = None
    error: str | None = None
    imported_groups: int = 0


def export_config(config: FilterConfig, now: datetime | None = None) -> dict[str, object]:
    """設定をエクスポート用の辞書にする.

    Args:
        config: エクスポートする設定
        now: エクスポート時刻（テスト用。省略時は現在時刻 UTC）
    """
    exported_at = (now or datetime.now(UTC)).isoformat()
    document = config.to_dict()
    document["schemaVersion"] = CURRENT_SCHEMA_VERSION
    document["exportedAt"] = exported_at
    return document


def dumps_export(config: FilterConfig, now: datetime | None = None) -> str:
    return json.dumps(export_config(config, now), indent=2, ensure_ascii=False)


def validate_import_payload(data: object) -> str | None:
    """インポート文書の形式を検証する.

    Returns:
        エラーメッセージ（問題なければ None）
    """
    if not isinstance(data, dict):
        return "Import document must be a JSON object"
    if not isinstance(data.get("masterEnabled"), bool):
        return "Missing or invalid 'masterEnabled' (boolean required)"
    if not isinstance(data.get("groups"), list):
        return "Missing or invalid 'groups' (array required)"

    for i, group in enumerate(data["groups"]):
        if not isinstance(group, dict):
            return f"Group #{i + 1} must be an object"
        if "id" not in group or group["id"] is None:
            return f"Group #{i + 1} is missing 'id'"
        if not isinstance(group.get("name"), str):
            return f"Group #{i + 1} has missing or invalid 'name' (string required)"
        if not isinstance(group.get("keywords"), list):
            return f"Group #{i + 1} has missing or invalid 'keywords' (array required)"
    return None


def _parse_document(payload: str | bytes | dict) -> object:
    if isinstance(payload, dict):
        return payload
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e
    except UnicodeDecodeError as e:
        raise ConfigValidationError(f"Import document is not valid text: {e.reason}") from e
    except RecursionError as e:
        raise ConfigValidationError("Import document is nested too deeply") from e


def import_config(
    current: FilterConfig,
    payload: str | bytes | dict,
    mode: ImportMode = ImportMode.REPLACE,
) -> ImportResult:
    """インポート文書を現在の設定へ取り込む.

    Args:
        current: 現在の設定（変更しない）
        payload: JSON文字列、または読み込み済みの辞書
        mode: REPLACE または APPEND

    Returns:
        取り込み結果。成功時は新しい FilterConfig を含む
    """
    try:
        data = _parse_document(payload)
        error = validate_import_payload(data)
        if error:
            raise ConfigValidationError(error)
        imported = FilterConfig.from_dict(data)
    except ConfigValidationError as e:
        logger.warning(f"Filter config import rejected: {e}")
        return ImportResult(success=False, error=str(e))

    if mode == ImportMode.REPLACE:
        logger.info(f"Imported filter config (replace): {len(imported.groups)} groups")
        return ImportResult(success=True, config=imported, imported_groups=len(imported.groups))

    merged = current.copy()
    for group in imported.groups:
        group.id = generate_group_id()
        group.match_count = 0
        if not group.name.strip():
            group.name = default_group_name(len(merged.groups) + 1)
        merged.groups.append(group)

    logger.info(f"Imported filter config (append): {len(imported.groups)} groups added")
    return ImportResult(success=True, config=merged, imported_groups=len(imported.groups))
