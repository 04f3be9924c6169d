"""フィルタ設定（FilterGroup / FilterConfig）のデータモデルと移行処理.

永続化・インポート/エクスポートの単位は FilterConfig で、JSON 上のキーは
ブラウザ版と互換の camelCase（`masterEnabled`, `simplifyEnabled`, `groups`, `schemaVersion`）。

旧形式（キーワードのフラットなリスト）:
    {"enabled": true, "keywords": ["watermark", "signature"], "simplifyEnabled": false}

は `migrate_legacy_config()` でグループ1つの現行形式へ変換する。
移行・読み込みでグループを黙って捨てることはしない（欠けたフィールドは既定値で補う）。
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field

from .exceptions import ConfigValidationError

CURRENT_SCHEMA_VERSION = 2
LEGACY_SCHEMA_VERSION = 1
MIGRATED_GROUP_NAME = "Migrated keywords"


def generate_group_id() -> str:
    """グループIDを採番する（一度だけ生成し、以後変更しない）."""
    return f"grp_{uuid.uuid4().hex}"


def default_group_name(position: int) -> str:
    return f"Group {position}"


def normalize_keywords(keywords: object, field_name: str = "keywords") -> list[str]:
    """キーワード列を strip 済み・空要素なしのリストに揃える.

    カンマ区切りの文字列も受け付ける（旧UIの入力欄がこの形式だったため）。
    """
    if keywords is None:
        return []
    if isinstance(keywords, str):
        raw: list[object] = list(keywords.split(","))
    elif isinstance(keywords, (list, tuple)):
        raw = list(keywords)
    else:
        raise ConfigValidationError(f"'{field_name}' must be a list, got {type(keywords).__name__}", field_name)

    out: list[str] = []
    for v in raw:
        if v is None:
            continue
        s = v.strip() if isinstance(v, str) else str(v).strip()
        if s:
            out.append(s)
    return out


def _coerce_bool(value: object, default: bool, field_name: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ConfigValidationError(f"'{field_name}' must be a boolean, got {type(value).__name__}", field_name)


@dataclass
class FilterGroup:
    """フィルタグループ.

    keywords のいずれかに一致したタグを削除し、replacement が設定されていれば
    最初に削除した位置へ置換タグを挿入する。
    """

    id: str = field(default_factory=generate_group_id)
    name: str = ""
    enabled: bool = True
    keywords: list[str] = field(default_factory=list)
    replacement: str = ""
    match_count: int = 0  # 直近のフィルタ実行での一致数（永続化しない）

    @property
    def is_active(self) -> bool:
        return self.enabled and bool(self.keywords)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "keywords": list(self.keywords),
            "replacement": self.replacement,
        }

    @classmethod
    def from_dict(cls, data: dict, position: int = 1) -> FilterGroup:
        """辞書からグループを復元する（欠けたフィールドは既定値で補完）.

        Args:
            data: グループの辞書
            position: 名前が空のときに使うプレースホルダ番号（1始まり）

        Raises:
            ConfigValidationError: フィールドの型が不正な場合
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Group must be an object, got {type(data).__name__}", "groups")

        group_id = data.get("id")
        if group_id is None or (isinstance(group_id, str) and not group_id.strip()):
            group_id = generate_group_id()
        group_id = str(group_id)

        name = data.get("name")
        if name is None:
            name = ""
        if not isinstance(name, str):
            raise ConfigValidationError(f"Group name must be a string, got {type(name).__name__}", "name")

        replacement = data.get("replacement")
        if replacement is None:
            replacement = ""
        if not isinstance(replacement, str):
            raise ConfigValidationError(
                f"Group replacement must be a string, got {type(replacement).__name__}", "replacement"
            )

        return cls(
            id=group_id,
            name=name.strip() or default_group_name(position),
            enabled=_coerce_bool(data.get("enabled"), True, "enabled"),
            keywords=normalize_keywords(data.get("keywords")),
            replacement=replacement,
        )


@dataclass
class FilterConfig:
    """永続化/交換の単位となるフィルタ設定."""

    master_enabled: bool = False
    simplify_enabled: bool = False
    groups: list[FilterGroup] = field(default_factory=list)
    schema_version: int = CURRENT_SCHEMA_VERSION

    @classmethod
    def default(cls) -> FilterConfig:
        return cls()

    def copy(self) -> FilterConfig:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, object]:
        return {
            "masterEnabled": self.master_enabled,
            "simplifyEnabled": self.simplify_enabled,
            "groups": [g.to_dict() for g in self.groups],
            "schemaVersion": self.schema_version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FilterConfig:
        """現行形式の辞書から復元する.

        Raises:
            ConfigValidationError: 形式が不正な場合
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(f"Config must be an object, got {type(data).__name__}")

        raw_groups = data.get("groups")
        if raw_groups is None:
            raw_groups = []
        if not isinstance(raw_groups, list):
            raise ConfigValidationError("'groups' must be a list", "groups")

        config = cls(
            master_enabled=_coerce_bool(data.get("masterEnabled"), False, "masterEnabled"),
            simplify_enabled=_coerce_bool(data.get("simplifyEnabled"), False, "simplifyEnabled"),
            schema_version=CURRENT_SCHEMA_VERSION,
        )
        for position, raw in enumerate(raw_groups, start=1):
            group = FilterGroup.from_dict(raw, position=position)
            # 重複IDは採番し直す（グループ自体は捨てない）
            if config.find_group(group.id) is not None:
                group.id = generate_group_id()
            config.groups.append(group)
        return config

    # --- グループ操作 -------------------------------------------------

    def find_group(self, group_id: str) -> FilterGroup | None:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def get_group(self, group_id: str) -> FilterGroup:
        group = self.find_group(group_id)
        if group is None:
            raise KeyError(f"Filter group not found: {group_id}")
        return group

    def index_of(self, group_id: str) -> int:
        for i, group in enumerate(self.groups):
            if group.id == group_id:
                return i
        raise KeyError(f"Filter group not found: {group_id}")

    def add_group(self, group: FilterGroup) -> FilterGroup:
        if self.find_group(group.id) is not None:
            raise ValueError(f"Duplicate filter group id: {group.id}")
        if not group.name.strip():
            group.name = default_group_name(len(self.groups) + 1)
        self.groups.append(group)
        return group

    def remove_group(self, group_id: str) -> FilterGroup:
        return self.groups.pop(self.index_of(group_id))

    def move_group(self, group_id: str, new_index: int) -> None:
        """グループの実行順を変更する（範囲外のindexは端に丸める）."""
        group = self.groups.pop(self.index_of(group_id))
        new_index = max(0, min(new_index, len(self.groups)))
        self.groups.insert(new_index, group)


def is_legacy_config(data: object) -> bool:
    """旧形式（フラットなキーワードリスト）の設定か判定する."""
    return isinstance(data, dict) and "groups" not in data and isinstance(data.get("keywords"), (list, str))


def migrate_legacy_config(data: dict) -> FilterConfig:
    """旧形式の設定を現行形式へ変換する.

    フラットなキーワードリストをそのまま1グループにまとめる。
    キーワードが空でもグループは作る（ユーザーが後から編集できるように）。

    Args:
        data: 旧形式の辞書（`enabled`, `keywords`, `simplifyEnabled`）

    Returns:
        現行形式の設定
    """
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Legacy config must be an object, got {type(data).__name__}")

    group = FilterGroup(
        name=MIGRATED_GROUP_NAME,
        enabled=True,
        keywords=normalize_keywords(data.get("keywords")),
        replacement="",
    )
    return FilterConfig(
        master_enabled=_coerce_bool(data.get("enabled"), False, "enabled"),
        simplify_enabled=_coerce_bool(data.get("simplifyEnabled"), False, "simplifyEnabled"),
        groups=[group],
        schema_version=CURRENT_SCHEMA_VERSION,
    )


def load_config_payload(data: object) -> FilterConfig:
    """永続化されていた辞書を、形式を判定して FilterConfig に変換する.

    Raises:
        ConfigValidationError: どちらの形式としても解釈できない場合
    """
    if is_legacy_config(data):
        return migrate_legacy_config(data)  # type: ignore[arg-type]
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Config must be an object, got {type(data).__name__}")
    return FilterConfig.from_dict(data)
