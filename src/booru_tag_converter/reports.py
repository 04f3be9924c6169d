"""一括変換の結果レポート.

複数の入力をまとめて変換し、入力ごとの状態（判定フォーマット、タグ数、
フィルタ/簡略化の件数、エラー）を CSV または Parquet で出力する。
"""

from __future__ import annotations

import json
from pathlib import Path

import polars as pl
from loguru import logger

from booru_tag_converter.converter import TagConverter

BATCH_ENTRY_SEPARATOR = "---"

REPORT_SCHEMA = {
    "index": pl.Int64,
    "format": pl.String,
    "tag_count": pl.Int64,
    "total_filtered": pl.Int64,
    "total_simplified": pl.Int64,
    "error": pl.String,
    "tags": pl.String,
}


def read_batch_inputs(input_path: Path | str) -> list[str]:
    """一括変換の入力ファイルを読み込む.

    - `.json`: 文字列の配列
    - `.jsonl`: 1行1つの JSON 文字列
    - それ以外: `---` だけの行で区切ったテキスト

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: JSON の形式が不正な場合
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Batch input not found: {input_path}")

    text = input_path.read_text(encoding="utf-8")
    suffix = input_path.suffix.lower()

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in batch input: {input_path}") from e
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise ValueError(f"Batch input must be a JSON array of strings: {input_path}")
        return data

    if suffix == ".jsonl":
        entries: list[str] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                value = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON at {input_path}:{lineno}") from e
            if not isinstance(value, str):
                raise ValueError(f"Expected a JSON string at {input_path}:{lineno}")
            entries.append(value)
        return entries

    entries = []
    current: list[str] = []
    for line in text.splitlines():
        if line.strip() == BATCH_ENTRY_SEPARATOR:
            entries.append("\n".join(current))
            current = []
        else:
            current.append(line)
    entries.append("\n".join(current))
    return [e for e in entries if e.strip()]


def build_batch_report(
    converter: TagConverter,
    inputs: list[str],
    separator: str = ", ",
) -> pl.DataFrame:
    """入力を順に変換し、結果を DataFrame にまとめる.

    Args:
        converter: 変換に使うコンバータ
        inputs: 入力文字列のリスト
        separator: `tags` 列でタグを連結する区切り

    Returns:
        REPORT_SCHEMA の列を持つ DataFrame（入力1件につき1行）
    """
    rows: list[dict[str, object]] = []
    for i, raw in enumerate(inputs):
        tags = converter.convert(raw)
        status = converter.status
        rows.append(
            {
                "index": i,
                "format": status.format.value if status.format else None,
                "tag_count": status.tag_count,
                "total_filtered": status.total_filtered,
                "total_simplified": status.total_simplified,
                "error": status.error,
                "tags": separator.join(tags),
            }
        )

    failed = sum(1 for r in rows if r["error"])
    if failed:
        logger.warning(f"Batch conversion: {failed}/{len(rows)} inputs failed")
    return pl.DataFrame(rows, schema=REPORT_SCHEMA)


def export_batch_report(df: pl.DataFrame, output_path: Path | str, fmt: str = "csv") -> Path:
    """レポートを CSV / Parquet として出力する.

    Raises:
        ValueError: 未知の出力形式
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "csv":
        df.write_csv(output_path)
    elif fmt == "parquet":
        df.write_parquet(output_path)
    else:
        raise ValueError(f"Unknown report format: {fmt!r}")

    logger.info(f"Batch report written: {output_path} ({len(df)} rows)")
    return output_path
