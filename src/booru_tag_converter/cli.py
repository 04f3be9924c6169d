"""コマンドラインインターフェース.

使用例:
    $ booru-tag-converter convert input.txt
    $ pbpaste | booru-tag-converter convert --json
    $ booru-tag-converter filters add --name "Quality" --keywords "masterpiece, best quality"
    $ booru-tag-converter filters master on
    $ booru-tag-converter batch inputs.jsonl --output reports/batch.csv
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from booru_tag_converter.app_config import LOG_LEVELS, AppConfig, load_app_config
from booru_tag_converter.converter import TagConverter
from booru_tag_converter.core.filter_config import FilterConfig
from booru_tag_converter.core.replacement import replacement_error
from booru_tag_converter.core.transfer import ImportMode
from booru_tag_converter.reports import build_batch_report, export_batch_report, read_batch_inputs
from booru_tag_converter.samples import SAMPLES, get_sample
from booru_tag_converter.settings import FilterSettings
from booru_tag_converter.stores import STORE_BACKENDS, create_store

EXIT_OK = 0
EXIT_FAILURE = 1


def configure_logging(level: str, log_file: Path | None = None) -> None:
    """loguru のシンクを設定する（stderr + 任意のファイル）."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level="DEBUG", rotation="1 MB", retention=3, encoding="utf-8")


def _parse_switch(value: str) -> bool:
    lowered = value.lower()
    if lowered in {"on", "true", "1", "yes"}:
        return True
    if lowered in {"off", "false", "0", "no"}:
        return False
    raise argparse.ArgumentTypeError(f"expected on/off, got {value!r}")


def _split_keywords(values: list[str] | None) -> list[str]:
    out: list[str] = []
    for value in values or []:
        out.extend(k.strip() for k in value.split(",") if k.strip())
    return out


def _read_input(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _format_config(config: FilterConfig) -> str:
    lines = [
        f"master: {'on' if config.master_enabled else 'off'}",
        f"simplify: {'on' if config.simplify_enabled else 'off'}",
        f"groups: {len(config.groups)}",
    ]
    for i, group in enumerate(config.groups):
        state = "enabled" if group.enabled else "disabled"
        lines.append(f"  [{i}] {group.name} ({group.id}) {state}")
        lines.append(f"      keywords: {', '.join(group.keywords) or '-'}")
        if group.replacement:
            error = replacement_error(group.replacement)
            suffix = f"  (invalid: {error})" if error else ""
            lines.append(f"      replacement: {group.replacement}{suffix}")
    return "\n".join(lines)


# --- サブコマンド -----------------------------------------------------


def cmd_convert(args: argparse.Namespace, converter: TagConverter) -> int:
    tags = converter.convert(_read_input(args.input))
    status = converter.status

    if args.json:
        print(json.dumps({"tags": tags, "status": status.as_dict()}, indent=2, ensure_ascii=False))
    else:
        print(args.separator.join(tags))

    if status.error:
        logger.error(status.error)
        return EXIT_FAILURE
    return EXIT_OK


def cmd_batch(args: argparse.Namespace, converter: TagConverter) -> int:
    try:
        inputs = read_batch_inputs(args.input)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    logger.info(f"Converting {len(inputs)} inputs from {args.input}")
    df = build_batch_report(converter, inputs, separator=args.separator)
    export_batch_report(df, args.output, fmt=args.report_format)
    return EXIT_OK


def cmd_samples(args: argparse.Namespace, converter: TagConverter) -> int:
    try:
        samples = [get_sample(args.name)] if args.name else list(SAMPLES)
    except KeyError as e:
        logger.error(e.args[0])
        return EXIT_FAILURE
    for sample in samples:
        print(f"# {sample.name}")
        print(sample.content)
        if args.convert:
            print(f"=> {', '.join(converter.convert(sample.content))}")
        print()
    return EXIT_OK


def cmd_filters(args: argparse.Namespace, settings: FilterSettings) -> int:
    action = args.filters_action

    if action == "list":
        print(_format_config(settings.config))
    elif action == "add":
        group = settings.add_group(
            name=args.name or "",
            keywords=_split_keywords(args.keywords),
            replacement=args.replacement or "",
            enabled=not args.disabled,
        )
        print(group.id)
    elif action == "update":
        fields: dict[str, object] = {}
        if args.name is not None:
            fields["name"] = args.name
        if args.keywords is not None:
            fields["keywords"] = _split_keywords(args.keywords)
        if args.replacement is not None:
            fields["replacement"] = args.replacement
        settings.update_group(args.group_id, **fields)
    elif action == "remove":
        settings.remove_group(args.group_id)
    elif action == "move":
        settings.move_group(args.group_id, args.index)
    elif action in {"enable", "disable"}:
        settings.set_group_enabled(args.group_id, action == "enable")
    elif action == "master":
        settings.set_master_enabled(args.state)
    elif action == "simplify":
        settings.set_simplify_enabled(args.state)
    elif action == "reset":
        settings.reset()
    elif action == "import":
        try:
            document = args.file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read import file {args.file}: {e}")
            return EXIT_FAILURE
        result = settings.import_document(document, ImportMode(args.mode))
        if not result.success:
            logger.error(f"Import failed: {result.error}")
            return EXIT_FAILURE
        print(f"Imported {result.imported_groups} group(s) ({args.mode})")
    elif action == "export":
        document = settings.export_document()
        if args.file is None:
            print(document)
        else:
            args.file.parent.mkdir(parents=True, exist_ok=True)
            args.file.write_text(document, encoding="utf-8")
            logger.info(f"Exported filter settings to {args.file}")
    return EXIT_OK


# --- パーサ -----------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booru-tag-converter",
        description="Convert Danbooru/Gelbooru/comma-separated tag text into a clean tag list",
    )
    parser.add_argument("--config", type=Path, default=None, help="App config YAML path")
    parser.add_argument("--log-level", default=None, help="Override log level (DEBUG, INFO, ...)")
    parser.add_argument(
        "--store-backend", choices=STORE_BACKENDS, default=None, help="Override settings store backend"
    )
    parser.add_argument("--store-path", type=Path, default=None, help="Override settings store path")

    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Convert tag text (file or stdin)")
    p_convert.add_argument("input", type=Path, nargs="?", default=None, help="Input file (default: stdin)")
    p_convert.add_argument("--json", action="store_true", help="Print tags and status as JSON")
    p_convert.add_argument("--separator", default=", ", help="Separator for plain output")

    p_batch = sub.add_parser("batch", help="Convert many inputs and write a report")
    p_batch.add_argument("input", type=Path, help="Batch input (.json / .jsonl / text separated by '---')")
    p_batch.add_argument("--output", type=Path, required=True, help="Report output path")
    p_batch.add_argument("--report-format", choices=["csv", "parquet"], default="csv")
    p_batch.add_argument("--separator", default=", ", help="Separator for the tags column")

    p_samples = sub.add_parser("samples", help="Show built-in sample inputs")
    p_samples.add_argument("--name", default=None, help="Sample name (Danbooru / Gelbooru / Standard)")
    p_samples.add_argument("--convert", action="store_true", help="Also show the converted tags")

    p_filters = sub.add_parser("filters", help="Manage filter groups")
    f_sub = p_filters.add_subparsers(dest="filters_action", required=True)

    f_sub.add_parser("list", help="Show filter settings")

    f_add = f_sub.add_parser("add", help="Append a filter group")
    f_add.add_argument("--name", default=None)
    f_add.add_argument("--keywords", action="append", default=None, help="Comma-separated keywords (repeatable)")
    f_add.add_argument("--replacement", default=None, help="Replacement tags, e.g. 'clean, safe'")
    f_add.add_argument("--disabled", action="store_true", help="Create the group disabled")

    f_update = f_sub.add_parser("update", help="Update a filter group")
    f_update.add_argument("group_id")
    f_update.add_argument("--name", default=None)
    f_update.add_argument("--keywords", action="append", default=None, help="Replaces all keywords")
    f_update.add_argument("--replacement", default=None)

    f_remove = f_sub.add_parser("remove", help="Remove a filter group")
    f_remove.add_argument("group_id")

    f_move = f_sub.add_parser("move", help="Change the execution order of a group")
    f_move.add_argument("group_id")
    f_move.add_argument("index", type=int, help="New 0-based position")

    for name in ("enable", "disable"):
        f_toggle = f_sub.add_parser(name, help=f"{name.capitalize()} a filter group")
        f_toggle.add_argument("group_id")

    for name in ("master", "simplify"):
        f_switch = f_sub.add_parser(name, help=f"Turn the {name} switch on/off")
        f_switch.add_argument("state", type=_parse_switch)

    f_sub.add_parser("reset", help="Reset filter settings to defaults")

    f_import = f_sub.add_parser("import", help="Import filter settings from JSON")
    f_import.add_argument("file", type=Path)
    f_import.add_argument("--mode", choices=[m.value for m in ImportMode], default=ImportMode.REPLACE.value)

    f_export = f_sub.add_parser("export", help="Export filter settings as JSON")
    f_export.add_argument("file", type=Path, nargs="?", default=None, help="Output file (default: stdout)")

    return parser


def _resolve_app_config(args: argparse.Namespace) -> AppConfig:
    config = load_app_config(args.config)
    if args.store_backend is not None:
        config.store_backend = args.store_backend
    if args.store_path is not None:
        config.store_path = args.store_path.expanduser()
    if args.log_level is not None:
        level = args.log_level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {args.log_level!r}")
        config.log_level = level
    return config


def main(argv: list[str] | None = None) -> int:
    """CLI エントリポイント."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = _resolve_app_config(args)
    except ValueError as e:
        parser.error(str(e))

    configure_logging(app_config.log_level, app_config.log_file)

    store = create_store(app_config.store_backend, app_config.store_path)
    try:
        settings = FilterSettings(store)
        if args.command == "filters":
            try:
                return cmd_filters(args, settings)
            except KeyError as e:
                logger.error(e.args[0])
                return EXIT_FAILURE

        converter = TagConverter.from_settings(settings, simplify_mode=app_config.simplify_mode)
        if args.command == "convert":
            return cmd_convert(args, converter)
        if args.command == "batch":
            return cmd_batch(args, converter)
        if args.command == "samples":
            return cmd_samples(args, converter)
    finally:
        store.close()

    parser.error(f"Unknown command: {args.command}")
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
