"""Integration tests for the command line interface."""

import json
from pathlib import Path

import polars as pl
import pytest

from booru_tag_converter.cli import EXIT_FAILURE, EXIT_OK, main


def _run(tmp_path: Path, *args: str) -> int:
    return main(
        [
            "--config",
            str(tmp_path / "missing.yml"),
            "--store-backend",
            "json",
            "--store-path",
            str(tmp_path / "settings.json"),
            *args,
        ]
    )


@pytest.mark.integration
class TestCli:
    """CLI 統合テスト."""

    def test_convert_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        input_path = tmp_path / "input.txt"
        input_path.write_text("General\n?\n1boy 1.4M\n?\n1girl 6.1M\n?\noriginal 2.8M", encoding="utf-8")

        assert _run(tmp_path, "convert", str(input_path)) == EXIT_OK
        assert capsys.readouterr().out.strip() == "1boy, 1girl, original"

    def test_convert_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        input_path = tmp_path / "input.txt"
        input_path.write_text("1girl, smile, 1girl", encoding="utf-8")

        assert _run(tmp_path, "convert", "--json", str(input_path)) == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["tags"] == ["1girl", "smile"]
        assert output["status"]["format"] == "standard"
        assert output["status"]["tag_count"] == 2

    def test_filters_apply_to_convert(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        args = ["filters", "add", "--name", "Marks", "--keywords", "watermark", "--replacement", "clean, safe"]
        assert _run(tmp_path, *args) == EXIT_OK
        group_id = capsys.readouterr().out.strip()
        assert group_id.startswith("grp_")
        assert _run(tmp_path, "filters", "master", "on") == EXIT_OK

        input_path = tmp_path / "input.txt"
        input_path.write_text("1girl, watermark, smile", encoding="utf-8")
        assert _run(tmp_path, "convert", str(input_path)) == EXIT_OK
        assert capsys.readouterr().out.strip() == "1girl, clean, safe, smile"

        assert _run(tmp_path, "filters", "disable", group_id) == EXIT_OK
        assert _run(tmp_path, "convert", str(input_path)) == EXIT_OK
        assert capsys.readouterr().out.strip() == "1girl, watermark, smile"

    def test_filters_list(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        _run(tmp_path, "filters", "add", "--keywords", "hat, cap")
        capsys.readouterr()

        assert _run(tmp_path, "filters", "list") == EXIT_OK
        out = capsys.readouterr().out
        assert "master: off" in out
        assert "Group 1" in out
        assert "keywords: hat, cap" in out

    def test_unknown_group(self, tmp_path: Path) -> None:
        assert _run(tmp_path, "filters", "remove", "grp_missing") == EXIT_FAILURE

    def test_export_and_import(self, tmp_path: Path) -> None:
        export_path = tmp_path / "export" / "filters.json"
        _run(tmp_path, "filters", "add", "--name", "Hats", "--keywords", "hat")
        assert _run(tmp_path, "filters", "export", str(export_path)) == EXIT_OK

        document = json.loads(export_path.read_text(encoding="utf-8"))
        assert document["schemaVersion"] == 2
        assert [g["name"] for g in document["groups"]] == ["Hats"]

        assert _run(tmp_path, "filters", "import", str(export_path), "--mode", "append") == EXIT_OK
        stored = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
        groups = json.loads(stored["tagConverter_filterGroups"])["groups"]
        assert [g["name"] for g in groups] == ["Hats", "Hats"]
        assert groups[0]["id"] != groups[1]["id"]

    def test_import_invalid_document(self, tmp_path: Path) -> None:
        bad_path = tmp_path / "bad.json"
        bad_path.write_text(json.dumps({"masterEnabled": "yes", "groups": []}), encoding="utf-8")
        assert _run(tmp_path, "filters", "import", str(bad_path)) == EXIT_FAILURE

    def test_import_unreadable_file(self, tmp_path: Path) -> None:
        """存在しない・UTF-8 でないファイルはエラー終了する."""
        assert _run(tmp_path, "filters", "import", str(tmp_path / "missing.json")) == EXIT_FAILURE

        binary_path = tmp_path / "binary.json"
        binary_path.write_bytes(b"\xff\xfe\x00garbage")
        assert _run(tmp_path, "filters", "import", str(binary_path)) == EXIT_FAILURE

    def test_batch_report(self, tmp_path: Path) -> None:
        input_path = tmp_path / "inputs.txt"
        input_path.write_text("General\n?\n1girl 6.1M\n---\nhat, red hat\n", encoding="utf-8")
        output_path = tmp_path / "report.csv"

        assert _run(tmp_path, "batch", str(input_path), "--output", str(output_path)) == EXIT_OK
        df = pl.read_csv(output_path)
        assert df["format"].to_list() == ["danbooru", "standard"]
        assert df["tags"].to_list() == ["1girl", "hat, red hat"]

    def test_batch_missing_input(self, tmp_path: Path) -> None:
        code = _run(tmp_path, "batch", str(tmp_path / "none.json"), "--output", str(tmp_path / "r.csv"))
        assert code == EXIT_FAILURE

    def test_samples(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(tmp_path, "samples", "--name", "standard", "--convert") == EXIT_OK
        out = capsys.readouterr().out
        assert "# Standard" in out
        assert "=> masterpiece, best quality, 1girl, long hair, blue eyes, school uniform" in out

    def test_unknown_sample(self, tmp_path: Path) -> None:
        assert _run(tmp_path, "samples", "--name", "pixiv") == EXIT_FAILURE

    def test_invalid_log_level(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            _run(tmp_path, "--log-level", "loud", "samples")
