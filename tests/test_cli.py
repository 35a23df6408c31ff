"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from rnaseq_deliverables.cli import cli


class TestClassifyCommand:

    def test_prints_kind_and_group(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["classify", "C1_GO_enrichment.xlsx", "path/to/readme.md"])

        assert result.exit_code == 0
        assert "C1_GO_enrichment.xlsx\tcomparison_go\tC1" in result.output
        assert "readme.md\tunknown\t-" in result.output

    def test_requires_files(self):
        result = CliRunner().invoke(cli, ["classify"])
        assert result.exit_code != 0


class TestProcessCommand:

    def test_writes_dataset(self, tmp_path, make_csv, dge_detail_rows):
        detail = tmp_path / "C1_DGE_results.csv"
        detail.write_bytes(make_csv(dge_detail_rows))
        output = tmp_path / "out" / "dataset.json"

        result = CliRunner().invoke(
            cli, ["process", str(detail), "--output", str(output), "--workers", "2"]
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["comparisons"]["C1"]["sigCount"] == 2
        assert payload["files"][0]["status"] == "success"
        assert "PROCESSING SUMMARY" in result.output

    def test_failed_file_sets_exit_code(self, tmp_path):
        broken = tmp_path / "C1_DGE_results.xlsx"
        broken.write_bytes(b"not a workbook")
        output = tmp_path / "dataset.json"

        result = CliRunner().invoke(cli, ["process", str(broken), "--output", str(output)])

        assert result.exit_code == 1
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["files"][0]["status"] == "error"

    def test_missing_file_rejected(self, tmp_path):
        result = CliRunner().invoke(cli, ["process", str(tmp_path / "missing.csv")])
        assert result.exit_code != 0
