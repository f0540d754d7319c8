"""Tests for the command line: flags, exit codes, report file."""

import json

import yaml
from typer.testing import CliRunner

from siliconscan.cli import app

runner = CliRunner()

CLEAN = {
    "host": {
        "arm64_capable": True,
        "current_arch": "arm64",
        "os_version": "13.4",
        "emulation_layer_installed": True,
    },
    "path": ["/opt/homebrew/bin", "/usr/local/bin"],
    "developer_tools": "/Library/Developer/CommandLineTools",
}


def _facts_file(tmp_path, **host):
    facts = {**CLEAN, "host": {**CLEAN["host"], **host}}
    path = tmp_path / "facts.yaml"
    path.write_text(yaml.safe_dump(facts))
    return path


def _reports(directory):
    return sorted(directory.glob("silicon_compatibility_report_*.md"))


def test_help_exits_zero():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "--test" in result.output
    assert "--verbose" in result.output


def test_unknown_flag_is_rejected(tmp_path):
    result = runner.invoke(app, ["--bogus", "-o", str(tmp_path)])
    assert result.exit_code != 0
    assert _reports(tmp_path) == []


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("siliconscan ")


def test_clean_scan_exits_zero_and_writes_report(tmp_path):
    out = tmp_path / "out"
    result = runner.invoke(app, ["--facts", str(_facts_file(tmp_path)), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Found 0 critical issues, 0 warnings, and 0 informational items" in result.output
    reports = _reports(out)
    assert len(reports) == 1
    assert "No compatibility issues found." in reports[0].read_text()


def test_critical_scan_exits_one(tmp_path):
    facts = _facts_file(tmp_path, os_version="10.15.7")
    result = runner.invoke(app, ["--facts", str(facts), "-o", str(tmp_path)])
    assert result.exit_code == 1
    assert "macOS version 10.15.7 is not compatible with Apple Silicon" in result.output
    assert "### High Priority" in _reports(tmp_path)[0].read_text()


def test_json_output(tmp_path):
    facts = _facts_file(tmp_path, emulation_layer_installed=False)
    result = runner.invoke(app, ["--facts", str(facts), "-o", str(tmp_path), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["summary"] == {"critical": 0, "warning": 1, "info": 0}
    assert data["host"]["is_native_arch_host"] is True
    assert data["report_path"].endswith(".md")


def test_test_mode_banner(tmp_path):
    result = runner.invoke(app, ["--test", "--facts", str(_facts_file(tmp_path)), "-o", str(tmp_path)])
    assert result.exit_code == 0
    assert "TEST MODE" in result.output
    assert "[TEST MODE] Would check for Rosetta processes" in _reports(tmp_path)[0].read_text()


def test_config_overrides_tables(tmp_path):
    config = tmp_path / "tables.yaml"
    config.write_text("min_os_major: 14\n")
    facts = _facts_file(tmp_path)
    result = runner.invoke(app, ["--facts", str(facts), "--config", str(config), "-o", str(tmp_path)])
    assert result.exit_code == 1
    assert "Upgrade to macOS 14 or newer" in result.output


def test_bad_config_is_usage_error(tmp_path):
    config = tmp_path / "tables.yaml"
    config.write_text("no_such_table: 1\n")
    result = runner.invoke(app, ["--config", str(config), "-o", str(tmp_path)])
    assert result.exit_code == 2
    assert _reports(tmp_path) == []


def test_missing_facts_file_is_rejected(tmp_path):
    result = runner.invoke(app, ["--facts", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 2


def test_report_lands_in_output_dir_option(tmp_path):
    out = tmp_path / "nested" / "reports"
    result = runner.invoke(app, ["--facts", str(_facts_file(tmp_path)), "--output-dir", str(out)])
    assert result.exit_code == 0
    assert len(_reports(out)) == 1
    assert _reports(tmp_path) == []
