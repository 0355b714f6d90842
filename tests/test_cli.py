"""Tests for the command-line interface."""

import json
import logging

import pytest
from typer.testing import CliRunner

from unsafe_census import __version__
from unsafe_census.cli import app
from unsafe_census.scanning.treesitter_parser import TREE_SITTER_AVAILABLE

runner = CliRunner()

UNSAFE_SOURCE = """\
fn main() {
    let x = 1;
    let p = &x as *const i32;
    unsafe {
        let y = *p;
    }
}

#[cfg(test)]
mod tests {
    #[test]
    fn probe() {
        unsafe { touch(); }
    }
}
"""

SAFE_SOURCE = """\
#![forbid(unsafe_code)]

fn add(a: i32, b: i32) -> i32 {
    a + b
}
"""


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the run."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def unsafe_file(isolated):
    path = isolated / "main.rs"
    path.write_text(UNSAFE_SOURCE)
    return path


@pytest.fixture
def safe_file(isolated):
    path = isolated / "lib.rs"
    path.write_text(SAFE_SOURCE)
    return path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_unknown_format(safe_file):
    result = runner.invoke(app, [str(safe_file), "--format", "xml"])
    assert result.exit_code == 1
    assert "Unknown formatter" in result.output


@pytest.mark.skipif(not TREE_SITTER_AVAILABLE, reason="tree-sitter-rust not installed")
class TestScanCommand:
    def test_diagnostics_on_stdout(self, unsafe_file):
        result = runner.invoke(app, [str(unsafe_file), "--format", "quiet"])
        assert result.exit_code == 0
        lines = [line for line in result.stdout.splitlines() if " ~ " in line]
        assert lines == [
            "unsafe { let y = *p; } ~ Inner ~ 1 ~ 1 ~ Dereference Operation",
            "unsafe { touch(); } ~ Inner ~ 1 ~ 1",
        ]

    def test_exclude_tests(self, unsafe_file):
        result = runner.invoke(app, [str(unsafe_file), "--exclude-tests", "--format", "quiet"])
        assert result.exit_code == 0
        assert "touch()" not in result.stdout

    def test_output_file(self, unsafe_file, isolated):
        summary = isolated / "summary.json"
        result = runner.invoke(app, [str(unsafe_file), "--output", str(summary)])
        assert result.exit_code == 0
        data = json.loads(summary.read_text())
        assert data[0]["path"] == str(unsafe_file)
        assert data[0]["counters"]["exprs"]["unsafe"] == 2
        assert data[0]["final_depth"] == 0

    def test_json_format(self, safe_file):
        result = runner.invoke(app, [str(safe_file), "--format", "json"])
        assert result.exit_code == 0
        assert '"forbids_unsafe": true' in result.stdout

    def test_json_summary_follows_diagnostics(self, unsafe_file):
        result = runner.invoke(app, [str(unsafe_file), "--format", "json"])
        assert result.exit_code == 0
        stdout = result.stdout
        start = stdout.index("[\n")
        assert all(" ~ Inner ~ " in line for line in stdout[:start].splitlines())
        assert len(stdout[:start].splitlines()) == 2
        data = json.loads(stdout[start:])
        assert data[0]["regions_closed"] == 2

    def test_output_file_keeps_stdout_to_diagnostics(self, unsafe_file, isolated):
        summary = isolated / "summary.json"
        result = runner.invoke(app, [str(unsafe_file), "--format", "json", "--output", str(summary)])
        assert result.exit_code == 0
        assert '"counters"' not in result.stdout
        assert len([line for line in result.stdout.splitlines() if " ~ " in line]) == 2
        assert json.loads(summary.read_text())[0]["regions_closed"] == 2

    def test_missing_file(self, isolated):
        result = runner.invoke(app, [str(isolated / "absent.rs")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_syntax_error_rejected_unless_lenient(self, isolated):
        broken = isolated / "broken.rs"
        broken.write_text("fn main( {\n")
        assert runner.invoke(app, [str(broken), "-f", "quiet"]).exit_code == 1
        assert runner.invoke(app, [str(broken), "-f", "quiet", "--lenient"]).exit_code == 0

    def test_fail_on_unsafe(self, unsafe_file, safe_file):
        assert runner.invoke(app, [str(safe_file), "--fail-on-unsafe", "-f", "quiet"]).exit_code == 0
        assert runner.invoke(app, [str(unsafe_file), "--fail-on-unsafe", "-f", "quiet"]).exit_code == 1

    def test_verbose_log_file(self, unsafe_file, isolated):
        log_file = isolated / "scan.log"
        result = runner.invoke(app, [str(unsafe_file), "-v", "-f", "quiet", "--log-file", str(log_file)])
        assert result.exit_code == 0
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "enter Inner region" in log_file.read_text()

    def test_region_stats_from_config(self, unsafe_file, isolated):
        (isolated / "unsafe-census.toml").write_text('region_stats = "nope"\n')
        result = runner.invoke(app, [str(unsafe_file), "-f", "quiet"])
        assert result.exit_code == 1
        assert "region_stats" in result.output
