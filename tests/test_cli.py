"""End-to-end tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from migscan import config as config_module
from migscan.cli import main

CSV = """\
"type","schema","dsn","user","password","audit_users"
"MYSQL","sakila","dbi:mysql:host=10.0.0.5;database=sakila;port=3306","root","rootpw",""
"ORACLE","","dbi:Oracle:host=10.0.0.6;sid=XE;port=1521","system","manager",""
"""


@pytest.fixture(autouse=True)
def _isolated_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "no-config.toml")


@pytest.fixture
def dsn_list(tmp_path: Path) -> Path:
    path = tmp_path / "dbs.csv"
    path.write_text(CSV)
    return path


def test_execute_mode_produces_reports(
    tmp_path: Path, dsn_list: Path, fake_tool: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    invocations = tmp_path / "invocations.log"
    monkeypatch.setenv("FAKE_TOOL_LOG", str(invocations))
    outdir = tmp_path / "scan"

    code = main(["-l", str(dsn_list), "-o", str(outdir), "-b", str(fake_tool)])

    assert code == 0
    summary = (outdir / "dbs_scan.csv").read_text().splitlines()
    assert summary == [
        "database;schema;user",
        "db;sakila;root",
        "db;HR;system",
        "db;SCOTT;system",
    ]
    reports = sorted(path.name for path in outdir.glob("*-report.html"))
    assert reports == [
        "10.0.0.5_sakila_sakila-report.html",
        "10.0.0.6_XE_HR-report.html",
        "10.0.0.6_XE_SCOTT-report.html",
    ]
    assert (outdir / "10.0.0.6_XE_HR-report.html").read_text() == "<report schema='HR'/>\n"
    calls = invocations.read_text().splitlines()
    assert len(calls) == 7
    assert sum("SHOW_SCHEMA" in call for call in calls) == 1
    assert calls[0].startswith("-m -s dbi:mysql:host=10.0.0.5")


def test_json_format_and_cost_unit(tmp_path: Path, dsn_list: Path, fake_tool: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    invocations = tmp_path / "invocations.log"
    monkeypatch.setenv("FAKE_TOOL_LOG", str(invocations))
    outdir = tmp_path / "scan"

    code = main(["-l", str(dsn_list), "-o", str(outdir), "-b", str(fake_tool.parent), "-f", "json", "-u", "12"])

    assert code == 0
    assert (outdir / "10.0.0.5_sakila_sakila-report.json").exists()
    assert all("--cost_unit_value 12" in call for call in invocations.read_text().splitlines() if "SHOW_REPORT" in call)


def test_dry_run_prints_commands_without_output_dir(
    tmp_path: Path, dsn_list: Path, fake_tool: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    outdir = tmp_path / "scan"

    code = main(["-l", str(dsn_list), "-o", str(outdir), "-b", str(fake_tool), "--test"])

    assert code == 0
    assert not outdir.exists()
    out = capsys.readouterr().out
    assert "SHOW_SCHEMA" in out
    assert "SCHEMA\tHR" in out
    assert "<SCHEMA>" in out
    assert out.count("--print_header") == 1
    assert "manager" not in out


def test_existing_output_dir_is_fatal(tmp_path: Path, dsn_list: Path, fake_tool: Path) -> None:
    outdir = tmp_path / "scan"
    outdir.mkdir()

    assert main(["-l", str(dsn_list), "-o", str(outdir), "-b", str(fake_tool)]) == 1
    assert list(outdir.iterdir()) == []


def test_malformed_list_aborts_before_anything_runs(tmp_path: Path, fake_tool: Path) -> None:
    bad = tmp_path / "bad.csv"
    bad.write_text("ORACLE,HR,dbi:Oracle:XE,hr,hr\nMYSQL,db,dbi:mysql:database=db\n")
    outdir = tmp_path / "scan"

    assert main(["-l", str(bad), "-o", str(outdir), "-b", str(fake_tool)]) == 1
    assert not outdir.exists()


def test_missing_list_is_fatal(tmp_path: Path, fake_tool: Path) -> None:
    assert main(["-l", str(tmp_path / "missing.csv"), "-o", str(tmp_path / "scan"), "-b", str(fake_tool)]) == 1


def test_invalid_format_is_fatal(tmp_path: Path, dsn_list: Path, fake_tool: Path) -> None:
    assert main(["-l", str(dsn_list), "-o", str(tmp_path / "scan"), "-b", str(fake_tool), "-f", "pdf"]) == 1


def test_bad_binpath_is_fatal(tmp_path: Path, dsn_list: Path) -> None:
    assert main(["-l", str(dsn_list), "-o", str(tmp_path / "scan"), "-b", str(tmp_path / "nowhere" / "ora2pg")]) == 1


def test_usage_error_shows_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "--outdir" in capsys.readouterr().err


def test_help_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--help"]) == 0
    assert "type,schema,dsn,user,password" in capsys.readouterr().out
