"""
tests/test_cli.py

Command-line wrapper: argument forms, JSON output and error exits.
"""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from pathtraffic.cli import main

EXPORT = (
    "timestamp,userId,path,status,latencyMs\n"
    "2025-01-01T10:00:00Z,u1,/api/orders,200,100\n"
    "2025-01-01T11:00:00Z,u2,/api/orders,200,200\n"
    "2025-01-01T11:30:00Z,u3,/api/users,200,50\n"
    "garbage line\n"
)


@pytest.fixture()
def export_file(tmp_path: Path) -> Path:
    p = tmp_path / "access.csv"
    p.write_text(EXPORT, encoding="utf-8")
    return p


def test_prints_json_report(export_file: Path, capsys) -> None:
    code = main([
        "--file", str(export_file),
        "--from", "2025-01-01",
        "--to", "2025-01-01",
        "--tz", "jst",
        "--top", "10",
        "--log-level", "WARNING",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert json.loads(out) == [
        {"date": "2025-01-01", "path": "/api/orders", "count": 2, "avgLatency": 150},
        {"date": "2025-01-01", "path": "/api/users", "count": 1, "avgLatency": 50},
    ]
    assert out.endswith("\n")


def test_equals_form_and_top(export_file: Path, capsys) -> None:
    code = main([
        f"--file={export_file}",
        "--from=2025-01-01",
        "--to=2025-01-01",
        "--tz=ict",
        "--top=1",
        "--log-level=WARNING",
    ])
    assert code == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["path"] for r in rows] == ["/api/orders"]


def test_reads_stdin(monkeypatch, capsys) -> None:
    fake_stdin = io.TextIOWrapper(io.BytesIO(EXPORT.encode("utf-8")), encoding="utf-8")
    monkeypatch.setattr("sys.stdin", fake_stdin)
    code = main(["--file", "-", "--from", "2025-01-01", "--to", "2025-01-01", "--log-level", "WARNING"])
    assert code == 0
    assert len(json.loads(capsys.readouterr().out)) == 2


@pytest.mark.parametrize(
    "extra,needle",
    [
        (["--tz", "utc"], "tz"),
        (["--top", "0"], "top"),
        (["--top", "two"], "top"),
    ],
)
def test_bad_options_exit_1(export_file: Path, capsys, extra, needle) -> None:
    code = main(["--file", str(export_file), "--from", "2025-01-01", "--to", "2025-01-01", "--log-level", "WARNING", *extra])
    assert code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert needle in captured.err


def test_bad_date_exit_1(export_file: Path, capsys) -> None:
    code = main(["--file", str(export_file), "--from", "2025/01/01", "--to", "2025-01-01", "--log-level", "WARNING"])
    assert code == 1
    assert "from" in capsys.readouterr().err


def test_missing_file_exit_1(tmp_path: Path, capsys) -> None:
    code = main(["--file", str(tmp_path / "nope.csv"), "--from", "2025-01-01", "--to", "2025-01-01", "--log-level", "WARNING"])
    assert code == 1
    assert "Cannot read" in capsys.readouterr().err


def test_missing_required_argument() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--from", "2025-01-01", "--to", "2025-01-01"])
    assert exc.value.code == 2
