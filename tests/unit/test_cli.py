from __future__ import annotations

import json
from pathlib import Path

import pytest

from csvrecords.cli.main import main


def test_cli_help_prints_and_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    """CLI is accessible."""
    # Argparse exits via SystemExit for -h
    with pytest.raises(SystemExit) as e:
        main(["-h"])

    assert e.value.code == 0
    out = capsys.readouterr().out
    assert "usage: csvrecords" in out
    assert "parse" in out


def test_cli_parse_prints_summary(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("name,age\nJohn,30\n# note\nJane,25\n")
    rc = main(["parse", "--input", str(path), "--comments"])
    assert rc == 0

    out = capsys.readouterr().out.strip()
    assert out == f"{path}: rows=2 errors=0 fields=2 truncated=false"


def test_cli_parse_json_output(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("Full Name,Age,Joined\nAda Lovelace,36,1990-01-01\n")
    rc = main([
        "parse", "--input", str(path), "--json",
        "--dynamic-typing", "--header-transform", "snake",
        "--rename", "full_name=name", "--parser", "age=float",
    ])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["meta"]["fields"] == ["name", "age", "joined"]
    assert payload["data"] == [{"name": "Ada Lovelace", "age": 36.0, "joined": "1990-01-01 00:00:00+00:00"}]
    assert payload["errors"] == []


def test_cli_skip_invalid_lines_reports_errors(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("a,b\n1,2\n1,2,3\n4,5")
    rc = main(["parse", "--input", str(path), "--skip-invalid-lines", "--json"])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert len(payload["data"]) == 2
    assert payload["errors"] == [{
        "type": "InvalidRow",
        "code": "row_parse_failed",
        "message": "too many fields: expected 2, got 3",
        "row": 2,
    }]


def test_cli_bad_row_without_skip_exits_one(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("a,b\n1,2,3")
    rc = main(["parse", "--input", str(path)])
    assert rc == 1
    assert "too many fields" in capsys.readouterr().err


def test_cli_missing_file_exits_one(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["parse", "--input", str(tmp_path / "nope.csv")])
    assert rc == 1
    assert "error:" in capsys.readouterr().err


def test_cli_bad_pair_flag_exits_one(write_csv) -> None:
    path = write_csv("a\n1")
    assert main(["parse", "--input", str(path), "--rename", "no-equals-sign"]) == 1


def test_cli_preview_and_no_header(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("1,2\n3,4\n5,6")
    rc = main(["parse", "--input", str(path), "--no-header", "--preview", "2", "--json"])
    assert rc == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["data"] == [["1", "2"], ["3", "4"]]
    assert payload["meta"]["truncated"] is True
    assert "fields" not in payload["meta"]


def test_cli_unknown_encoding_exits_one(write_csv, capsys: pytest.CaptureFixture[str]) -> None:
    path = write_csv("a\n1")
    rc = main(["parse", "--input", str(path), "--encoding", "bogus"])
    assert rc == 1
    assert "bogus" in capsys.readouterr().err
