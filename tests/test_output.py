"""Tests for table/json/yaml output formatting."""

from __future__ import annotations

import json
from datetime import datetime

import yaml

from awstui.utils.output import MAX_CELL_WIDTH, OutputFormatter, format_datetime, format_size


ROWS = [
    {"name": "bucket-a", "creation_date": datetime(2024, 5, 1, 12, 0, 0)},
    {"name": "bucket-b", "creation_date": None},
]


def test_table_output(capsys):
    OutputFormatter("table").output(ROWS, title="Buckets")

    out = capsys.readouterr().out.splitlines()
    assert out[1] == "Buckets"
    assert out[2] == "======="
    assert out[3].split() == ["NAME", "CREATION_DATE"]
    assert out[5].split() == ["bucket-a", "2024-05-01", "12:00:00"]
    assert out[6].split() == ["bucket-b", "-"]


def test_table_respects_header_selection(capsys):
    OutputFormatter("table").output(ROWS, headers=["name"])

    out = capsys.readouterr().out
    assert "CREATION_DATE" not in out
    assert "bucket-b" in out


def test_empty_list(capsys):
    OutputFormatter("table").output([])

    assert "(no data)" in capsys.readouterr().out


def test_dict_table_nests(capsys):
    OutputFormatter("table").output({
        "user": {"user_name": "alice", "mfa_enabled": False},
        "access_keys": [{"access_key_id": "AKIA1"}],
    })

    out = capsys.readouterr().out
    assert "  user_name  : alice" in out
    assert "mfa_enabled: no" in out
    assert "access_key_id: AKIA1" in out


def test_long_cells_are_truncated(capsys):
    OutputFormatter("table").output([{"arn": "x" * 80}])

    row = capsys.readouterr().out.splitlines()[-1]
    assert row.strip() == "x" * MAX_CELL_WIDTH


def test_json_output(capsys):
    OutputFormatter("json").output(ROWS)

    data = json.loads(capsys.readouterr().out)
    assert data[0] == {"name": "bucket-a", "creation_date": "2024-05-01 12:00:00"}


def test_yaml_output(capsys):
    OutputFormatter("yaml").output(ROWS)

    data = yaml.safe_load(capsys.readouterr().out)
    assert data[0] == {"name": "bucket-a", "creation_date": "2024-05-01T12:00:00"}
    assert data[1]["creation_date"] is None


def test_format_datetime():
    assert format_datetime(None) == "-"
    assert format_datetime("2024-05-01T12:00:00Z") == "2024-05-01 12:00:00"
    assert format_datetime("yesterday") == "yesterday"


def test_format_size():
    assert format_size(None) == "-"
    assert format_size(512) == "512.0 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(5 * 1024 ** 3) == "5.0 GB"
