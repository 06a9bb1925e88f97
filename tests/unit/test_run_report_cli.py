"""Unit tests for the run_report command line."""

import importlib
from datetime import date

import pytest


@pytest.fixture
def cli(monkeypatch):
    # Importing the script flips ENVIRONMENT away from "test"; monkeypatch restores it
    monkeypatch.setenv("ENVIRONMENT", "test")
    return importlib.import_module("scripts.run_report")


def test_explicit_period(cli):
    args = cli.parse_args(["Monthly", "--start", "2025-03-01", "--end", "2025-03-15"])
    assert args.report_type == "Monthly"
    assert args.start == date(2025, 3, 1)
    assert args.end == date(2025, 3, 15)


def test_default_period(cli):
    args = cli.parse_args(["Daily_Sales", "--to", "owner@x.com"])
    assert args.start is None
    assert args.end is None
    assert args.to == "owner@x.com"


@pytest.mark.parametrize("flag", ["--start", "--end"])
def test_lone_date_is_rejected(cli, flag, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(["Daily", flag, "2025-03-01"])

    assert exc.value.code == 2
    assert "--start and --end must be given together" in capsys.readouterr().err
