"""Tests for the burrow option parser."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(REPO_ROOT / "python"))

from burrow.errors import MissingValue, UnknownOption
from burrow.options import Flag, OptionSchema, parse


def _schema(help: bool = True) -> OptionSchema:
    return OptionSchema(
        [
            Flag("v", "verbose", "Verbose output"),
            Flag("f", "filter", "Filter pattern", takes_value=True),
        ],
        help=help,
    )


def test_boolean_and_value_flags():
    opts = parse(_schema(), ["-v", "-f", "foo"])
    assert opts.verbose is True
    assert opts.filter == "foo"
    assert opts.args == []
    assert opts.as_dict() == {"verbose": True, "filter": "foo"}


def test_positionals_keep_order():
    opts = parse(_schema(), ["one", "-v", "two", "--filter=x", "three"])
    assert opts.args == ["one", "two", "three"]
    assert opts.filter == "x"


def test_defaults_when_flags_absent():
    opts = parse(_schema(), ["arg"])
    assert opts.verbose is False
    assert opts.filter is None
    assert not opts.given("verbose")
    assert "filter" not in opts


def test_clustered_short_flags_with_trailing_value():
    opts = parse(_schema(), ["-vffoo"])
    assert opts.verbose is True
    assert opts.filter == "foo"


def test_double_dash_ends_flag_parsing():
    opts = parse(_schema(), ["--", "-v", "--filter"])
    assert opts.args == ["-v", "--filter"]
    assert opts.verbose is False


def test_negative_numbers_are_positional():
    opts = parse(_schema(), ["-3", "-1.5"])
    assert opts.args == ["-3", "-1.5"]


def test_unknown_option_reports_token():
    with pytest.raises(UnknownOption) as excinfo:
        parse(_schema(), ["--bogus"])
    assert excinfo.value.token == "--bogus"
    with pytest.raises(UnknownOption):
        parse(_schema(), ["-x"])


def test_missing_value_reports_flag():
    with pytest.raises(MissingValue) as excinfo:
        parse(_schema(), ["-f"])
    assert excinfo.value.flag == "-f"
    with pytest.raises(MissingValue):
        parse(_schema(), ["--filter"])


def test_help_flag_short_circuits():
    opts = parse(_schema(), ["-v", "--help", "--bogus"])
    assert opts.help_requested is True
    opts = parse(_schema(), ["-h"])
    assert opts.help_requested is True


def test_help_flag_anywhere_short_circuits():
    assert parse(_schema(), ["-f", "-h"]).help_requested is True
    assert parse(_schema(), ["--filter", "--help"]).help_requested is True
    assert parse(_schema(), ["one", "--", "-h"]).help_requested is True
    assert parse(_schema(help=False), ["--", "-h"]).args == ["-h"]


def test_help_flag_only_when_schema_has_one():
    with pytest.raises(UnknownOption):
        parse(_schema(help=False), ["-h"])


def test_empty_schema_treats_everything_as_positional():
    opts = parse(OptionSchema(), ["-v", "--x"])
    assert opts.args == ["-v", "--x"]


def test_duplicate_flags_rejected():
    schema = _schema()
    with pytest.raises(ValueError):
        schema.add(Flag("v", "very", "clash"))


def test_format_usage_lists_flags():
    text = _schema().format_usage("Usage: thing")
    lines = text.splitlines()
    assert lines[0] == "Usage: thing"
    assert any("-v, --verbose" in line for line in lines)
    assert any("-f, --filter FILTER" in line for line in lines)
    assert any("-h, --help" in line for line in lines)
