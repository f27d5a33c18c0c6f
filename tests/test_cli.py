"""Tests for the command line entry points that need no network."""

from __future__ import annotations

from typer.testing import CliRunner

from intel_briefing.cli import app


runner = CliRunner()


def test_invalid_category_exits_with_usage_code():
    result = runner.invoke(app, ["headlines", "--category", "weather"])
    assert result.exit_code == 2
    assert "Invalid category" in result.output


def test_bias_lookup_prints_rating():
    result = runner.invoke(app, ["bias", "www.reuters.com"])
    assert result.exit_code == 0
    assert "Reuters" in result.output
    assert "center" in result.output


def test_bias_lookup_for_unknown_outlet_fails():
    result = runner.invoke(app, ["bias", "example.org"])
    assert result.exit_code == 1
    assert "No rating for example.org" in result.output
