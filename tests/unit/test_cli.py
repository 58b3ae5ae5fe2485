"""
Unit Tests: Uncertain CLI

Tests for the demo and bill commands using CliRunner.
"""

import json

from typer.testing import CliRunner

from src.cli.main import app

runner = CliRunner()

HOUSEHOLD = ["--month", "2025-01", "--area", "60", "--occupants", "2"]


class TestMainApp:

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Uncertain" in result.stdout

    def test_verbose_flag_accepted(self):
        result = runner.invoke(app, ["--verbose", "version"])
        assert result.exit_code == 0


class TestDemo:

    def test_demo_json(self):
        result = runner.invoke(app, ["demo", "--samples", "200", "--seed", "1", "--json"])
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        sections = {row["section"] for row in rows}
        assert "correlation" in sections
        assert "fair die" in sections

        by_label = {(row["section"], row["label"]): row["value"] for row in rows}
        assert by_label[("correlation", "x - x")] == 0.0

    def test_demo_seed_is_reproducible(self):
        first = runner.invoke(app, ["demo", "--samples", "100", "--seed", "5", "--json"])
        second = runner.invoke(app, ["demo", "--samples", "100", "--seed", "5", "--json"])
        assert first.stdout == second.stdout

    def test_demo_table(self):
        result = runner.invoke(app, ["demo", "--samples", "100"])
        assert result.exit_code == 0
        assert "Uncertain walkthrough" in result.stdout

    def test_demo_rejects_zero_samples(self):
        result = runner.invoke(app, ["demo", "--samples", "0"])
        assert result.exit_code == 1


class TestBillEstimate:

    def test_estimate_json(self):
        result = runner.invoke(
            app, ["bill", "estimate", *HOUSEHOLD, "--samples", "200", "--seed", "3", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["id"] == "bill_2025_01"
        assert data["total_kwh_lower"] <= data["total_kwh"] <= data["total_kwh_upper"]
        assert data["breakdown"][0]["name"] == "Heating"

    def test_estimate_with_ev(self):
        result = runner.invoke(
            app,
            ["bill", "estimate", *HOUSEHOLD, "--ev-km", "30", "--ev-battery", "60", "--samples", "100", "--json"],
        )
        assert result.exit_code == 0
        names = [item["name"] for item in json.loads(result.stdout)["breakdown"]]
        assert "EV Charging" in names

    def test_estimate_table(self):
        result = runner.invoke(app, ["bill", "estimate", *HOUSEHOLD, "--samples", "100"])
        assert result.exit_code == 0
        assert "Heating" in result.stdout

    def test_invalid_month(self):
        result = runner.invoke(app, ["bill", "estimate", "--month", "January", "--area", "60", "--occupants", "2"])
        assert result.exit_code == 1

    def test_invalid_heating_type(self):
        result = runner.invoke(app, ["bill", "estimate", *HOUSEHOLD, "--heating", "Wood"])
        assert result.exit_code == 1

    def test_invalid_confidence(self):
        result = runner.invoke(app, ["bill", "estimate", *HOUSEHOLD, "--confidence", "1.5"])
        assert result.exit_code == 1


class TestBillRisk:

    def test_zero_threshold_is_exceeded(self):
        result = runner.invoke(app, ["bill", "risk", *HOUSEHOLD, "--threshold", "0", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["accepted"] is True
        assert data["decision"] == "accept"
        assert data["threshold_kwh"] == 0.0

    def test_huge_threshold_is_not_exceeded(self):
        result = runner.invoke(app, ["bill", "risk", *HOUSEHOLD, "--threshold", "1000000", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["accepted"] is False

    def test_risk_text_output(self):
        result = runner.invoke(app, ["bill", "risk", *HOUSEHOLD, "--threshold", "0"])
        assert result.exit_code == 0
        assert "LIKELY EXCEEDED" in result.stdout
