"""Integration tests for the CLI."""

import csv
import json

import openpyxl
import pytest

from ledgergrid.cli.main import cli


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "state.db")


def _invoke(cli_runner, db_path, *args):
    return cli_runner.invoke(cli, ["--db-path", db_path, *args])


def test_help_does_not_need_state(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "overview" in result.output


def test_overview_generate_writes_csv(cli_runner, db_path, ledger_csv, scenario_rows, tmp_path):
    ledger = ledger_csv(scenario_rows)
    output = tmp_path / "overview.csv"

    result = _invoke(
        cli_runner, db_path, "overview", "generate", "--ledger", ledger, "-o", str(output), "--year", "2024"
    )

    assert result.exit_code == 0, result.output
    assert "Financial overview generated successfully!" in result.output
    assert "Wrote 13 rows" in result.output

    with open(output, newline="", encoding="utf-8") as f:
        grid = list(csv.reader(f))
    assert grid[0][4] == "Jan-24"
    assert grid[0][18:20] == ["Show Sub-Categories", "TRUE"]
    assert grid[6][:4] == ["Essentials", "Food", "Groceries", "TRUE"]
    assert grid[6][4].endswith("/IF(D7=TRUE,2,1)")


def test_overview_generate_console(cli_runner, db_path, ledger_csv, scenario_rows):
    ledger = ledger_csv(scenario_rows)

    result = _invoke(cli_runner, db_path, "overview", "generate", "--ledger", ledger, "--console")

    assert result.exit_code == 0, result.output
    assert "Total Expenses" in result.output
    assert "Net (Total Income - Expenses)" in result.output


def test_overview_generate_missing_column(cli_runner, db_path, ledger_csv, tmp_path):
    ledger = ledger_csv([["Date", "Type", "Category"], ["2024-01-01", "Income", "Salary"]])

    result = _invoke(
        cli_runner, db_path, "overview", "generate", "--ledger", ledger, "-o", str(tmp_path / "o.csv")
    )

    assert result.exit_code == 1
    assert "Required columns not found: Amount" in result.output
    assert not (tmp_path / "o.csv").exists()


def test_toggle_subcategories_and_settings(cli_runner, db_path, ledger_csv, scenario_rows, tmp_path):
    ledger = ledger_csv(scenario_rows)
    output = tmp_path / "overview.csv"

    result = _invoke(
        cli_runner,
        db_path,
        "overview",
        "toggle-subcategories",
        "--off",
        "--ledger",
        ledger,
        "-o",
        str(output),
        "--year",
        "2024",
    )
    assert result.exit_code == 0, result.output
    assert "Sub-categories hidden" in result.output

    with open(output, newline="", encoding="utf-8") as f:
        grid = list(csv.reader(f))
    assert grid[0][19] == "FALSE"
    assert grid[6][:3] == ["Essentials", "Food", ""]

    result = _invoke(cli_runner, db_path, "settings", "list")
    assert "ShowSubCategories: false" in result.output

    # Without --on/--off the preference flips
    result = _invoke(
        cli_runner, db_path, "overview", "toggle-subcategories", "--ledger", ledger, "-o", str(output)
    )
    assert "Sub-categories shown" in result.output

    result = _invoke(cli_runner, db_path, "settings", "reset", "--yes")
    assert result.exit_code == 0
    result = _invoke(cli_runner, db_path, "settings", "list")
    assert "No preferences stored" in result.output


def test_cache_clear(cli_runner, db_path, ledger_csv, scenario_rows, tmp_path):
    ledger = ledger_csv(scenario_rows)
    _invoke(cli_runner, db_path, "overview", "generate", "--ledger", ledger, "-o", str(tmp_path / "o.csv"))

    result = _invoke(cli_runner, db_path, "cache", "clear")

    assert result.exit_code == 0
    assert "Cleared 6 cache keys" in result.output


def test_cache_clear_when_disabled(cli_runner, db_path, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"cache": {"enabled": False}}), encoding="utf-8")

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "--config", str(config_path), "cache", "clear"]
    )

    assert result.exit_code == 0
    assert "Cache is disabled" in result.output


def test_invalid_config_file(cli_runner, db_path, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"colour": "red"}), encoding="utf-8")

    result = cli_runner.invoke(
        cli, ["--db-path", db_path, "--config", str(config_path), "settings", "list"]
    )

    assert result.exit_code == 1
    assert "Unknown OverviewConfig option(s): colour" in result.output


def test_overview_generate_writes_workbook(cli_runner, db_path, ledger_csv, scenario_rows, tmp_path):
    ledger = ledger_csv(scenario_rows)
    output = tmp_path / "overview.xlsx"

    result = _invoke(
        cli_runner, db_path, "overview", "generate", "--ledger", ledger, "-o", str(output), "--year", "2024"
    )

    assert result.exit_code == 0, result.output
    assert f"Wrote 13 rows to {output}" in result.output

    ws = openpyxl.load_workbook(output)["Overview"]
    assert ws.freeze_panes == "A2"
    assert ws["E1"].value == "Jan-24"
    assert ws["T1"].value is True
    assert [ws.cell(row=7, column=c).value for c in range(1, 5)] == ["Essentials", "Food", "Groceries", True]
    assert ws["E7"].value.endswith("/IF(D7=TRUE,2,1)")
