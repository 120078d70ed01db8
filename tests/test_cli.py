"""Tests for the command-line interface."""

import json

import pytest

from pos_analytics.cli import main


@pytest.fixture
def sales_file(tmp_path):
    rows = [
        {
            "id": str(i),
            "location_id": 1 + i % 2,
            "created_at": f"2025-01-{day:02d}T15:00:00Z",
            "total": 100.0,
            "items": [{"product_id": "p1", "product_name": "Alfajor", "quantity": 4, "unit_price": 25}],
            "payment_method": "Debit",
        }
        for i, day in enumerate([3, 6, 10, 13, 16])
    ]
    path = tmp_path / "sales.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return str(path)


def test_dashboard_command(sales_file, capsys) -> None:
    code = main(["dashboard", "--file", sales_file, "--range", "all_time", "--now", "2025-01-17T15:00:00Z"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Dashboard - Red (all_time)" in out
    assert "Ingresos:        $500.00" in out


def test_dashboard_command_for_location(sales_file, capsys) -> None:
    code = main(
        ["dashboard", "--file", sales_file, "--range", "last_30_days", "--location", "2", "--now", "2025-01-17T15:00:00Z"]
    )

    assert code == 0
    assert "Mar de las Pampas" in capsys.readouterr().out


def test_forecast_command_with_fixed_tags(sales_file, capsys) -> None:
    code = main(
        [
            "forecast",
            "--file", sales_file,
            "--location", "1",
            "--now", "2025-01-17T15:00:00Z",
            "--weather", "rainy",
            "--flow", "arrival",
        ]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "Clima: rainy" in out
    assert "Flujo turístico: arrival" in out


def test_missing_file_reports_error(tmp_path, capsys) -> None:
    code = main(["dashboard", "--file", str(tmp_path / "missing.json")])

    assert code == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_bad_now_reports_error(sales_file, capsys) -> None:
    code = main(["dashboard", "--file", sales_file, "--now", "2025-01-17 15:00"])
    assert code == 1


@pytest.mark.parametrize("quantity", [2.5, "dos"])
def test_bad_row_reports_error(tmp_path, capsys, quantity) -> None:
    """A malformed ledger row exits with status 1 instead of a traceback."""
    path = tmp_path / "sales.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "1",
                    "location_id": 1,
                    "created_at": "2025-01-03T15:00:00Z",
                    "total": 100.0,
                    "items": [{"product_id": "p1", "product_name": "Alfajor", "quantity": quantity, "unit_price": 25}],
                    "payment_method": "Cash",
                }
            ]
        ),
        encoding="utf-8",
    )

    code = main(["dashboard", "--file", str(path), "--now", "2025-01-17T15:00:00Z"])

    assert code == 1
    assert "quantity" in capsys.readouterr().err


@pytest.mark.parametrize("content", ["[]", '{"timezone": 123}', '{"locations": "Pinamar"}'])
def test_bad_config_reports_error(sales_file, tmp_path, capsys, content) -> None:
    config = tmp_path / "analytics.json"
    config.write_text(content, encoding="utf-8")

    code = main(["dashboard", "--file", sales_file, "--config", str(config), "--now", "2025-01-17T15:00:00Z"])

    assert code == 1
    assert "[ERROR]" in capsys.readouterr().err
