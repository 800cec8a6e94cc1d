"""Smoke tests for the click CLI against a throwaway SQLite file."""

import logging

import pytest
from click.testing import CliRunner

from orderflow.infrastructure import bootstrap
from orderflow.infrastructure.cli.main import cli
from orderflow.logging_config import configure_logging


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDERFLOW_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    configure_logging(handler=logging.NullHandler())
    bootstrap.reset()
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, list(args))

    assert invoke("db", "init").exit_code == 0
    yield invoke
    bootstrap.reset()


class TestOrderCommands:

    def test_full_lifecycle(self, run):
        assert run("inventory", "add", "--name", "Widget", "--stock", "10").exit_code == 0

        created = run("order", "create", "--user", "7", "--items", "1:5@15.00")
        assert created.exit_code == 0, created.output
        assert "Order #1 created" in created.output
        assert "INR 75.00" in created.output

        shown = run("inventory", "show")
        assert "Widget" in shown.output
        assert "5" in shown.output

        shipped = run("order", "update", "--id", "1", "--status", "Shipped")
        assert shipped.exit_code == 0, shipped.output
        assert "status=Shipped" in shipped.output

        cancelled = run("order", "cancel", "--id", "1", "--user", "7", "--goods-returned")
        assert cancelled.exit_code == 0
        assert "cancelled" in cancelled.output

        listed = run("order", "list", "--user", "7")
        assert "Cancelled" in listed.output

    def test_low_stock_warning_is_printed(self, run):
        run("inventory", "add", "--name", "Widget", "--stock", "1")
        result = run("order", "create", "--user", "7", "--items", "1:3@1")
        assert result.exit_code == 0
        assert "Warning:" in result.output

    def test_domain_error_becomes_click_error(self, run):
        result = run("order", "show", "--id", "42")
        assert result.exit_code == 1
        assert "Order #42 not found" in result.output

    def test_bad_item_format(self, run):
        result = run("order", "create", "--user", "7", "--items", "widget")
        assert result.exit_code == 2
        assert "ProductId:Qty@Price" in result.output

    def test_cancel_via_update_rejected(self, run):
        run("inventory", "add", "--name", "Widget", "--stock", "1")
        run("order", "create", "--user", "7", "--items", "1:1@1")
        result = run("order", "update", "--id", "1", "--status", "Cancelled")
        assert result.exit_code == 1
        assert "cancel operation" in result.output


class TestInventoryAndHoldCommands:

    def test_adjust_below_zero(self, run):
        run("inventory", "add", "--name", "Widget", "--stock", "2")
        result = run("inventory", "adjust", "--product", "1", "--delta", "-5")
        assert result.exit_code == 0
        assert "now -3" in result.output

    def test_hold_place_list_release(self, run):
        run("inventory", "add", "--name", "Widget", "--stock", "2")
        placed = run("hold", "place", "--product", "1", "--quantity", "4", "--ref-type", "QUOTE", "--ref", "Q-1")
        assert "Hold #1 placed" in placed.output

        assert "QUOTE:Q-1" in run("hold", "list").output
        assert run("hold", "release", "--id", "1").exit_code == 0
        assert "No active holds." in run("hold", "list").output

        again = run("hold", "release", "--id", "1")
        assert again.exit_code == 1

    def test_events_dispatch(self, run):
        run("inventory", "add", "--name", "Widget", "--stock", "2")
        result = run("events", "dispatch")
        assert result.exit_code == 0
        assert "Dispatched 1 event(s), 0 failed." in result.output
