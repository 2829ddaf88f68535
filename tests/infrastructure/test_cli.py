"""End-to-end tests for the click CLI against a temporary store."""

from datetime import datetime, timezone

import pytest
from click.testing import CliRunner

from pos.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    env = {"POS_DATA_DIR": str(tmp_path), "POS_CASHIER_ID": "7", "POS_TEST_MODE": ""}

    def invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return invoke


@pytest.fixture
def catalog(run):
    assert run("product", "add", "--name", "Beer", "--price", "3.50",
               "--category", "Drinks", "--stock", "100").exit_code == 0
    assert run("product", "add", "--name", "Cola", "--price", "2.00",
               "--deposit", "0.25", "--stock", "10").exit_code == 0


class TestOrderCommands:

    def test_sale_from_open_to_paid(self, run, catalog):
        result = run("order", "create")
        assert result.exit_code == 0
        assert "Order #1 created" in result.output

        result = run("order", "add", "--id", "1", "--product", "1", "--quantity", "2")
        assert result.exit_code == 0
        assert "8.33 EUR" in result.output

        result = run("order", "pay", "--id", "1", "--amount", "10.00")
        assert result.exit_code == 0
        assert "change 1.67 EUR" in result.output

        result = run("product", "list")
        assert "98" in result.output

    def test_paid_order_rejects_changes(self, run, catalog):
        run("order", "create")
        run("order", "add", "--id", "1", "--product", "1")
        run("order", "pay", "--id", "1", "--amount", "5")

        result = run("order", "add", "--id", "1", "--product", "2")

        assert result.exit_code == 1
        assert "[InvalidState]" in result.output

    def test_cancel(self, run, catalog):
        run("order", "create")
        run("order", "add", "--id", "1", "--product", "2", "--quantity", "3")

        result = run("order", "cancel", "--id", "1", "--reason", "changed mind")
        assert result.exit_code == 0

        result = run("order", "show", "--id", "1")
        assert "status=Cancelled" in result.output
        assert "Notes: changed mind" in result.output

    def test_missing_order(self, run):
        result = run("order", "show", "--id", "99")
        assert result.exit_code == 1
        assert "[NotFound]" in result.output

    def test_bad_amount(self, run, catalog):
        run("order", "create")
        result = run("order", "pay", "--id", "1", "--amount", "lots")
        assert result.exit_code == 2

    def test_sub_cent_discount_rejected(self, run, catalog):
        run("order", "create")
        result = run("order", "discount", "--id", "1", "--amount", "0.005")
        assert result.exit_code == 2
        assert "more than two decimal places" in result.output

    def test_show_by_number(self, run, catalog):
        run("order", "create")
        number = run("order", "show", "--id", "1").output.split()[2]

        result = run("order", "show", "--number", number)

        assert result.exit_code == 0
        assert result.output.startswith(f"Order #1  {number}")

    def test_show_needs_exactly_one_key(self, run):
        assert run("order", "show").exit_code == 2
        assert run("order", "show", "--id", "1", "--number", "1").exit_code == 2

    def test_show_unknown_number(self, run):
        result = run("order", "show", "--number", "000000000000")
        assert result.exit_code == 1
        assert "[NotFound]" in result.output

    def test_list_own_orders(self, run, catalog):
        run("order", "create")
        run("order", "create", "--cashier", "8")
        run("order", "add", "--id", "1", "--product", "1", "--quantity", "2")

        result = run("order", "list")
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.strip().startswith("1 ")]
        assert len(lines) == 1
        assert "8.33 EUR" in lines[0]
        assert "No orders found." in run("order", "list", "--cashier", "9").output

    def test_test_flag(self, run):
        run("order", "create", "--test")
        assert "TEST ORDER" in run("order", "show", "--id", "1").output


class TestProductCommands:

    def test_duplicate_product(self, run, catalog):
        result = run("product", "add", "--name", "beer", "--price", "1.00")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_update_and_delete(self, run, catalog):
        assert run("product", "update", "--id", "2", "--no-deposit").exit_code == 0
        assert "deleted" in run("product", "delete", "--id", "2").output
        assert "Cola" not in run("product", "list", "--all").output

    def test_delete_sold_product_deactivates(self, run, catalog):
        run("order", "create")
        run("order", "add", "--id", "1", "--product", "1")
        result = run("product", "delete", "--id", "1")
        assert "deactivated" in result.output
        assert "inactive" in run("product", "list", "--all").output

    def test_conflicting_deposit_flags(self, run, catalog):
        result = run("product", "update", "--id", "2", "--deposit", "0.10", "--no-deposit")
        assert result.exit_code == 2

    def test_stock_and_low_stock_listing(self, run, catalog):
        run("product", "update", "--id", "2", "--min-stock", "5")
        run("product", "stock", "--id", "2", "--quantity", "4")
        result = run("product", "list", "--low-stock")
        assert "Cola" in result.output
        assert "Beer" not in result.output


class TestDepositAndReport:

    def test_deposit_return_and_report(self, run, catalog):
        run("order", "create")
        run("order", "add", "--id", "1", "--product", "2", "--quantity", "4")
        run("order", "pay", "--id", "1", "--amount", "20")

        result = run("deposit", "return", "--product", "2", "--quantity", "2")
        assert result.exit_code == 0
        assert "Refund 0.50 EUR" in result.output

        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        result = run("report", "sales", "--from", today)
        assert result.exit_code == 0
        assert "Deposit collected:   1.00" in result.output
        assert "Deposit balance:     0.50" in result.output

    def test_deposit_return_without_deposit(self, run, catalog):
        result = run("deposit", "return", "--product", "1")
        assert result.exit_code == 1
        assert "does not carry a deposit" in result.output
