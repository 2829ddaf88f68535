"""Tests for the JSON-file-backed unit of work and repositories."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from pos.application.order_lifecycle import OrderLifecycleManager
from pos.domain.exceptions import PersistenceError
from pos.domain.model.deposit_return import DepositReturn
from pos.domain.model.order import Order, OrderStatus, PaymentMethod
from pos.domain.model.product import Product, ProductCategory
from pos.domain.model.value_objects import Money, TaxRate
from pos.infrastructure.identity import StaticIdentityProvider
from pos.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from tests.fakes import RecordingAuditSink

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _beer() -> Product:
    return Product(
        id=1, name="Beer", price=Money.of("3.50"), tax_rate=TaxRate.of("19"),
        requires_deposit=True, deposit_amount=Money.of("0.08"),
        stock_quantity=24, min_stock_level=6, category=ProductCategory.DRINKS,
    )


@pytest.fixture
def store(tmp_path):
    return tmp_path / "data" / "pos.json"


class TestJsonUnitOfWork:

    def test_creates_empty_store(self, store):
        with JsonUnitOfWork(store) as uow:
            assert uow.products.list_all() == []
        assert json.loads(store.read_text()) == {
            "products": [], "orders": [], "deposit_returns": [],
        }

    def test_product_round_trip(self, store):
        with JsonUnitOfWork(store) as uow:
            uow.products.save(_beer())
            uow.commit()

        with JsonUnitOfWork(store) as uow:
            loaded = uow.products.get_by_id(1)
            assert loaded == _beer()
            assert uow.products.get_by_name("BEER ").id == 1
            assert uow.products.next_id() == 2

    def test_order_round_trip(self, store):
        order = Order.open(order_number="202610194711", cashier_id=7, now=NOW)
        order.add_line_item(_beer(), 3)
        order.apply_discount(Money.of("0.50"))
        order.mark_paid(PaymentMethod.CARD, Money.of("20.00"), now=NOW)
        order.items[0].stock_deducted = 3

        with JsonUnitOfWork(store) as uow:
            uow.orders.save(order)
            uow.commit()

        with JsonUnitOfWork(store) as uow:
            loaded = uow.orders.get_by_order_number("202610194711")

        assert loaded.id == 1
        assert loaded.status == OrderStatus.PAID
        assert loaded.payment_method == PaymentMethod.CARD
        assert loaded.created_at == NOW
        assert loaded.items[0].deposit_amount == Money.of("0.08")
        assert loaded.items[0].stock_deducted == 3
        assert loaded.totals == order.totals
        assert loaded.change_amount == order.change_amount

    def test_uncommitted_changes_are_discarded(self, store):
        with JsonUnitOfWork(store) as uow:
            uow.products.save(_beer())
            uow.commit()

        with JsonUnitOfWork(store) as uow:
            beer = uow.products.get_by_id(1)
            beer.adjust_stock(-10)
            uow.products.save(beer)

        with JsonUnitOfWork(store) as uow:
            assert uow.products.get_by_id(1).stock_quantity == 24

    def test_exception_inside_block_discards_changes(self, store):
        with pytest.raises(RuntimeError):
            with JsonUnitOfWork(store) as uow:
                uow.products.save(_beer())
                raise RuntimeError("till crashed")

        with JsonUnitOfWork(store) as uow:
            assert uow.products.list_all() == []

    def test_delete_product(self, store):
        with JsonUnitOfWork(store) as uow:
            uow.products.save(_beer())
            uow.commit()
        with JsonUnitOfWork(store) as uow:
            uow.products.delete(1)
            uow.commit()
        with JsonUnitOfWork(store) as uow:
            assert uow.products.get_by_id(1) is None

    def test_references_product(self, store):
        order = Order.open(order_number="202610190001", cashier_id=7, now=NOW)
        order.add_line_item(_beer(), 1)
        with JsonUnitOfWork(store) as uow:
            uow.orders.save(order)
            uow.commit()
        with JsonUnitOfWork(store) as uow:
            assert uow.orders.references_product(1)
            assert not uow.orders.references_product(2)

    def test_orders_listed_by_creation_range(self, store):
        with JsonUnitOfWork(store) as uow:
            for offset, number in ((0, "1"), (2, "2"), (-1, "3")):
                uow.orders.save(
                    Order.open(order_number=number, cashier_id=7, now=NOW + timedelta(days=offset))
                )
            uow.commit()

        with JsonUnitOfWork(store) as uow:
            orders = uow.orders.list_created_between(NOW - timedelta(days=1), NOW + timedelta(days=2))

        assert [o.order_number for o in orders] == ["3", "1"]

    def test_deposit_returns(self, store):
        refund = DepositReturn.for_product(_beer(), 6, actor_id=7, now=NOW)
        with JsonUnitOfWork(store) as uow:
            uow.deposit_returns.add(refund)
            uow.commit()
        assert refund.id == 1

        with JsonUnitOfWork(store) as uow:
            (loaded,) = uow.deposit_returns.list_created_between(NOW, NOW + timedelta(hours=1))
        assert loaded.amount == Money.of("0.48")
        assert loaded.quantity.value == 6

    def test_corrupt_store_raises_persistence_error(self, store):
        store.parent.mkdir(parents=True)
        store.write_text("{not json")
        with pytest.raises(PersistenceError, match="Cannot read store"):
            with JsonUnitOfWork(store):
                pass

    @pytest.mark.parametrize(
        "document",
        [
            {"orders": [{"id": 1}]},
            {"orders": [{"id": 1, "order_number": "1", "cashier_id": 7, "items": [],
                         "status": "Shipped", "created_at": "2026-10-19T12:00:00+00:00"}]},
            {"products": [{"id": 1, "name": "Beer", "price": "-3.50"}]},
            {"products": [{"id": 1, "name": "Beer", "price": "three"}]},
            {"deposit_returns": ["not a record"]},
            {"orders": {}},
        ],
    )
    def test_malformed_record_raises_persistence_error(self, store, document):
        store.parent.mkdir(parents=True)
        store.write_text(json.dumps(document))
        with pytest.raises(PersistenceError) as excinfo:
            with JsonUnitOfWork(store):
                pass
        assert excinfo.value.kind == "PersistenceFailure"

    def test_malformed_store_is_a_failed_result_not_a_crash(self, store):
        store.parent.mkdir(parents=True)
        store.write_text(json.dumps({"orders": [{"id": 1}]}))
        manager = OrderLifecycleManager(
            JsonUnitOfWork(store), RecordingAuditSink(), StaticIdentityProvider(7)
        )

        assert manager.add_item(1, 1, 1).error_kind == "PersistenceFailure"
        assert manager.get_order(1).error_kind == "PersistenceFailure"
        assert json.loads(store.read_text()) == {"orders": [{"id": 1}]}

    def test_orders_listed_by_cashier_newest_first(self, store):
        with JsonUnitOfWork(store) as uow:
            for offset, number, cashier in ((0, "1", 7), (2, "2", 7), (1, "3", 8)):
                uow.orders.save(
                    Order.open(order_number=number, cashier_id=cashier,
                               now=NOW + timedelta(days=offset))
                )
            uow.commit()

        with JsonUnitOfWork(store) as uow:
            assert [o.order_number for o in uow.orders.list_by_cashier(7)] == ["2", "1"]
            assert uow.orders.list_by_cashier(9) == []

    def test_commit_leaves_no_temp_files(self, store):
        with JsonUnitOfWork(store) as uow:
            uow.products.save(_beer())
            uow.commit()
        assert [p.name for p in store.parent.iterdir()] == ["pos.json"]
