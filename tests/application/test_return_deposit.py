"""Tests for the Return Deposit use case."""

import pytest

from pos.application.ports import AuditEventKind
from pos.application.return_deposit import ReturnDepositHandler
from pos.domain.exceptions import ProductNotFoundError, ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.infrastructure.identity import StaticIdentityProvider
from tests.fakes import BrokenAuditSink, FakeUnitOfWork, RecordingAuditSink


def _uow() -> FakeUnitOfWork:
    crate = Product(
        id=1, name="Beer crate", price=Money.of("15.00"),
        requires_deposit=True, deposit_amount=Money.of("3.10"),
    )
    bread = Product(id=2, name="Bread", price=Money.of("2.50"))
    return FakeUnitOfWork(products=[crate, bread])


class TestReturnDeposit:

    def test_refund_is_recorded(self):
        uow, audit = _uow(), RecordingAuditSink()

        refund = ReturnDepositHandler(uow, audit, StaticIdentityProvider(7)).handle(1, 2)

        assert refund.amount == Money.of("6.20")
        assert refund.actor_id == 7
        assert [r.amount for r in uow.deposit_return_records] == [Money.of("6.20")]
        assert audit.kinds == [AuditEventKind.DEPOSIT_RETURNED]

    def test_product_without_deposit(self):
        uow = _uow()
        with pytest.raises(ValidationError):
            ReturnDepositHandler(uow, RecordingAuditSink(), StaticIdentityProvider(7)).handle(2, 1)
        assert uow.deposit_return_records == []

    def test_unknown_product(self):
        with pytest.raises(ProductNotFoundError):
            ReturnDepositHandler(
                _uow(), RecordingAuditSink(), StaticIdentityProvider(7)
            ).handle(9, 1)

    def test_broken_audit_sink_still_records_refund(self):
        uow = _uow()
        ReturnDepositHandler(uow, BrokenAuditSink(), StaticIdentityProvider(7)).handle(1, 1)
        assert len(uow.deposit_return_records) == 1
