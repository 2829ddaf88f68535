"""JSON-document-backed implementation of DepositReturnRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pos.domain.model.deposit_return import DepositReturn
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from pos.domain.repository.deposit_return_repository import DepositReturnRepository


class JsonDepositReturnRepository(DepositReturnRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    def add(self, deposit_return: DepositReturn) -> None:
        deposit_return.id = max((r["id"] for r in self._records), default=0) + 1
        self._records.append(
            {
                "id": deposit_return.id,
                "product_id": deposit_return.product_id,
                "product_name": deposit_return.product_name,
                "quantity": deposit_return.quantity.value,
                "amount": str(deposit_return.amount.amount),
                "currency": deposit_return.amount.currency,
                "actor_id": deposit_return.actor_id,
                "created_at": deposit_return.created_at.isoformat(),
            }
        )

    def list_created_between(self, start: datetime, end: datetime) -> list[DepositReturn]:
        returns = [self._to_domain(raw) for raw in self._records]
        return [r for r in returns if start <= r.created_at < end]

    def validate(self) -> None:
        for raw in self._records:
            self._to_domain(raw)

    @staticmethod
    def _to_domain(raw: dict) -> DepositReturn:
        return DepositReturn(
            id=raw["id"],
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            quantity=Quantity(raw["quantity"]),
            amount=Money(Decimal(raw["amount"]), raw.get("currency", DEFAULT_CURRENCY)),
            actor_id=raw["actor_id"],
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
