"""Application service: Sales Report use case (query)."""

from __future__ import annotations

from datetime import datetime

from pos.domain.exceptions import ValidationError
from pos.domain.repository.unit_of_work import UnitOfWork
from pos.domain.service.sales_report import SalesSummary, summarize_orders


class SalesReportHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        start: datetime,
        end: datetime,
        include_test: bool = False,
    ) -> SalesSummary:
        """Summarize orders created in ``[start, end)``."""
        if end <= start:
            raise ValidationError("Report end must be after its start")

        with self._uow as uow:
            orders = uow.orders.list_created_between(start, end)
            returns = uow.deposit_returns.list_created_between(start, end)

        return summarize_orders(
            orders, start, end, include_test=include_test, deposit_returns=returns
        )
