"""Composition root: builds concrete adapters from settings and wires them in.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Configuration comes
from environment variables:

``POS_DATA_DIR``   directory holding ``pos.json`` (default: ``<repo>/data``)
``POS_CASHIER_ID`` user id recorded on orders and audit entries (default 1)
``POS_TEST_MODE``  ``1``/``true``/``yes`` marks new orders as test orders
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pos.application.add_product import AddProductHandler
from pos.application.delete_product import DeleteProductHandler
from pos.application.list_products import ListProductsHandler
from pos.application.order_lifecycle import OrderLifecycleManager
from pos.application.return_deposit import ReturnDepositHandler
from pos.application.sales_report import SalesReportHandler
from pos.application.set_stock import SetStockHandler
from pos.application.update_product import UpdateProductHandler
from pos.domain.exceptions import ValidationError
from pos.infrastructure.audit import LoggingAuditSink
from pos.infrastructure.identity import StaticIdentityProvider
from pos.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
_STORE_FILE = "pos.json"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    cashier_id: int
    test_mode: bool

    @property
    def store_path(self) -> Path:
        return self.data_dir / _STORE_FILE


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    raw_cashier = env.get("POS_CASHIER_ID", "1")
    try:
        cashier_id = int(raw_cashier)
    except ValueError as exc:
        raise ValidationError(f"POS_CASHIER_ID must be an integer, got {raw_cashier!r}") from exc
    return Settings(
        data_dir=Path(env.get("POS_DATA_DIR") or _DEFAULT_DATA_DIR),
        cashier_id=cashier_id,
        test_mode=env.get("POS_TEST_MODE", "").strip().lower() in ("1", "true", "yes"),
    )


def unit_of_work(settings: Settings) -> JsonUnitOfWork:
    return JsonUnitOfWork(settings.store_path)


def identity_provider(settings: Settings) -> StaticIdentityProvider:
    return StaticIdentityProvider(settings.cashier_id)


def order_lifecycle_manager(settings: Settings) -> OrderLifecycleManager:
    return OrderLifecycleManager(
        uow=unit_of_work(settings),
        audit=LoggingAuditSink(),
        identity=identity_provider(settings),
        test_mode=settings.test_mode,
    )


def add_product_handler(settings: Settings) -> AddProductHandler:
    return AddProductHandler(unit_of_work(settings), LoggingAuditSink(), identity_provider(settings))


def update_product_handler(settings: Settings) -> UpdateProductHandler:
    return UpdateProductHandler(
        unit_of_work(settings), LoggingAuditSink(), identity_provider(settings)
    )


def set_stock_handler(settings: Settings) -> SetStockHandler:
    return SetStockHandler(unit_of_work(settings), LoggingAuditSink(), identity_provider(settings))


def delete_product_handler(settings: Settings) -> DeleteProductHandler:
    return DeleteProductHandler(
        unit_of_work(settings), LoggingAuditSink(), identity_provider(settings)
    )


def list_products_handler(settings: Settings) -> ListProductsHandler:
    return ListProductsHandler(unit_of_work(settings))


def return_deposit_handler(settings: Settings) -> ReturnDepositHandler:
    return ReturnDepositHandler(
        unit_of_work(settings), LoggingAuditSink(), identity_provider(settings)
    )


def sales_report_handler(settings: Settings) -> SalesReportHandler:
    return SalesReportHandler(unit_of_work(settings))
