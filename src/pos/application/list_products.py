"""Application service: List Products use case (query)."""

from __future__ import annotations

from pos.application.dto import ProductDTO, product_to_dto
from pos.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        include_inactive: bool = False,
        low_stock_only: bool = False,
    ) -> list[ProductDTO]:
        with self._uow as uow:
            products = uow.products.list_all()

        if not include_inactive:
            products = [p for p in products if p.is_active]
        if low_stock_only:
            products = [p for p in products if p.is_low_stock or p.is_oversold]
        products.sort(key=lambda p: (p.category.value, p.name.lower()))
        return [product_to_dto(p) for p in products]
