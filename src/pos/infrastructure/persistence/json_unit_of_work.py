"""JSON-file-backed unit of work.

The whole store is one JSON document holding products, orders and
deposit returns.  ``begin()`` reads it, repositories stage changes in
memory, and ``commit()`` writes the complete document to a temporary
file that atomically replaces the old one.  A failure anywhere before
the replace leaves the file exactly as it was.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pos.domain.exceptions import DomainException, PersistenceError
from pos.domain.repository.unit_of_work import UnitOfWork
from pos.infrastructure.persistence.json_deposit_return_repository import (
    JsonDepositReturnRepository,
)
from pos.infrastructure.persistence.json_order_repository import JsonOrderRepository
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

logger = logging.getLogger(__name__)

_SECTIONS = ("products", "orders", "deposit_returns")


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._document: dict | None = None

    # --- UnitOfWork interface -------------------------------------------------

    def begin(self) -> None:
        self._ensure_file()
        self._document = self._load_raw()
        self.products = JsonProductRepository(self._document["products"])
        self.orders = JsonOrderRepository(self._document["orders"])
        self.deposit_returns = JsonDepositReturnRepository(self._document["deposit_returns"])
        try:
            self.products.validate()
            self.orders.validate()
            self.deposit_returns.validate()
        except (KeyError, TypeError, ValueError, AttributeError, ArithmeticError,
                DomainException) as exc:
            self._document = None
            raise PersistenceError(
                f"Store {self._file_path} holds a malformed record: {exc!r}", cause=exc
            ) from exc

    def commit(self) -> None:
        if self._document is None:
            raise PersistenceError("Cannot commit outside of a unit of work")
        self._persist_raw(self._document)
        logger.debug("Committed store to %s", self._file_path)

    def rollback(self) -> None:
        self._document = None

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Cannot read store {self._file_path}", cause=exc) from exc
        if not isinstance(document, dict):
            raise PersistenceError(f"Store {self._file_path} is not a JSON object")
        for section in _SECTIONS:
            if not isinstance(document.setdefault(section, []), list):
                raise PersistenceError(f"Store {self._file_path}: '{section}' is not a list")
        return document

    def _persist_raw(self, document: dict) -> None:
        directory = self._file_path.parent
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._file_path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(json.dumps(document, indent=2) + "\n")
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._file_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Cannot write store {self._file_path}", cause=exc) from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps({section: [] for section in _SECTIONS}, indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise PersistenceError(f"Cannot create store {self._file_path}", cause=exc) from exc
