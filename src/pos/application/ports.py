"""Collaborator interfaces consumed by the application layer.

The audit sink and identity provider are injected into handlers; the
composition root picks the concrete implementations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

logger = logging.getLogger(__name__)


class AuditEventKind(Enum):
    ORDER_CREATED = "OrderCreated"
    ORDER_MODIFIED = "OrderModified"
    ORDER_PAID = "OrderPaid"
    ORDER_CANCELLED = "OrderCancelled"
    ORDER_ITEM_ADDED = "OrderItemAdded"
    ORDER_ITEM_REMOVED = "OrderItemRemoved"
    PRODUCT_CREATED = "ProductCreated"
    PRODUCT_MODIFIED = "ProductModified"
    PRODUCT_DELETED = "ProductDeleted"
    DEPOSIT_RETURNED = "DepositReturned"


class AuditSink(ABC):

    @abstractmethod
    def record(self, actor_id: int, event_kind: AuditEventKind, message: str) -> None:
        """Store one audit entry.  Callers never let a failure here fail a sale."""


class IdentityProvider(ABC):

    @abstractmethod
    def current_user_id(self) -> int:
        """Return the id of the user operating the till."""


def record_safely(
    audit: AuditSink,
    actor_id: int,
    event_kind: AuditEventKind,
    message: str,
) -> None:
    """Record an audit entry; a failing sink is logged, never raised."""
    try:
        audit.record(actor_id, event_kind, message)
    except Exception:
        logger.exception("Audit sink failed to record %s: %s", event_kind.value, message)
