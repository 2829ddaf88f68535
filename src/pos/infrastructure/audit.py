"""Audit sink that writes entries to the ``pos.audit`` logger.

Route that logger to a file or a log shipper to keep a durable trail.
"""

from __future__ import annotations

import logging

from pos.application.ports import AuditEventKind, AuditSink

audit_logger = logging.getLogger("pos.audit")


class LoggingAuditSink(AuditSink):

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    def record(self, actor_id: int, event_kind: AuditEventKind, message: str) -> None:
        self._logger.info(
            "%s by user %s: %s",
            event_kind.value,
            actor_id,
            message,
            extra={"actor_id": actor_id, "event_kind": event_kind.value},
        )
