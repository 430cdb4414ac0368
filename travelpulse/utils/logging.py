"""Structured logging for storage and sync operations."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredStorageLogger:
    """Structured logger for document store operations."""

    def log_operation(
        self,
        backend: str,
        op: str,
        key: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log a store operation with structured data."""
        log_data: dict[str, Any] = {
            "backend": backend,
            "op": op,
            "key": key,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Storage {op}: {backend} {key} - {outcome}"

        if outcome in ("success", "absent"):
            logger.debug(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_fallback(self, op: str, key: str, error_reason: str) -> None:
        """Log a switch from the primary store to the local mirror."""
        logger.warning(
            f"Storage {op}: falling back to local cache for {key}",
            extra={"structured": {"op": op, "key": key, "error_reason": error_reason}},
        )
