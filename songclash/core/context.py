"""Request-scoped context threaded through services and data access."""

from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Any

_BASE36 = string.digits + string.ascii_lowercase


def generate_trace_id(function_name: str) -> str:
    """Generate a unique trace ID for correlating the logs of one call."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"{function_name}_{int(time.time() * 1000)}_{suffix}"


class TraceLoggerAdapter(logging.LoggerAdapter):
    """Prefix every record with the trace ID of the current request."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        """Prepend the trace ID and expose it to formatters."""
        trace_id = self.extra.get("trace_id") if self.extra else None
        kwargs.setdefault("extra", {}).update({"trace_id": trace_id})
        return f"[{trace_id}] {msg}", kwargs


@dataclass(frozen=True)
class RequestContext:
    """Trace ID and logger for a single service call."""

    trace_id: str
    logger: logging.LoggerAdapter = field(repr=False)

    @classmethod
    def create(
        cls,
        function_name: str,
        trace_id: str | None = None,
        logger: logging.Logger | None = None,
    ) -> RequestContext:
        """Build a context, generating a trace ID when none is supplied."""
        trace_id = trace_id or generate_trace_id(function_name)
        base_logger = logger or logging.getLogger("songclash")
        return cls(
            trace_id=trace_id,
            logger=TraceLoggerAdapter(base_logger, {"trace_id": trace_id}),
        )
