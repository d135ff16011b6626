"""
Audit Logger

DESIGN DECISION: Every command against the expense data is logged.
This provides:
1. Complete traceability of adds, edits, deletes and clears
2. Debugging capability when stored data is found corrupt
3. A recent-activity feed the page can show

The audit logger:
- Is synchronous, like everything else in QuickBill
- Gracefully handles failures (doesn't crash the page if logging fails)
- Keeps a bounded in-memory history of recent events
"""

import logging
from collections import deque
from typing import Any, Optional

import structlog

from quickbill.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """
    Route structlog output through the stdlib root logger at ``level``.

    With ``debug`` on, events are rendered for humans instead of as JSON.
    Call once at application start.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger().setLevel(getattr(logging, level.upper()))

    if debug:
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.dev.ConsoleRenderer(),
            ],
        )


_LEVELS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
}


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for the page's activity feed)
    """

    def __init__(
        self,
        history_size: int = 200,
        logger: Optional[Any] = None,
    ):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
            logger: Logger to write to. Defaults to a structlog logger.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = logger or structlog.get_logger("quickbill.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always records the event in history. Returns False if writing
        to the log failed; never raises.
        """
        self._history.append(event)

        try:
            method = getattr(self._logger, _LEVELS[event.severity])
            method("audit_event", **event.to_log_dict())
        except Exception:
            # Fall back to the plain stdlib logger; the page must keep going
            logging.getLogger(__name__).exception(
                "audit_log_failed event_id=%s", event.event_id
            )
            return False

        return True

    def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """The most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def clear_history(self) -> None:
        self._history.clear()
