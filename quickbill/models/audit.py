"""
Audit Models for QuickBill

Every command the page raises against the expense data is recorded as an
audit event. This provides:
1. Traceability of every add, edit, delete and clear
2. Debugging information when stored data turns out to be corrupt
3. A recent-activity feed for the page

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expense lifecycle
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSES_CLEARED = "expenses_cleared"

    # Input problems
    VALIDATION_FAILED = "validation_failed"

    # Storage
    EXPENSES_LOADED = "expenses_loaded"
    STORAGE_CORRUPT = "storage_corrupt"
    STORAGE_READ_FAILED = "storage_read_failed"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_REJECTED = "export_rejected"

    # Page state
    FILTERS_CHANGED = "filters_changed"
    ONBOARDING_COMPLETED = "onboarding_completed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which expense this is about, if any
    expense_id: Optional[int] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, title, amount, category)
        event = AuditEventBuilder.expenses_cleared(count)
    """

    @staticmethod
    def expense_added(
        expense_id: int,
        title: str,
        amount: str,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            expense_id=expense_id,
            description=f"Expense added: {title} - {amount}",
            details={
                "title": title,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: int,
        changes: dict[str, Any],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            expense_id=expense_id,
            description=f"Expense {expense_id} updated ({len(changes)} fields changed)",
            details={"changes": changes},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: int, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            description=f"Expense deleted: {title}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def expenses_cleared(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            severity=AuditSeverity.WARNING,
            description=f"All expense data cleared ({count} records)",
            details={"record_count": count},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        operation: str,
        issues: list[dict],
        expense_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            expense_id=expense_id,
            description=f"{operation.capitalize()} rejected with {len(issues)} issues",
            details={
                "operation": operation,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def expenses_loaded(count: int, skipped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            severity=AuditSeverity.WARNING if skipped else AuditSeverity.INFO,
            description=f"Loaded {count} expenses from storage",
            details={
                "record_count": count,
                "skipped_records": skipped,
            },
        )

    @staticmethod
    def storage_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_CORRUPT,
            severity=AuditSeverity.ERROR,
            description=f"Stored data under '{key}' is corrupt; starting empty",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not read stored data under '{key}'; starting empty",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def export_completed(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            description=f"Exported {row_count} expenses to {filename}",
            details={
                "filename": filename,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def export_rejected(category_filter: str, period_filter: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Export requested but no expenses are visible",
            details={
                "category_filter": category_filter,
                "period_filter": period_filter,
            },
            is_user_action=True,
        )

    @staticmethod
    def filters_changed(category_filter: str, period_filter: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTERS_CHANGED,
            severity=AuditSeverity.DEBUG,
            description=f"Filters set to {category_filter} / {period_filter}",
            details={
                "category_filter": category_filter,
                "period_filter": period_filter,
            },
            is_user_action=True,
        )

    @staticmethod
    def onboarding_completed(skipped: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ONBOARDING_COMPLETED,
            description="Onboarding skipped" if skipped else "Onboarding completed",
            details={"skipped": skipped},
            is_user_action=True,
        )
