"""
Data Models Package

This package contains all Pydantic models used in QuickBill.
All data flowing through the system must conform to these schemas.
"""

from quickbill.models.expense import (
    ALL_CATEGORIES,
    CategoryFilter,
    CsvExport,
    DashboardView,
    Expense,
    ExpenseCategory,
    PeriodFilter,
    Projection,
    ValidationIssue,
    coerce_category_filter,
    normalize_amount,
    parse_amount,
    period_label,
)
from quickbill.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "ALL_CATEGORIES",
    "CategoryFilter",
    "CsvExport",
    "DashboardView",
    "Expense",
    "ExpenseCategory",
    "PeriodFilter",
    "Projection",
    "ValidationIssue",
    "coerce_category_filter",
    "normalize_amount",
    "parse_amount",
    "period_label",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
