"""Audit logging package."""

from quickbill.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
