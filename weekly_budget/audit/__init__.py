"""Audit logging package."""

from weekly_budget.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
