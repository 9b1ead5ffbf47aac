"""
Main Orchestrator for Weekly Budget

Ties the configured pieces together into one ready-to-use LedgerStore:
settings -> logging -> key-value backend -> audit logger -> store.

DESIGN DECISION: The store is an explicit object with a lifecycle owned by
the application. Nothing is kept in module globals, so a test or a second
session can build its own store against another backend.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from weekly_budget.audit import AuditLogger, configure_logging
from weekly_budget.config import Settings, get_settings
from weekly_budget.ledger import LedgerStore
from weekly_budget.services.storage import create_key_value_store


def create_ledger_store(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> LedgerStore:
    """
    Factory function to create the application's ledger.

    Args:
        settings: Configuration to use; loaded from the environment if omitted
        clock: Source of "now", replaceable in tests

    Returns:
        A LedgerStore over the backend selected by STORAGE_BACKEND.
        Call aclose() on it when the application shuts down.
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging(
        level="DEBUG" if app_settings.debug_mode else app_settings.log_level,
        json_logs=app_settings.log_json,
    )

    return LedgerStore(
        backend=create_key_value_store(settings),
        clock=clock,
        audit_logger=AuditLogger(),
    )


@asynccontextmanager
async def ledger_session(
    settings: Optional[Settings] = None,
) -> AsyncIterator[LedgerStore]:
    """Create a ledger store and close its backend on exit."""
    store = create_ledger_store(settings)
    try:
        yield store
    finally:
        await store.aclose()
