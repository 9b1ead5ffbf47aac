"""
Error classification for ledger operations.

DESIGN DECISION: Whether a failure reaches the user is decided by one
declared policy, not by scattered try/except blocks:
- Reads fall back to a safe default (0, empty list, "no rollover")
- Writes from add/delete propagate, so the user sees a failure
- Rollover bookkeeping and weekly-limit writes are logged and swallowed
- Invalid input is rejected before anything is persisted

The ledger store looks up the recovery action for each failure here.
"""

from enum import Enum
from typing import Any, Final, Optional

from weekly_budget.audit.logger import AuditLogger


USER_FACING_ERROR_MESSAGE: Final[str] = "Operation failed. Please try again."


class ErrorKind(str, Enum):
    """Where a failure happened."""
    VALIDATION = "validation"            # bad amount or category input
    STORAGE_READ = "storage_read"        # plain read of a document
    MUTATION_READ = "mutation_read"      # read that an add/delete will write back
    STORAGE_WRITE = "storage_write"      # add/delete persisting a list
    ROLLOVER_WRITE = "rollover_write"    # reset marker, archive or clearing
    SETTINGS_WRITE = "settings_write"    # weekly limit


class RecoveryAction(str, Enum):
    """What the ledger does about a failure."""
    REJECT = "reject"                      # raise before persisting anything
    USE_DEFAULT = "use_default"            # log, return the safe default
    PROPAGATE = "propagate"                # log, re-raise to the caller
    LOG_AND_CONTINUE = "log_and_continue"  # log, carry on as if it succeeded


ERROR_POLICY: Final[dict[ErrorKind, RecoveryAction]] = {
    ErrorKind.VALIDATION: RecoveryAction.REJECT,
    ErrorKind.STORAGE_READ: RecoveryAction.USE_DEFAULT,
    # Defaulting to an empty list here would overwrite the stored list.
    ErrorKind.MUTATION_READ: RecoveryAction.PROPAGATE,
    ErrorKind.STORAGE_WRITE: RecoveryAction.PROPAGATE,
    ErrorKind.ROLLOVER_WRITE: RecoveryAction.LOG_AND_CONTINUE,
    ErrorKind.SETTINGS_WRITE: RecoveryAction.LOG_AND_CONTINUE,
}


def recovery_for(kind: ErrorKind) -> RecoveryAction:
    return ERROR_POLICY[kind]


def is_propagated(kind: ErrorKind) -> bool:
    """True when failures of this kind reach the caller."""
    return recovery_for(kind) in (RecoveryAction.REJECT, RecoveryAction.PROPAGATE)


class LedgerValidationError(ValueError):
    """User input the ledger refuses to record."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def handle_failure(
    kind: ErrorKind,
    error: Exception,
    audit_logger: Optional[AuditLogger] = None,
    default: Any = None,
    **details: Any,
) -> Any:
    """
    Apply ERROR_POLICY to a failure caught in the ledger.

    Must be called from the except block that caught `error`.

    Returns:
        `default` when the policy recovers from the failure

    Raises:
        The caught error when the policy propagates or rejects it
    """
    action = recovery_for(kind)
    if audit_logger is not None:
        audit_logger.log_storage_failure(
            error_kind=kind.value,
            recovery=action.value,
            error_message=str(error),
            details={key: str(value) for key, value in details.items()},
        )
    if is_propagated(kind):
        raise error
    return default
