"""Audit logging for risk calculations.

Every calculation, successful or not, emits one structured event on the
``audit`` logger so that a deployment can route them to an append-only
store. No patient identifiers are recorded, only the model, outcome and
headline numbers.
"""

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Separate audit logger for calculation events
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Types of auditable actions."""

    CALCULATE = "calculate"
    COMPARE = "compare"
    NORMALIZE = "normalize"
    INTERVENTION = "intervention"


class CalculationAuditEvent(BaseModel):
    """Audit event record for a single calculation."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction = Field(..., description="Type of action performed")
    model: str = Field(..., description="Risk model identifier")
    success: bool = Field(True, description="Whether the calculation succeeded")
    risk_percent: float | None = Field(None, description="Final risk percentage")
    risk_category: str | None = Field(None, description="Assigned risk band")
    error_type: str | None = Field(None, description="Failure kind if unsuccessful")
    details: dict[str, Any] | None = Field(None, description="Additional context")


def log_calculation(
    model: str,
    success: bool = True,
    risk_percent: float | None = None,
    risk_category: str | None = None,
    error_type: str | None = None,
    details: dict[str, Any] | None = None,
    action: AuditAction = AuditAction.CALCULATE,
) -> CalculationAuditEvent:
    """Log a calculation audit event.

    Args:
        model: Risk model identifier (e.g. ``framingham_2008``)
        success: Whether the calculation produced a result
        risk_percent: Final (modified) risk percentage
        risk_category: Assigned risk band
        error_type: Failure kind when ``success`` is False
        details: Additional context
        action: Type of action being audited

    Returns:
        The created CalculationAuditEvent
    """
    event = CalculationAuditEvent(
        action=action,
        model=model,
        success=success,
        risk_percent=risk_percent,
        risk_category=risk_category,
        error_type=error_type,
        details=details,
    )

    log_level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        log_level,
        f"AUDIT: {action.value} {model}"
        f"{f' risk={risk_percent:.2f}%' if risk_percent is not None else ''}"
        f"{f' category={risk_category}' if risk_category else ''}"
        f"{f' error={error_type}' if error_type else ''}"
        f" success={success}",
        extra={"audit_event": event.model_dump()},
    )

    return event
