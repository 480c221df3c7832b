"""Core engine configuration and utilities."""

from cvdrisk.core.audit import AuditAction, CalculationAuditEvent, log_calculation
from cvdrisk.core.config import Settings, settings
from cvdrisk.core.exceptions import (
    ComputationError,
    ConfigurationError,
    RiskEngineError,
    ValidationError,
)

__all__ = [
    # Config
    "Settings",
    "settings",
    # Errors
    "RiskEngineError",
    "ValidationError",
    "ComputationError",
    "ConfigurationError",
    # Audit
    "AuditAction",
    "CalculationAuditEvent",
    "log_calculation",
]
