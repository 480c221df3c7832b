"""Exception hierarchy for the risk engine.

Engines raise these; the calculator facade converts ``ValidationError`` and
``ComputationError`` into a ``CalculationFailure`` so callers never see a
partially filled result. ``ConfigurationError`` is recovered locally by the
normalizer.
"""

from typing import Any


class RiskEngineError(Exception):
    """Base class for all risk engine errors."""

    error_type = "engine"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details or {}


class ValidationError(RiskEngineError):
    """Input is missing, malformed, or outside a model's validated domain."""

    error_type = "validation"


class ComputationError(RiskEngineError):
    """A calculation produced a value that cannot be turned into a risk."""

    error_type = "computation"


class ConfigurationError(RiskEngineError):
    """A categorical code is not recognised."""

    error_type = "configuration"
