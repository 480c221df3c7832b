"""Risk model interface shared by the Framingham and QRISK3 engines.

Provides the interface the calculator facade and heart-age estimator rely on:
domain validation, a raw (unvalidated) risk function and the ideal profile.
"""

import logging
import math
from abc import ABC, abstractmethod

from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.core.exceptions import ComputationError, ValidationError
from cvdrisk.schemas.base import DiabetesStatus, Ethnicity, RiskModelId, SmokingStatus
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.coefficients import DEFAULT_COEFFICIENTS, CoefficientTable

logger = logging.getLogger(__name__)


def survival_to_risk(
    linear_predictor: float,
    baseline_survival: float,
    log: logging.Logger | None = None,
) -> float:
    """Convert a centred linear predictor into a 10-year risk proportion.

    risk = 1 - S0 ** exp(linear_predictor), clamped to [0, 1].

    Args:
        linear_predictor: Centred sum of coefficient * value terms.
        baseline_survival: Model baseline 10-year survival S0.
        log: Logger for overflow warnings.

    Returns:
        Risk as a proportion in [0, 1].

    Raises:
        ComputationError: If the linear predictor is NaN.
    """
    log = log or logger
    if math.isnan(linear_predictor):
        raise ComputationError(
            "Linear predictor is not a number",
            details={"linear_predictor": str(linear_predictor)},
        )
    if math.isinf(linear_predictor):
        clamped = 1.0 if linear_predictor > 0 else 0.0
        log.warning(f"Infinite linear predictor, clamping risk to {clamped}")
        return clamped
    try:
        hazard_ratio = math.exp(linear_predictor)
    except OverflowError:
        log.warning(f"exp({linear_predictor:.3f}) overflowed, clamping risk to 1.0")
        return 1.0

    risk = 1.0 - baseline_survival ** hazard_ratio
    return min(max(risk, 0.0), 1.0)


def require_positive(value: float | None, field: str) -> float:
    """Check that a value is present and strictly positive."""
    if value is None:
        raise ValidationError(f"{field} is required", field=field)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{field} must be a positive number", field=field, details={"value": value})
    return value


class RiskModel(ABC):
    """Interface for 10-year CVD risk engines.

    Engines are constructed explicitly with their coefficient table, settings
    and logger; they hold no other state and are safe to share between threads.
    """

    model_id: RiskModelId
    min_age: float
    max_age: float

    def __init__(
        self,
        coefficients: CoefficientTable = DEFAULT_COEFFICIENTS,
        settings: Settings | None = None,
        log: logging.Logger | None = None,
    ):
        self.coefficients = coefficients
        self.settings = settings or default_settings
        self.logger = log or logging.getLogger(type(self).__module__)

    def validate_age(self, profile: PatientProfile) -> None:
        """Reject ages outside the model's validated domain.

        Raises:
            ValidationError: If age is outside [min_age, max_age].
        """
        if not math.isfinite(profile.age) or not self.min_age <= profile.age <= self.max_age:
            raise ValidationError(
                f"Age {profile.age} is outside the validated range "
                f"{self.min_age:g}-{self.max_age:g} for {self.model_id.value}",
                field="age",
                details={"min": self.min_age, "max": self.max_age, "value": profile.age},
            )

    @abstractmethod
    def validate(self, profile: PatientProfile) -> list[str]:
        """Check that the profile carries everything the model needs.

        Returns:
            Non-fatal warnings.

        Raises:
            ValidationError: If the profile cannot be scored.
        """
        ...

    @abstractmethod
    def raw_risk(self, profile: PatientProfile) -> float:
        """Risk proportion without domain validation.

        Used directly by the heart-age search, which evaluates ages outside the
        validated range.
        """
        ...

    def calculate(self, profile: PatientProfile) -> tuple[float, list[str]]:
        """Validate the profile and compute its risk proportion.

        Returns:
            Tuple of (risk proportion, warnings).
        """
        warnings = self.validate(profile)
        risk = self.raw_risk(profile)
        self.logger.debug(f"{self.model_id.value} risk for age {profile.age:g}: {risk:.6f}")
        return risk, warnings

    def ideal_profile(self, profile: PatientProfile, age: float | None = None) -> PatientProfile:
        """Ideal-risk-factor profile with the patient's sex.

        Args:
            profile: The patient whose sex is kept.
            age: Age of the ideal person (defaults to the patient's age).
        """
        s = self.settings
        hdl = s.ideal_hdl_mmol_l
        return PatientProfile(
            age=profile.age if age is None else age,
            sex=profile.sex,
            ethnicity=Ethnicity.WHITE_OR_NOT_STATED,
            smoking=SmokingStatus.NON,
            diabetes=DiabetesStatus.NONE,
            systolic_bp=s.ideal_systolic_bp,
            sbp_sd=s.ideal_sbp_sd,
            bmi=s.ideal_bmi,
            total_cholesterol=s.ideal_cholesterol_ratio * hdl,
            hdl_cholesterol=hdl,
            cholesterol_ratio=s.ideal_cholesterol_ratio,
            townsend=s.ideal_townsend,
        )
