"""Heart age estimation.

Heart age is the age at which a person with ideal risk factors (same sex)
would carry the patient's risk. Ideal-profile risk rises monotonically with
age for both models, so the inverse is found by bisection.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.risk_model import RiskModel

logger = logging.getLogger(__name__)


class HeartAgeMethod(str, Enum):
    """How a heart age estimate was obtained."""

    BISECTION = "bisection"
    LOWER_BOUND = "lower_bound"
    UPPER_BOUND = "upper_bound"
    CHRONOLOGICAL = "chronological"


@dataclass
class HeartAgeEstimate:
    """Result of a heart age search."""

    age: float
    method: HeartAgeMethod
    iterations: int = 0

    @property
    def years(self) -> int:
        """Heart age rounded to whole years."""
        return int(round(self.age))


class HeartAgeEstimator:
    """Inverts a model's ideal-profile risk function by bisection."""

    def __init__(self, settings: Settings | None = None, log: logging.Logger | None = None):
        self.settings = settings or default_settings
        self.logger = log or logger

    def ideal_risk(self, model: RiskModel, profile: PatientProfile, age: float) -> float:
        """Risk of the ideal profile at the given age (no domain validation)."""
        return model.raw_risk(model.ideal_profile(profile, age))

    def estimate(self, model: RiskModel, profile: PatientProfile, target_risk: float) -> HeartAgeEstimate:
        """Estimate heart age for a target risk.

        Args:
            model: Engine whose raw risk function is inverted.
            profile: The patient (sex and chronological age are used).
            target_risk: Patient's final risk as a proportion.

        Returns:
            HeartAgeEstimate. Falls back to chronological age when the target
            is negligible, an evaluated risk is non-finite, or the search does not
            converge; saturates at the search bounds when the target lies
            outside the ideal-risk range.
        """
        s = self.settings
        chronological = HeartAgeEstimate(age=profile.age, method=HeartAgeMethod.CHRONOLOGICAL)

        if not math.isfinite(target_risk) or target_risk < s.heart_age_min_target_risk:
            self.logger.debug(f"Target risk {target_risk} too small for heart age, using chronological age")
            return chronological

        def risk_at(age: float) -> float | None:
            risk = self.ideal_risk(model, profile, age)
            return risk if math.isfinite(risk) else None

        low, high = s.heart_age_min, s.heart_age_max
        low_risk, high_risk = risk_at(low), risk_at(high)
        if low_risk is None or high_risk is None:
            self.logger.warning("Non-finite ideal risk at search bounds, using chronological age")
            return chronological
        if target_risk <= low_risk:
            return HeartAgeEstimate(age=low, method=HeartAgeMethod.LOWER_BOUND)
        if target_risk >= high_risk:
            return HeartAgeEstimate(age=high, method=HeartAgeMethod.UPPER_BOUND)

        iteration = 0
        while iteration < s.heart_age_max_iterations:
            mid = (low + high) / 2
            mid_risk = risk_at(mid)
            if mid_risk is None:
                self.logger.warning(f"Non-finite ideal risk at age {mid:.2f}, using chronological age")
                return chronological
            low, high = (mid, high) if mid_risk < target_risk else (low, mid)
            iteration += 1

        heart_age = (low + high) / 2
        final_risk = risk_at(heart_age)
        if final_risk is None or abs(final_risk - target_risk) > s.heart_age_tolerance:
            self.logger.warning(
                f"Heart age search did not converge after {iteration} iterations, "
                "using chronological age"
            )
            return chronological

        self.logger.debug(f"Heart age {heart_age:.2f} found in {iteration} iterations")
        return HeartAgeEstimate(age=heart_age, method=HeartAgeMethod.BISECTION, iterations=iteration)
