"""Treatment scenarios applied to a patient profile.

An intervention produces a new ``PatientProfile`` that the calculator scores
with the same model as the baseline:

- Statin: LDL falls by the given percentage and total cholesterol falls by
  the same absolute amount, so the total/HDL ratio is recomputed.
- Blood pressure: systolic BP falls by the given number of mmHg.
- Smoking cessation: a current smoker becomes an ex-smoker.
"""

import logging

from cvdrisk.core.exceptions import ValidationError
from cvdrisk.schemas.base import SmokingStatus
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.schemas.risk import Intervention

logger = logging.getLogger(__name__)


def apply_intervention(
    profile: PatientProfile, intervention: Intervention
) -> tuple[PatientProfile, list[str], list[str]]:
    """Build the treated profile.

    Args:
        profile: Baseline profile.
        intervention: Treatment effects to apply.

    Returns:
        Tuple of (treated profile, names of applied interventions, warnings).

    Raises:
        ValidationError: If the profile lacks the values an intervention changes.
    """
    update: dict = {}
    applied: list[str] = []
    warnings: list[str] = []

    if intervention.ldl_reduction_percent is not None:
        total, hdl = profile.total_cholesterol, profile.hdl_cholesterol
        if total is None or hdl is None:
            raise ValidationError(
                "Statin effect needs total and HDL cholesterol", field="total_cholesterol"
            )
        fraction = intervention.ldl_reduction_percent / 100
        ldl = profile.ldl_cholesterol
        if ldl is None:
            ldl = total - hdl
            warnings.append("LDL not available; statin effect applied to non-HDL cholesterol")
        else:
            update["ldl_cholesterol"] = ldl * (1 - fraction)
        new_total = total - ldl * fraction
        update["total_cholesterol"] = new_total
        if profile.cholesterol_ratio is not None:
            update["cholesterol_ratio"] = new_total / hdl
        applied.append("statin")

    if intervention.sbp_reduction is not None:
        if profile.systolic_bp is None:
            raise ValidationError("Blood pressure effect needs systolic_bp", field="systolic_bp")
        update["systolic_bp"] = profile.systolic_bp - intervention.sbp_reduction
        applied.append("blood_pressure")

    if intervention.smoking_cessation:
        if profile.is_current_smoker:
            update["smoking"] = SmokingStatus.EX
            applied.append("smoking_cessation")
        else:
            warnings.append("Smoking cessation ignored for a non-smoker")

    logger.debug(f"Applied interventions: {applied or 'none'}")
    return profile.model_copy(update=update), applied, warnings
