"""Framingham General CVD risk engine (D'Agostino 2008, lipid model)."""

import math

from cvdrisk.core.exceptions import ValidationError
from cvdrisk.schemas.base import RiskModelId
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.coefficients import FraminghamTable
from cvdrisk.services.risk_model import RiskModel, require_positive, survival_to_risk
from cvdrisk.services.unit_conversion import mmol_to_mg_dl


class FraminghamEngine(RiskModel):
    """10-year general CVD risk from the Framingham Heart Study.

    Cholesterol enters the model in mg/dL, the unit of the published means;
    the canonical mmol/L profile values are converted on the way in.
    Exactly one ln(SBP) term is used, chosen by treatment status.
    """

    model_id = RiskModelId.FRAMINGHAM
    min_age = 30.0
    max_age = 74.0

    def table_for(self, profile: PatientProfile) -> FraminghamTable:
        """Coefficient table for the patient's sex."""
        return self.coefficients.framingham[profile.sex]

    def validate(self, profile: PatientProfile) -> list[str]:
        """Check age domain and the presence of positive lipid/SBP values.

        Raises:
            ValidationError: If any required value is missing or non-positive.
        """
        self.validate_age(profile)
        require_positive(profile.total_cholesterol, "total_cholesterol")
        require_positive(profile.hdl_cholesterol, "hdl_cholesterol")
        require_positive(profile.systolic_bp, "systolic_bp")
        return []

    def linear_predictor(self, profile: PatientProfile) -> float:
        """Centred linear predictor sum(beta * (x - mean))."""
        table = self.table_for(profile)
        c, m = table.coefficients, table.means

        ln_age = math.log(profile.age)
        ln_tc = math.log(mmol_to_mg_dl(profile.total_cholesterol))
        ln_hdl = math.log(mmol_to_mg_dl(profile.hdl_cholesterol))
        ln_sbp = math.log(profile.systolic_bp)

        treated = profile.treated_hypertension
        sbp_beta = c.ln_sbp_treated if treated else c.ln_sbp_untreated

        terms = {
            "age": c.ln_age * (ln_age - m.ln_age),
            "total_cholesterol": c.ln_total_cholesterol * (ln_tc - m.ln_total_cholesterol),
            "hdl": c.ln_hdl * (ln_hdl - m.ln_hdl),
            "sbp": sbp_beta * (ln_sbp - table.sbp_centre(treated)),
            "smoker": c.smoker * (float(profile.is_current_smoker) - m.smoker),
            "diabetes": c.diabetes * (float(profile.has_diabetes) - m.diabetes),
        }
        self.logger.debug(f"Framingham terms: {terms}")
        return sum(terms.values())

    def raw_risk(self, profile: PatientProfile) -> float:
        """Risk proportion without domain validation.

        Raises:
            ValidationError: If a value that is log-transformed is not positive.
        """
        for field in ("total_cholesterol", "hdl_cholesterol", "systolic_bp"):
            require_positive(getattr(profile, field), field)
        if profile.age <= 0:
            raise ValidationError("age must be positive", field="age")

        table = self.table_for(profile)
        return survival_to_risk(self.linear_predictor(profile), table.baseline_survival, self.logger)
