"""QRISK3 (2017) 10-year cardiovascular risk engine.

Implements the published ``cvd_female_raw`` / ``cvd_male_raw`` algorithms:
fractional-polynomial age and BMI terms, centred continuous predictors,
ethnicity and smoking offsets, binary comorbidities and age interactions.
"""

import math

from cvdrisk.core.exceptions import ValidationError
from cvdrisk.schemas.base import DiabetesStatus, RiskModelId, Sex
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.coefficients import QRISK3Table
from cvdrisk.services.risk_model import RiskModel, require_positive, survival_to_risk

# Published calculator accepts SBP in this range
SBP_RANGE = (70.0, 210.0)


def fractional_power(x: float, power: float) -> float:
    """Fractional-polynomial transform where power 0 means ln(x)."""
    if power == 0:
        return math.log(x)
    return x ** power


class QRISK3Engine(RiskModel):
    """QRISK3 10-year risk of heart attack or stroke."""

    model_id = RiskModelId.QRISK3
    min_age = 25.0
    max_age = 84.0

    def table_for(self, profile: PatientProfile) -> QRISK3Table:
        """Coefficient table for the patient's sex."""
        return self.coefficients.qrisk3[profile.sex]

    def validate(self, profile: PatientProfile) -> list[str]:
        """Check age domain, SBP, BMI and cholesterol ratio.

        Returns:
            Warnings for values the model accepts but clamps or flags.

        Raises:
            ValidationError: If a required value is missing or non-positive.
        """
        self.validate_age(profile)
        warnings: list[str] = []

        sbp = require_positive(profile.systolic_bp, "systolic_bp")
        low, high = SBP_RANGE
        if not low <= sbp <= high:
            warnings.append(f"Systolic BP {sbp:g} is outside the QRISK3 range {low:g}-{high:g}")

        bmi = require_positive(profile.effective_bmi, "bmi")
        clamped = self.clamp_bmi(bmi)
        if clamped != bmi:
            message = f"BMI {bmi:.1f} clamped to {clamped:g} for QRISK3"
            self.logger.warning(message)
            warnings.append(message)

        require_positive(profile.effective_cholesterol_ratio, "cholesterol_ratio")

        if profile.sbp_sd is not None and profile.sbp_sd < 0:
            raise ValidationError("sbp_sd cannot be negative", field="sbp_sd")
        if profile.erectile_dysfunction and profile.sex == Sex.FEMALE:
            warnings.append("Erectile dysfunction is not a QRISK3 predictor for women; ignored")
        return warnings

    def clamp_bmi(self, bmi: float) -> float:
        """Clamp BMI to the range QRISK3 was derived on."""
        return min(max(bmi, self.settings.qrisk3_bmi_min), self.settings.qrisk3_bmi_max)

    def linear_predictor(self, profile: PatientProfile) -> float:
        """Sum of all QRISK3 terms for the profile."""
        table = self.table_for(profile)
        means = table.means

        dage = profile.age / 10
        age_1 = fractional_power(dage, table.age_powers[0]) - means["age_1"]
        age_2 = fractional_power(dage, table.age_powers[1]) - means["age_2"]

        dbmi = self.clamp_bmi(profile.effective_bmi) / 10
        bmi_1 = dbmi ** -2 - means["bmi_1"]
        bmi_2 = dbmi ** -2 * math.log(dbmi) - means["bmi_2"]

        continuous = {
            "age_1": age_1,
            "age_2": age_2,
            "bmi_1": bmi_1,
            "bmi_2": bmi_2,
            "ratio": profile.effective_cholesterol_ratio - means["ratio"],
            "sbp": profile.systolic_bp - means["sbp"],
            "sbp_sd": (profile.sbp_sd or 0.0) - means["sbp_sd"],
            "townsend": profile.townsend - means["townsend"],
        }
        indicators = self.binary_indicators(profile)
        smoke = profile.smoking.qrisk3_index

        a = table.ethnicity[profile.ethnicity.qrisk3_group]
        a += table.smoking[smoke]
        a += sum(table.continuous[name] * value for name, value in continuous.items())
        a += sum(
            coefficient for name, coefficient in table.binary.items() if indicators.get(name)
        )

        # Age interactions
        for age_term, interactions in ((age_1, table.age_1_interactions), (age_2, table.age_2_interactions)):
            if smoke:
                a += age_term * interactions[f"smoke_{smoke}"]
            for name, coefficient in interactions.items():
                if name.startswith("smoke_"):
                    continue
                if name in continuous:
                    a += age_term * continuous[name] * coefficient
                elif indicators.get(name):
                    a += age_term * coefficient

        self.logger.debug(f"QRISK3 linear predictor: {a:.6f}")
        return a

    @staticmethod
    def binary_indicators(profile: PatientProfile) -> dict[str, bool]:
        """Map profile flags onto QRISK3 binary term names."""
        return {
            "atrial_fibrillation": profile.atrial_fibrillation,
            "atypical_antipsychotics": profile.atypical_antipsychotics,
            "corticosteroids": profile.corticosteroids,
            "erectile_dysfunction": profile.erectile_dysfunction and profile.sex == Sex.MALE,
            "migraine": profile.migraine,
            "rheumatoid_arthritis": profile.rheumatoid_arthritis,
            "chronic_kidney_disease": profile.chronic_kidney_disease,
            "severe_mental_illness": profile.severe_mental_illness,
            "sle": profile.sle,
            "treated_hypertension": profile.treated_hypertension,
            "type1_diabetes": profile.diabetes == DiabetesStatus.TYPE1,
            "type2_diabetes": profile.diabetes == DiabetesStatus.TYPE2,
            "family_history": profile.family_history_premature_cvd,
        }

    def raw_risk(self, profile: PatientProfile) -> float:
        """Risk proportion without domain validation.

        Raises:
            ValidationError: If BMI, SBP, ratio or age is missing or not positive.
        """
        require_positive(profile.age, "age")
        require_positive(profile.systolic_bp, "systolic_bp")
        require_positive(profile.effective_bmi, "bmi")
        require_positive(profile.effective_cholesterol_ratio, "cholesterol_ratio")

        table = self.table_for(profile)
        return survival_to_risk(self.linear_predictor(profile), table.baseline_survival, self.logger)
