"""Unit conversion and input normalization.

Converts caller-supplied measurements into the canonical units used by the
risk engines (mmol/L, cm, kg, mmHg, Lp(a) in mg/dL), derives BMI, the
total/HDL ratio, Friedewald LDL and blood-pressure variability, and maps
free-text categorical codes onto the engine enums.
"""

import logging
import math
import statistics
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.core.exceptions import ConfigurationError, ValidationError
from cvdrisk.schemas.base import (
    CholesterolUnit,
    DiabetesStatus,
    Ethnicity,
    HeightUnit,
    LpaUnit,
    Sex,
    SmokingStatus,
    WeightUnit,
)
from cvdrisk.schemas.patient import PatientProfile, RawPatientInput

logger = logging.getLogger(__name__)


# ============================================================================
# Conversion constants
# ============================================================================

CHOLESTEROL_MG_DL_PER_MMOL_L = 38.67
TRIGLYCERIDES_MG_DL_PER_MMOL_L = 88.57
CM_PER_INCH = 2.54
KG_PER_POUND = 0.45359237

# Friedewald is unreliable above this triglyceride level (mmol/L)
FRIEDEWALD_MAX_TRIGLYCERIDES = 4.5
FRIEDEWALD_TG_DIVISOR = 2.2

MIN_SBP_READINGS = 3

# Physiological plausibility limits
SBP_LIMITS = (50.0, 300.0)
BMI_LIMITS = (10.0, 70.0)
RATIO_LIMITS = (1.0, 12.0)
TRIGLYCERIDE_LIMITS = (0.2, 20.0)  # mmol/L


# ============================================================================
# Conversion functions
# ============================================================================


def mg_dl_to_mmol(value: float) -> float:
    """Convert cholesterol from mg/dL to mmol/L."""
    return value / CHOLESTEROL_MG_DL_PER_MMOL_L


def mmol_to_mg_dl(value: float) -> float:
    """Convert cholesterol from mmol/L to mg/dL."""
    return value * CHOLESTEROL_MG_DL_PER_MMOL_L


def convert_cholesterol(value: float, from_unit: CholesterolUnit, to_unit: CholesterolUnit) -> float:
    """Convert a cholesterol value between mg/dL and mmol/L.

    Args:
        value: Concentration in ``from_unit``.
        from_unit: Source unit.
        to_unit: Target unit.

    Returns:
        Concentration in ``to_unit``.
    """
    if from_unit == to_unit:
        return value
    if from_unit == CholesterolUnit.MG_DL:
        return mg_dl_to_mmol(value)
    return mmol_to_mg_dl(value)


def convert_triglycerides(value: float, from_unit: CholesterolUnit, to_unit: CholesterolUnit) -> float:
    """Convert triglycerides between mg/dL and mmol/L."""
    if from_unit == to_unit:
        return value
    if from_unit == CholesterolUnit.MG_DL:
        return value / TRIGLYCERIDES_MG_DL_PER_MMOL_L
    return value * TRIGLYCERIDES_MG_DL_PER_MMOL_L


def convert_lpa(value: float, from_unit: LpaUnit, to_unit: LpaUnit, nmol_per_mg_dl: float) -> float:
    """Convert lipoprotein(a) between nmol/L and mg/dL.

    There is no exact conversion because apo(a) isoforms differ in mass;
    a single configured factor is used everywhere.

    Args:
        value: Concentration in ``from_unit``.
        from_unit: Source unit.
        to_unit: Target unit.
        nmol_per_mg_dl: nmol/L equivalent to 1 mg/dL.
    """
    if from_unit == to_unit:
        return value
    if from_unit == LpaUnit.NMOL_L:
        return value / nmol_per_mg_dl
    return value * nmol_per_mg_dl


def height_to_cm(value: float, unit: HeightUnit) -> float:
    """Convert a height to centimetres."""
    if unit == HeightUnit.M:
        return value * 100
    if unit == HeightUnit.IN:
        return value * CM_PER_INCH
    return value


def weight_to_kg(value: float, unit: WeightUnit) -> float:
    """Convert a weight to kilograms."""
    if unit == WeightUnit.LB:
        return value * KG_PER_POUND
    return value


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body mass index in kg/m².

    Raises:
        ValidationError: If height or weight is not positive.
    """
    if height_cm <= 0:
        raise ValidationError("height must be positive", field="height")
    if weight_kg <= 0:
        raise ValidationError("weight must be positive", field="weight")
    height_m = height_cm / 100
    return weight_kg / (height_m ** 2)


def friedewald_ldl(total: float, hdl: float, triglycerides: float) -> float | None:
    """Estimate LDL (mmol/L) with the Friedewald equation.

    Returns None when triglycerides are too high for the estimate to hold.
    """
    if triglycerides >= FRIEDEWALD_MAX_TRIGLYCERIDES:
        return None
    return total - hdl - triglycerides / FRIEDEWALD_TG_DIVISOR


def sbp_standard_deviation(readings: list[float]) -> float | None:
    """Sample standard deviation of systolic readings.

    Returns None with fewer than three readings.
    """
    if len(readings) < MIN_SBP_READINGS:
        return None
    return statistics.stdev(readings)


# ============================================================================
# Categorical codes
# ============================================================================


def _code(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


SEX_ALIASES: dict[str, Sex] = {
    "female": Sex.FEMALE,
    "f": Sex.FEMALE,
    "woman": Sex.FEMALE,
    "male": Sex.MALE,
    "m": Sex.MALE,
    "man": Sex.MALE,
}

SMOKING_ALIASES: dict[str, SmokingStatus] = {
    **{s.value: s for s in SmokingStatus},
    "never": SmokingStatus.NON,
    "non_smoker": SmokingStatus.NON,
    "no": SmokingStatus.NON,
    "former": SmokingStatus.EX,
    "ex_smoker": SmokingStatus.EX,
    "light_smoker": SmokingStatus.LIGHT,
    "moderate_smoker": SmokingStatus.MODERATE,
    "heavy_smoker": SmokingStatus.HEAVY,
}

DIABETES_ALIASES: dict[str, DiabetesStatus] = {
    **{d.value: d for d in DiabetesStatus},
    "no": DiabetesStatus.NONE,
    "type_1": DiabetesStatus.TYPE1,
    "t1": DiabetesStatus.TYPE1,
    "type_2": DiabetesStatus.TYPE2,
    "t2": DiabetesStatus.TYPE2,
}

ETHNICITY_ALIASES: dict[str, Ethnicity] = {
    **{e.value: e for e in Ethnicity},
    "white": Ethnicity.WHITE_OR_NOT_STATED,
    "not_stated": Ethnicity.WHITE_OR_NOT_STATED,
    "white_british": Ethnicity.WHITE_OR_NOT_STATED,
    "black_caribbean": Ethnicity.CARIBBEAN,
    "black_african": Ethnicity.AFRICAN,
    "other_asian_background": Ethnicity.OTHER_ASIAN,
    "other": Ethnicity.OTHER_ETHNIC_GROUP,
}


def parse_code(value: str, aliases: dict[str, Any], field: str) -> Any:
    """Look up a categorical code.

    Raises:
        ConfigurationError: If the code is not recognised.
    """
    try:
        return aliases[_code(value)]
    except KeyError:
        raise ConfigurationError(
            f"Unrecognised {field} code '{value}'",
            field=field,
            details={"value": value},
        ) from None


# ============================================================================
# Normalizer
# ============================================================================


class UnitNormalizer:
    """Turns a ``RawPatientInput`` into a canonical ``PatientProfile``.

    Unknown categorical codes fall back to the baseline category with a
    logged warning; missing or implausible numbers raise ``ValidationError``.
    """

    def __init__(self, settings: Settings | None = None, log: logging.Logger | None = None):
        self.settings = settings or default_settings
        self.logger = log or logger

    def normalize(self, raw: RawPatientInput | dict[str, Any]) -> PatientProfile:
        """Normalize raw input into canonical units.

        Args:
            raw: Raw input model or a plain mapping of its fields.

        Returns:
            Frozen PatientProfile.

        Raises:
            ValidationError: If a value is missing, non-numeric or implausible.
        """
        if not isinstance(raw, RawPatientInput):
            raw = self._parse_raw(raw)

        warnings: list[str] = []

        if raw.age is None:
            raise ValidationError("age is required", field="age")
        if not math.isfinite(raw.age) or raw.age <= 0:
            raise ValidationError("age must be a positive number", field="age", details={"value": raw.age})
        if raw.sex is None:
            raise ValidationError("sex is required", field="sex")
        if _code(raw.sex) not in SEX_ALIASES:
            raise ValidationError(f"Unrecognised sex '{raw.sex}'", field="sex")
        sex = SEX_ALIASES[_code(raw.sex)]

        ethnicity = self._categorical(raw.ethnicity, ETHNICITY_ALIASES, "ethnicity", Ethnicity.WHITE_OR_NOT_STATED, warnings)
        smoking = self._categorical(raw.smoking, SMOKING_ALIASES, "smoking", SmokingStatus.NON, warnings)
        diabetes = self._categorical(raw.diabetes, DIABETES_ALIASES, "diabetes", DiabetesStatus.NONE, warnings)

        # Lipids
        unit = raw.cholesterol_unit
        total = self._positive(raw.total_cholesterol, "total_cholesterol")
        hdl = self._positive(raw.hdl, "hdl")
        total = convert_cholesterol(total, unit, CholesterolUnit.MMOL_L) if total is not None else None
        hdl = convert_cholesterol(hdl, unit, CholesterolUnit.MMOL_L) if hdl is not None else None
        ldl = self._positive(raw.ldl, "ldl")
        ldl = convert_cholesterol(ldl, unit, CholesterolUnit.MMOL_L) if ldl is not None else None
        triglycerides = self._positive(raw.triglycerides, "triglycerides")
        if triglycerides is not None:
            triglycerides = convert_triglycerides(
                triglycerides, raw.triglycerides_unit or unit, CholesterolUnit.MMOL_L
            )
            self._within(triglycerides, TRIGLYCERIDE_LIMITS, "triglycerides")

        if ldl is None and None not in (total, hdl, triglycerides):
            ldl = friedewald_ldl(total, hdl, triglycerides)
            if ldl is None:
                warnings.append("Triglycerides too high to estimate LDL")

        ratio = raw.cholesterol_ratio
        if ratio is None and total is not None and hdl is not None:
            ratio = total / hdl
        if ratio is not None:
            self._within(ratio, RATIO_LIMITS, "cholesterol_ratio")

        # Body size
        height_cm = self._positive(raw.height, "height")
        height_cm = height_to_cm(height_cm, raw.height_unit) if height_cm is not None else None
        weight_kg = self._positive(raw.weight, "weight")
        weight_kg = weight_to_kg(weight_kg, raw.weight_unit) if weight_kg is not None else None
        bmi = raw.bmi
        if bmi is None and height_cm is not None and weight_kg is not None:
            bmi = calculate_bmi(weight_kg, height_cm)
        if bmi is not None:
            self._within(bmi, BMI_LIMITS, "bmi")

        # Blood pressure
        if raw.systolic_bp is not None:
            self._within(raw.systolic_bp, SBP_LIMITS, "systolic_bp")
        sbp_sd = raw.sbp_sd
        if sbp_sd is None and raw.sbp_readings:
            for reading in raw.sbp_readings:
                self._within(reading, SBP_LIMITS, "sbp_readings")
            sbp_sd = sbp_standard_deviation(raw.sbp_readings)
            if sbp_sd is None:
                warnings.append(
                    f"At least {MIN_SBP_READINGS} systolic readings are needed to derive variability"
                )
        if sbp_sd is not None and (not math.isfinite(sbp_sd) or sbp_sd < 0):
            raise ValidationError(
                "sbp_sd must be a non-negative number", field="sbp_sd", details={"value": sbp_sd}
            )

        lpa = self._positive(raw.lpa, "lpa")
        if lpa is not None:
            lpa = convert_lpa(lpa, raw.lpa_unit, LpaUnit.MG_DL, self.settings.lpa_nmol_per_mg_dl)

        profile = PatientProfile(
            age=raw.age,
            sex=sex,
            ethnicity=ethnicity,
            smoking=smoking,
            diabetes=diabetes,
            systolic_bp=raw.systolic_bp,
            sbp_sd=sbp_sd,
            bmi=bmi,
            height_cm=height_cm,
            weight_kg=weight_kg,
            total_cholesterol=total,
            hdl_cholesterol=hdl,
            ldl_cholesterol=ldl,
            triglycerides=triglycerides,
            cholesterol_ratio=ratio,
            lpa_mg_dl=lpa,
            atrial_fibrillation=raw.atrial_fibrillation,
            rheumatoid_arthritis=raw.rheumatoid_arthritis,
            chronic_kidney_disease=raw.chronic_kidney_disease,
            migraine=raw.migraine,
            sle=raw.sle,
            severe_mental_illness=raw.severe_mental_illness,
            erectile_dysfunction=raw.erectile_dysfunction,
            treated_hypertension=raw.treated_hypertension,
            family_history_premature_cvd=raw.family_history_premature_cvd,
            atypical_antipsychotics=raw.atypical_antipsychotics,
            corticosteroids=raw.corticosteroids,
            townsend=raw.townsend,
            normalization_warnings=tuple(warnings),
        )
        self.logger.debug(f"Normalized profile: age={profile.age:g} sex={profile.sex.value}")
        return profile

    def _parse_raw(self, data: dict[str, Any]) -> RawPatientInput:
        try:
            return RawPatientInput.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(
                f"Invalid value for {field}: {first['msg']}",
                field=field,
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e

    def _categorical(
        self,
        value: str | None,
        aliases: dict[str, Any],
        field: str,
        baseline: Any,
        warnings: list[str],
    ) -> Any:
        if value is None:
            return baseline
        try:
            return parse_code(value, aliases, field)
        except ConfigurationError as e:
            message = f"{e.message}; using '{baseline.value}'"
            self.logger.warning(message)
            warnings.append(message)
            return baseline

    @staticmethod
    def _positive(value: float | None, field: str) -> float | None:
        if value is None:
            return None
        if not math.isfinite(value) or value <= 0:
            raise ValidationError(f"{field} must be a positive number", field=field, details={"value": value})
        return value

    @staticmethod
    def _within(value: float, limits: tuple[float, float], field: str) -> None:
        low, high = limits
        if not math.isfinite(value) or not low <= value <= high:
            raise ValidationError(
                f"{field} {value:g} is outside the plausible range {low:g}-{high:g}",
                field=field,
                details={"min": low, "max": high, "value": value},
            )
