"""Tests for unit conversion and input normalization."""

import pytest

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
from cvdrisk.schemas.patient import RawPatientInput
from cvdrisk.services.unit_conversion import (
    SMOKING_ALIASES,
    UnitNormalizer,
    calculate_bmi,
    convert_cholesterol,
    convert_lpa,
    convert_triglycerides,
    friedewald_ldl,
    height_to_cm,
    parse_code,
    sbp_standard_deviation,
    weight_to_kg,
)


# ============================================================================
# Conversion Function Tests
# ============================================================================


class TestCholesterolConversion:
    """Test cholesterol unit conversion."""

    def test_mg_dl_to_mmol(self):
        """Test 193.35 mg/dL is 5.0 mmol/L."""
        assert convert_cholesterol(193.35, CholesterolUnit.MG_DL, CholesterolUnit.MMOL_L) == pytest.approx(5.0)

    def test_mmol_to_mg_dl(self):
        """Test 1.0 mmol/L is 38.67 mg/dL."""
        assert convert_cholesterol(1.0, CholesterolUnit.MMOL_L, CholesterolUnit.MG_DL) == pytest.approx(38.67)

    def test_same_unit_unchanged(self):
        """Test converting to the same unit is a no-op."""
        assert convert_cholesterol(4.2, CholesterolUnit.MMOL_L, CholesterolUnit.MMOL_L) == 4.2

    @pytest.mark.parametrize("value", [0.5, 3.1, 5.0, 7.77, 12.0])
    def test_round_trip(self, value):
        """Test mmol/L -> mg/dL -> mmol/L returns the original value."""
        mg = convert_cholesterol(value, CholesterolUnit.MMOL_L, CholesterolUnit.MG_DL)
        back = convert_cholesterol(mg, CholesterolUnit.MG_DL, CholesterolUnit.MMOL_L)
        assert abs(back - value) < 1e-6


class TestOtherConversions:
    """Test triglyceride, Lp(a), height and weight conversion."""

    def test_triglycerides(self):
        """Test 177.14 mg/dL triglycerides is 2.0 mmol/L."""
        assert convert_triglycerides(177.14, CholesterolUnit.MG_DL, CholesterolUnit.MMOL_L) == pytest.approx(2.0)

    def test_lpa_nmol_to_mg(self):
        """Test 217 nmol/L is 100 mg/dL with the canonical factor."""
        assert convert_lpa(217, LpaUnit.NMOL_L, LpaUnit.MG_DL, 2.17) == pytest.approx(100.0)

    def test_lpa_mg_to_nmol(self):
        """Test 50 mg/dL is 108.5 nmol/L."""
        assert convert_lpa(50, LpaUnit.MG_DL, LpaUnit.NMOL_L, 2.17) == pytest.approx(108.5)

    def test_height(self):
        """Test inches and metres convert to centimetres."""
        assert height_to_cm(70, HeightUnit.IN) == pytest.approx(177.8)
        assert height_to_cm(1.75, HeightUnit.M) == pytest.approx(175.0)
        assert height_to_cm(160, HeightUnit.CM) == 160

    def test_weight(self):
        """Test pounds convert to kilograms."""
        assert weight_to_kg(220, WeightUnit.LB) == pytest.approx(99.79032, rel=1e-6)
        assert weight_to_kg(80, WeightUnit.KG) == 80


class TestDerivedValues:
    """Test BMI, Friedewald LDL and SBP variability."""

    def test_bmi(self):
        """Test BMI for 70 kg at 175 cm."""
        assert calculate_bmi(70, 175) == pytest.approx(22.857, abs=0.001)

    def test_bmi_rejects_zero_height(self):
        """Test zero height is a validation error."""
        with pytest.raises(ValidationError):
            calculate_bmi(70, 0)

    def test_friedewald(self):
        """Test LDL = TC - HDL - TG/2.2."""
        assert friedewald_ldl(5.5, 1.3, 1.1) == pytest.approx(3.7)

    def test_friedewald_high_triglycerides(self):
        """Test Friedewald is not used when TG >= 4.5 mmol/L."""
        assert friedewald_ldl(6.0, 1.0, 4.5) is None

    def test_sbp_sd_sample_deviation(self):
        """Test SD uses the n-1 denominator."""
        assert sbp_standard_deviation([120, 130, 140]) == pytest.approx(10.0)

    def test_sbp_sd_needs_three_readings(self):
        """Test fewer than three readings gives no SD."""
        assert sbp_standard_deviation([120, 130]) is None


class TestCodes:
    """Test categorical code parsing."""

    def test_alias(self):
        """Test aliases are case and separator insensitive."""
        assert parse_code("Ex-Smoker", SMOKING_ALIASES, "smoking") == SmokingStatus.EX

    def test_unknown_code_raises(self):
        """Test unknown code raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc:
            parse_code("cigars", SMOKING_ALIASES, "smoking")
        assert exc.value.field == "smoking"


# ============================================================================
# Normalizer Tests
# ============================================================================


class TestUnitNormalizer:
    """Test UnitNormalizer.normalize."""

    def setup_method(self):
        """Create a normalizer for each test."""
        self.normalizer = UnitNormalizer()

    def test_us_units(self):
        """Test mg/dL, inches and pounds are converted to canonical units."""
        profile = self.normalizer.normalize(RawPatientInput(
            age=50, sex="male",
            total_cholesterol=232.02, hdl=38.67, triglycerides=132.855,
            cholesterol_unit=CholesterolUnit.MG_DL, triglycerides_unit=CholesterolUnit.MG_DL,
            height=70, height_unit=HeightUnit.IN, weight=180, weight_unit=WeightUnit.LB,
            systolic_bp=130,
        ))
        assert profile.sex == Sex.MALE
        assert profile.total_cholesterol == pytest.approx(6.0)
        assert profile.hdl_cholesterol == pytest.approx(1.0)
        assert profile.triglycerides == pytest.approx(1.5)
        assert profile.cholesterol_ratio == pytest.approx(6.0)
        assert profile.ldl_cholesterol == pytest.approx(6.0 - 1.0 - 1.5 / 2.2)
        assert profile.height_cm == pytest.approx(177.8)
        assert profile.bmi == pytest.approx(81.6466 / 1.778 ** 2, rel=1e-4)

    def test_accepts_mapping(self):
        """Test a plain dict is accepted."""
        profile = self.normalizer.normalize({"age": 45, "sex": "F", "smoking": "heavy"})
        assert profile.sex == Sex.FEMALE
        assert profile.smoking == SmokingStatus.HEAVY

    def test_lpa_in_nmol(self):
        """Test Lp(a) nmol/L is stored as mg/dL."""
        profile = self.normalizer.normalize({"age": 45, "sex": "male", "lpa": 108.5, "lpa_unit": "nmol/L"})
        assert profile.lpa_mg_dl == pytest.approx(50.0)

    def test_sbp_sd_from_readings(self):
        """Test SBP SD is derived from readings when absent."""
        profile = self.normalizer.normalize({"age": 45, "sex": "male", "sbp_readings": [120, 130, 140]})
        assert profile.sbp_sd == pytest.approx(10.0)

    @pytest.mark.parametrize("reading", [float("nan"), -120.0])
    def test_invalid_sbp_reading(self, reading):
        """Test a non-finite or negative reading is rejected before deriving SD."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 45, "sex": "male", "sbp_readings": [120, reading, 140]})
        assert exc.value.field == "sbp_readings"

    def test_non_finite_sbp_sd(self):
        """Test a NaN SBP SD is rejected."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 45, "sex": "male", "sbp_sd": float("nan")})
        assert exc.value.field == "sbp_sd"

    def test_triglycerides_follow_cholesterol_unit(self):
        """Test triglycerides without their own unit use the cholesterol unit."""
        profile = self.normalizer.normalize({
            "age": 50, "sex": "male", "cholesterol_unit": "mg/dL",
            "total_cholesterol": 200, "hdl": 50, "triglycerides": 150,
        })
        assert profile.triglycerides == pytest.approx(150 / 88.57)
        assert profile.ldl_cholesterol == pytest.approx(3.11, abs=0.01)
        assert profile.normalization_warnings == ()

    def test_explicit_triglycerides_unit_wins(self):
        """Test an explicit triglycerides unit overrides the cholesterol unit."""
        profile = self.normalizer.normalize({
            "age": 50, "sex": "male", "cholesterol_unit": "mg/dL",
            "triglycerides": 1.5, "triglycerides_unit": "mmol/L",
        })
        assert profile.triglycerides == pytest.approx(1.5)

    def test_implausible_triglycerides(self):
        """Test triglycerides outside physiological limits are rejected."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 50, "sex": "male", "triglycerides": 150})
        assert exc.value.field == "triglycerides"

    def test_unknown_code_falls_back_to_baseline(self):
        """Test unknown codes become baseline categories with a warning."""
        profile = self.normalizer.normalize({
            "age": 45, "sex": "male", "ethnicity": "martian", "diabetes": "maybe",
        })
        assert profile.ethnicity == Ethnicity.WHITE_OR_NOT_STATED
        assert profile.diabetes == DiabetesStatus.NONE
        assert len(profile.normalization_warnings) == 2

    def test_ethnicity_alias(self):
        """Test short ethnicity aliases map to census categories."""
        profile = self.normalizer.normalize({"age": 45, "sex": "male", "ethnicity": "Black African"})
        assert profile.ethnicity == Ethnicity.AFRICAN

    def test_missing_age(self):
        """Test missing age is a validation error."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"sex": "male"})
        assert exc.value.field == "age"

    def test_unknown_sex(self):
        """Test unknown sex cannot fall back and is a validation error."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 50, "sex": "x"})
        assert exc.value.field == "sex"

    def test_non_numeric_value(self):
        """Test non-numeric input is a validation error naming the field."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 50, "sex": "male", "systolic_bp": "high"})
        assert exc.value.field == "systolic_bp"

    def test_non_positive_lipid(self):
        """Test a zero lipid value is rejected before any logarithm."""
        with pytest.raises(ValidationError) as exc:
            self.normalizer.normalize({"age": 50, "sex": "male", "hdl": 0})
        assert exc.value.field == "hdl"

    def test_implausible_sbp(self):
        """Test SBP outside physiological limits is rejected."""
        with pytest.raises(ValidationError):
            self.normalizer.normalize({"age": 50, "sex": "male", "systolic_bp": 400})

    def test_profile_is_frozen(self):
        """Test the normalized profile cannot be modified."""
        profile = self.normalizer.normalize({"age": 45, "sex": "male"})
        with pytest.raises(Exception):
            profile.age = 50
