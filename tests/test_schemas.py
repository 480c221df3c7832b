"""Tests for schemas and enums."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from cvdrisk.schemas.base import QRISK3_ETHNIC_GROUPS, Ethnicity, Sex, SmokingStatus
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.schemas.risk import AppliedModifier, CalculationFailure, RiskResult


class TestEthnicity:
    """Test ethnicity lookups."""

    def test_every_category_has_a_group(self):
        """Test all census categories map to a QRISK3 group 1-9."""
        assert set(QRISK3_ETHNIC_GROUPS) == set(Ethnicity)
        assert set(QRISK3_ETHNIC_GROUPS.values()) == set(range(1, 10))

    def test_south_asian(self):
        """Test only Indian, Pakistani and Bangladeshi count as South Asian."""
        assert {e for e in Ethnicity if e.is_south_asian} == {
            Ethnicity.INDIAN, Ethnicity.PAKISTANI, Ethnicity.BANGLADESHI,
        }


class TestSmokingStatus:
    """Test smoking categories."""

    def test_qrisk3_index(self):
        """Test categories index 0-4 in order."""
        assert [s.qrisk3_index for s in SmokingStatus] == [0, 1, 2, 3, 4]

    def test_current(self):
        """Test ex-smokers are not current smokers."""
        assert not SmokingStatus.EX.is_current
        assert SmokingStatus.LIGHT.is_current


class TestPatientProfile:
    """Test PatientProfile."""

    def test_derived_ratio_and_bmi(self):
        """Test ratio and BMI are derived when not given."""
        profile = PatientProfile(
            age=50, sex=Sex.MALE, total_cholesterol=6.0, hdl_cholesterol=1.5, height_cm=180, weight_kg=81,
        )
        assert profile.effective_cholesterol_ratio == pytest.approx(4.0)
        assert profile.effective_bmi == pytest.approx(25.0)

    def test_explicit_values_win(self):
        """Test explicit ratio and BMI take precedence."""
        profile = PatientProfile(
            age=50, sex=Sex.MALE, total_cholesterol=6.0, hdl_cholesterol=1.5, cholesterol_ratio=3.9, bmi=24,
            height_cm=180, weight_kg=81,
        )
        assert profile.effective_cholesterol_ratio == 3.9
        assert profile.effective_bmi == 24

    def test_frozen(self):
        """Test profiles are immutable."""
        profile = PatientProfile(age=50, sex=Sex.MALE)
        with pytest.raises(PydanticValidationError):
            profile.age = 60


class TestResults:
    """Test result models."""

    def test_success_tags(self):
        """Test results and failures are tagged."""
        failure = CalculationFailure(model="qrisk3_2017", error_type="validation", message="bad")
        assert failure.success is False
        result = RiskResult(
            model="framingham_2008", base_risk_percent=5, modified_risk_percent=5,
            risk_category="low", heart_age=50,
        )
        assert result.success is True

    def test_risk_bounds_enforced(self):
        """Test percentages above 100 are rejected."""
        with pytest.raises(PydanticValidationError):
            RiskResult(
                model="framingham_2008", base_risk_percent=101, modified_risk_percent=5,
                risk_category="low", heart_age=50,
            )

    def test_modifier_factor_positive(self):
        """Test modifier factors must be positive."""
        with pytest.raises(PydanticValidationError):
            AppliedModifier(name="x", factor=0)
