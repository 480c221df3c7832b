"""Pytest configuration and fixtures for risk engine tests."""

from unittest.mock import MagicMock

import pytest

from cvdrisk.core.config import Settings
from cvdrisk.schemas.base import Ethnicity, Sex, SmokingStatus
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.risk_calculator import CVDRiskCalculator


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults, independent of any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def audit_hook() -> MagicMock:
    """Mock audit hook to verify calculation auditing."""
    return MagicMock()


@pytest.fixture
def calculator(test_settings: Settings, audit_hook: MagicMock) -> CVDRiskCalculator:
    """Calculator built with default coefficients and a mock audit hook."""
    return CVDRiskCalculator(settings=test_settings, audit_hook=audit_hook)


@pytest.fixture
def framingham_female_60() -> PatientProfile:
    """Female, 60, TC 6.0, HDL 1.2, SBP 140 untreated, non-smoker, no diabetes."""
    return PatientProfile(
        age=60,
        sex=Sex.FEMALE,
        systolic_bp=140,
        total_cholesterol=6.0,
        hdl_cholesterol=1.2,
    )


@pytest.fixture
def qrisk3_male_55() -> PatientProfile:
    """Male, 55, white, non-smoker, BMI 28, SBP 130 (SD 8), ratio 4.5, Townsend 0."""
    return PatientProfile(
        age=55,
        sex=Sex.MALE,
        ethnicity=Ethnicity.WHITE_OR_NOT_STATED,
        smoking=SmokingStatus.NON,
        bmi=28,
        systolic_bp=130,
        sbp_sd=8,
        cholesterol_ratio=4.5,
        townsend=0,
    )


@pytest.fixture
def full_profile() -> PatientProfile:
    """Profile that carries every field both models need."""
    return PatientProfile(
        age=55,
        sex=Sex.MALE,
        systolic_bp=135,
        sbp_sd=6,
        bmi=27,
        total_cholesterol=5.5,
        hdl_cholesterol=1.2,
        cholesterol_ratio=5.5 / 1.2,
    )
