"""Tests for engine settings."""

import pytest

from cvdrisk.core.config import Settings
from cvdrisk.schemas.base import LpaUnit, RiskModelId
from cvdrisk.services.unit_conversion import UnitNormalizer


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = Settings(_env_file=None)
        assert settings.lpa_nmol_per_mg_dl == 2.17
        assert settings.heart_age_max_iterations == 25
        assert settings.heart_age_tolerance == 0.0005
        assert settings.lpa_tier_factors == (1.2, 1.4, 1.7)

    def test_env_override(self, monkeypatch) -> None:
        """Test CVDRISK_ environment variables override defaults."""
        monkeypatch.setenv("CVDRISK_LPA_NMOL_PER_MG_DL", "2.5")
        monkeypatch.setenv("CVDRISK_HEART_AGE_MAX", "90")
        settings = Settings(_env_file=None)
        assert settings.lpa_nmol_per_mg_dl == 2.5
        assert settings.heart_age_max == 90

    def test_lpa_factor_used_by_normalizer(self) -> None:
        """Test the configured Lp(a) factor drives conversion."""
        normalizer = UnitNormalizer(Settings(_env_file=None, lpa_nmol_per_mg_dl=2.5))
        profile = normalizer.normalize({"age": 50, "sex": "male", "lpa": 125, "lpa_unit": LpaUnit.NMOL_L})
        assert profile.lpa_mg_dl == pytest.approx(50.0)

    def test_invalid_lpa_factor(self) -> None:
        """Test non-positive Lp(a) factor is rejected."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, lpa_nmol_per_mg_dl=0)

    def test_unordered_lpa_tiers(self) -> None:
        """Test Lp(a) thresholds must ascend."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, lpa_tier_thresholds_mg_dl=(100, 50, 30))

    @pytest.mark.parametrize("override", [
        {"family_history_factor": 0},
        {"south_asian_factor": -1.5},
        {"lpa_tier_factors": (1.2, 0, 1.7)},
    ])
    def test_non_positive_modifier_factor(self, override) -> None:
        """Test modifier factors must be positive."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, **override)

    def test_non_positive_heart_age_min(self) -> None:
        """Test the heart age search cannot start at or below zero."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, heart_age_min=0)

    def test_risk_cap_bounds(self) -> None:
        """Test the modified risk cap must be within (0, 100]."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, modified_risk_cap_percent=120)

    def test_preferred_model_override(self, monkeypatch) -> None:
        """Test the preferred comparison model can be set from the environment."""
        monkeypatch.setenv("CVDRISK_PREFERRED_MODEL", "framingham_2008")
        assert Settings(_env_file=None).preferred_model == RiskModelId.FRAMINGHAM
