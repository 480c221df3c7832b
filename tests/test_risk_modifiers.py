"""Tests for the Framingham risk modifier stage."""

import pytest

from cvdrisk.core.config import Settings
from cvdrisk.schemas.base import Ethnicity, Sex
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.services.risk_modifiers import RiskModifierStage


def _profile(**overrides) -> PatientProfile:
    return PatientProfile(age=55, sex=Sex.MALE, **overrides)


class TestLpaTiers:
    """Test lipoprotein(a) tiers."""

    def setup_method(self):
        """Create stage with default settings."""
        self.stage = RiskModifierStage(Settings(_env_file=None))

    @pytest.mark.parametrize("lpa,factor", [
        (29.9, None),
        (30, 1.2),
        (49.9, 1.2),
        (50, 1.4),
        (99, 1.4),
        (100, 1.7),
        (250, 1.7),
    ])
    def test_tier_boundaries(self, lpa, factor):
        """Test only the highest applicable tier is used."""
        modifier = self.stage.lpa_modifier(lpa)
        if factor is None:
            assert modifier is None
        else:
            assert modifier.factor == factor

    def test_missing_lpa(self):
        """Test missing Lp(a) applies no modifier."""
        assert self.stage.lpa_modifier(None) is None


class TestApply:
    """Test modifier application."""

    def setup_method(self):
        """Create stage with default settings."""
        self.stage = RiskModifierStage(Settings(_env_file=None))

    def test_no_modifiers_returns_base_exactly(self):
        """Test base risk passes through untouched without modifiers."""
        base = 0.123456789
        modified, applied = self.stage.apply(base, _profile())
        assert modified == base
        assert applied == []

    def test_family_history(self):
        """Test family history multiplies risk by 1.6."""
        modified, applied = self.stage.apply(0.10, _profile(family_history_premature_cvd=True))
        assert modified == pytest.approx(0.16)
        assert [m.name for m in applied] == ["family_history"]

    @pytest.mark.parametrize("ethnicity", [Ethnicity.INDIAN, Ethnicity.PAKISTANI, Ethnicity.BANGLADESHI])
    def test_south_asian(self, ethnicity):
        """Test South-Asian ancestry multiplies risk by 1.5."""
        modified, applied = self.stage.apply(0.10, _profile(ethnicity=ethnicity))
        assert modified == pytest.approx(0.15)
        assert applied[0].name == "south_asian_ancestry"

    def test_other_asian_not_south_asian(self):
        """Test other Asian and Chinese ethnicities get no ancestry modifier."""
        for ethnicity in (Ethnicity.OTHER_ASIAN, Ethnicity.CHINESE):
            _, applied = self.stage.apply(0.10, _profile(ethnicity=ethnicity))
            assert applied == []

    def test_modifiers_compound(self):
        """Test factors multiply together."""
        profile = _profile(lpa_mg_dl=60, family_history_premature_cvd=True, ethnicity=Ethnicity.INDIAN)
        modified, applied = self.stage.apply(0.05, profile)
        assert modified == pytest.approx(0.05 * 1.4 * 1.6 * 1.5)
        assert [m.factor for m in applied] == [1.4, 1.6, 1.5]

    def test_capped_below_100(self):
        """Test compounded risk is capped at 99.9%."""
        profile = _profile(lpa_mg_dl=150, family_history_premature_cvd=True, ethnicity=Ethnicity.PAKISTANI)
        modified, _ = self.stage.apply(0.60, profile)
        assert modified == pytest.approx(0.999)

    def test_configured_factors(self):
        """Test factors come from settings."""
        stage = RiskModifierStage(Settings(_env_file=None, family_history_factor=2.0))
        modified, _ = stage.apply(0.10, _profile(family_history_premature_cvd=True))
        assert modified == pytest.approx(0.20)
