"""Multiplicative risk modifiers applied after the Framingham model.

Lipoprotein(a), family history of premature CVD and South-Asian ancestry
are not Framingham predictors; guidelines advise scaling the base risk
instead. Factors compound and the result is capped below 100%.
"""

import logging

from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.schemas.risk import AppliedModifier

logger = logging.getLogger(__name__)


class RiskModifierStage:
    """Applies the configured modifiers to a base risk proportion."""

    def __init__(self, settings: Settings | None = None, log: logging.Logger | None = None):
        self.settings = settings or default_settings
        self.logger = log or logger

    def lpa_modifier(self, lpa_mg_dl: float | None) -> AppliedModifier | None:
        """Highest Lp(a) tier the value reaches, if any."""
        if lpa_mg_dl is None:
            return None
        tiers = zip(self.settings.lpa_tier_thresholds_mg_dl, self.settings.lpa_tier_factors)
        applicable = [(threshold, factor) for threshold, factor in tiers if lpa_mg_dl >= threshold]
        if not applicable:
            return None
        threshold, factor = applicable[-1]
        return AppliedModifier(
            name="lipoprotein_a",
            factor=factor,
            detail=f"Lp(a) {lpa_mg_dl:.0f} mg/dL >= {threshold:g} mg/dL",
        )

    def modifiers_for(self, profile: PatientProfile) -> list[AppliedModifier]:
        """All modifiers that apply to the profile, in application order."""
        modifiers = []
        lpa = self.lpa_modifier(profile.lpa_mg_dl)
        if lpa is not None:
            modifiers.append(lpa)
        if profile.family_history_premature_cvd:
            modifiers.append(AppliedModifier(
                name="family_history",
                factor=self.settings.family_history_factor,
                detail="Family history of premature CVD",
            ))
        if profile.is_south_asian:
            modifiers.append(AppliedModifier(
                name="south_asian_ancestry",
                factor=self.settings.south_asian_factor,
                detail=f"South-Asian ancestry ({profile.ethnicity.value})",
            ))
        return modifiers

    def apply(self, base_risk: float, profile: PatientProfile) -> tuple[float, list[AppliedModifier]]:
        """Scale a base risk proportion by every applicable modifier.

        Args:
            base_risk: Model risk as a proportion in [0, 1].
            profile: Patient whose Lp(a), family history and ethnicity are read.

        Returns:
            Tuple of (modified risk proportion, applied modifiers). With no
            modifiers the base risk is returned unchanged.
        """
        modifiers = self.modifiers_for(profile)
        if not modifiers:
            return base_risk, []

        modified = base_risk
        for modifier in modifiers:
            modified *= modifier.factor

        cap = self.settings.modified_risk_cap_percent / 100
        if modified > cap:
            self.logger.info(f"Modified risk {modified:.4f} capped at {cap:.3f}")
            modified = cap

        self.logger.debug(
            f"Applied modifiers {[m.name for m in modifiers]}: {base_risk:.4f} -> {modified:.4f}"
        )
        return modified, modifiers
