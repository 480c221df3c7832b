"""Engine configuration using pydantic-settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cvdrisk.schemas.base import RiskModelId


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Every value can be overridden with a ``CVDRISK_`` prefixed variable,
    e.g. ``CVDRISK_LPA_NMOL_PER_MG_DL=2.5``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CVDRISK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging
    log_level: str = "INFO"

    # Unit conversion
    lpa_nmol_per_mg_dl: float = 2.17

    # Risk modifiers (Framingham only)
    lpa_tier_thresholds_mg_dl: tuple[float, float, float] = (30.0, 50.0, 100.0)
    lpa_tier_factors: tuple[float, float, float] = (1.2, 1.4, 1.7)
    family_history_factor: float = 1.6
    south_asian_factor: float = 1.5
    modified_risk_cap_percent: float = 99.9

    # QRISK3
    qrisk3_bmi_min: float = 15.0
    qrisk3_bmi_max: float = 47.0

    # Heart age search
    heart_age_min: float = 20.0
    heart_age_max: float = 95.0
    heart_age_max_iterations: int = 25
    heart_age_tolerance: float = 0.0005
    heart_age_min_target_risk: float = 0.0001

    # Ideal profile used for heart age and relative risk
    ideal_bmi: float = 22.0
    ideal_systolic_bp: float = 110.0
    ideal_sbp_sd: float = 0.0
    ideal_cholesterol_ratio: float = 3.5
    ideal_hdl_mmol_l: float = 1.3
    ideal_townsend: float = -7.0

    # Default risk bands (percent)
    low_risk_threshold: float = 10.0
    high_risk_threshold: float = 20.0

    # Model comparison
    preferred_model: RiskModelId = RiskModelId.QRISK3

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        """Reject orderings that would make the pipeline ill-defined."""
        if self.low_risk_threshold >= self.high_risk_threshold:
            raise ValueError("low_risk_threshold must be below high_risk_threshold")
        if self.heart_age_min >= self.heart_age_max:
            raise ValueError("heart_age_min must be below heart_age_max")
        if list(self.lpa_tier_thresholds_mg_dl) != sorted(self.lpa_tier_thresholds_mg_dl):
            raise ValueError("lpa_tier_thresholds_mg_dl must be ascending")
        if self.lpa_nmol_per_mg_dl <= 0:
            raise ValueError("lpa_nmol_per_mg_dl must be positive")
        factors = (*self.lpa_tier_factors, self.family_history_factor, self.south_asian_factor)
        if any(factor <= 0 for factor in factors):
            raise ValueError("risk modifier factors must be positive")
        if not 0 < self.modified_risk_cap_percent <= 100:
            raise ValueError("modified_risk_cap_percent must be in (0, 100]")
        if self.heart_age_min <= 0:
            raise ValueError("heart_age_min must be positive")
        return self


settings = Settings()
