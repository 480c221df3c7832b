"""Maps a risk percentage onto guideline risk bands."""

import math
from dataclasses import dataclass

from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.schemas.base import RiskCategory


@dataclass(frozen=True)
class RiskBand:
    """A risk band covering percentages below ``upper`` (exclusive)."""

    category: str
    upper: float
    description: str = ""


# Canadian Cardiovascular Society, the default
CCS_BANDS = (
    RiskBand(RiskCategory.LOW.value, 10.0, "Low risk: lifestyle advice"),
    RiskBand(RiskCategory.INTERMEDIATE.value, 20.0, "Intermediate risk: consider statin therapy"),
    RiskBand(RiskCategory.HIGH.value, math.inf, "High risk: statin therapy recommended"),
)

ACC_AHA_BANDS = (
    RiskBand(RiskCategory.LOW.value, 5.0, "Low risk"),
    RiskBand(RiskCategory.BORDERLINE.value, 7.5, "Borderline risk: discuss risk enhancers"),
    RiskBand(RiskCategory.INTERMEDIATE.value, 20.0, "Intermediate risk: moderate-intensity statin"),
    RiskBand(RiskCategory.HIGH.value, math.inf, "High risk: high-intensity statin"),
)

NICE_BANDS = (
    RiskBand(RiskCategory.LOW.value, 10.0, "Below NICE treatment threshold"),
    RiskBand(RiskCategory.HIGH.value, math.inf, "Offer atorvastatin 20 mg (NICE CG181)"),
)


class RiskCategorizer:
    """Assigns a risk percentage to the first band whose upper bound exceeds it."""

    def __init__(self, bands: tuple[RiskBand, ...] | None = None):
        self.bands = tuple(bands) if bands is not None else CCS_BANDS
        if not self.bands:
            raise ValueError("At least one risk band is required")
        uppers = [band.upper for band in self.bands]
        if uppers != sorted(uppers) or len(set(uppers)) != len(uppers):
            raise ValueError("Risk band upper bounds must be strictly ascending")
        if self.bands[-1].upper != math.inf:
            raise ValueError("The last risk band must be open-ended")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RiskCategorizer":
        """Three-band categorizer using the configured thresholds."""
        s = settings or default_settings
        return cls((
            RiskBand(RiskCategory.LOW.value, s.low_risk_threshold, CCS_BANDS[0].description),
            RiskBand(RiskCategory.INTERMEDIATE.value, s.high_risk_threshold, CCS_BANDS[1].description),
            RiskBand(RiskCategory.HIGH.value, math.inf, CCS_BANDS[2].description),
        ))

    def band_for(self, risk_percent: float) -> RiskBand:
        """Band containing ``risk_percent``."""
        for band in self.bands:
            if risk_percent < band.upper:
                return band
        return self.bands[-1]

    def categorize(self, risk_percent: float) -> str:
        """Category name for ``risk_percent``."""
        return self.band_for(risk_percent).category
