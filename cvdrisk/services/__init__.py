"""Services for the CVD risk engine.

Services implement the risk pipeline:
- UnitNormalizer: canonical units and derived measurements
- FraminghamEngine / QRISK3Engine: published 10-year risk models
- RiskModifierStage: Lp(a), family history and ancestry adjustments
- HeartAgeEstimator: ideal-profile risk inversion
- RiskCategorizer: guideline risk bands
- apply_intervention: treated profiles for intervention effects
- CVDRiskCalculator: orchestration and entry points
"""

from cvdrisk.services.coefficients import DEFAULT_COEFFICIENTS, CoefficientTable
from cvdrisk.services.framingham import FraminghamEngine
from cvdrisk.services.heart_age import HeartAgeEstimate, HeartAgeEstimator, HeartAgeMethod
from cvdrisk.services.interventions import apply_intervention
from cvdrisk.services.qrisk3 import QRISK3Engine
from cvdrisk.services.risk_calculator import (
    CVDRiskCalculator,
    calculate_framingham_risk,
    calculate_qrisk3_risk,
)
from cvdrisk.services.risk_categorizer import (
    ACC_AHA_BANDS,
    CCS_BANDS,
    NICE_BANDS,
    RiskBand,
    RiskCategorizer,
)
from cvdrisk.services.risk_factors import contributing_factors
from cvdrisk.services.risk_model import RiskModel
from cvdrisk.services.risk_modifiers import RiskModifierStage
from cvdrisk.services.unit_conversion import UnitNormalizer

__all__ = [
    # Coefficients
    "CoefficientTable",
    "DEFAULT_COEFFICIENTS",
    # Models
    "RiskModel",
    "FraminghamEngine",
    "QRISK3Engine",
    # Pipeline stages
    "UnitNormalizer",
    "RiskModifierStage",
    "HeartAgeEstimator",
    "HeartAgeEstimate",
    "HeartAgeMethod",
    "RiskBand",
    "RiskCategorizer",
    "CCS_BANDS",
    "ACC_AHA_BANDS",
    "NICE_BANDS",
    "contributing_factors",
    "apply_intervention",
    # Entry points
    "CVDRiskCalculator",
    "calculate_framingham_risk",
    "calculate_qrisk3_risk",
]
