"""CVD Risk Engine: 10-year Framingham and QRISK3 cardiovascular risk."""

from cvdrisk.schemas import PatientProfile, RawPatientInput, RiskResult, CalculationFailure
from cvdrisk.services import CVDRiskCalculator, calculate_framingham_risk, calculate_qrisk3_risk

__version__ = "0.1.0"

__all__ = [
    "PatientProfile",
    "RawPatientInput",
    "RiskResult",
    "CalculationFailure",
    "CVDRiskCalculator",
    "calculate_framingham_risk",
    "calculate_qrisk3_risk",
]
