"""Pydantic schemas and enums for the CVD risk engine."""

from cvdrisk.schemas.base import (
    CholesterolUnit,
    DiabetesStatus,
    Ethnicity,
    HeightUnit,
    ImpactLevel,
    LpaUnit,
    RiskCategory,
    RiskModelId,
    Sex,
    SmokingStatus,
    WeightUnit,
)
from cvdrisk.schemas.patient import PatientProfile, RawPatientInput
from cvdrisk.schemas.risk import (
    AppliedModifier,
    CalculationFailure,
    Intervention,
    InterventionEffect,
    ModelComparison,
    RiskFactor,
    RiskOutcome,
    RiskResult,
)

__all__ = [
    # Enums
    "Sex",
    "Ethnicity",
    "SmokingStatus",
    "DiabetesStatus",
    "RiskModelId",
    "RiskCategory",
    "ImpactLevel",
    "CholesterolUnit",
    "LpaUnit",
    "HeightUnit",
    "WeightUnit",
    # Patient
    "RawPatientInput",
    "PatientProfile",
    # Results
    "AppliedModifier",
    "RiskFactor",
    "RiskResult",
    "CalculationFailure",
    "RiskOutcome",
    "ModelComparison",
    "Intervention",
    "InterventionEffect",
]
