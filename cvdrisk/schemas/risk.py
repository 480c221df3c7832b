"""Risk calculation result schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from cvdrisk.schemas.base import ImpactLevel, RiskModelId


class AppliedModifier(BaseModel):
    """A multiplicative adjustment applied to a base risk."""

    name: str = Field(..., description="Modifier identifier")
    factor: float = Field(..., gt=0.0, description="Multiplicative factor")
    detail: str | None = Field(None, description="Human-readable reason")

    model_config = {"frozen": True}


class RiskFactor(BaseModel):
    """A patient characteristic that contributes to risk."""

    name: str = Field(..., description="Risk factor name")
    impact: ImpactLevel = Field(..., description="Relative weight")
    description: str = Field(..., description="Why it matters")


class RiskResult(BaseModel):
    """Successful 10-year CVD risk calculation."""

    success: Literal[True] = True
    model: RiskModelId = Field(..., description="Model that produced the result")
    base_risk_percent: float = Field(..., ge=0.0, le=100.0, description="Unadjusted model risk")
    modified_risk_percent: float = Field(
        ..., ge=0.0, le=100.0, description="Risk after modifiers (equals base for QRISK3)"
    )
    modifiers: list[AppliedModifier] = Field(default_factory=list)
    risk_category: str = Field(..., description="Assigned risk band")
    category_description: str = Field("", description="Band description")
    heart_age: int = Field(..., description="Age of an ideal-profile person with the same risk")
    ideal_risk_percent: float | None = Field(
        None, description="Risk of an ideal-profile person of the same age and sex"
    )
    relative_risk: float | None = Field(None, description="Modified risk divided by ideal risk")
    contributing_factors: list[RiskFactor] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    inputs: dict[str, Any] = Field(default_factory=dict, description="Canonical input echo")


class CalculationFailure(BaseModel):
    """Tagged failure returned instead of a RiskResult."""

    success: Literal[False] = False
    model: RiskModelId = Field(..., description="Model that was requested")
    error_type: Literal["validation", "computation"] = Field(..., description="Failure kind")
    message: str = Field(..., description="What went wrong")
    field: str | None = Field(None, description="Offending input field")
    details: dict[str, Any] = Field(default_factory=dict)


RiskOutcome = RiskResult | CalculationFailure


class ModelComparison(BaseModel):
    """Both models run on the same profile."""

    framingham: RiskResult | CalculationFailure
    qrisk3: RiskResult | CalculationFailure
    difference_percent: float | None = Field(
        None, description="QRISK3 minus Framingham modified risk, when both succeeded"
    )
    same_category: bool | None = Field(None, description="Whether both land in the same band")
    agreement: Literal["high", "moderate", "low"] | None = Field(
        None, description="Agreement level from the absolute difference (<=5, <=10, >10 points)"
    )
    relative_difference_percent: float | None = Field(
        None, description="Absolute difference as a percentage of the mean of both risks"
    )
    suggested_model: RiskModelId | None = Field(None, description="Model suggested for this patient")
    rationale: str | None = Field(None, description="Why the suggested model was chosen")


class Intervention(BaseModel):
    """Treatment effects to re-score a profile with."""

    ldl_reduction_percent: float | None = Field(
        None, gt=0.0, lt=100.0, description="Statin LDL reduction (%)"
    )
    sbp_reduction: float | None = Field(None, gt=0.0, description="Systolic BP reduction (mmHg)")
    smoking_cessation: bool = Field(False, description="Current smoker stops smoking")


class InterventionEffect(BaseModel):
    """Risk before and after an intervention."""

    model: RiskModelId
    baseline: RiskResult
    treated: RiskResult
    applied: list[str] = Field(default_factory=list, description="Interventions that changed the profile")
    absolute_risk_reduction: float = Field(..., description="Baseline minus treated risk (percentage points)")
    relative_risk_reduction: float = Field(..., description="Absolute reduction as a percentage of baseline")
    number_needed_to_treat: int | None = Field(
        None, description="Patients treated for 10 years to prevent one event"
    )
    treated_risk_category: str = Field(..., description="Risk band after the intervention")
    warnings: list[str] = Field(default_factory=list)
