"""CVD risk calculator service.

Wires the pipeline together:

    UnitNormalizer -> {FraminghamEngine | QRISK3Engine}
                   -> RiskModifierStage (Framingham only)
                   -> HeartAgeEstimator -> RiskCategorizer -> RiskResult

A calculation either returns a complete ``RiskResult`` or a tagged
``CalculationFailure``; no partially filled result is ever produced.
"""

import logging
from collections.abc import Callable
from typing import Any

from cvdrisk.core.audit import AuditAction, log_calculation
from cvdrisk.core.config import Settings, settings as default_settings
from cvdrisk.core.exceptions import ComputationError, ValidationError
from cvdrisk.schemas.base import RiskModelId
from cvdrisk.schemas.patient import PatientProfile, RawPatientInput
from cvdrisk.schemas.risk import (
    CalculationFailure,
    Intervention,
    InterventionEffect,
    ModelComparison,
    RiskOutcome,
    RiskResult,
)
from cvdrisk.services.coefficients import DEFAULT_COEFFICIENTS, CoefficientTable
from cvdrisk.services.framingham import FraminghamEngine
from cvdrisk.services.heart_age import HeartAgeEstimator, HeartAgeMethod
from cvdrisk.services.interventions import apply_intervention
from cvdrisk.services.qrisk3 import QRISK3Engine
from cvdrisk.services.risk_categorizer import RiskCategorizer
from cvdrisk.services.risk_factors import contributing_factors
from cvdrisk.services.risk_model import RiskModel
from cvdrisk.services.risk_modifiers import RiskModifierStage
from cvdrisk.services.unit_conversion import UnitNormalizer

logger = logging.getLogger(__name__)

AuditHook = Callable[..., Any]

HIGH_AGREEMENT_POINTS = 5.0
MODERATE_AGREEMENT_POINTS = 10.0
MIN_NNT_REDUCTION_POINTS = 0.01


def agreement_level(difference_points: float) -> str:
    """Agreement between two risks from their absolute difference."""
    if difference_points <= HIGH_AGREEMENT_POINTS:
        return "high"
    if difference_points <= MODERATE_AGREEMENT_POINTS:
        return "moderate"
    return "low"


def suggest_model(
    framingham_percent: float,
    qrisk3_percent: float,
    preferred: RiskModelId = RiskModelId.QRISK3,
) -> tuple[RiskModelId, str]:
    """Suggest which model to act on.

    Close estimates defer to ``preferred``; otherwise the higher estimate
    is suggested.
    """
    if abs(qrisk3_percent - framingham_percent) <= HIGH_AGREEMENT_POINTS:
        return preferred, (
            "Both models give similar estimates. Framingham is well established; "
            "QRISK3 covers more risk factors."
        )
    if framingham_percent > qrisk3_percent:
        return RiskModelId.FRAMINGHAM, (
            f"Framingham ({framingham_percent:.1f}%) estimates higher risk than "
            f"QRISK3 ({qrisk3_percent:.1f}%)."
        )
    return RiskModelId.QRISK3, (
        f"QRISK3 ({qrisk3_percent:.1f}%) estimates higher risk than "
        f"Framingham ({framingham_percent:.1f}%), reflecting its broader factor set."
    )


class CVDRiskCalculator:
    """Runs the full risk pipeline for either model.

    All collaborators are passed in explicitly; defaults are built from the
    published coefficient table and the loaded settings.
    """

    def __init__(
        self,
        coefficients: CoefficientTable = DEFAULT_COEFFICIENTS,
        settings: Settings | None = None,
        categorizer: RiskCategorizer | None = None,
        log: logging.Logger | None = None,
        audit_hook: AuditHook = log_calculation,
    ):
        self.settings = settings or default_settings
        self.logger = log or logger
        self.audit_hook = audit_hook

        self.normalizer = UnitNormalizer(self.settings, log)
        self.framingham = FraminghamEngine(coefficients, self.settings, log)
        self.qrisk3 = QRISK3Engine(coefficients, self.settings, log)
        self.modifiers = RiskModifierStage(self.settings, log)
        self.heart_age = HeartAgeEstimator(self.settings, log)
        self.categorizer = categorizer or RiskCategorizer.from_settings(self.settings)

        self._engines: dict[RiskModelId, RiskModel] = {
            RiskModelId.FRAMINGHAM: self.framingham,
            RiskModelId.QRISK3: self.qrisk3,
        }

    # ------------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------------

    def calculate_framingham_risk(self, profile: PatientProfile) -> RiskOutcome:
        """Framingham 10-year risk with modifiers, heart age and category."""
        return self._run(self.framingham, profile, apply_modifiers=True)

    def calculate_qrisk3_risk(self, profile: PatientProfile) -> RiskOutcome:
        """QRISK3 10-year risk with heart age and category."""
        return self._run(self.qrisk3, profile, apply_modifiers=False)

    def calculate(
        self,
        raw: RawPatientInput | dict[str, Any],
        model: RiskModelId | str = RiskModelId.FRAMINGHAM,
    ) -> RiskOutcome:
        """Normalize raw input and run one model.

        Args:
            raw: Unit-tagged input or a mapping of its fields.
            model: Which model to run.

        Returns:
            RiskResult or CalculationFailure.

        Raises:
            ValueError: If ``model`` is not a supported model id.
        """
        model_id = RiskModelId(model)
        try:
            profile = self.normalizer.normalize(raw)
        except ValidationError as e:
            return self._failure(model_id, e, action=AuditAction.NORMALIZE)

        if model_id == RiskModelId.FRAMINGHAM:
            return self.calculate_framingham_risk(profile)
        return self.calculate_qrisk3_risk(profile)

    def compare(self, profile: PatientProfile, preferred_model: RiskModelId | None = None) -> ModelComparison:
        """Run both models on the same profile and report how far they agree.

        Args:
            profile: Canonical patient profile.
            preferred_model: Model suggested when both agree closely. Defaults
                to ``settings.preferred_model``.

        Returns:
            ModelComparison with both outcomes. Agreement fields are only
            filled when both models succeeded.
        """
        framingham = self.calculate_framingham_risk(profile)
        qrisk3 = self.calculate_qrisk3_risk(profile)
        comparison = ModelComparison(framingham=framingham, qrisk3=qrisk3)

        if isinstance(framingham, RiskResult) and isinstance(qrisk3, RiskResult):
            f_percent = framingham.modified_risk_percent
            q_percent = qrisk3.modified_risk_percent
            mean = (f_percent + q_percent) / 2
            suggested, rationale = suggest_model(
                f_percent, q_percent, preferred_model or self.settings.preferred_model
            )
            comparison = comparison.model_copy(update={
                "difference_percent": q_percent - f_percent,
                "same_category": qrisk3.risk_category == framingham.risk_category,
                "agreement": agreement_level(abs(q_percent - f_percent)),
                "relative_difference_percent": abs(q_percent - f_percent) / mean * 100 if mean > 0 else 0.0,
                "suggested_model": suggested,
                "rationale": rationale,
            })

        self.audit_hook(
            model="both",
            success=framingham.success and qrisk3.success,
            details={"difference_percent": comparison.difference_percent, "agreement": comparison.agreement},
            action=AuditAction.COMPARE,
        )
        return comparison

    def calculate_intervention_effect(
        self,
        profile: PatientProfile,
        intervention: Intervention,
        model: RiskModelId | str = RiskModelId.FRAMINGHAM,
    ) -> InterventionEffect | CalculationFailure:
        """Re-score a profile after treatment.

        The baseline and treated profiles run through the same model. The
        reductions compare modified risks, in percentage points.

        Raises:
            ValueError: If ``model`` is not a supported model id.
        """
        model_id = RiskModelId(model)
        engine = self._engines[model_id]
        apply_modifiers = model_id == RiskModelId.FRAMINGHAM

        baseline = self._run(engine, profile, apply_modifiers)
        if isinstance(baseline, CalculationFailure):
            return baseline
        try:
            treated_profile, applied, warnings = apply_intervention(profile, intervention)
        except ValidationError as e:
            return self._failure(model_id, e, action=AuditAction.INTERVENTION)
        treated = self._run(engine, treated_profile, apply_modifiers)
        if isinstance(treated, CalculationFailure):
            return treated

        reduction = baseline.modified_risk_percent - treated.modified_risk_percent
        relative = reduction / baseline.modified_risk_percent * 100 if baseline.modified_risk_percent > 0 else 0.0
        nnt = round(100 / reduction) if reduction > MIN_NNT_REDUCTION_POINTS else None

        self.logger.info(
            f"{model_id.value} intervention {applied or 'none'}: "
            f"{baseline.modified_risk_percent:.1f}% -> {treated.modified_risk_percent:.1f}%"
        )
        self.audit_hook(
            model=model_id.value,
            success=True,
            risk_percent=treated.modified_risk_percent,
            risk_category=treated.risk_category,
            details={"applied": applied, "absolute_risk_reduction": reduction},
            action=AuditAction.INTERVENTION,
        )
        return InterventionEffect(
            model=model_id,
            baseline=baseline,
            treated=treated,
            applied=applied,
            absolute_risk_reduction=reduction,
            relative_risk_reduction=relative,
            number_needed_to_treat=nnt,
            treated_risk_category=treated.risk_category,
            warnings=warnings,
        )

    def get_available_models(self) -> list[str]:
        """List supported model identifiers."""
        return [model_id.value for model_id in self._engines]

    # ------------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------------

    def _run(self, engine: RiskModel, profile: PatientProfile, apply_modifiers: bool) -> RiskOutcome:
        model_id = engine.model_id
        try:
            base_risk, warnings = engine.calculate(profile)
            if apply_modifiers:
                modified_risk, applied = self.modifiers.apply(base_risk, profile)
            else:
                modified_risk, applied = base_risk, []
            estimate = self.heart_age.estimate(engine, profile, modified_risk)
            ideal_risk = engine.raw_risk(engine.ideal_profile(profile))
        except (ValidationError, ComputationError) as e:
            return self._failure(model_id, e)

        if estimate.method == HeartAgeMethod.LOWER_BOUND:
            warnings.append(f"Heart age is at or below {estimate.age:g}")
        elif estimate.method == HeartAgeMethod.UPPER_BOUND:
            warnings.append(f"Heart age is at or above {estimate.age:g}")

        modified_percent = modified_risk * 100
        band = self.categorizer.band_for(modified_percent)
        result = RiskResult(
            model=model_id,
            base_risk_percent=base_risk * 100,
            modified_risk_percent=modified_percent,
            modifiers=applied,
            risk_category=band.category,
            category_description=band.description,
            heart_age=estimate.years,
            ideal_risk_percent=ideal_risk * 100,
            relative_risk=modified_risk / ideal_risk if ideal_risk > 0 else None,
            contributing_factors=contributing_factors(profile),
            warnings=[*profile.normalization_warnings, *warnings],
            inputs=profile.model_dump(mode="json", exclude={"normalization_warnings"}),
        )

        self.logger.info(
            f"{model_id.value}: risk {modified_percent:.1f}% ({band.category}), "
            f"heart age {result.heart_age}"
        )
        self.audit_hook(
            model=model_id.value,
            success=True,
            risk_percent=modified_percent,
            risk_category=band.category,
        )
        return result

    def _failure(
        self,
        model_id: RiskModelId,
        error: ValidationError | ComputationError,
        action: AuditAction = AuditAction.CALCULATE,
    ) -> CalculationFailure:
        self.logger.warning(f"{model_id.value} {action.value} failed: {error.message}")
        self.audit_hook(model=model_id.value, success=False, error_type=error.error_type, action=action)
        return CalculationFailure(
            model=model_id,
            error_type=error.error_type,
            message=error.message,
            field=error.field,
            details=error.details,
        )


def calculate_framingham_risk(profile: PatientProfile) -> RiskOutcome:
    """Framingham risk with a freshly built default calculator."""
    return CVDRiskCalculator().calculate_framingham_risk(profile)


def calculate_qrisk3_risk(profile: PatientProfile) -> RiskOutcome:
    """QRISK3 risk with a freshly built default calculator."""
    return CVDRiskCalculator().calculate_qrisk3_risk(profile)
