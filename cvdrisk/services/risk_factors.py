"""Contributing risk factor summary.

Lists the patient characteristics that push risk up, each with a coarse
impact level, for display alongside a result.
"""

from cvdrisk.schemas.base import DiabetesStatus, ImpactLevel, SmokingStatus
from cvdrisk.schemas.patient import PatientProfile
from cvdrisk.schemas.risk import RiskFactor

# (profile attribute, name, impact, description)
CONDITION_FACTORS = [
    ("atrial_fibrillation", "Atrial fibrillation", ImpactLevel.HIGH,
     "Atrial fibrillation substantially increases stroke risk"),
    ("chronic_kidney_disease", "Chronic kidney disease", ImpactLevel.HIGH,
     "CKD stages 3-5 significantly increase CVD risk"),
    ("rheumatoid_arthritis", "Rheumatoid arthritis", ImpactLevel.MODERATE,
     "Rheumatoid arthritis increases CVD risk"),
    ("sle", "Systemic lupus erythematosus", ImpactLevel.MODERATE,
     "SLE increases CVD risk"),
    ("family_history_premature_cvd", "Family history of CVD", ImpactLevel.MODERATE,
     "Premature CVD in a first-degree relative increases risk"),
    ("treated_hypertension", "Treated hypertension", ImpactLevel.MODERATE,
     "Needing blood pressure treatment indicates elevated vascular risk"),
    ("migraine", "Migraine", ImpactLevel.LOW,
     "Migraine slightly increases stroke risk"),
    ("severe_mental_illness", "Severe mental illness", ImpactLevel.LOW,
     "Severe mental illness slightly increases CVD risk"),
    ("erectile_dysfunction", "Erectile dysfunction", ImpactLevel.LOW,
     "Erectile dysfunction is associated with vascular disease"),
    ("atypical_antipsychotics", "Atypical antipsychotics", ImpactLevel.LOW,
     "Atypical antipsychotic use increases CVD risk"),
    ("corticosteroids", "Regular corticosteroids", ImpactLevel.MODERATE,
     "Regular oral corticosteroid use increases CVD risk"),
]

SMOKING_IMPACT = {
    SmokingStatus.LIGHT: ImpactLevel.LOW,
    SmokingStatus.MODERATE: ImpactLevel.MODERATE,
    SmokingStatus.HEAVY: ImpactLevel.HIGH,
}


def contributing_factors(profile: PatientProfile) -> list[RiskFactor]:
    """Identify the risk factors present in a profile.

    Args:
        profile: Canonical patient profile.

    Returns:
        Risk factors, in a stable order (age first, conditions last).
    """
    factors: list[RiskFactor] = []

    if profile.age >= 65:
        factors.append(RiskFactor(
            name="Advanced age",
            impact=ImpactLevel.HIGH,
            description="Age is a strong independent risk factor for CVD",
        ))
    elif profile.age >= 55:
        factors.append(RiskFactor(
            name="Age",
            impact=ImpactLevel.MODERATE,
            description="Age is a significant risk factor for CVD",
        ))

    if profile.smoking in SMOKING_IMPACT:
        factors.append(RiskFactor(
            name="Smoking",
            impact=SMOKING_IMPACT[profile.smoking],
            description="Smoking significantly increases CVD risk",
        ))

    bmi = profile.effective_bmi
    if bmi is not None and bmi >= 30:
        factors.append(RiskFactor(
            name="Obesity", impact=ImpactLevel.MODERATE, description="BMI ≥30 kg/m² increases CVD risk",
        ))
    elif bmi is not None and bmi >= 25:
        factors.append(RiskFactor(
            name="Overweight", impact=ImpactLevel.LOW, description="BMI 25-29.9 kg/m² slightly increases CVD risk",
        ))

    sbp = profile.systolic_bp
    if sbp is not None and sbp >= 160:
        factors.append(RiskFactor(
            name="Severe hypertension",
            impact=ImpactLevel.HIGH,
            description="Systolic BP ≥160 mmHg significantly increases CVD risk",
        ))
    elif sbp is not None and sbp >= 140:
        factors.append(RiskFactor(
            name="Hypertension",
            impact=ImpactLevel.MODERATE,
            description="Systolic BP 140-159 mmHg increases CVD risk",
        ))

    ratio = profile.effective_cholesterol_ratio
    if ratio is not None and ratio >= 6:
        factors.append(RiskFactor(
            name="Poor cholesterol ratio",
            impact=ImpactLevel.HIGH,
            description="Total:HDL cholesterol ratio ≥6 significantly increases risk",
        ))
    elif ratio is not None and ratio >= 4.5:
        factors.append(RiskFactor(
            name="Elevated cholesterol ratio",
            impact=ImpactLevel.MODERATE,
            description="Total:HDL cholesterol ratio 4.5-5.9 increases risk",
        ))

    if profile.diabetes == DiabetesStatus.TYPE1:
        factors.append(RiskFactor(
            name="Type 1 diabetes", impact=ImpactLevel.HIGH,
            description="Type 1 diabetes significantly increases CVD risk",
        ))
    elif profile.diabetes == DiabetesStatus.TYPE2:
        factors.append(RiskFactor(
            name="Type 2 diabetes", impact=ImpactLevel.HIGH,
            description="Type 2 diabetes significantly increases CVD risk",
        ))

    lpa = profile.lpa_mg_dl
    if lpa is not None and lpa >= 50:
        factors.append(RiskFactor(
            name="Elevated lipoprotein(a)",
            impact=ImpactLevel.HIGH if lpa >= 100 else ImpactLevel.MODERATE,
            description="Lp(a) ≥50 mg/dL is an independent, inherited risk enhancer",
        ))

    for attribute, name, impact, description in CONDITION_FACTORS:
        if getattr(profile, attribute):
            factors.append(RiskFactor(name=name, impact=impact, description=description))

    return factors
