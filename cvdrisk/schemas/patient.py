"""Patient input schemas.

``RawPatientInput`` is what a caller hands over: unit-tagged measurements and
free-text categorical codes. ``PatientProfile`` is the immutable,
canonical-unit record every risk stage works from.
"""

from pydantic import BaseModel, Field

from cvdrisk.schemas.base import (
    CholesterolUnit,
    DiabetesStatus,
    Ethnicity,
    HeightUnit,
    LpaUnit,
    Sex,
    SmokingStatus,
    WeightUnit,
)


class RawPatientInput(BaseModel):
    """Schema for caller-supplied patient data in arbitrary units."""

    age: float | None = Field(None, description="Age in years")
    sex: str | None = Field(None, description="Sex code (female/male)")
    ethnicity: str | None = Field(None, description="Ethnicity code")
    smoking: str | None = Field(None, description="Smoking status code")
    diabetes: str | None = Field(None, description="Diabetes status code")

    systolic_bp: float | None = Field(None, description="Systolic blood pressure (mmHg)")
    sbp_sd: float | None = Field(None, description="SD of recent systolic readings (mmHg)")
    sbp_readings: list[float] = Field(
        default_factory=list,
        description="Recent systolic readings used to derive sbp_sd when it is absent",
    )

    bmi: float | None = Field(None, description="Body mass index (kg/m²)")
    height: float | None = Field(None, description="Height")
    height_unit: HeightUnit = Field(default=HeightUnit.CM, description="Unit of height")
    weight: float | None = Field(None, description="Weight")
    weight_unit: WeightUnit = Field(default=WeightUnit.KG, description="Unit of weight")

    total_cholesterol: float | None = Field(None, description="Total cholesterol")
    hdl: float | None = Field(None, description="HDL cholesterol")
    ldl: float | None = Field(None, description="LDL cholesterol")
    cholesterol_unit: CholesterolUnit = Field(
        default=CholesterolUnit.MMOL_L, description="Unit of cholesterol values"
    )
    triglycerides: float | None = Field(None, description="Triglycerides")
    triglycerides_unit: CholesterolUnit | None = Field(
        None, description="Unit of triglycerides (defaults to cholesterol_unit)"
    )
    cholesterol_ratio: float | None = Field(None, description="Total/HDL cholesterol ratio")

    lpa: float | None = Field(None, description="Lipoprotein(a)")
    lpa_unit: LpaUnit = Field(default=LpaUnit.MG_DL, description="Unit of lipoprotein(a)")

    atrial_fibrillation: bool = False
    rheumatoid_arthritis: bool = False
    chronic_kidney_disease: bool = False
    migraine: bool = False
    sle: bool = False
    severe_mental_illness: bool = False
    erectile_dysfunction: bool = False
    treated_hypertension: bool = False
    family_history_premature_cvd: bool = False
    atypical_antipsychotics: bool = False
    corticosteroids: bool = False

    townsend: float = Field(default=0.0, description="Townsend deprivation score")


class PatientProfile(BaseModel):
    """Canonical-unit patient record.

    Lipids are mmol/L, height cm, weight kg, blood pressure mmHg and
    lipoprotein(a) mg/dL. Instances are frozen.
    """

    age: float = Field(..., description="Age in years")
    sex: Sex = Field(..., description="Biological sex")
    ethnicity: Ethnicity = Field(default=Ethnicity.WHITE_OR_NOT_STATED, description="Ethnicity")
    smoking: SmokingStatus = Field(default=SmokingStatus.NON, description="Smoking status")
    diabetes: DiabetesStatus = Field(default=DiabetesStatus.NONE, description="Diabetes status")

    systolic_bp: float | None = Field(None, description="Systolic blood pressure (mmHg)")
    sbp_sd: float | None = Field(None, description="SD of systolic readings (mmHg)")

    bmi: float | None = Field(None, description="Body mass index (kg/m²)")
    height_cm: float | None = Field(None, description="Height (cm)")
    weight_kg: float | None = Field(None, description="Weight (kg)")

    total_cholesterol: float | None = Field(None, description="Total cholesterol (mmol/L)")
    hdl_cholesterol: float | None = Field(None, description="HDL cholesterol (mmol/L)")
    ldl_cholesterol: float | None = Field(None, description="LDL cholesterol (mmol/L)")
    triglycerides: float | None = Field(None, description="Triglycerides (mmol/L)")
    cholesterol_ratio: float | None = Field(None, description="Total/HDL ratio")

    lpa_mg_dl: float | None = Field(None, description="Lipoprotein(a) (mg/dL)")

    atrial_fibrillation: bool = False
    rheumatoid_arthritis: bool = False
    chronic_kidney_disease: bool = False
    migraine: bool = False
    sle: bool = False
    severe_mental_illness: bool = False
    erectile_dysfunction: bool = False
    treated_hypertension: bool = False
    family_history_premature_cvd: bool = False
    atypical_antipsychotics: bool = False
    corticosteroids: bool = False

    townsend: float = Field(default=0.0, description="Townsend deprivation score")

    normalization_warnings: tuple[str, ...] = Field(
        default=(), description="Recoverable problems found while normalizing"
    )

    model_config = {"frozen": True}

    @property
    def is_current_smoker(self) -> bool:
        """Check if the patient currently smokes."""
        return self.smoking.is_current

    @property
    def has_diabetes(self) -> bool:
        """Check if the patient has either type of diabetes."""
        return self.diabetes != DiabetesStatus.NONE

    @property
    def is_south_asian(self) -> bool:
        """Check if the patient has South-Asian ancestry."""
        return self.ethnicity.is_south_asian

    @property
    def effective_cholesterol_ratio(self) -> float | None:
        """Total/HDL ratio, derived from the lipid panel when not given."""
        if self.cholesterol_ratio is not None:
            return self.cholesterol_ratio
        if self.total_cholesterol is not None and self.hdl_cholesterol:
            return self.total_cholesterol / self.hdl_cholesterol
        return None

    @property
    def effective_bmi(self) -> float | None:
        """BMI, derived from height and weight when not given."""
        if self.bmi is not None:
            return self.bmi
        if self.height_cm and self.weight_kg is not None:
            return self.weight_kg / (self.height_cm / 100) ** 2
        return None
