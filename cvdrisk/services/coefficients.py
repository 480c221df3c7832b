"""Published coefficient tables for the supported risk models.

References:
- D'Agostino RB et al. General cardiovascular risk profile for use in
  primary care: the Framingham Heart Study. Circulation 2008;117:743-753.
- Hippisley-Cox J et al. Development and validation of QRISK3 risk
  prediction algorithms. BMJ 2017;357:j2099 (qrisk.org, 2017 release).

Tables are built once at import time and are read-only afterwards.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from cvdrisk.schemas.base import Sex


# ============================================================================
# Framingham General CVD (2008), lipid model
# ============================================================================


@dataclass(frozen=True)
class FraminghamTerms:
    """One value per Framingham predictor (coefficient or population mean)."""

    ln_age: float
    ln_total_cholesterol: float  # mg/dL
    ln_hdl: float  # mg/dL
    ln_sbp_untreated: float
    ln_sbp_treated: float
    smoker: float
    diabetes: float


@dataclass(frozen=True)
class FraminghamTable:
    """Sex-specific Framingham table."""

    coefficients: FraminghamTerms
    means: FraminghamTerms
    baseline_survival: float

    def sbp_centre(self, treated: bool) -> float:
        """Centring constant for the active ln(SBP) branch.

        The published model centres both branches on their own means. Only
        one branch is non-zero for a patient, so the other branch's
        ``coefficient * mean`` is folded into the active branch here.
        """
        c, m = self.coefficients, self.means
        offset = c.ln_sbp_untreated * m.ln_sbp_untreated + c.ln_sbp_treated * m.ln_sbp_treated
        beta = c.ln_sbp_treated if treated else c.ln_sbp_untreated
        return offset / beta


FRAMINGHAM_TABLES: Mapping[Sex, FraminghamTable] = MappingProxyType({
    Sex.FEMALE: FraminghamTable(
        coefficients=FraminghamTerms(
            ln_age=2.32888,
            ln_total_cholesterol=1.20904,
            ln_hdl=-0.70833,
            ln_sbp_untreated=2.76157,
            ln_sbp_treated=2.82263,
            smoker=0.52873,
            diabetes=0.69154,
        ),
        means=FraminghamTerms(
            ln_age=3.8686,
            ln_total_cholesterol=5.3504,
            ln_hdl=4.0176,
            ln_sbp_untreated=4.2400,
            ln_sbp_treated=0.5826,
            smoker=0.3423,
            diabetes=0.0376,
        ),
        baseline_survival=0.95012,
    ),
    Sex.MALE: FraminghamTable(
        coefficients=FraminghamTerms(
            ln_age=3.06117,
            ln_total_cholesterol=1.12370,
            ln_hdl=-0.93263,
            ln_sbp_untreated=1.93303,
            ln_sbp_treated=1.99881,
            smoker=0.65451,
            diabetes=0.57367,
        ),
        means=FraminghamTerms(
            ln_age=3.8560,
            ln_total_cholesterol=5.3420,
            ln_hdl=3.7686,
            ln_sbp_untreated=4.3544,
            ln_sbp_treated=0.5019,
            smoker=0.3522,
            diabetes=0.0650,
        ),
        baseline_survival=0.88936,
    ),
})


# ============================================================================
# QRISK3 (2017)
# ============================================================================

# Keys shared by the continuous, binary and interaction mappings
CONTINUOUS_TERMS = ("age_1", "age_2", "bmi_1", "bmi_2", "ratio", "sbp", "sbp_sd", "townsend")
BINARY_TERMS = (
    "atrial_fibrillation",
    "atypical_antipsychotics",
    "corticosteroids",
    "erectile_dysfunction",
    "migraine",
    "rheumatoid_arthritis",
    "chronic_kidney_disease",
    "severe_mental_illness",
    "sle",
    "treated_hypertension",
    "type1_diabetes",
    "type2_diabetes",
    "family_history",
)


@dataclass(frozen=True)
class QRISK3Table:
    """Sex-specific QRISK3 table.

    ``age_powers`` are the fractional-polynomial powers applied to age/10.
    ``ethnicity`` is indexed by ethrisk code (index 0 unused, 1 is baseline)
    and ``smoking`` by smoking category. Interaction mappings are keyed by
    binary term, ``smoke_1``..``smoke_4`` or a continuous term name.
    """

    baseline_survival: float
    age_powers: tuple[float, float]
    ethnicity: tuple[float, ...]
    smoking: tuple[float, ...]
    means: Mapping[str, float]
    continuous: Mapping[str, float]
    binary: Mapping[str, float]
    age_1_interactions: Mapping[str, float]
    age_2_interactions: Mapping[str, float]


def _frozen(values: dict[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


QRISK3_TABLES: Mapping[Sex, QRISK3Table] = MappingProxyType({
    Sex.FEMALE: QRISK3Table(
        baseline_survival=0.988876402378082,
        age_powers=(-2.0, 1.0),
        ethnicity=(
            0.0,
            0.0,
            0.28040314332995425,
            0.56298994142075398,
            0.29590000851116516,
            0.072785379877982545,
            -0.17072135508857317,
            -0.39371043314874971,
            -0.32632495283530272,
            -0.17127056883241784,
        ),
        smoking=(
            0.0,
            0.13386833786546262,
            0.56200858012438537,
            0.66749593377502547,
            0.84948177644830847,
        ),
        means=_frozen({
            "age_1": 0.053274843841791,
            "age_2": 4.332503318786621,
            "bmi_1": 0.154946178197861,
            "bmi_2": 0.144462317228317,
            "ratio": 3.476326465606690,
            "sbp": 123.130012512207030,
            "sbp_sd": 9.002537727355957,
            "townsend": 0.392308831214905,
        }),
        continuous=_frozen({
            "age_1": -8.1388109247726188,
            "age_2": 0.79733376689699098,
            "bmi_1": 0.29236092275460052,
            "bmi_2": -4.1513300213837665,
            "ratio": 0.15338035820802554,
            "sbp": 0.013131488407103424,
            "sbp_sd": 0.0078894541014586095,
            "townsend": 0.077223790588590108,
        }),
        binary=_frozen({
            "atrial_fibrillation": 1.5923354969269663,
            "atypical_antipsychotics": 0.25237642070115557,
            "corticosteroids": 0.59520725304601851,
            "migraine": 0.301267260870345,
            "rheumatoid_arthritis": 0.21364803435181942,
            "chronic_kidney_disease": 0.65194569493845833,
            "severe_mental_illness": 0.12555308058820178,
            "sle": 0.75880938654267693,
            "treated_hypertension": 0.50931593683423004,
            "type1_diabetes": 1.7267977510537347,
            "type2_diabetes": 1.0688773244615468,
            "family_history": 0.45445319020896213,
        }),
        age_1_interactions=_frozen({
            "smoke_1": -4.7057161785851891,
            "smoke_2": -2.7430383403573337,
            "smoke_3": -0.86608088829392182,
            "smoke_4": 0.90241562369710648,
            "atrial_fibrillation": 19.938034889546561,
            "corticosteroids": -0.98408045235936281,
            "migraine": 1.7634979587872999,
            "chronic_kidney_disease": -3.5874047731694114,
            "sle": 19.690303738638292,
            "treated_hypertension": 11.872809733921812,
            "type1_diabetes": -1.2444332714320747,
            "type2_diabetes": 6.8652342000009599,
            "bmi_1": 23.802623412141742,
            "bmi_2": -71.184947692087007,
            "family_history": 0.99467807940435127,
            "sbp": 0.034131842338615485,
            "townsend": -1.0301180802035639,
        }),
        age_2_interactions=_frozen({
            "smoke_1": -0.075589244643193026,
            "smoke_2": -0.11951192874867074,
            "smoke_3": -0.10366306397571923,
            "smoke_4": -0.13991853591718389,
            "atrial_fibrillation": -0.076182651011162505,
            "corticosteroids": -0.12005364946742472,
            "migraine": -0.065586917898699859,
            "chronic_kidney_disease": -0.22688873086442507,
            "sle": 0.077347949679016273,
            "treated_hypertension": 0.00096857823588174436,
            "type1_diabetes": -0.28724064624488949,
            "type2_diabetes": -0.097112252590695489,
            "bmi_1": 0.52369958933664429,
            "bmi_2": 0.045744190122323759,
            "family_history": -0.076885051698423038,
            "sbp": -0.0015082501423272358,
            "townsend": -0.031593414674962329,
        }),
    ),
    Sex.MALE: QRISK3Table(
        baseline_survival=0.977268040180206,
        age_powers=(-1.0, 3.0),
        ethnicity=(
            0.0,
            0.0,
            0.27719248760308279,
            0.47446360714931268,
            0.52961729919689371,
            0.035100159186299017,
            -0.35807899669327919,
            -0.4005648523216514,
            -0.41522792889830173,
            -0.26321348134749967,
        ),
        smoking=(
            0.0,
            0.19128222863388983,
            0.55241588192645552,
            0.63835053027506072,
            0.78983819881858019,
        ),
        means=_frozen({
            "age_1": 0.234766781330109,
            "age_2": 77.284080505371094,
            "bmi_1": 0.149176135659218,
            "bmi_2": 0.141913309693336,
            "ratio": 4.300998687744141,
            "sbp": 128.571578979492190,
            "sbp_sd": 8.756621360778809,
            "townsend": 0.526304900646210,
        }),
        continuous=_frozen({
            "age_1": -17.839781666005575,
            "age_2": 0.0022964880605765492,
            "bmi_1": 2.4562776660536358,
            "bmi_2": -8.3011122314711354,
            "ratio": 0.17340196856327111,
            "sbp": 0.012910126542553305,
            "sbp_sd": 0.010251914291290456,
            "townsend": 0.033268201277287295,
        }),
        binary=_frozen({
            "atrial_fibrillation": 0.88209236928054657,
            "atypical_antipsychotics": 0.13046879855173513,
            "corticosteroids": 0.45485399750445543,
            "erectile_dysfunction": 0.22251859086705383,
            "migraine": 0.25584178074159913,
            "rheumatoid_arthritis": 0.20970658013956567,
            "chronic_kidney_disease": 0.71853261288274384,
            "severe_mental_illness": 0.12133039882047164,
            "sle": 0.4401572174457522,
            "treated_hypertension": 0.51659871082695474,
            "type1_diabetes": 1.2343425521675175,
            "type2_diabetes": 0.85942071430932221,
            "family_history": 0.54055469009390156,
        }),
        age_1_interactions=_frozen({
            "smoke_1": -0.21011133933516346,
            "smoke_2": 0.75268676447503191,
            "smoke_3": 0.99315887556405791,
            "smoke_4": 2.1331163414389076,
            "atrial_fibrillation": 3.4896675530623207,
            "corticosteroids": 1.1708133653489108,
            "erectile_dysfunction": -1.506400985745431,
            "migraine": 2.3491159871402441,
            "chronic_kidney_disease": -0.50656716327223694,
            "treated_hypertension": 6.5114581098532671,
            "type1_diabetes": 5.3379864878006531,
            "type2_diabetes": 3.6461817406221311,
            "bmi_1": 31.004952956033886,
            "bmi_2": -111.29157184391643,
            "family_history": 2.7808628508531887,
            "sbp": 0.018858524469865853,
            "townsend": -0.1007554870063731,
        }),
        age_2_interactions=_frozen({
            "smoke_1": -0.00049854870275326121,
            "smoke_2": -0.00079875633317385414,
            "smoke_3": -0.00083706184266251296,
            "smoke_4": -0.00078400319155637289,
            "atrial_fibrillation": -0.00034995608340636049,
            "corticosteroids": -0.0002496045095297166,
            "erectile_dysfunction": -0.0011058218441227373,
            "migraine": 0.00019896446041478631,
            "chronic_kidney_disease": -0.0018325930166498813,
            "treated_hypertension": 0.00063838053104165013,
            "type1_diabetes": 0.0006409780808752897,
            "type2_diabetes": -0.00024695695588868315,
            "bmi_1": 0.0050380102356322029,
            "bmi_2": -0.013074483002524319,
            "family_history": -0.00024791809907396037,
            "sbp": -0.000012718741915884570,
            "townsend": -0.000093299642323272888,
        }),
    ),
})


@dataclass(frozen=True)
class CoefficientTable:
    """All model tables, handed to engines by constructor injection."""

    framingham: Mapping[Sex, FraminghamTable]
    qrisk3: Mapping[Sex, QRISK3Table]


DEFAULT_COEFFICIENTS = CoefficientTable(framingham=FRAMINGHAM_TABLES, qrisk3=QRISK3_TABLES)
