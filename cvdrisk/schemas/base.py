"""Base schemas and enums for the CVD risk engine."""

from enum import Enum


class Sex(str, Enum):
    """Biological sex; selects the whole coefficient table."""

    FEMALE = "female"
    MALE = "male"


class Ethnicity(str, Enum):
    """Self-reported ethnicity (UK census categories)."""

    WHITE_OR_NOT_STATED = "white_or_not_stated"
    WHITE_IRISH = "white_irish"
    WHITE_GYPSY_OR_IRISH_TRAVELLER = "white_gypsy_or_irish_traveller"
    OTHER_WHITE = "other_white"
    WHITE_AND_BLACK_CARIBBEAN = "white_and_black_caribbean"
    WHITE_AND_BLACK_AFRICAN = "white_and_black_african"
    WHITE_AND_ASIAN = "white_and_asian"
    OTHER_MIXED = "other_mixed"
    INDIAN = "indian"
    PAKISTANI = "pakistani"
    BANGLADESHI = "bangladeshi"
    OTHER_ASIAN = "other_asian"
    CARIBBEAN = "caribbean"
    AFRICAN = "african"
    OTHER_BLACK = "other_black"
    CHINESE = "chinese"
    OTHER_ETHNIC_GROUP = "other_ethnic_group"

    @property
    def qrisk3_group(self) -> int:
        """QRISK3 ethnic risk group (1 = white or not stated ... 9 = other)."""
        return QRISK3_ETHNIC_GROUPS[self]

    @property
    def is_south_asian(self) -> bool:
        """Check if this ethnicity counts as South-Asian ancestry."""
        return self in SOUTH_ASIAN_ETHNICITIES


# Census category -> published QRISK3 ethrisk code
QRISK3_ETHNIC_GROUPS: dict[Ethnicity, int] = {
    Ethnicity.WHITE_OR_NOT_STATED: 1,
    Ethnicity.WHITE_IRISH: 1,
    Ethnicity.WHITE_GYPSY_OR_IRISH_TRAVELLER: 1,
    Ethnicity.OTHER_WHITE: 1,
    Ethnicity.INDIAN: 2,
    Ethnicity.PAKISTANI: 3,
    Ethnicity.BANGLADESHI: 4,
    Ethnicity.OTHER_ASIAN: 5,
    Ethnicity.CARIBBEAN: 6,
    Ethnicity.AFRICAN: 7,
    Ethnicity.CHINESE: 8,
    Ethnicity.WHITE_AND_BLACK_CARIBBEAN: 9,
    Ethnicity.WHITE_AND_BLACK_AFRICAN: 9,
    Ethnicity.WHITE_AND_ASIAN: 9,
    Ethnicity.OTHER_MIXED: 9,
    Ethnicity.OTHER_BLACK: 9,
    Ethnicity.OTHER_ETHNIC_GROUP: 9,
}

SOUTH_ASIAN_ETHNICITIES = frozenset({
    Ethnicity.INDIAN,
    Ethnicity.PAKISTANI,
    Ethnicity.BANGLADESHI,
})


class SmokingStatus(str, Enum):
    """Smoking category in QRISK3 order."""

    NON = "non"
    EX = "ex"
    LIGHT = "light"  # < 10 cigarettes/day
    MODERATE = "moderate"  # 10-19
    HEAVY = "heavy"  # 20+

    @property
    def qrisk3_index(self) -> int:
        """Position in the QRISK3 smoking coefficient vector."""
        return list(SmokingStatus).index(self)

    @property
    def is_current(self) -> bool:
        """Check if this is a current smoker."""
        return self in (SmokingStatus.LIGHT, SmokingStatus.MODERATE, SmokingStatus.HEAVY)


class DiabetesStatus(str, Enum):
    """Diabetes status."""

    NONE = "none"
    TYPE1 = "type1"
    TYPE2 = "type2"


class RiskModelId(str, Enum):
    """Supported 10-year CVD risk models."""

    FRAMINGHAM = "framingham_2008"
    QRISK3 = "qrisk3_2017"


class RiskCategory(str, Enum):
    """Default guideline risk bands."""

    LOW = "low"
    BORDERLINE = "borderline"
    INTERMEDIATE = "intermediate"
    HIGH = "high"


class ImpactLevel(str, Enum):
    """Relative weight of a contributing risk factor."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


# ============================================================================
# Unit tags
# ============================================================================


class CholesterolUnit(str, Enum):
    """Lipid concentration units."""

    MMOL_L = "mmol/L"
    MG_DL = "mg/dL"


class LpaUnit(str, Enum):
    """Lipoprotein(a) units."""

    MG_DL = "mg/dL"
    NMOL_L = "nmol/L"


class HeightUnit(str, Enum):
    """Height units."""

    CM = "cm"
    M = "m"
    IN = "in"


class WeightUnit(str, Enum):
    """Weight units."""

    KG = "kg"
    LB = "lb"
