import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Month = Literal["jan","feb","mar","apr","may","jun","jul","aug","sep","oct","nov","dec"]
MONTHS: Tuple[str, ...] = ("jan","feb","mar","apr","may","jun","jul","aug","sep","oct","nov","dec")

RootingDepth = Literal["shallow","medium","deep"]


class TextureClass(str, Enum):
    SANDY = "sandy"
    LOAMY = "loamy"
    CLAYEY = "clayey"
    SILTY = "silty"
    SANDY_LOAM = "sandy-loam"
    CLAY_LOAM = "clay-loam"


class AgroSeason(str, Enum):
    KHARIF = "kharif"
    RABI = "rabi"
    ZAID = "zaid"

    @property
    def hindi(self) -> str:
        return _SEASON_HINDI[self]


_SEASON_HINDI = {
    AgroSeason.KHARIF: "खरीफ",
    AgroSeason.RABI: "रबी",
    AgroSeason.ZAID: "ज़ैद",
}


class Suitability(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class LimitingFactor(str, Enum):
    TEMPERATURE_UNKNOWN = "Temperature unknown"
    TEMPERATURE_OUTSIDE_TOLERANCE = "Temperature outside tolerance"
    TEMPERATURE_SUBOPTIMAL = "Temperature suboptimal"
    RAINFALL_UNKNOWN = "Rainfall unknown"
    LOW_RAINFALL = "Low rainfall"
    # never emitted while RAINFALL_FLAG_BELOW sits under the ramp value at
    # 15 % excess; kept so the tag set stays closed
    SLIGHT_EXCESS_RAINFALL = "Slight excess rainfall"
    EXCESS_RAINFALL = "Excess rainfall"
    RAINFALL_VARIABILITY = "Rainfall variability"   # same, unreachable with current thresholds
    PH_UNKNOWN = "pH unknown"
    PH_UNSUITABLE = "pH unsuitable"
    PH_MARGINAL = "pH marginal"
    LOW_ORGANIC_CARBON = "Low organic carbon"
    TEXTURE_UNKNOWN = "Texture unknown"
    TEXTURE_MISMATCH = "Texture mismatch"
    OUTSIDE_SOWING_WINDOW = "Outside ideal sowing window"

    @property
    def is_hard(self) -> bool:
        """Hard factors rule a crop out; the rest only reduce confidence."""
        return self in _HARD_FACTORS


_HARD_FACTORS = frozenset({
    LimitingFactor.TEMPERATURE_OUTSIDE_TOLERANCE,
    LimitingFactor.PH_UNSUITABLE,
})


def as_number(value: Any) -> Optional[float]:
    """Coerce provider values to float; anything unusable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class CropNames(_Frozen):
    english: str
    hindi: str


class CropRequirement(_Frozen):
    id: str
    names: CropNames
    temperature_range: Tuple[float, float]   # °C, mean daily
    rainfall_range: Tuple[float, float]      # mm over the 7-day forecast
    ph_range: Tuple[float, float]
    texture: Tuple[TextureClass, ...]
    seasonality: Tuple[Month, ...] = ()      # sowing months; empty = unconstrained
    rooting_depth: Optional[RootingDepth] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_ranges(self):
        for label in ("temperature_range", "rainfall_range", "ph_range"):
            low, high = getattr(self, label)
            if low > high:
                raise ValueError(f"{self.id}: {label} min {low} is above max {high}")
        return self


class DailyForecast(_Frozen):
    date: Optional[str] = None
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    total_precip_mm: Optional[float] = None
    avg_humidity: Optional[float] = None
    description: Optional[str] = None

    @field_validator("min_temp", "max_temp", "total_precip_mm", "avg_humidity", mode="before")
    @classmethod
    def coerce_numeric(cls, v):
        return as_number(v)


class RecommendationInput(_Frozen):
    # soil (pH units, percentages)
    ph: Optional[float] = None
    sand: Optional[float] = None
    silt: Optional[float] = None
    clay: Optional[float] = None
    org_carbon: Optional[float] = None
    # weather
    forecast: Tuple[DailyForecast, ...] = ()
    rainfall_last_24h: Optional[float] = Field(default=None, alias="rainfallLast24h")
    now: datetime = Field(default_factory=_utcnow)

    @field_validator("ph", "sand", "silt", "clay", "org_carbon", "rainfall_last_24h", mode="before")
    @classmethod
    def coerce_numeric(cls, v):
        return as_number(v)

    @field_validator("forecast", mode="before")
    @classmethod
    def empty_forecast(cls, v):
        return () if v is None else v

    @field_validator("now", mode="before")
    @classmethod
    def default_now(cls, v):
        return _utcnow() if v is None else v


class Reasons(_Frozen):
    english: Tuple[str, ...]
    hindi: Tuple[str, ...]

    @model_validator(mode="after")
    def check_parallel(self):
        if len(self.english) != len(self.hindi):
            raise ValueError("english and hindi reasons must pair up one to one")
        return self


class FactorScores(_Frozen):
    temperature: float
    rainfall: float
    ph: float
    texture: float
    season: float
    soc: Optional[float] = None


class RecommendationMeta(_Frozen):
    weekly_rainfall: Optional[float]
    temperature_sample_count: int
    agro_season: AgroSeason
    texture: Optional[TextureClass]
    completeness: float


class CropRecommendation(_Frozen):
    id: str
    names: CropNames
    overall_score: float
    confidence: float
    suitability: Suitability
    reasons: Reasons
    factor_scores: FactorScores
    limiting_factors: Tuple[LimitingFactor, ...]
    meta: RecommendationMeta
    debug: Optional[Dict[str, Any]] = None


class AlertType(str, Enum):
    WARNING = "warning"
    INFO = "info"
    DANGER = "danger"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WeatherAlert(_Frozen):
    id: str
    type: AlertType
    title: str
    message: str
    severity: Severity
    timestamp: datetime
