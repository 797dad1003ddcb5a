import math
from datetime import datetime, timezone
from typing import NamedTuple, Optional, Sequence, Tuple

from .models import MONTHS, AgroSeason, DailyForecast, RecommendationInput, TextureClass

FORECAST_DAYS = 7


class Conditions(NamedTuple):
    """Site features shared by every crop in one recommendation call."""
    texture: Optional[TextureClass]
    weekly_rainfall: Optional[float]
    mean_temperature: Optional[float]
    forecast_days: int
    month: int
    agro_season: AgroSeason


def classify_texture(sand: Optional[float], silt: Optional[float], clay: Optional[float]) -> Optional[TextureClass]:
    """Bucket a sand/silt/clay sample into a simplified USDA-style class.

    Fractions are renormalised to percentages of their sum, so g/kg and %
    inputs classify the same way.
    """
    if sand is None or silt is None or clay is None:
        return None
    total = sand + silt + clay
    if total <= 0:
        return None
    s = sand / total * 100
    si = silt / total * 100
    c = clay / total * 100

    if c > 40:
        return TextureClass.CLAYEY
    if s > 70 and c < 15:
        return TextureClass.SANDY
    if si > 70 and c < 15:
        return TextureClass.SILTY
    if s > 45 and 20 < c < 35:
        return TextureClass.SANDY_LOAM
    if 27 < c < 40 and 15 < si < 53:
        return TextureClass.CLAY_LOAM
    return TextureClass.LOAMY


def _finite(total: float) -> Optional[float]:
    # sums of huge finite readings can overflow to inf
    return total if math.isfinite(total) else None


def weekly_rainfall(forecast: Sequence[DailyForecast]) -> Optional[float]:
    values = [d.total_precip_mm for d in forecast[:FORECAST_DAYS] if d.total_precip_mm is not None]
    if not values:
        return None
    return _finite(sum(values))


def mean_temperature(forecast: Sequence[DailyForecast]) -> Optional[float]:
    temps = [(d.min_temp + d.max_temp) / 2 for d in forecast[:FORECAST_DAYS]
             if d.min_temp is not None and d.max_temp is not None]
    if not temps:
        return None
    return _finite(sum(temps) / len(temps))


def utc_month(now: datetime) -> int:
    # naive datetimes are taken to be UTC already
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.month


def agro_season(now: datetime) -> AgroSeason:
    # Kharif Jun-Oct, Zaid Apr-May, Rabi Nov-Mar. Not regionalised.
    m = utc_month(now)
    if 6 <= m <= 10:
        return AgroSeason.KHARIF
    if m in (4, 5):
        return AgroSeason.ZAID
    return AgroSeason.RABI


def month_distance(month: int, months: Sequence[str]) -> int:
    """Smallest cyclic distance, in months, from `month` (1-12) to any named month."""
    best = 12
    for name in months:
        diff = abs(MONTHS.index(name) + 1 - month)
        best = min(best, diff, 12 - diff)
    return best


def derive_conditions(inp: RecommendationInput) -> Conditions:
    forecast: Tuple[DailyForecast, ...] = inp.forecast
    return Conditions(
        texture=classify_texture(inp.sand, inp.silt, inp.clay),
        weekly_rainfall=weekly_rainfall(forecast),
        mean_temperature=mean_temperature(forecast),
        forecast_days=min(FORECAST_DAYS, len(forecast)),
        month=utc_month(inp.now),
        agro_season=agro_season(inp.now),
    )
