"""Scoring curves. Each maps one site feature against one crop requirement to 0..1.

A score of 0 means "no usable signal or unsuitable"; callers track which of
the two it was through limiting factors.
"""
import math
from typing import Optional, Sequence, Tuple

from .models import TextureClass

SIGMA_FACTOR = 1.8
TEXTURE_MISMATCH_SCORE = 0.3
TEXTURE_UNKNOWN_SCORE = 0.4
SOC_TARGET = 0.5          # % organic carbon treated as adequate
GAUSSIAN_CUTOFF = 40.0    # sigmas; exp(-z²/2) is 0.0 in floating point long before this


def gaussian_score(value: Optional[float], center: float, half_width: float,
                   sigma_factor: float = SIGMA_FACTOR) -> float:
    if value is None:
        return 0.0
    sigma = half_width / sigma_factor
    if sigma <= 0:
        return 1.0 if value == center else 0.0
    z = (value - center) / sigma
    if not abs(z) <= GAUSSIAN_CUTOFF:
        return 0.0
    return max(0.0, min(1.0, math.exp(-z * z / 2)))


def temperature_score(mean_temp: Optional[float], bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return gaussian_score(mean_temp, (low + high) / 2, (high - low) / 2)


def trapezoid_score(value: Optional[float], a: float, b: float, c: float, d: float) -> float:
    """0 outside (a, d), 1 on [b, c], linear ramps in between."""
    if value is None:
        return 0.0
    if value <= a or value >= d:
        return 0.0
    if b <= value <= c:
        return 1.0
    if value < b:
        return (value - a) / (b - a)
    return (d - value) / (d - c)


def rainfall_score(weekly_mm: Optional[float], bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return trapezoid_score(weekly_mm, low * 0.5, low, high, high * 1.4)


def excess_ratio(value: float, high: float) -> float:
    """Fraction by which `value` overshoots `high`."""
    if high <= 0:
        return math.inf if value > high else 0.0
    return (value - high) / high


def range_score(value: Optional[float], bounds: Tuple[float, float]) -> float:
    """1 inside bounds; quadratic decay to 0 at half the span beyond either edge."""
    if value is None:
        return 0.0
    low, high = bounds
    if low <= value <= high:
        return 1.0
    span = high - low
    if span <= 0:
        return 0.0
    d = (low - value) / span if value < low else (value - high) / span
    if d >= 0.5:
        return 0.0
    return 1 - (d / 0.5) ** 2


def texture_score(texture: Optional[TextureClass], accepted: Sequence[TextureClass]) -> float:
    if texture is None:
        return TEXTURE_UNKNOWN_SCORE
    return 1.0 if texture in accepted else TEXTURE_MISMATCH_SCORE


def season_score(in_season: bool, in_sowing_window: bool, distance: int) -> float:
    if in_season and in_sowing_window:
        return 1.0
    if in_season:
        return 0.75
    return 0.4 * max(0.0, 1 - distance / 4)


def soc_score(org_carbon: Optional[float]) -> Optional[float]:
    if org_carbon is None:
        return None
    if org_carbon >= SOC_TARGET:
        return 1.0
    return max(0.0, org_carbon / SOC_TARGET)
