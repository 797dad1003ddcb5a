import logging
from typing import Dict, List, Optional, Sequence, Tuple

from . import factors
from .crops import CROPS
from .explainer import SLIGHT_EXCESS, explain
from .features import Conditions, derive_conditions, month_distance
from .models import (
    MONTHS,
    CropRecommendation,
    CropRequirement,
    FactorScores,
    LimitingFactor,
    RecommendationInput,
    RecommendationMeta,
    Suitability,
)

logger = logging.getLogger(__name__)

BASE_WEIGHTS: Dict[str, float] = {
    "temperature": 0.20,
    "rainfall": 0.20,
    "ph": 0.15,
    "texture": 0.12,
    "season": 0.15,
    "soc": 0.08,
}
# Held back for factors not scored yet (weather anomalies). Counted when
# normalising, contributes nothing to the score.
RESERVED_WEIGHT = 0.08

TEMPERATURE_TOLERANCE = 5.0   # °C beyond the range before it is a hard fail
RAINFALL_FLAG_BELOW = 0.55
SEASON_FLAG_BELOW = 0.7
LOW_SOC = 0.25


def adaptive_weight(base: float, score: float) -> float:
    if score >= 0.85:
        return base * 0.8    # already good, let weaker factors separate crops
    if score <= 0.4:
        return base * 1.25
    return base


def aggregate(scores: Dict[str, float]) -> Tuple[float, Dict[str, float]]:
    """Weighted mean of factor scores; returns (overall, normalised weights)."""
    weights = {name: adaptive_weight(BASE_WEIGHTS[name], s) for name, s in scores.items()}
    weights["reserved"] = RESERVED_WEIGHT
    total = sum(weights.values())
    weights = {name: w / total for name, w in weights.items()}
    overall = sum(s * weights[name] for name, s in scores.items())
    return max(0.0, min(1.0, overall)), weights


def completeness(scores: Dict[str, float]) -> float:
    # soc occupies its slot even when it was not measured
    present = [scores[k] > 0 for k in ("temperature", "rainfall", "ph", "texture", "season")]
    present.append(scores["soc"] > 0 if "soc" in scores else True)
    return sum(present) / len(present)


def penalty(limiting: Sequence[LimitingFactor]) -> float:
    hard = sum(1 for f in limiting if f.is_hard)
    soft = len(limiting) - hard
    return max(0.65, 1 - hard * 0.15 - soft * 0.05)


def confidence(overall: float, complete: float, pen: float) -> float:
    """0..100"""
    return overall * (0.6 + 0.4 * complete) * pen * 100


def classify(overall: float) -> Suitability:
    if overall >= 0.8:
        return Suitability.EXCELLENT
    if overall >= 0.6:
        return Suitability.GOOD
    if overall >= 0.4:
        return Suitability.MODERATE
    return Suitability.POOR


def _season(crop: CropRequirement, month: int) -> float:
    if not crop.seasonality:
        return 1.0
    in_sowing = MONTHS[month - 1] in crop.seasonality
    # the catalog carries one month list, so season and sowing window coincide
    distance = 0 if in_sowing else month_distance(month, crop.seasonality)
    return factors.season_score(in_sowing, in_sowing, distance)


def score_crop(crop: CropRequirement, inp: RecommendationInput, cond: Conditions,
               debug: bool = False) -> Tuple[float, CropRecommendation]:
    limiting: List[LimitingFactor] = []

    temperature = factors.temperature_score(cond.mean_temperature, crop.temperature_range)
    t_min, t_max = crop.temperature_range
    if cond.mean_temperature is None:
        limiting.append(LimitingFactor.TEMPERATURE_UNKNOWN)
    elif not (t_min - TEMPERATURE_TOLERANCE <= cond.mean_temperature <= t_max + TEMPERATURE_TOLERANCE):
        limiting.append(LimitingFactor.TEMPERATURE_OUTSIDE_TOLERANCE)
    elif temperature < 0.5:
        limiting.append(LimitingFactor.TEMPERATURE_SUBOPTIMAL)

    rainfall = factors.rainfall_score(cond.weekly_rainfall, crop.rainfall_range)
    r_min, r_max = crop.rainfall_range
    if cond.weekly_rainfall is None:
        limiting.append(LimitingFactor.RAINFALL_UNKNOWN)
    elif rainfall < RAINFALL_FLAG_BELOW:
        if cond.weekly_rainfall < r_min:
            limiting.append(LimitingFactor.LOW_RAINFALL)
        elif cond.weekly_rainfall > r_max:
            if factors.excess_ratio(cond.weekly_rainfall, r_max) < SLIGHT_EXCESS:
                limiting.append(LimitingFactor.SLIGHT_EXCESS_RAINFALL)
            else:
                limiting.append(LimitingFactor.EXCESS_RAINFALL)
        else:
            limiting.append(LimitingFactor.RAINFALL_VARIABILITY)

    ph = factors.range_score(inp.ph, crop.ph_range)
    if inp.ph is None:
        limiting.append(LimitingFactor.PH_UNKNOWN)
    elif ph == 0:
        limiting.append(LimitingFactor.PH_UNSUITABLE)
    elif ph < 0.5:
        limiting.append(LimitingFactor.PH_MARGINAL)

    soc: Optional[float] = factors.soc_score(inp.org_carbon)
    if soc is not None and inp.org_carbon <= LOW_SOC:
        limiting.append(LimitingFactor.LOW_ORGANIC_CARBON)

    texture = factors.texture_score(cond.texture, crop.texture)
    if cond.texture is None:
        limiting.append(LimitingFactor.TEXTURE_UNKNOWN)
    elif texture < 0.5:
        limiting.append(LimitingFactor.TEXTURE_MISMATCH)

    season = _season(crop, cond.month)
    if season < SEASON_FLAG_BELOW:
        limiting.append(LimitingFactor.OUTSIDE_SOWING_WINDOW)

    scores = {"temperature": temperature, "rainfall": rainfall, "ph": ph,
              "texture": texture, "season": season}
    if soc is not None:
        scores["soc"] = soc

    overall, weights = aggregate(scores)
    complete = completeness(scores)
    pen = penalty(limiting)

    reasons = explain(crop, temperature=temperature, rainfall=rainfall, ph=ph,
                      texture=texture, season=season,
                      weekly_rainfall=cond.weekly_rainfall, agro_season=cond.agro_season)

    extra = None
    if debug:
        extra = {
            "scores": dict(scores),
            "weights": weights,
            "overall": overall,
            "completeness": complete,
            "penalty": pen,
            "avgTemp": cond.mean_temperature,
            "weeklyRainfall": cond.weekly_rainfall,
        }

    rec = CropRecommendation(
        id=crop.id,
        names=crop.names,
        overall_score=round(overall, 3),
        confidence=round(confidence(overall, complete, pen), 1),
        suitability=classify(overall),
        reasons=reasons,
        factor_scores=FactorScores(
            temperature=round(temperature, 2),
            rainfall=round(rainfall, 2),
            ph=round(ph, 2),
            texture=round(texture, 2),
            season=round(season, 2),
            soc=round(soc, 2) if soc is not None else None,
        ),
        limiting_factors=tuple(limiting),
        meta=RecommendationMeta(
            weekly_rainfall=cond.weekly_rainfall,
            temperature_sample_count=cond.forecast_days,
            agro_season=cond.agro_season,
            texture=cond.texture,
            completeness=round(complete, 2),
        ),
        debug=extra,
    )
    return overall, rec


def recommend(inp: RecommendationInput, top_n: int = 5, debug: bool = False,
              catalog: Sequence[CropRequirement] = CROPS) -> List[CropRecommendation]:
    """Score every catalog crop and return the best `top_n`, highest first.

    Ties keep catalog order.
    """
    cond = derive_conditions(inp)
    scored = [score_crop(c, inp, cond, debug=debug) for c in catalog]
    scored.sort(key=lambda x: x[0], reverse=True)
    logger.debug("scored %d crops (season=%s texture=%s rain=%s temp=%s)",
                 len(scored), cond.agro_season.value, cond.texture,
                 cond.weekly_rainfall, cond.mean_temperature)
    return [rec for _, rec in scored[:max(top_n, 0)]]
