from typing import List, Optional, Tuple

from .factors import excess_ratio
from .models import AgroSeason, CropRequirement, Reasons

SLIGHT_EXCESS = 0.15

Pair = Tuple[str, str]


def _tier(score: float, high: float, mid: float, sentences: Tuple[Pair, Pair, Pair]) -> Pair:
    if score >= high:
        return sentences[0]
    if score >= mid:
        return sentences[1]
    return sentences[2]


def _rainfall(score: float, weekly_mm: Optional[float], bounds: Tuple[float, float]) -> Pair:
    if score >= 0.8:
        return ("Rainfall within comfortable band", "वर्षा उपयुक्त सीमा में")
    if score >= 0.55:
        return ("Rainfall marginally acceptable", "वर्षा सीमांत रूप से स्वीकार्य")
    if weekly_mm is None:
        return ("Rainfall data missing", "वर्षा डेटा अनुपलब्ध")
    low, high = bounds
    if weekly_mm < low:
        return ("Rainfall likely insufficient", "वर्षा संभवतः अपर्याप्त")
    if weekly_mm > high:
        if excess_ratio(weekly_mm, high) < SLIGHT_EXCESS:
            return ("Slight rainfall excess", "वर्षा थोड़ी अधिक")
        return ("Excess rainfall risk", "अधिक वर्षा का जोखिम")
    return ("Rainfall marginally acceptable", "वर्षा सीमांत रूप से स्वीकार्य")


def explain(crop: CropRequirement, *, temperature: float, rainfall: float, ph: float,
            texture: float, season: float, weekly_rainfall: Optional[float],
            agro_season: AgroSeason) -> Reasons:
    """Bilingual reasons in fixed factor order, one sentence per factor plus the season name."""
    pairs: List[Pair] = [
        _tier(temperature, 0.8, 0.5, (
            ("Temperature near ideal", "तापमान लगभग आदर्श"),
            ("Temperature acceptable", "तापमान स्वीकार्य"),
            ("Temperature limiting", "तापमान सीमित कारक"),
        )),
        _rainfall(rainfall, weekly_rainfall, crop.rainfall_range),
        _tier(ph, 0.8, 0.5, (
            ("Soil pH optimal", "मिट्टी का pH आदर्श"),
            ("Soil pH acceptable", "मिट्टी का pH स्वीकार्य"),
            ("Soil pH limiting", "मिट्टी का pH सीमित"),
        )),
        _tier(texture, 0.9, 0.5, (
            ("Texture well-suited", "बनावट उपयुक्त"),
            ("Texture partially suitable", "बनावट आंशिक रूप से उपयुक्त"),
            ("Texture mismatch", "बनावट मेल नहीं खाती"),
        )),
        _tier(season, 0.85, 0.6, (
            ("Within sowing window", "बुवाई समय के भीतर"),
            ("Near sowing window", "बुवाई समय के निकट"),
            ("Outside typical sowing period", "सामान्य बुवाई अवधि से बाहर"),
        )),
        (f"Agro season: {agro_season.value}", f"कृषि मौसम: {agro_season.hindi}"),
    ]
    return Reasons(
        english=tuple(en for en, _ in pairs),
        hindi=tuple(hi for _, hi in pairs),
    )
