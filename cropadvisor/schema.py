from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cropadvisor.config import settings
from cropadvisor.engine.models import CropRecommendation, CropRequirement, RecommendationInput, WeatherAlert


def _top_n():
    return Field(default=settings.default_top_n, ge=1, le=settings.max_top_n, alias="topN")


class RecommendRequest(RecommendationInput):
    top_n: int = _top_n()
    debug: bool = False


class ProviderRecommendRequest(BaseModel):
    """Raw provider payloads, as returned by the soil and weather services."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    soil: Optional[Dict[str, Any]] = None      # OpenEpi soil property response
    hourly: Optional[Dict[str, Any]] = None    # Open-Meteo "hourly" block
    rainfall_last_24h: Optional[float] = Field(default=None, alias="rainfallLast24h")
    precipitation_last_hour: Optional[float] = None   # Open-Meteo "current" block
    now: Optional[datetime] = None
    top_n: int = _top_n()
    debug: bool = False


class RecommendResponse(BaseModel):
    items: List[CropRecommendation]


class ProviderRecommendResponse(RecommendResponse):
    alerts: List[WeatherAlert]


class CropListResponse(BaseModel):
    items: List[CropRequirement]
