"""Turn already-fetched provider payloads into engine input.

Nothing here performs I/O. Soil payloads follow the OpenEpi soil property
response (SoilGrids layers); weather payloads are the ``hourly`` block of an
Open-Meteo forecast.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from cropadvisor.engine.features import FORECAST_DAYS
from cropadvisor.engine.models import (
    AlertType,
    DailyForecast,
    RecommendationInput,
    Severity,
    WeatherAlert,
    as_number,
)

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = "0-5cm"

HEAVY_RAIN_MM = 20.0
VERY_HEAVY_RAIN_MM = 40.0
HEAT_C = 38.0
EXTREME_HEAT_C = 42.0
DRY_HUMIDITY = 25.0
INTENSE_RAIN_MM_PER_HOUR = 5.0


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _rows(value: Any) -> List[Mapping[str, Any]]:
    # provider lists may carry junk entries; keep the objects only
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def _series(hourly: Mapping[str, Any], key: str) -> Sequence[Any]:
    series = hourly.get(key)
    if series is None:
        return []
    if not isinstance(series, (list, tuple)):
        logger.warning("hourly %s is not an array, ignoring it", key)
        return []
    return series


def extract_soil_property(payload: Mapping[str, Any], code: str,
                          depth: str = DEFAULT_DEPTH, value: str = "mean") -> Optional[float]:
    """Value of one soil layer at one depth, in the layer's target units."""
    layers = _rows(_mapping(_mapping(payload).get("properties")).get("layers"))
    layer = next((l for l in layers if l.get("code") == code), None)
    if layer is None:
        logger.warning("soil layer %s not in payload", code)
        return None
    row = next((d for d in _rows(layer.get("depths")) if d.get("label") == depth), None)
    if row is None:
        logger.warning("soil layer %s has no depth %s", code, depth)
        return None
    raw = as_number(_mapping(row.get("values")).get(value))
    if raw is None:
        return None
    factor = as_number(_mapping(layer.get("unit_measure")).get("conversion_factor")) or 1.0
    return raw / factor


def soil_from_openepi(payload: Mapping[str, Any], depth: str = DEFAULT_DEPTH) -> Dict[str, Optional[float]]:
    # once converted sand/silt/clay are %, soc is g/kg
    soc = extract_soil_property(payload, "soc", depth)
    return {
        "ph": extract_soil_property(payload, "phh2o", depth),
        "sand": extract_soil_property(payload, "sand", depth),
        "silt": extract_soil_property(payload, "silt", depth),
        "clay": extract_soil_property(payload, "clay", depth),
        "org_carbon": None if soc is None else soc / 10,
    }


def _describe(total_precip: float, max_temp: float) -> str:
    if total_precip > 5:
        return "Rain likely"
    if max_temp > 35:
        return "Hot & Dry"
    return "Fair"


def daily_forecast_from_hourly(hourly: Mapping[str, Any]) -> List[DailyForecast]:
    """Collapse hourly arrays into chronological daily rows (at most 7)."""
    hourly = _mapping(hourly)
    times = _series(hourly, "time")
    temps = _series(hourly, "temperature_2m")
    precip = _series(hourly, "precipitation")
    humidity = _series(hourly, "relative_humidity_2m")

    by_date: Dict[str, Dict[str, List[float]]] = {}
    for i, ts in enumerate(times):
        day = by_date.setdefault(str(ts).split("T")[0], {"temps": [], "precip": [], "humidity": []})
        for key, series in (("temps", temps), ("precip", precip), ("humidity", humidity)):
            v = as_number(series[i]) if i < len(series) else None
            if v is not None:
                day[key].append(v)

    out: List[DailyForecast] = []
    for date in sorted(by_date)[:FORECAST_DAYS]:
        day = by_date[date]
        t = day["temps"]
        total = round(sum(day["precip"]), 1)
        max_t = max(t) if t else None
        hum = day["humidity"]
        mean_hum = sum(hum) / len(hum) if hum else None
        out.append(DailyForecast(
            date=date,
            min_temp=min(t) if t else None,
            max_temp=max_t,
            total_precip_mm=total if day["precip"] else None,
            avg_humidity=round(mean_hum) if mean_hum is not None and math.isfinite(mean_hum) else None,
            description=_describe(total, max_t if max_t is not None else 0.0),
        ))
    return out


def _first(days: Sequence[DailyForecast], field: str, hit) -> Optional[DailyForecast]:
    return next((d for d in days if getattr(d, field) is not None and hit(getattr(d, field))), None)


def weather_alerts(days: Sequence[DailyForecast],
                   precipitation_last_hour: Optional[float] = None,
                   now: Optional[datetime] = None) -> List[WeatherAlert]:
    """Advisories for the coming week plus rain falling right now.

    At most one alert per kind, raised for the earliest day that crosses the
    threshold, in the order heavy rain, heat, low humidity, current rain.
    """
    stamp = now or datetime.now(timezone.utc)
    days = days[:FORECAST_DAYS]
    alerts: List[WeatherAlert] = []

    wet = _first(days, "total_precip_mm", lambda v: v >= HEAVY_RAIN_MM)
    if wet is not None:
        alerts.append(WeatherAlert(
            id=f"rain-{wet.date}",
            type=AlertType.WARNING,
            title="Heavy Rain Forecast",
            message=f"Expected ≥ {wet.total_precip_mm:.1f} mm on {wet.date}",
            severity=Severity.HIGH if wet.total_precip_mm > VERY_HEAVY_RAIN_MM else Severity.MEDIUM,
            timestamp=stamp,
        ))

    hot = _first(days, "max_temp", lambda v: v >= HEAT_C)
    if hot is not None:
        alerts.append(WeatherAlert(
            id=f"heat-{hot.date}",
            type=AlertType.WARNING,
            title="High Temperature Alert",
            message=f"Max temperature reaching {hot.max_temp:.1f}°C on {hot.date}",
            severity=Severity.HIGH if hot.max_temp >= EXTREME_HEAT_C else Severity.MEDIUM,
            timestamp=stamp,
        ))

    dry = _first(days, "avg_humidity", lambda v: v <= DRY_HUMIDITY)
    if dry is not None:
        alerts.append(WeatherAlert(
            id=f"dry-{dry.date}",
            type=AlertType.INFO,
            title="Low Humidity Advisory",
            message=f"Average humidity around {dry.avg_humidity:g}% on {dry.date}",
            severity=Severity.LOW,
            timestamp=stamp,
        ))

    rain_now = as_number(precipitation_last_hour)
    if rain_now is not None and rain_now >= INTENSE_RAIN_MM_PER_HOUR:
        alerts.append(WeatherAlert(
            id="current-rain",
            type=AlertType.DANGER,
            title="Intense Rainfall Ongoing",
            message=f"~{rain_now:.1f} mm in last hour",
            severity=Severity.HIGH,
            timestamp=stamp,
        ))
    return alerts


def build_input(soil_payload: Optional[Mapping[str, Any]] = None,
                hourly: Optional[Mapping[str, Any]] = None,
                rainfall_last_24h: Optional[float] = None,
                now: Optional[datetime] = None) -> RecommendationInput:
    soil = soil_from_openepi(soil_payload) if soil_payload else {}
    forecast = daily_forecast_from_hourly(hourly) if hourly else []
    return RecommendationInput(
        **soil,
        forecast=tuple(forecast),
        rainfall_last_24h=rainfall_last_24h,
        now=now,
    )
