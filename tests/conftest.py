from datetime import datetime, timezone

import pytest

from cropadvisor.engine.models import DailyForecast, RecommendationInput

# sand/silt/clay triples that classify to each texture
TEXTURE_SAMPLES = {
    "loamy": (40, 40, 20),
    "sandy-loam": (60, 15, 25),
    "clay-loam": (30, 40, 30),
    "clayey": (20, 20, 60),
    "silty": (5, 85, 10),
    "sandy": (85, 10, 5),
}


def make_forecast(mean_temp, weekly_mm, days=7):
    """`days` identical days at `mean_temp`, all rain on the first day."""
    return tuple(
        DailyForecast(min_temp=mean_temp, max_temp=mean_temp,
                      total_precip_mm=weekly_mm if i == 0 else 0.0)
        for i in range(days)
    )


def utc(year, month, day=15):
    return datetime(year, month, day, 12, tzinfo=timezone.utc)


@pytest.fixture
def wheat_january():
    sand, silt, clay = TEXTURE_SAMPLES["loamy"]
    return RecommendationInput(
        ph=6.8, sand=sand, silt=silt, clay=clay,
        forecast=make_forecast(18.0, 40.0),
        now=utc(2024, 1),
    )
