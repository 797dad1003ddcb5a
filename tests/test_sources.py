import pytest

from cropadvisor.engine.models import AlertType, DailyForecast, Severity, TextureClass
from cropadvisor.engine.features import classify_texture
from cropadvisor.sources import (
    build_input,
    daily_forecast_from_hourly,
    extract_soil_property,
    soil_from_openepi,
    weather_alerts,
)

from conftest import utc


def _layer(code, mean, factor=10, label="0-5cm"):
    return {
        "code": code,
        "name": code,
        "unit_measure": {"mapped_units": "x", "target_units": "y", "conversion_factor": factor},
        "depths": [{"label": label, "range": {}, "values": {"mean": mean}}],
    }


SOIL = {
    "type": "Feature",
    "properties": {"layers": [
        _layer("phh2o", 68),
        _layer("sand", 400),
        _layer("silt", 400),
        _layer("clay", 200),
        _layer("soc", 120),
    ]},
}


def _hourly(days, temps_by_day, rain_by_day):
    time, temps, rain, hum = [], [], [], []
    for day, t_vals, r_vals in zip(days, temps_by_day, rain_by_day):
        for h, (t, r) in enumerate(zip(t_vals, r_vals)):
            time.append(f"{day}T{h:02d}:00")
            temps.append(t)
            rain.append(r)
            hum.append(60)
    return {"time": time, "temperature_2m": temps, "precipitation": rain, "relative_humidity_2m": hum}


def test_extract_applies_conversion_factor():
    assert extract_soil_property(SOIL, "phh2o") == pytest.approx(6.8)
    assert extract_soil_property(SOIL, "clay") == pytest.approx(20.0)


def test_extract_missing_layer_or_depth():
    assert extract_soil_property(SOIL, "nitrogen") is None
    assert extract_soil_property(SOIL, "sand", depth="100-200cm") is None
    assert extract_soil_property({}, "sand") is None


def test_extract_null_value():
    payload = {"properties": {"layers": [_layer("sand", None)]}}
    assert extract_soil_property(payload, "sand") is None


def test_soil_from_openepi():
    soil = soil_from_openepi(SOIL)
    assert soil["ph"] == pytest.approx(6.8)
    assert soil["org_carbon"] == pytest.approx(1.2)
    assert classify_texture(soil["sand"], soil["silt"], soil["clay"]) == TextureClass.LOAMY


def test_daily_forecast_from_hourly_groups_and_sorts():
    hourly = _hourly(
        ["2024-01-02", "2024-01-01"],
        [[10, 20, 15], [5, 25, 12]],
        [[1.0, 2.04, 0], [0, 0, 0]],
    )
    days = daily_forecast_from_hourly(hourly)
    assert [d.date for d in days] == ["2024-01-01", "2024-01-02"]
    assert (days[0].min_temp, days[0].max_temp) == (5, 25)
    assert days[1].total_precip_mm == pytest.approx(3.0)
    assert days[1].avg_humidity == 60
    assert days[0].description == "Fair"


def test_daily_descriptions():
    hourly = _hourly(["2024-05-01", "2024-05-02"], [[30, 38], [20, 24]], [[0, 0], [4, 3]])
    days = daily_forecast_from_hourly(hourly)
    assert days[0].description == "Hot & Dry"
    assert days[1].description == "Rain likely"


def test_daily_forecast_caps_at_seven_days():
    dates = [f"2024-03-{d:02d}" for d in range(1, 11)]
    hourly = _hourly(dates, [[20, 22]] * 10, [[0, 1]] * 10)
    assert len(daily_forecast_from_hourly(hourly)) == 7


def test_build_input():
    hourly = _hourly(["2024-01-15"], [[10, 26]], [[5, 5]])
    inp = build_input(SOIL, hourly, rainfall_last_24h=2.5, now=utc(2024, 1))
    assert inp.ph == pytest.approx(6.8)
    assert inp.forecast[0].total_precip_mm == 10
    assert inp.rainfall_last_24h == 2.5
    assert inp.now.month == 1


def test_build_input_without_payloads():
    inp = build_input(now=utc(2024, 1))
    assert inp.ph is None
    assert inp.forecast == ()


@pytest.mark.parametrize("payload", [
    {"properties": {"layers": ["oops", 3, None]}},
    {"properties": {"layers": "oops"}},
    {"properties": []},
    {"properties": {"layers": [{"code": "sand", "depths": ["0-5cm"]}]}},
    {"properties": {"layers": [{"code": "sand", "depths": [{"label": "0-5cm", "values": 7}]}]}},
])
def test_extract_tolerates_malformed_layers(payload):
    assert extract_soil_property(payload, "sand") is None


def test_malformed_layers_do_not_hide_good_ones():
    payload = {"properties": {"layers": ["oops", _layer("clay", 200)]}}
    assert extract_soil_property(payload, "clay") == pytest.approx(20.0)
    assert soil_from_openepi(payload)["sand"] is None


def test_daily_forecast_ignores_scalar_series():
    hourly = {"time": ["2024-01-01T00:00", "2024-01-01T12:00"], "temperature_2m": 5,
              "precipitation": [1.0, 2.0], "relative_humidity_2m": "high"}
    days = daily_forecast_from_hourly(hourly)
    assert len(days) == 1
    assert days[0].min_temp is None and days[0].max_temp is None
    assert days[0].total_precip_mm == pytest.approx(3.0)
    assert days[0].avg_humidity is None


def test_daily_forecast_without_time_axis():
    assert daily_forecast_from_hourly({"time": 12, "temperature_2m": [1, 2]}) == []
    assert daily_forecast_from_hourly("nonsense") == []


def _day(date, precip=0.0, max_temp=30.0, humidity=60.0):
    return DailyForecast(date=date, min_temp=20.0, max_temp=max_temp,
                         total_precip_mm=precip, avg_humidity=humidity)


def test_no_alerts_in_calm_week():
    days = [_day(f"2024-07-{d:02d}") for d in range(1, 8)]
    assert weather_alerts(days, precipitation_last_hour=1.0, now=utc(2024, 7)) == []


@pytest.mark.parametrize("precip,severity", [
    (19.9, None), (20.0, Severity.MEDIUM), (40.0, Severity.MEDIUM), (40.1, Severity.HIGH),
])
def test_heavy_rain_alert(precip, severity):
    alerts = weather_alerts([_day("2024-07-01"), _day("2024-07-02", precip=precip)], now=utc(2024, 7))
    if severity is None:
        assert alerts == []
        return
    (alert,) = alerts
    assert alert.id == "rain-2024-07-02"
    assert alert.type == AlertType.WARNING
    assert alert.severity == severity
    assert alert.message == f"Expected ≥ {precip:.1f} mm on 2024-07-02"


def test_heavy_rain_alert_uses_earliest_day():
    days = [_day("2024-07-01", precip=25.0), _day("2024-07-02", precip=60.0)]
    (alert,) = weather_alerts(days, now=utc(2024, 7))
    assert alert.id == "rain-2024-07-01"
    assert alert.severity == Severity.MEDIUM


@pytest.mark.parametrize("max_temp,severity", [
    (37.9, None), (38.0, Severity.MEDIUM), (41.9, Severity.MEDIUM), (42.0, Severity.HIGH),
])
def test_heat_alert(max_temp, severity):
    alerts = weather_alerts([_day("2024-05-10", max_temp=max_temp)], now=utc(2024, 5))
    if severity is None:
        assert alerts == []
        return
    (alert,) = alerts
    assert alert.id == "heat-2024-05-10"
    assert alert.type == AlertType.WARNING
    assert alert.severity == severity


@pytest.mark.parametrize("humidity,raised", [(25.0, True), (25.1, False)])
def test_low_humidity_advisory(humidity, raised):
    alerts = weather_alerts([_day("2024-04-01", humidity=humidity)], now=utc(2024, 4))
    assert bool(alerts) == raised
    if raised:
        assert alerts[0].type == AlertType.INFO
        assert alerts[0].severity == Severity.LOW
        assert alerts[0].message == "Average humidity around 25% on 2024-04-01"


@pytest.mark.parametrize("rain,raised", [(4.9, False), (5.0, True), (None, False), ("n/a", False)])
def test_current_rain_alert(rain, raised):
    alerts = weather_alerts([], precipitation_last_hour=rain, now=utc(2024, 7))
    assert bool(alerts) == raised
    if raised:
        assert alerts[0].id == "current-rain"
        assert alerts[0].type == AlertType.DANGER
        assert alerts[0].severity == Severity.HIGH


def test_alert_order_and_timestamp():
    days = [_day("2024-05-01", precip=30.0, max_temp=43.0, humidity=20.0)]
    alerts = weather_alerts(days, precipitation_last_hour=8.0, now=utc(2024, 5))
    assert [a.id for a in alerts] == ["rain-2024-05-01", "heat-2024-05-01", "dry-2024-05-01", "current-rain"]
    assert all(a.timestamp == utc(2024, 5) for a in alerts)


def test_alerts_skip_missing_values_and_late_days():
    days = [DailyForecast(date="2024-07-01")] + [_day(f"2024-07-{d:02d}") for d in range(2, 8)]
    days.append(_day("2024-07-08", precip=90.0))
    assert weather_alerts(days, now=utc(2024, 7)) == []
