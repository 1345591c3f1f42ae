"""Tests for weather-driven farming advisories."""

from types import SimpleNamespace

from smartagri.services.advisories import critical_alerts, farming_recommendations


def _weather(temperature=25, humidity=50, rainfall=0, wind_speed=5):
    return SimpleNamespace(
        temperature=temperature, humidity=humidity, rainfall=rainfall, wind_speed=wind_speed
    )


def test_only_high_temperature():
    advisories = farming_recommendations(_weather(40, 50, 10, 5))
    assert [a.type for a in advisories] == ["high_temperature"]
    assert advisories[0].severity == "warning"


def test_all_rules_fire_in_order():
    advisories = farming_recommendations(_weather(36, 81, 71, 21))
    assert [a.type for a in advisories] == [
        "high_temperature",
        "high_humidity",
        "heavy_rain",
        "strong_winds",
    ]


def test_optimal_conditions_when_nothing_fires():
    advisories = farming_recommendations(_weather())
    assert len(advisories) == 1
    assert advisories[0].type == "optimal_conditions"
    assert advisories[0].severity == "success"


def test_thresholds_are_strict():
    advisories = farming_recommendations(_weather(35, 80, 70, 20))
    assert [a.type for a in advisories] == ["optimal_conditions"]


def test_critical_alerts_keep_warnings_only():
    advisories = farming_recommendations(_weather(40, 90, 0, 5))
    alerts = critical_alerts(advisories)
    assert [a.type for a in alerts] == ["high_temperature"]
    assert critical_alerts(farming_recommendations(_weather())) == []
