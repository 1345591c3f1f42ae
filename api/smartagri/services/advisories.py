"""Rule-based farming advisories derived from current weather.

Rules are independent and evaluated in a fixed order (temperature, humidity,
rainfall, wind); clients display advisories in that order. When no rule
fires a single "optimal conditions" advisory is returned.
"""

from dataclasses import dataclass, field
from typing import Protocol

HIGH_TEMPERATURE_C = 35
HIGH_HUMIDITY_PCT = 80
HEAVY_RAIN_MM = 70
STRONG_WIND = 20

# Severities counted as alerts by GET /weather/alerts
ALERT_SEVERITIES = frozenset({"warning", "danger"})


class Conditions(Protocol):
    temperature: float
    humidity: float
    rainfall: float
    wind_speed: float


@dataclass(frozen=True)
class Advisory:
    type: str
    severity: str
    message: str
    recommendation: str
    actions: list[str] = field(default_factory=list)


def farming_recommendations(weather: Conditions) -> list[Advisory]:
    advisories = []

    if weather.temperature > HIGH_TEMPERATURE_C:
        advisories.append(
            Advisory(
                type="high_temperature",
                severity="warning",
                message="High temperature alert",
                recommendation="Increase irrigation frequency and provide shade for sensitive crops",
                actions=["Morning watering", "Use shade nets", "Avoid midday operations"],
            )
        )

    if weather.humidity > HIGH_HUMIDITY_PCT:
        advisories.append(
            Advisory(
                type="high_humidity",
                severity="info",
                message="High humidity detected",
                recommendation="Monitor for fungal diseases and ensure good air circulation",
                actions=["Check for mildew", "Improve ventilation", "Avoid overhead irrigation"],
            )
        )

    if weather.rainfall > HEAVY_RAIN_MM:
        advisories.append(
            Advisory(
                type="heavy_rain",
                severity="warning",
                message="Heavy rain expected",
                recommendation="Ensure proper drainage and delay pesticide applications",
                actions=["Check drainage", "Delay spraying", "Protect soil from erosion"],
            )
        )

    if weather.wind_speed > STRONG_WIND:
        advisories.append(
            Advisory(
                type="strong_winds",
                severity="warning",
                message="Strong winds forecasted",
                recommendation="Secure tall crops and delay spraying operations",
                actions=["Stake plants", "Delay spraying", "Protect young plants"],
            )
        )

    if not advisories:
        advisories.append(
            Advisory(
                type="optimal_conditions",
                severity="success",
                message="Weather conditions are optimal",
                recommendation="Good time for regular farming activities",
                actions=["Continue normal schedule", "Monitor soil moisture"],
            )
        )

    return advisories


def critical_alerts(advisories: list[Advisory]) -> list[Advisory]:
    return [a for a in advisories if a.severity in ALERT_SEVERITIES]
