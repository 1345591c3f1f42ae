"""Seasonal price outlook from a static high/low month table."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

MONTH_ABBREVIATIONS = [
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
]

# crop -> (high price months, low price months)
SEASONAL_PATTERNS: dict[str, tuple[str, str]] = {
    "wheat": ("Mar-Apr", "Sep-Oct"),
    "rice": ("Nov-Dec", "Jul-Aug"),
    "cotton": ("Dec-Jan", "Jun-Jul"),
    "sugarcane": ("Feb-Mar", "Aug-Sep"),
}

REC_HIGH_SEASON = "Currently in high price season. Consider selling if you have stock."
REC_LOW_SEASON = "Currently in low price season. Good time for procurement."
REC_NEUTRAL_SEASON = "Neutral seasonal period. Monitor market trends."
REC_NO_PATTERN = "No strong seasonal pattern identified for this crop"


@dataclass(frozen=True)
class SeasonalPrediction:
    crop: str
    current_season: str
    recommendation: str
    high_season: Optional[str] = None
    low_season: Optional[str] = None


def season_for_month(month: int) -> str:
    """Coarse season for a 0-indexed month."""
    if 2 <= month <= 4:
        return "Spring"
    if 5 <= month <= 7:
        return "Summer"
    if 8 <= month <= 10:
        return "Monsoon"
    return "Winter"


def parse_month_range(month_range: str) -> list[int]:
    """Expand "Mar-Apr" into [2, 3].

    Ranges that cross the year boundary ("Dec-Jan") expand to an empty list.
    """
    start, end = month_range.lower().split("-")
    start_index = MONTH_ABBREVIATIONS.index(start)
    end_index = MONTH_ABBREVIATIONS.index(end)
    return list(range(start_index, end_index + 1))


def seasonal_recommendation(month: int, high: str, low: str) -> str:
    if month in parse_month_range(high):
        return REC_HIGH_SEASON
    if month in parse_month_range(low):
        return REC_LOW_SEASON
    return REC_NEUTRAL_SEASON


def predict_seasonal_prices(crop: str, month: Optional[int] = None) -> SeasonalPrediction:
    if month is None:
        month = datetime.now(timezone.utc).month - 1

    pattern = SEASONAL_PATTERNS.get(crop)
    if pattern is None:
        return SeasonalPrediction(
            crop=crop,
            current_season=season_for_month(month),
            recommendation=REC_NO_PATTERN,
        )

    high, low = pattern
    return SeasonalPrediction(
        crop=crop,
        current_season=season_for_month(month),
        recommendation=seasonal_recommendation(month, high, low),
        high_season=high,
        low_season=low,
    )
