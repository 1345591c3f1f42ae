"""Fixed vocabularies shared by models, schemas and services."""

import enum


class Crop(str, enum.Enum):
    wheat = "wheat"
    rice = "rice"
    cotton = "cotton"
    sugarcane = "sugarcane"
    maize = "maize"
    tomato = "tomato"
    potato = "potato"
    onion = "onion"


class Market(str, enum.Enum):
    delhi = "delhi"
    mumbai = "mumbai"
    pune = "pune"
    bangalore = "bangalore"
    hyderabad = "hyderabad"
    chennai = "chennai"
    kolkata = "kolkata"


# Weather is tracked for the same set of cities as markets
City = Market


class PriceTrend(str, enum.Enum):
    up = "up"
    down = "down"
    stable = "stable"


class PriceSourceTag(str, enum.Enum):
    government = "government"
    simulated = "simulated"


class ArticleCategory(str, enum.Enum):
    soil = "soil"
    irrigation = "irrigation"
    pest = "pest"
    harvest = "harvest"
    crop = "crop"
    market = "market"
    technology = "technology"


class ChatRole(str, enum.Enum):
    user = "user"
    bot = "bot"


class ChatCategory(str, enum.Enum):
    market = "market"
    weather = "weather"
    soil = "soil"
    irrigation = "irrigation"
    pest = "pest"
    general = "general"


# Markets considered when comparing prices for a single crop
COMPARISON_MARKETS = ["delhi", "mumbai", "pune", "bangalore", "hyderabad"]

# Cities included in the multi-city weather summary
SUMMARY_CITIES = ["delhi", "mumbai", "pune", "bangalore", "hyderabad", "chennai"]

DEFAULT_UNIT = "quintal"
