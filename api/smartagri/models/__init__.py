from .base import Base
from .price_observation import PriceObservation
from .weather_observation import WeatherObservation
from .knowledge_article import KnowledgeArticle
from .chat_message import ChatMessage

__all__ = [
    "Base",
    "PriceObservation",
    "WeatherObservation",
    "KnowledgeArticle",
    "ChatMessage",
]
