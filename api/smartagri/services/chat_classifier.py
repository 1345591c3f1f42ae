"""Keyword-based chat message analysis.

Scores a message against fixed per-topic keyword lists. The score for a topic
is the fraction of its keywords that occur in the message; the first topic
with the strictly highest fraction wins.
"""

from dataclasses import dataclass, field

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "market": ["price", "market", "sell", "buy", "cost", "mandi"],
    "weather": ["weather", "rain", "temperature", "humidity", "climate"],
    "soil": ["soil", "ph", "fertility", "nutrient", "compost"],
    "irrigation": ["water", "irrigation", "drip", "sprinkler"],
    "pest": ["pest", "insect", "disease", "fungus", "weed"],
}

STOP_WORDS = frozenset({"the", "a", "an", "is", "are", "what", "how", "when", "where", "why"})


@dataclass(frozen=True)
class QueryAnalysis:
    category: str
    confidence: int
    intent: str
    keywords: list[str] = field(default_factory=list)


def classify_category(message: str) -> tuple[str, float]:
    """Return (category, match ratio); ("general", 0.0) when nothing matches."""
    text = message.lower()
    best_category = "general"
    best_ratio = 0.0
    for category, keywords in CATEGORY_KEYWORDS.items():
        matches = sum(1 for keyword in keywords if keyword in text)
        ratio = matches / len(keywords)
        if ratio > best_ratio:
            best_ratio = ratio
            best_category = category
    return best_category, best_ratio


def determine_intent(message: str) -> str:
    """Case-sensitive: "Help me" does not count as a help request."""
    if "?" in message or "how" in message or "what" in message:
        return "question"
    if "help" in message or "problem" in message:
        return "help"
    if "price" in message or "market" in message:
        return "market_info"
    return "general"


def extract_keywords(message: str) -> list[str]:
    return [
        word for word in message.lower().split()
        if len(word) > 3 and word not in STOP_WORDS
    ]


def analyze_query(message: str) -> QueryAnalysis:
    category, ratio = classify_category(message)
    return QueryAnalysis(
        category=category,
        confidence=round(ratio * 100),
        intent=determine_intent(message),
        keywords=extract_keywords(message),
    )
