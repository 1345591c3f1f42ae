"""Tests for keyword-based chat analysis."""

from smartagri.services.chat_classifier import (
    analyze_query,
    classify_category,
    determine_intent,
    extract_keywords,
)


def test_market_price_question():
    analysis = analyze_query("What is the market price of wheat today?")
    assert analysis.category == "market"
    assert analysis.confidence == 33
    assert analysis.intent == "question"
    assert "market" in analysis.keywords
    assert "what" not in analysis.keywords


def test_no_keywords_is_general():
    assert classify_category("hello there") == ("general", 0.0)
    assert analyze_query("hello there").confidence == 0


def test_higher_ratio_wins():
    # market 1/6 vs weather 1/5
    category, ratio = classify_category("rain price")
    assert category == "weather"
    assert ratio == 0.2


def test_ties_go_to_first_category():
    category, _ = classify_category("rain soil")
    assert category == "weather"


def test_classification_is_case_insensitive():
    assert classify_category("DRIP IRRIGATION")[0] == "irrigation"


def test_intent_priority():
    assert determine_intent("how do I stop aphids") == "question"
    assert determine_intent("I need help with price") == "help"
    assert determine_intent("market update") == "market_info"
    assert determine_intent("hello there") == "general"


def test_extract_keywords():
    assert extract_keywords("What is the best fertilizer for soil") == [
        "best",
        "fertilizer",
        "soil",
    ]


def test_intent_is_case_sensitive():
    assert determine_intent("Help me with my crop") == "general"
    assert determine_intent("How do I stop aphids") == "general"
    assert determine_intent("What about Market rates") == "general"
    assert determine_intent("Is the Price fair?") == "question"
