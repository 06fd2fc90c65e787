"""Lexicon-based sentiment classifier"""
from __future__ import annotations

import math

from src.core import SentimentScore

POSITIVE_WORDS = (
    "good", "great", "excellent", "amazing", "wonderful",
    "fantastic", "love", "happy", "joy", "perfect",
    "best", "awesome", "brilliant", "outstanding", "superb",
)
NEGATIVE_WORDS = (
    "bad", "terrible", "awful", "hate", "sad",
    "angry", "disappointed", "horrible", "worst", "disgusting",
    "annoying", "frustrating", "poor", "pathetic", "useless",
)

NEUTRAL_CONFIDENCE = 50
BASE_CONFIDENCE = 60
CONFIDENCE_SPAN = 35
MAX_CONFIDENCE = 95

def _matches(token: str, lexicon: tuple[str, ...]) -> bool:
    # Substring match: "amazingly" counts for "amazing"
    return any(entry in token for entry in lexicon)

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def _indicators(count: int, label: str) -> str:
    return f"{count} {label} indicator{'' if count == 1 else 's'}"

def classify(text: str) -> SentimentScore:
    """
    Score the emotional tone of text by counting lexicon hits

    Tokens are whitespace-separated and lowercased. A token counts towards a
    lexicon when any entry is a substring of it; one token can count towards
    both lexicons.

    Args:
        text: Input text (may be empty)

    Returns:
        SentimentScore with confidence 50 for neutral results and
        round(min(95, 60 + share * 35)) otherwise, where share is the
        winning count over all indicator hits
    """
    positive = 0
    negative = 0
    for token in text.lower().split():
        if _matches(token, POSITIVE_WORDS):
            positive += 1
        if _matches(token, NEGATIVE_WORDS):
            negative += 1

    total = positive + negative
    if total == 0 or positive == negative:
        return SentimentScore(
            sentiment="neutral",
            confidence=NEUTRAL_CONFIDENCE,
            summary="Neutral sentiment - no strong emotional indicators detected",
        )

    if positive > negative:
        sentiment, count = "positive", positive
    else:
        sentiment, count = "negative", negative

    share = count / total
    confidence = _round_half_up(min(MAX_CONFIDENCE, BASE_CONFIDENCE + share * CONFIDENCE_SPAN))
    return SentimentScore(
        sentiment=sentiment,
        confidence=confidence,
        summary=f"{sentiment.capitalize()} sentiment detected with {_indicators(count, sentiment)}",
    )
