"""
Sentiment Scorer - Lexicon-based sentiment in [-1, 1]

Design principles:
- Pure function of text
- Never raises: any internal failure returns 0.0 (neutral)
- High-intensity lexicon is disjoint from the negative lexicon
"""

import logging
import re

from intake.utils.lexicons import HIGH_INTENSITY_WORDS, NEGATIVE_WORDS, POSITIVE_WORDS

logger = logging.getLogger(__name__)

POSITIVE_WEIGHT = 0.2
NEGATIVE_WEIGHT = -0.4
HIGH_INTENSITY_WEIGHT = -0.6

# Contextual penalties applied once per utterance
CONTEXT_PENALTIES = [
    ('alone', re.compile(r"\b(?:alone|by myself|on my own)\b"), -0.2),
    ('disability', re.compile(r"\b(?:wheelchair|disab\w*|mobility)\b"), -0.1),
    ('minor', re.compile(r"\b(?:minor|teenager|under 18|child|kid|(?:i'?m|i am) (?:[1-9]|1[0-7]))\b"), -0.2),
]

_EDGE_PUNCTUATION = re.compile(r"^[^\w']+|[^\w']+$")


def tokenize(text):
    """Split on whitespace and strip punctuation from token edges"""
    tokens = []
    for raw in text.lower().split():
        token = _EDGE_PUNCTUATION.sub('', raw)
        if token:
            tokens.append(token)
    return tokens


def score_sentiment(text) -> float:
    """
    Score sentiment of an utterance

    Args:
        text: Sanitized utterance

    Returns:
        Score clamped to [-1, 1]; 0.0 on internal failure

    Examples:
        >>> score_sentiment("I feel safe now, thanks")
        0.4
    """
    try:
        score = 0.0
        for token in tokenize(text):
            if token in HIGH_INTENSITY_WORDS:
                score += HIGH_INTENSITY_WEIGHT
            elif token in NEGATIVE_WORDS:
                score += NEGATIVE_WEIGHT
            elif token in POSITIVE_WORDS:
                score += POSITIVE_WEIGHT

        lowered = text.lower()
        for _name, pattern, penalty in CONTEXT_PENALTIES:
            if pattern.search(lowered):
                score += penalty

        return round(max(-1.0, min(1.0, score)), 4)

    except Exception as e:
        logger.warning(f"Sentiment scoring failed, returning neutral: {type(e).__name__}")
        return 0.0
