"""
Utility helpers for the intake engine

Simple utility functions for identifier generation and confidence scoring.
"""

import re
import uuid


# Surface patterns that signal an unambiguous disclosure
CLEAR_PATTERNS = [
    re.compile(r'\bmy name is\b'),
    re.compile(r"\bi'?m \d+\b"),
    re.compile(r'\bi am \d+\b'),
    re.compile(r'\bwheelchair\b'),
    re.compile(r'\balone\b'),
    re.compile(r'\b(?:mum|mom|parent)\b'),
    re.compile(r'\b(?:came up to|approached)\b'),
    re.compile(r'[\w.+-]+@[\w-]+\.[\w.-]+'),
]


def generate_session_id(short=False):
    """
    Generate unique session identifier

    Args:
        short (bool): If True, return 8-char hex. If False, return full UUID hex.

    Returns:
        str: Session ID

    Examples:
        >>> generate_session_id(short=True)
        'a3f7e2b9'
    """
    full_id = uuid.uuid4().hex
    return full_id[:8] if short else full_id


def generate_response_id():
    """
    Generate unique response identifier for caller-side de-duplication

    Returns:
        str: 32-char hex string
    """
    return uuid.uuid4().hex


def calculate_confidence(base, extracted_fields, text, max_confidence=0.95):
    """
    Combine classifier confidence with extraction evidence

    +0.05 per extracted field (capped at +0.2) and +0.1 per clear surface
    pattern (capped at +0.2). Pattern matching is never fully certain, so
    the result is capped at max_confidence.

    Args:
        base (float): Classifier confidence
        extracted_fields (dict): Fields extracted this turn
        text (str): Sanitized utterance
        max_confidence (float): Upper bound

    Returns:
        float: Confidence in [0, max_confidence]
    """
    lowered = text.lower()
    field_bonus = min(0.05 * len(extracted_fields), 0.2)
    pattern_hits = sum(1 for pattern in CLEAR_PATTERNS if pattern.search(lowered))
    pattern_bonus = min(0.1 * pattern_hits, 0.2)
    confidence = base + field_bonus + pattern_bonus
    return round(max(0.0, min(max_confidence, confidence)), 4)
