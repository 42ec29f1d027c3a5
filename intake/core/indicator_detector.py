"""
Indicator Detector - Trauma signal detection for a single utterance

Responsibilities:
- Detect ten independent trauma indicators from text
- Identify which complex-trauma sub-pattern matched (entrapment, stalking, threats)

Design principles:
- Pure functions (no state, no logging of content)
- One compiled regex family per indicator, tunable independently
- Complex trauma is its own composite and never collapses into has_threat
"""

import re
from typing import Dict, List, Optional

from intake.contracts import TraumaIndicators

_PHYSICAL_CONTACT = (
    r"\b(?:touch(?:ed|es|ing)?|grab(?:bed|s|bing)?|push(?:ed|es|ing)?|pull(?:ed|s|ing)?|"
    r"hit(?:s|ting)?|slap(?:ped|s|ping)?|kick(?:ed|s|ing)?|punch(?:ed|es|ing)?|"
    r"hold(?:s|ing)?|held|forc(?:e|ed|es|ing)|grop(?:e|ed|es|ing)|shov(?:e|ed|ing)|"
    r"strangl\w*|chok(?:e|ed|ing)|kiss(?:ed|ing)?)\b"
)

# Complex trauma sub-families, checked in this order by detect_complex_trauma_type
COMPLEX_TRAUMA_PATTERNS: Dict[str, re.Pattern] = {
    'entrapment': re.compile(
        r"\b(?:wouldn'?t let|would not let|couldn'?t leave|could not leave|can'?t leave|"
        r"cannot leave|couldn'?t get away|trapped|locked me|blocked (?:me|my|the)|"
        r"cornered|wouldn'?t move out of)\b"
    ),
    'stalking': re.compile(
        r"\b(?:followed|following me|stalk\w*|watching me|been watching|keeps? watching|"
        r"waiting for me outside)\b"
    ),
    'threats': re.compile(
        r"\b(?:threaten\w*|threats?|said (?:he|she|they) would|"
        r"(?:would|will|gonna|going to) (?:kill|hurt|get) me)\b"
    ),
}

INDICATOR_PATTERNS: Dict[str, re.Pattern] = {
    'has_incident': re.compile(
        r"\b(?:happened|incident|attack\w*|assault\w*|harass\w*|abus\w*|came up to|"
        r"approached|came over to|hurt me|violen\w*|rap(?:e|ed)|molest\w*|"
        r"exposed (?:himself|herself)|flash(?:ed|ing)|catcall\w*|spat at|"
        r"something (?:bad )?happened|report)\b"
    ),
    'has_threat': re.compile(
        r"\b(?:threat\w*|said (?:he|she|they) would|(?:would|will|gonna|going to) "
        r"(?:kill|hurt|get)|kill|weapon|knife|gun|blade)\b"
    ),
    'has_urgency': re.compile(
        r"\b(?:right now|urgent\w*|emergency|immediately|still here|happening now|"
        r"in danger|help me|outside my (?:house|door|flat)|asap)\b"
    ),
    'has_vulnerability': re.compile(
        r"\b(?:alone|by myself|on my own|wheelchair|disab\w*|mobility|young|minor|"
        r"teenager|child|kid|helpless|powerless|vulnerable|(?:i'?m|i am) (?:[1-9]|1[0-7])\b|"
        r"without my (?:mum|mom|dad|parents?))"
    ),
    'has_location': re.compile(
        r"\b(?:happened (?:in|at|near|on)|park|station|street|road|shop\w*|mall|toilets?|"
        r"bathroom|bus|train|tube|school|office|building|car park|centre|center|city|"
        r"town|london|platform|cafe|pub|club|bar|library)\b"
    ),
    'has_timing': re.compile(
        r"\b(?:yesterday|today|tonight|last (?:night|week|month|year|fortnight|"
        r"monday|tuesday|wednesday|thursday|friday|saturday|sunday)|this (?:morning|"
        r"afternoon|evening)|ago|earlier|fortnight|the other day|"
        r"\d{1,2}[:.]\d{2}|\d{1,2}\s*(?:am|pm)|\d{1,2}/\d{1,2}/\d{4}|"
        r"on (?:monday|tuesday|wednesday|thursday|friday|saturday|sunday))\b"
    ),
    'has_perpetrator': re.compile(
        r"\b(?:he|she|they|him|them|man|woman|guy|person|someone|stranger|boy|girl|"
        r"men|group|lad|bloke)\b"
    ),
    'has_physical_contact': re.compile(_PHYSICAL_CONTACT),
    'has_emotional_distress': re.compile(
        r"\b(?:scared|terrified|frightened|afraid|upset|crying|cried|panic\w*|anxious|"
        r"shaking|traumati[sz]ed|overwhelmed|helpless|distress\w*|shock\w*|numb|"
        r"can'?t stop thinking|can'?t sleep)\b"
    ),
}


def detect_complex_trauma_type(text: str) -> Optional[str]:
    """
    Identify which complex-trauma sub-pattern matched

    Args:
        text: Sanitized utterance

    Returns:
        'entrapment', 'stalking', 'threats', or None

    Examples:
        >>> detect_complex_trauma_type("he wouldn't let me leave")
        'entrapment'
    """
    lowered = _normalise(text)
    for trauma_type, pattern in COMPLEX_TRAUMA_PATTERNS.items():
        if pattern.search(lowered):
            return trauma_type
    return None


def detect_indicators(text: str) -> TraumaIndicators:
    """
    Detect trauma indicators in an utterance

    Args:
        text: Sanitized utterance

    Returns:
        TraumaIndicators with one flag per regex family

    Examples:
        >>> detect_indicators("he grabbed my arm").has_physical_contact
        True
    """
    lowered = _normalise(text)
    flags = {name: bool(pattern.search(lowered)) for name, pattern in INDICATOR_PATTERNS.items()}
    flags['has_complex_trauma'] = detect_complex_trauma_type(lowered) is not None
    return TraumaIndicators(**flags)


def active_indicators(indicators: TraumaIndicators) -> List[str]:
    """Names of the indicators that are set (safe to log)"""
    return [name for name, value in vars(indicators).items() if value]


def _normalise(text: str) -> str:
    if not isinstance(text, str):
        return ""
    return text.lower().replace('’', "'")
