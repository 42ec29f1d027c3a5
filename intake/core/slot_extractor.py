"""
Slot Extractor - Intent-conditioned extraction of report fields

Responsibilities:
- Run the extraction routines mapped to the resolved intent
- Always run the fallback routines (contact, signalled timing/vulnerability/location)
- Enforce first-match-wins: never overwrite a known or already-set field
- Isolate routine failures (one failing routine drops only its own fields)

Design principles:
- Stateless apart from the injected clock
- Ordered pattern lists, most specific first
- Narratives are stored as categorical summaries, never raw text
- Logs routine and field names only, never values
"""

import logging
import re
from datetime import datetime
from typing import Callable, Dict, List, Optional

from intake.contracts import TraumaIndicators
from intake.core.indicator_detector import detect_complex_trauma_type
from intake.utils.intent_templates import Intent
from intake.utils.lexicons import (
    AFFIRMATIVE_REPLIES,
    LOCATION_FILLERS,
    NAME_STOPWORDS,
    NEGATIVE_REPLIES,
    NON_LOCATION_WORDS,
    is_name_word,
)
from intake.utils.time_resolver import resolve_relative_time

logger = logging.getLogger(__name__)

_NAME_WORD = r"[a-z][a-z'-]*"
_NAME_CAPTURE = rf"({_NAME_WORD}(?:\s+{_NAME_WORD}){{0,2}})"

EXPLICIT_NAME_PATTERNS = [
    re.compile(rf"\bmy (?:first )?name is\s+{_NAME_CAPTURE}"),
    re.compile(rf"\bmy name's\s+{_NAME_CAPTURE}"),
    re.compile(rf"\b(?:you can )?call me\s+{_NAME_CAPTURE}"),
    re.compile(rf"\bi(?:'m| am) called\s+{_NAME_CAPTURE}"),
]
# Only trusted when the utterance was classified as a name
CASUAL_NAME_PATTERNS = [
    re.compile(rf"\bthis is\s+{_NAME_CAPTURE}"),
    re.compile(rf"\bi(?:'m| am)\s+{_NAME_CAPTURE}"),
    re.compile(rf"\bit's\s+{_NAME_CAPTURE}"),
]
SURNAME_PATTERN = re.compile(rf"\bmy (?:surname|last name|family name) is\s+({_NAME_WORD})")
BARE_NAME = re.compile(rf"^\s*({_NAME_WORD}(?:\s+{_NAME_WORD})?)\s*[.!]?\s*$")

AGE_PATTERNS = [
    re.compile(r"\b(\d{1,3})\s*(?:years?|yrs?)\s*old\b"),
    re.compile(r"\bi(?:'m| am)\s+(?:only\s+|just\s+)?(\d{1,3})\b"),
    re.compile(r"\bage(?:d)?\s*(?:is\s*)?(\d{1,3})\b"),
    re.compile(r"\bmy age is\s+(\d{1,3})\b"),
    re.compile(r"^\s*(\d{1,3})\s*[.!]?\s*$"),
]
DATE_OF_BIRTH = re.compile(r"\bborn (?:on )?(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})\b")

LOCATION_ANCHORED = [
    re.compile(r"\b(?:it )?happened (?:in|at|near|outside|on)\s+(.+)", re.IGNORECASE),
    re.compile(r"\bi was (?:at|in|near|outside|on)\s+(.+)", re.IGNORECASE),
    re.compile(r"\b(?:it|this) (?:was|took place|occurred) (?:in|at|near|outside|on)\s+(.+)", re.IGNORECASE),
    re.compile(r"\bnear\s+(.+)", re.IGNORECASE),
]
LOCATION_GENERIC = [
    re.compile(r"\b(?:at|in|outside|inside|by)\s+(.+)", re.IGNORECASE),
]
BARE_LOCATION = re.compile(r"^\s*([A-Za-z][A-Za-z'\- ]{1,40})\s*[.!]?\s*$")
ADDRESS_PATTERNS = [
    ('street', re.compile(r"\bmy address is\s+([^,.;!?]+)", re.IGNORECASE)),
    ('town_city', re.compile(r"\bi live in\s+([A-Za-z][A-Za-z' -]+)", re.IGNORECASE)),
]
_CLAUSE_END = re.compile(
    r"[,.;!?]|\s+(?:when|and|while|because|but|with|yesterday|today|last|this|at about|around \d|on the way)\b",
    re.IGNORECASE,
)

# Coarse location categories, first match wins
LOCATION_CATEGORIES = [
    (re.compile(r"\b(?:toilets?|bathroom|restroom|loos?)\b"), "Near public toilets"),
    (re.compile(r"\b(?:shop\w*|mall|store|supermarket)\b"), "Shopping area"),
    (re.compile(r"\b(?:park|playground|field)\b"), "Park or public space"),
    (re.compile(r"\b(?:station|bus|train|tube|platform|underground)\b"), "Transport hub"),
    (re.compile(r"\b(?:street|road|avenue|lane|pavement)\b"), "Street or road"),
    (re.compile(r"\b(?:building|office|workplace|work)\b"), "Building or workplace"),
]


def is_location_type(place: str) -> bool:
    """True when every word is a category keyword ("park", "bus station"), so no place name"""
    words = place.lower().split()
    return bool(words) and all(
        any(pattern.search(word) for pattern, _label in LOCATION_CATEGORIES) for word in words
    )


# Narrative families in precedence order (most specific first)
NARRATIVE_FAMILIES = [
    (re.compile(r"\b(?:hit|hits|hitting|punch\w*|slap\w*|kick\w*|beat(?:en|ing)?|"
                r"attack\w*|assault\w*|strangl\w*|chok\w*|stab\w*|hurt me)\b"),
     "Physical violence occurred"),
    (re.compile(r"\b(?:touch\w*|grab\w*|push\w*|pull\w*|held|hold\w*|grop\w*|forc\w*|shov\w*|kiss\w*)\b"),
     "Physical contact occurred"),
    (re.compile(r"\b(?:threat\w*|said (?:he|she|they) would|(?:would|will|gonna|going to) (?:kill|hurt)|kill)\b"),
     "Threats were made"),
    (re.compile(r"\b(?:called me|swore|swearing|shout\w*|yell\w*|insult\w*|abus\w*|names|"
                r"offensive|slur\w*|catcall\w*|comments?)\b"),
     "Verbal abuse or offensive language was used"),
    (re.compile(r"\b(?:follow\w*|stalk\w*|watching me)\b"),
     "Someone was following me"),
    (re.compile(r"\b(?:wouldn'?t let|would not let|couldn'?t leave|could not leave|can'?t leave|"
                r"trapped|locked me|blocked|cornered)\b"),
     "I was trapped or prevented from leaving"),
    (re.compile(r"\b(?:came up to|approached|came over)\b"),
     "Someone approached me"),
]
GENERIC_NARRATIVE = "Incident details provided"

DISABILITY_PATTERN = re.compile(
    r"\b(?:wheelchair|disabilit\w*|disabled|mobility (?:issues?|problems?|aid|scooter)|"
    r"walking stick|crutches|blind|deaf|autis\w*|learning (?:difficult|disabilit)\w*)\b"
)
ALONE_PATTERN = re.compile(
    r"\b(?:alone|by myself|on my own|without my (?:mum|mom|dad|parents?|friends?)|"
    r"no ?one (?:was )?around|nobody (?:was )?around)\b"
)

EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]*\w")
PHONE_PATTERN = re.compile(r"(?<![\w/])(\+?\d[\d\s-]{8,14}\d)(?![\w/])")

MEDIA_NEGATIVE = re.compile(
    r"\b(?:no|not any|don'?t have any|do not have any|didn'?t take any|did not take any|haven'?t got any|"
    r"don'?t have|didn'?t take|didn'?t get)\s+(?:photos?|pictures?|videos?|recordings?|footage|evidence)\b"
)
MEDIA_POSITIVE = re.compile(r"\b(?:photos?|pictures?|videos?|recorded|recordings?|footage|screenshots?)\b")
CCTV_NEGATIVE = re.compile(r"\b(?:no|weren'?t any|there were no|there wasn'?t any)\s+(?:cctv |security )?cameras?\b|\bno cctv\b")
CCTV_POSITIVE = re.compile(r"\b(?:cctv|security cameras?|cameras?|surveillance)\b")
LEFT_ITEMS = re.compile(r"\b(?:left|dropped)\s+(?:behind\s+)?(?:his|her|their|a|an|the)\s+([a-z]+(?:\s+[a-z]+)?)")

WITNESS_NEGATIVE = re.compile(r"\b(?:no ?one saw|nobody saw|no witnesses|there was no ?one|no ?one else|nobody else)\b")
WITNESS_POSITIVE = re.compile(
    r"\b(?:there were witnesses|witness(?:es|ed)?|someone (?:else )?saw|people saw|others saw|"
    r"(?:my )?(?:friend|mum|mom|dad|sister|brother) saw|saw (?:it|what happened))\b"
)
WITNESS_NAME = re.compile(r"\b(?:named|called)\s+([a-z][a-z'-]*)")

SUSPECT_UNKNOWN = re.compile(
    r"\b(?:stranger|don'?t know (?:him|her|them|who)|didn'?t know (?:him|her|them|who)|"
    r"didn'?t recogni[sz]e|never seen (?:him|her|them))\b"
)
SUSPECT_KNOWN = re.compile(
    r"\b(?:i know (?:him|her|them|who)|(?:his|her|their) name (?:is|was)|i recogni[sz]e|"
    r"(?:he|she|they)'?s? (?:is|was|were)? ?my (?:ex|neighbour|teacher|boss|classmate))\b"
)
SUSPECT_DESCRIBE = re.compile(
    r"\b(?:i can describe|looked|wearing|tall|short|beard|hair|hoodie|jacket|about \d{1,2}|"
    r"in (?:his|her|their) \d0s)\b"
)
SUSPECT_NAME = re.compile(r"\b(?:his|her|their) name (?:is|was)\s+([a-z][a-z'-]*)")
SUSPECT_AGE = [
    re.compile(r"\b(?:he|she|they) (?:was|were|is|are|looked) (?:about|around|roughly|maybe|like)?\s*(\d{1,2})\b"),
    re.compile(r"\bin (?:his|her|their) (?:early |late |mid )?(\d0s)\b"),
    re.compile(r"\b(?:about|around|roughly) (\d{1,2}) (?:years old|ish)\b"),
]
SUSPECT_VEHICLE = re.compile(
    r"\b(?:car|van|vehicle|driving|drove|motorbike|moped|lorry|truck|registration|number plate)\b"
)
VEHICLE_REG = [
    re.compile(r"\b([A-Z]{2}\d{2}\s?[A-Z]{3})\b"),
    re.compile(r"\b(?:registration|reg|number plate|plate)\b(?: number)?\s*(?:is|was|:)?\s*([A-Za-z0-9]+(?: [A-Za-z0-9]+)?)",
               re.IGNORECASE),
]

TRANSPORT_PATTERN = re.compile(r"\b(?:bus|train|tube|tram|underground|overground|subway|metro|public transport)\b")
TRANSPORT_CARD = re.compile(r"\b(oyster|contactless)(?: card)?\b")

FEAR_PATTERN = re.compile(r"\b(?:scared|terrified|frightened|afraid|petrified)\b")


def _capitalize_name(name: str) -> str:
    return '-'.join(part.capitalize() for part in name.split('-'))


def _cut_at_stopword(capture: str) -> List[str]:
    tokens = []
    for token in capture.split():
        if not is_name_word(token):
            break
        tokens.append(token)
    return tokens


class SlotExtractor:
    """
    Intent-conditioned field extraction.

    Usage:
        extractor = SlotExtractor()
        fields = extractor.extract(text, intent, indicators, known_fields)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize extractor

        Args:
            clock: Callable returning "now" for relative-date arithmetic.
                   Defaults to datetime.now.
        """
        self.clock = clock or datetime.now

        # Intent -> routines that run for it
        self.intent_routines: Dict[str, List[str]] = {
            Intent.PROVIDE_NAME.value: ['name', 'age'],
            Intent.PROVIDE_AGE.value: ['age', 'name'],
            Intent.PROVIDE_TIMING.value: ['timing'],
            Intent.PROVIDE_LOCATION.value: ['location'],
            Intent.INCIDENT_NARRATIVE.value: ['narrative', 'location', 'suspect'],
            Intent.REPORT_INCIDENT.value: ['narrative', 'name', 'age', 'location', 'suspect'],
            Intent.CONTINUE_INCIDENT_NARRATIVE.value: ['narrative', 'suspect', 'evidence'],
            Intent.VULNERABILITY_CONTEXT.value: ['vulnerability', 'age'],
            Intent.PROVIDE_CONTACT.value: ['contact'],
            Intent.PROVIDE_EVIDENCE.value: ['evidence'],
            Intent.PROVIDE_WITNESSES.value: ['witnesses'],
            Intent.PROVIDE_SUSPECT.value: ['suspect'],
            Intent.PROVIDE_PUBLIC_TRANSPORT.value: ['transport', 'location'],
            Intent.REQUEST_HELP.value: ['vulnerability'],
            Intent.GENERAL_CONVERSATION.value: [],
        }

        self.routines = {
            'name': self._extract_name,
            'age': self._extract_age,
            'timing': self._extract_timing,
            'location': self._extract_location,
            'narrative': self._extract_narrative,
            'vulnerability': self._extract_vulnerability,
            'contact': self._extract_contact,
            'evidence': self._extract_evidence,
            'witnesses': self._extract_witnesses,
            'suspect': self._extract_suspect,
            'transport': self._extract_transport,
            'trauma_type': self._extract_trauma_type,
            'location_category': self._categorize_location,
        }

    # ========================
    # Public API
    # ========================

    def extract(self, text: str, intent: str, indicators: TraumaIndicators,
                known_fields: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Extract report fields from an utterance

        Args:
            text: Sanitized utterance
            intent: Resolved intent
            indicators: Indicators for this utterance
            known_fields: Fields already accumulated in the session

        Returns:
            Newly extracted fields (never includes a key from known_fields)
        """
        known = dict(known_fields or {})
        extracted: Dict[str, str] = {}
        if not text:
            return extracted

        for name in self._plan(intent, indicators):
            try:
                self.routines[name](text, intent, known, extracted)
            except Exception as e:
                logger.error(f"Extraction routine '{name}' failed: {type(e).__name__}")

        if extracted:
            logger.debug(f"Extracted fields: {sorted(extracted)}")
        return extracted

    def _plan(self, intent: str, indicators: TraumaIndicators) -> List[str]:
        """Routines for this intent followed by the always-on fallback set"""
        plan = list(self.intent_routines.get(intent, []))
        fallback = ['contact']
        if indicators.has_timing:
            fallback.append('timing')
        if indicators.has_vulnerability:
            fallback.append('vulnerability')
        if indicators.has_location:
            fallback.append('location_category')
        if indicators.has_physical_contact or indicators.has_complex_trauma:
            fallback.append('narrative')
        if indicators.has_complex_trauma or indicators.has_emotional_distress:
            fallback.append('trauma_type')
        for name in fallback:
            if name not in plan:
                plan.append(name)
        return plan

    @staticmethod
    def _set_field(field: str, value: Optional[str], known: Dict[str, str],
                   extracted: Dict[str, str]) -> bool:
        """First match wins: skip fields already known or already set this turn"""
        if value is None or value == '':
            return False
        if field in known or field in extracted:
            return False
        extracted[field] = value
        return True

    # ========================
    # Routines
    # ========================

    def _extract_name(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'")

        surname = SURNAME_PATTERN.search(lowered)
        if surname and surname.group(1) not in NAME_STOPWORDS:
            self._set_field('surname', _capitalize_name(surname.group(1)), known, extracted)

        patterns = list(EXPLICIT_NAME_PATTERNS)
        if intent == Intent.PROVIDE_NAME.value:
            patterns.extend(CASUAL_NAME_PATTERNS)
        candidates = [m.group(1) for pattern in patterns for m in pattern.finditer(lowered)]
        if intent == Intent.PROVIDE_NAME.value:
            bare = BARE_NAME.match(lowered)
            if bare:
                candidates.append(bare.group(1))

        for capture in candidates:
            tokens = _cut_at_stopword(capture)
            if not tokens or not all(re.fullmatch(_NAME_WORD, t) for t in tokens):
                continue
            self._set_field('first_name', _capitalize_name(tokens[0]), known, extracted)
            if len(tokens) > 1:
                self._set_field('surname', ' '.join(_capitalize_name(t) for t in tokens[1:]),
                                known, extracted)
            return

    def _extract_age(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'")

        dob = DATE_OF_BIRTH.search(lowered)
        if dob:
            for field, value in zip(('dob_day', 'dob_month', 'dob_year'), dob.groups()):
                self._set_field(field, str(int(value)), known, extracted)

        age = None
        for pattern in AGE_PATTERNS:
            match = pattern.search(lowered)
            if match and 1 <= int(match.group(1)) <= 120:
                age = int(match.group(1))
                break

        if age is None:
            if re.search(r"\bteenager\b", lowered):
                age = 15
            elif re.search(r"\b(?:minor|under 18|under eighteen)\b", lowered):
                age = 17

        if age is None:
            return
        if self._set_field('age', str(age), known, extracted):
            self._set_field('under18', 'Yes' if age < 18 else 'No', known, extracted)
            self._set_field('age_group', 'young' if age < 18 else 'adult', known, extracted)

    def _extract_timing(self, text, intent, known, extracted):
        if DATE_OF_BIRTH.search(text.lower()):
            return
        for field, value in resolve_relative_time(text, self.clock()).items():
            self._set_field(field, value, known, extracted)

    def _extract_location(self, text, intent, known, extracted):
        patterns = list(LOCATION_ANCHORED)
        if intent == Intent.PROVIDE_LOCATION.value:
            patterns.extend(LOCATION_GENERIC)

        for pattern in patterns:
            match = pattern.search(text)
            if not match:
                continue
            place = self._clean_location(match.group(1))
            if place:
                self._set_field('town_city', place, known, extracted)
                break
        else:
            if intent == Intent.PROVIDE_LOCATION.value:
                bare = BARE_LOCATION.match(text)
                if bare:
                    place = self._clean_location(bare.group(1))
                    # A bare category word is left to the categorizer
                    if place and not is_location_type(place):
                        self._set_field('town_city', place, known, extracted)

        for field, pattern in ADDRESS_PATTERNS:
            match = pattern.search(text)
            if match:
                self._set_field(field, match.group(1).strip(), known, extracted)

        self._categorize_location(text, intent, known, extracted)

    @staticmethod
    def _clean_location(capture: str) -> Optional[str]:
        """Cut at the clause boundary, strip leading fillers, reject non-places"""
        place = _CLAUSE_END.split(capture, maxsplit=1)[0].strip()
        changed = True
        while changed and place:
            changed = False
            for filler in LOCATION_FILLERS:
                if place.lower().startswith(filler + ' '):
                    place = place[len(filler) + 1:].strip()
                    changed = True
        if not place:
            return None
        words = place.lower().split()
        if words[0] in NON_LOCATION_WORDS or words[0] in NAME_STOPWORDS or len(words) > 5:
            return None
        return ' '.join(word if word.isupper() else word.capitalize() for word in place.split())

    def _categorize_location(self, text, intent, known, extracted):
        lowered = text.lower()
        for pattern, label in LOCATION_CATEGORIES:
            if pattern.search(lowered):
                self._set_field('incident_location_detail', label, known, extracted)
                return

    def _extract_narrative(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'")
        for pattern, summary in NARRATIVE_FAMILIES:
            if pattern.search(lowered):
                self._set_field('incident_narrative', summary, known, extracted)
                return
        if intent in (Intent.INCIDENT_NARRATIVE.value, Intent.REPORT_INCIDENT.value):
            self._set_field('incident_narrative', GENERIC_NARRATIVE, known, extracted)

    def _extract_vulnerability(self, text, intent, known, extracted):
        lowered = text.lower()

        disability = DISABILITY_PATTERN.search(lowered)
        if disability:
            self._set_field('disability', 'Yes', known, extracted)
            self._set_field('health_issues', 'Yes', known, extracted)
            self._set_field('health_issues_details', self._matched_clause(text, disability),
                            known, extracted)

        if ALONE_PATTERN.search(lowered):
            self._set_field('vulnerability_context', 'alone', known, extracted)
            self._set_field('alone_when_incident', 'Yes', known, extracted)

    @staticmethod
    def _matched_clause(text: str, match) -> str:
        """Clause of the original text containing the match"""
        start = max(text.rfind(sep, 0, match.start()) for sep in ',.;!?') + 1
        ends = [i for i in (text.find(sep, match.end()) for sep in ',.;!?') if i != -1]
        end = min(ends) if ends else len(text)
        clause = text[start:end].strip()[:100]
        if not clause:
            return "Uses wheelchair"
        return clause[0].upper() + clause[1:]

    def _extract_contact(self, text, intent, known, extracted):
        email = EMAIL_PATTERN.search(text)
        if email:
            self._set_field('email', email.group(0).lower(), known, extracted)

        phone = PHONE_PATTERN.search(text)
        if phone:
            digits = re.sub(r"[\s-]", '', phone.group(1))
            if 10 <= len(digits.lstrip('+')) <= 13:
                self._set_field('phone_number', digits, known, extracted)

    def _extract_evidence(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'").strip(' .!?')

        if lowered in NEGATIVE_REPLIES or MEDIA_NEGATIVE.search(lowered):
            self._set_field('have_personal_media', 'No', known, extracted)
        elif lowered in AFFIRMATIVE_REPLIES or MEDIA_POSITIVE.search(lowered):
            self._set_field('have_personal_media', 'Yes', known, extracted)

        if CCTV_NEGATIVE.search(lowered):
            self._set_field('third_party_video', 'No', known, extracted)
        elif CCTV_POSITIVE.search(lowered):
            self._set_field('third_party_video', 'Yes', known, extracted)

        left = LEFT_ITEMS.search(lowered)
        if left:
            self._set_field('suspect_left_items', left.group(1), known, extracted)

    def _extract_witnesses(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'").strip(' .!?')

        if lowered in NEGATIVE_REPLIES or WITNESS_NEGATIVE.search(lowered):
            self._set_field('has_witnesses', 'No', known, extracted)
            return
        if lowered in AFFIRMATIVE_REPLIES or WITNESS_POSITIVE.search(lowered):
            self._set_field('has_witnesses', 'Yes', known, extracted)
            name = WITNESS_NAME.search(lowered)
            if name and name.group(1) not in NAME_STOPWORDS:
                self._set_field('wit_first_name', _capitalize_name(name.group(1)), known, extracted)

    def _extract_suspect(self, text, intent, known, extracted):
        lowered = text.lower().replace('’', "'").strip(' .!?')

        name = SUSPECT_NAME.search(lowered)
        if name and name.group(1) not in NAME_STOPWORDS:
            self._set_field('sus_first_name', _capitalize_name(name.group(1)), known, extracted)

        if SUSPECT_UNKNOWN.search(lowered) or (
                intent == Intent.PROVIDE_SUSPECT.value and lowered in NEGATIVE_REPLIES):
            self._set_field('suspect_known', 'unknown', known, extracted)
        elif SUSPECT_KNOWN.search(lowered):
            self._set_field('suspect_known', 'known', known, extracted)
        elif SUSPECT_DESCRIBE.search(lowered) or (
                intent == Intent.PROVIDE_SUSPECT.value and lowered in AFFIRMATIVE_REPLIES):
            self._set_field('suspect_known', 'describe', known, extracted)

        for pattern in SUSPECT_AGE:
            match = pattern.search(lowered)
            if match:
                self._set_field('sus_approx_age', match.group(1), known, extracted)
                break

        if SUSPECT_VEHICLE.search(lowered):
            self._set_field('sus_in_vehicle', 'Yes', known, extracted)
            for pattern in VEHICLE_REG:
                match = pattern.search(text)
                if match:
                    self._set_field('sus_vehicle_reg', match.group(1).strip(), known, extracted)
                    break

    def _extract_transport(self, text, intent, known, extracted):
        lowered = text.lower()
        if TRANSPORT_PATTERN.search(lowered):
            self._set_field('public_transport', 'Yes', known, extracted)
        card = TRANSPORT_CARD.search(lowered)
        if card:
            self._set_field('public_transport', 'Yes', known, extracted)
            self._set_field('transport_card_details', f"{card.group(1).capitalize()} card",
                            known, extracted)

    def _extract_trauma_type(self, text, intent, known, extracted):
        trauma_type = detect_complex_trauma_type(text)
        if trauma_type is None:
            lowered = text.lower()
            if FEAR_PATTERN.search(lowered):
                trauma_type = 'fear'
            else:
                trauma_type = 'emotional_distress'
        self._set_field('trauma_type', trauma_type, known, extracted)
