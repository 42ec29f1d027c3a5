"""
Intent Classifier - Template similarity with context and regex fallback

Responsibilities:
- Score an utterance against curated intent templates (TF-IDF cosine)
- Resolve the final intent through an explicit, ordered rule table
- Fall back to regex rules when the similarity backend fails

Design principles:
- Stateless: session context arrives as a read-only ConversationSnapshot
- Resolution order is data (RESOLUTION_ORDER), not nested conditionals
- Similarity backends are swappable (TF-IDF default, embeddings optional)
- Logs rule names and intents only, never text

Resolution order:
    complex_trauma > incident_continuation > incident_report > uncertain >
    semantic_accept > context > semantic_fallback > regex > default
"""

import logging
import re
from collections import Counter
from typing import List, Optional, Tuple

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from intake.config import EngineConfig
from intake.contracts import ConversationSnapshot, IntentMatch, TraumaIndicators
from intake.utils.intent_templates import (
    INTENT_MILESTONE,
    NARRATIVE_INTENTS,
    PERSONAL_INFO_INTENTS,
    STAGE_REPLY_INTENT,
    Intent,
    iter_templates,
)
from intake.utils.lexicons import (
    AFFIRMATIVE_REPLIES,
    NAME_STOPWORDS,
    NEGATIVE_REPLIES,
    UNCERTAIN_REPLIES,
    is_name_word,
)

logger = logging.getLogger(__name__)

NUMBER_TOKEN = "num"

_NON_WORD = re.compile(r"[^\w\s]")
_DIGITS = re.compile(r"\d+")

BARE_NUMBER = re.compile(r"^\s*(\d{1,3})\s*$")
NUMBER_YEARS_OLD = re.compile(r"^\s*(?:i'?m |i am )?(\d{1,3})\s*(?:years?|yrs?)(?:\s*old)?\s*$")
BARE_ALPHA_PHRASE = re.compile(r"^\s*([a-z][a-z'-]*(?:\s+[a-z][a-z'-]*){0,3})\s*$")
TIME_KEYWORDS = re.compile(
    r"\b(?:yesterday|today|tonight|last (?:night|week|month|year)|this (?:morning|afternoon|evening)|"
    r"ago|earlier|recently|the other day|fortnight|monday|tuesday|wednesday|thursday|friday|"
    r"saturday|sunday|\d{1,2}[:.]\d{2}|\d{1,2}\s*(?:am|pm)|\d{1,2}/\d{1,2}/\d{4})\b"
)

# Looser cues, trusted only once the matching personal-info intent has been seen
AGE_HINT = re.compile(r"\d.*\b(?:old|age)\b|\b(?:old|age)\b.*\d")
TIME_HINT = re.compile(r"\b(?:yesterday|today|last|ago|when|time|date|morning|afternoon|evening|night)\b")

NAME_INTRO = re.compile(
    r"\b(?:my name is|my name's|my names|call me|i'm called|i am called|this is|i'm|i am|im)\s+([a-z][a-z'-]*)"
)
CONTACT_DETAILS = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+|(?:\+?\d[\d\s-]{8,14}\d)")

# Regex rules, in priority order: help > personal info > timing > location > suspect,
# then the remaining report sections
REGEX_RULES: List[Tuple[str, re.Pattern]] = [
    (Intent.REQUEST_HELP.value, re.compile(
        r"\b(?:help|support|need someone|what (?:should|do) i do|advice|not safe)\b")),
    (Intent.PROVIDE_TIMING.value, TIME_KEYWORDS),
    (Intent.PROVIDE_LOCATION.value, re.compile(
        r"\b(?:happened (?:in|at|near|on)|i was (?:at|near|outside|in the)|near the|outside the|"
        r"station|park|street|road|shop\w*|mall|toilets?|bathroom)\b")),
    (Intent.PROVIDE_SUSPECT.value, re.compile(
        r"\b(?:his name|her name|know who|stranger|registration|number plate|driving|"
        r"(?:he|she) (?:was|looked) (?:about|around|tall|short|wearing)|wearing|beard)\b")),
    (Intent.PROVIDE_EVIDENCE.value, re.compile(
        r"\b(?:photos?|pictures?|videos?|recorded|recording|footage|cctv|cameras?|screenshots?|evidence)\b")),
    (Intent.PROVIDE_WITNESSES.value, re.compile(
        r"\b(?:witness\w*|saw (?:it|what happened)|no one saw|nobody saw|someone (?:else )?saw|people saw)\b")),
    (Intent.PROVIDE_PUBLIC_TRANSPORT.value, re.compile(
        r"\b(?:bus|train|tube|tram|oyster|contactless|public transport|underground)\b")),
    (Intent.VULNERABILITY_CONTEXT.value, re.compile(
        r"\b(?:alone|by myself|on my own|wheelchair|disab\w*|mobility)\b")),
]


def tokenize(text: str) -> List[str]:
    """
    Lower-case, replace non-word characters with spaces, map digit runs to one token

    Examples:
        >>> tokenize("I'm 15!")
        ['i', 'm', 'num']
    """
    lowered = _NON_WORD.sub(' ', text.lower())
    lowered = _DIGITS.sub(f' {NUMBER_TOKEN} ', lowered)
    return lowered.split()


# =============================================================================
# Similarity backends
# =============================================================================

class TfidfSimilarity:
    """
    TF-IDF cosine similarity over the intent template table.

    A scikit-learn TfidfVectorizer is fitted on the template phrases with
    the module tokenizer, so digit runs share one token. Query tokens that
    never appear in a template are weighted like the rarest template
    token, so unfamiliar words dilute a match instead of being ignored.
    """

    def __init__(self, templates=None):
        """
        Fit the vectorizer and the template matrix

        Args:
            templates: Iterable of (intent, phrase) pairs. Defaults to the
                       registry in intake.utils.intent_templates.
        """
        pairs = list(templates if templates is not None else iter_templates())
        if not pairs:
            raise ValueError("TfidfSimilarity requires at least one template")

        self.intents = [intent for intent, _phrase in pairs]
        self.vectorizer = TfidfVectorizer(
            tokenizer=tokenize,
            lowercase=False,
            token_pattern=None,
            smooth_idf=False,
            norm=None,
        )
        self.template_matrix = self.vectorizer.fit_transform([phrase for _i, phrase in pairs])
        self.vocabulary = self.vectorizer.vocabulary_
        self.unknown_idf = float(self.vectorizer.idf_.max())

        logger.info(f"TF-IDF backend initialized: {len(self.intents)} templates, "
                    f"{len(self.vocabulary)} tokens")

    def best_match(self, text: str) -> Tuple[Optional[str], float]:
        """
        Score every template and return the best one

        Args:
            text: Sanitized utterance

        Returns:
            (intent, cosine similarity). (None, 0.0) when no token is known.
            Ties go to the earlier template.
        """
        tokens = tokenize(text)
        if not tokens:
            return None, 0.0

        query = self.vectorizer.transform([text])
        known_norm = float(query.multiply(query).sum()) ** 0.5
        if known_norm == 0:
            return None, 0.0

        unknown = Counter(token for token in tokens if token not in self.vocabulary)
        unknown_weight = sum((count * self.unknown_idf) ** 2 for count in unknown.values())
        dilution = known_norm / (known_norm ** 2 + unknown_weight) ** 0.5

        scores = cosine_similarity(query, self.template_matrix)[0] * dilution
        best = int(scores.argmax())
        best_score = float(scores[best])
        if best_score <= 0:
            return None, 0.0
        return self.intents[best], round(best_score, 4)


class EmbeddingSimilarity:
    """
    Cosine similarity over sentence embeddings.

    Wraps any client exposing encode(list_of_texts) -> list of vectors
    (see intake.utils.embedding_client.SentenceEmbeddingClient).
    Template embeddings are computed once at construction.
    """

    def __init__(self, client, templates=None):
        if not callable(getattr(client, 'encode', None)):
            raise TypeError("embedding client must have callable encode() method")
        pairs = list(templates if templates is not None else iter_templates())
        self.client = client
        self.intents = [intent for intent, _phrase in pairs]
        self.template_vectors = [list(vector) for vector in client.encode([p for _i, p in pairs])]
        logger.info(f"Embedding backend initialized: {len(self.template_vectors)} templates")

    def best_match(self, text: str) -> Tuple[Optional[str], float]:
        query = list(self.client.encode([text])[0])
        if not self.template_vectors or not any(query):
            return None, 0.0

        scores = cosine_similarity([query], self.template_vectors)[0]
        best = int(scores.argmax())
        best_score = float(scores[best])
        if best_score <= 0:
            return None, 0.0
        return self.intents[best], round(best_score, 4)


# =============================================================================
# Classifier
# =============================================================================

class _Turn:
    """Per-call resolution context"""

    def __init__(self, text, indicators, snapshot, candidate, score):
        self.text = text
        self.lowered = text.lower().replace('’', "'")
        self.indicators = indicators
        self.snapshot = snapshot
        self.candidate = candidate
        self.score = score

    def known(self, milestone: str) -> bool:
        return bool(self.snapshot.progress.get(milestone, False))

    @property
    def is_bare_reply(self) -> bool:
        stripped = self.lowered.strip(' .!?')
        return bool(BARE_NUMBER.match(stripped)) or stripped in AFFIRMATIVE_REPLIES \
            or stripped in NEGATIVE_REPLIES


class IntentClassifier:
    """
    Resolves the intent of one utterance.

    Usage:
        classifier = IntentClassifier()
        match = classifier.classify(text, indicators, snapshot)
    """

    RESOLUTION_ORDER = [
        'complex_trauma',
        'incident_continuation',
        'incident_report',
        'uncertain',
        'semantic_accept',
        'context',
        'semantic_fallback',
        'regex',
        'default',
    ]

    def __init__(self, backend=None, config: Optional[EngineConfig] = None):
        """
        Initialize classifier

        Args:
            backend: Similarity backend with best_match(text). Defaults to TfidfSimilarity.
            config: EngineConfig (thresholds and confidences)

        Raises:
            TypeError: If backend has no callable best_match()
        """
        self.backend = backend if backend is not None else TfidfSimilarity()
        if not callable(getattr(self.backend, 'best_match', None)):
            raise TypeError("similarity backend must have callable best_match() method")
        self.config = config or EngineConfig()
        self.rules = [(name, getattr(self, f"_rule_{name}")) for name in self.RESOLUTION_ORDER]
        logger.info(f"Intent classifier initialized with {type(self.backend).__name__}")

    # ========================
    # Public API
    # ========================

    def classify(self, text: str, indicators: TraumaIndicators,
                 snapshot: ConversationSnapshot) -> IntentMatch:
        """
        Resolve the intent of an utterance

        Args:
            text: Sanitized utterance
            indicators: Indicators detected for this utterance
            snapshot: Read-only session state before this turn

        Returns:
            IntentMatch (intent, confidence, rule name)
        """
        candidate, score = self._semantic_candidate(text)
        turn = _Turn(text, indicators, snapshot, candidate, score)

        for name, rule in self.rules:
            match = rule(turn)
            if match is not None:
                logger.debug(f"Intent resolved by rule '{name}': {match.intent} ({match.confidence:.2f})")
                return match

        # Unreachable: the default rule always matches
        return IntentMatch(Intent.GENERAL_CONVERSATION.value, self.config.default_confidence, 'default')

    def _semantic_candidate(self, text: str) -> Tuple[Optional[str], float]:
        if not text:
            return None, 0.0
        try:
            return self.backend.best_match(text)
        except Exception as e:
            logger.error(f"Similarity backend failed, using regex rules only: {type(e).__name__}")
            return None, 0.0

    # ========================
    # Resolution rules
    # ========================

    def _rule_complex_trauma(self, turn: _Turn) -> Optional[IntentMatch]:
        if not turn.indicators.has_complex_trauma:
            return None
        intent = (Intent.CONTINUE_INCIDENT_NARRATIVE if turn.known('narrative')
                  else Intent.REPORT_INCIDENT)
        return IntentMatch(intent.value, max(turn.score, 0.8), 'complex_trauma')

    def _rule_incident_continuation(self, turn: _Turn) -> Optional[IntentMatch]:
        if not turn.known('narrative'):
            return None
        ind = turn.indicators
        if turn.candidate in NARRATIVE_INTENTS or ind.has_incident \
                or ind.has_physical_contact or ind.has_threat:
            return IntentMatch(Intent.CONTINUE_INCIDENT_NARRATIVE.value,
                               max(turn.score, 0.8), 'incident_continuation')
        return None

    def _rule_incident_report(self, turn: _Turn) -> Optional[IntentMatch]:
        if turn.known('narrative'):
            return None
        ind = turn.indicators
        if ind.has_physical_contact or (ind.has_incident and (
                ind.has_threat
                or turn.candidate in NARRATIVE_INTENTS
                or turn.candidate in PERSONAL_INFO_INTENTS)):
            return IntentMatch(Intent.REPORT_INCIDENT.value, max(turn.score, 0.75), 'incident_report')
        return None

    def _rule_uncertain(self, turn: _Turn) -> Optional[IntentMatch]:
        if turn.lowered.strip(' .!?') not in UNCERTAIN_REPLIES:
            return None
        return IntentMatch(Intent.GENERAL_CONVERSATION.value,
                           self.config.context_confidence, 'uncertain')

    def _accepts_candidate(self, turn: _Turn) -> bool:
        return (turn.candidate is not None
                and turn.candidate != Intent.GENERAL_CONVERSATION.value
                and turn.score >= self.config.similarity_threshold)

    def _rule_semantic_accept(self, turn: _Turn) -> Optional[IntentMatch]:
        # Bare numbers and yes/no carry no meaning on their own; context decides
        if turn.is_bare_reply or not self._accepts_candidate(turn):
            return None
        milestone = INTENT_MILESTONE.get(turn.candidate)
        if milestone and turn.known(milestone):
            return None
        return IntentMatch(turn.candidate, turn.score, 'semantic_accept')

    def _rule_context(self, turn: _Turn) -> Optional[IntentMatch]:
        stripped = turn.lowered.strip(' .!?')
        confidence = self.config.context_confidence

        is_number = bool(BARE_NUMBER.match(stripped) or NUMBER_YEARS_OLD.match(stripped))
        if is_number and not turn.known('age'):
            return IntentMatch(Intent.PROVIDE_AGE.value, confidence, 'context')

        if turn.known('age') and not turn.known('timing') and (
                BARE_NUMBER.match(stripped) or TIME_KEYWORDS.search(stripped)):
            return IntentMatch(Intent.PROVIDE_TIMING.value, confidence, 'context')

        # Cues keyed to an earlier turn's intent
        previous = turn.snapshot.previous_intents
        if Intent.PROVIDE_NAME.value in previous and not turn.known('age') \
                and AGE_HINT.search(stripped):
            return IntentMatch(Intent.PROVIDE_AGE.value, confidence, 'context')
        if Intent.PROVIDE_AGE.value in previous and not turn.known('timing') \
                and TIME_HINT.search(stripped):
            return IntentMatch(Intent.PROVIDE_TIMING.value, confidence, 'context')

        if turn.known('name') and turn.known('age') and not turn.known('location') \
                and _is_bare_phrase(stripped):
            return IntentMatch(Intent.PROVIDE_LOCATION.value, confidence, 'context')

        if stripped in AFFIRMATIVE_REPLIES or stripped in NEGATIVE_REPLIES:
            intent = STAGE_REPLY_INTENT.get(turn.snapshot.stage)
            if intent:
                return IntentMatch(intent, confidence, 'context')

        return None

    def _rule_semantic_fallback(self, turn: _Turn) -> Optional[IntentMatch]:
        if turn.is_bare_reply or not self._accepts_candidate(turn):
            return None
        return IntentMatch(turn.candidate, turn.score, 'semantic_fallback')

    def _rule_regex(self, turn: _Turn) -> Optional[IntentMatch]:
        text = turn.lowered
        stripped = text.strip(' .!?')
        confidence = self.config.regex_confidence

        help_intent, help_pattern = REGEX_RULES[0]
        if help_pattern.search(text):
            return IntentMatch(help_intent, confidence, 'regex')

        # Personal info
        if any(is_name_word(m.group(1)) for m in NAME_INTRO.finditer(text)):
            return IntentMatch(Intent.PROVIDE_NAME.value, confidence, 'regex')
        if _is_bare_name(stripped):
            return IntentMatch(Intent.PROVIDE_NAME.value, confidence, 'regex')
        number = BARE_NUMBER.match(stripped) or NUMBER_YEARS_OLD.match(stripped)
        if number and 1 <= int(number.group(1)) <= 120:
            return IntentMatch(Intent.PROVIDE_AGE.value, confidence, 'regex')
        if CONTACT_DETAILS.search(text):
            return IntentMatch(Intent.PROVIDE_CONTACT.value, confidence, 'regex')

        for intent, pattern in REGEX_RULES[1:]:
            if pattern.search(text):
                return IntentMatch(intent, confidence, 'regex')
        return None

    def _rule_default(self, turn: _Turn) -> Optional[IntentMatch]:
        confidence = self.config.default_confidence
        if turn.candidate == Intent.GENERAL_CONVERSATION.value \
                and turn.score >= self.config.similarity_threshold:
            confidence = turn.score
        return IntentMatch(Intent.GENERAL_CONVERSATION.value, confidence, 'default')


def _is_bare_name(text: str) -> bool:
    """One or two alphabetic tokens, none of them a stopword"""
    tokens = text.split()
    if not 1 <= len(tokens) <= 2:
        return False
    return all(token.isalpha() and is_name_word(token) for token in tokens)


def _is_bare_phrase(text: str) -> bool:
    """Short alphabetic phrase that does not end in a stopword"""
    match = BARE_ALPHA_PHRASE.match(text)
    if not match:
        return False
    tokens = match.group(1).split()
    return tokens[-1] not in NAME_STOPWORDS and not all(t in NAME_STOPWORDS for t in tokens)
