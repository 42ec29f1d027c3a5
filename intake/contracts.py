"""
Semantic contracts for the trauma-sensitive intake engine.

This module defines immutable data structures that serve as contracts
between modules. These are NOT validators - they define shape and
semantics without enforcing rules.

Design principles:
- Frozen dataclasses (immutable after creation)
- No validation logic (contracts, not validators)
- No dependencies on other modules
- Definition layer only (no enforcement)

Contents:
- TraumaIndicators: Per-utterance boolean signal set
- IntentMatch: Resolved intent with confidence and the rule that produced it
- QuestionOutput: Immutable question representation from Question Selector
- ConversationSnapshot: Read-only copy of one session's conversation state
- ProcessedTurn: Output of a single engine invocation

Usage:
    from intake.contracts import TraumaIndicators, ProcessedTurn
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TraumaIndicators:
    """
    Boolean signals detected in a single utterance.

    Computed fresh for every utterance by the Indicator Detector and never
    stored in session state. has_complex_trauma is a distinct composite
    (entrapment, surveillance, explicit threat) and is never folded into
    has_threat.

    Attributes:
        has_incident: Mentions of something happening to the person
        has_threat: Threatening language or weapons
        has_urgency: Ongoing danger or need for immediate help
        has_vulnerability: Age, disability or being alone
        has_location: Place or location-type keywords
        has_timing: Relative or explicit date/time expressions
        has_perpetrator: References to another person
        has_physical_contact: Contact verbs in any tense
        has_emotional_distress: Fear, panic, crying, shock
        has_complex_trauma: Entrapment, stalking or explicit threat phrasing

    Examples:
        >>> indicators = TraumaIndicators(has_incident=True)
        >>> indicators.has_threat
        False
    """
    has_incident: bool = False
    has_threat: bool = False
    has_urgency: bool = False
    has_vulnerability: bool = False
    has_location: bool = False
    has_timing: bool = False
    has_perpetrator: bool = False
    has_physical_contact: bool = False
    has_emotional_distress: bool = False
    has_complex_trauma: bool = False


@dataclass(frozen=True)
class IntentMatch:
    """
    Resolved intent for one utterance.

    Attributes:
        intent: Intent label (see Intent enum)
        confidence: Confidence score 0.0-1.0
        rule: Name of the resolution rule that produced this match.
              Used for debug logging only.
    """
    intent: str
    confidence: float
    rule: str


@dataclass(frozen=True)
class QuestionOutput:
    """
    Immutable question representation returned by Question Selector.

    Attributes:
        milestone: Milestone the question targets ('name', 'age', ...).
                   None once every milestone is satisfied.
        stage: Conversation stage the question belongs to
        question: Canonical question text, personalized with the stored
                  first name where the template allows it
    """
    milestone: Optional[str]
    stage: str
    question: str


@dataclass(frozen=True)
class ConversationSnapshot:
    """
    Read-only deep copy of one session's ConversationState.

    The only form in which components other than the state container
    see session state. Mutating the dict members has no effect on the
    session.

    Attributes:
        session_id: Session identifier
        progress: Milestone name -> satisfied flag
        stage: Current conversation stage
        accumulated: Merged report fields (preserve-first)
        recent_questions: Last emitted responses, oldest first
        complex_trauma_detected: Sticky flag, set once any turn shows complex trauma
        previous_intents: Recent intents, oldest first
        turn_count: Number of processed turns
    """
    session_id: str
    progress: Dict[str, bool]
    stage: str
    accumulated: Dict[str, str]
    recent_questions: Tuple[str, ...] = ()
    complex_trauma_detected: bool = False
    previous_intents: Tuple[str, ...] = ()
    turn_count: int = 0


@dataclass(frozen=True)
class ProcessedTurn:
    """
    Result of processing a single utterance.

    Created fresh per call and handed to the caller (chat transport,
    console harness). Never holds user text other than the response.

    Attributes:
        sentiment: Sentiment score in [-1, 1]
        intent: Resolved intent label
        extracted_fields: Fields newly merged into the session this turn
        risk_level: 'low', 'medium' or 'high'
        response: Text to show the user
        indicators: Trauma indicators for this utterance
        confidence: Turn confidence in [0, 1]
        response_id: Unique hex identifier for caller-side de-duplication
        next_question: Canonical question for the first unmet milestone
        progress: Post-turn milestone flags
        stage: Post-turn conversation stage
    """
    sentiment: float
    intent: str
    extracted_fields: Dict[str, str]
    risk_level: str
    response: str
    indicators: TraumaIndicators
    confidence: float
    response_id: str
    next_question: Optional[str] = None
    progress: Dict[str, bool] = field(default_factory=dict)
    stage: str = "introduction"
