"""
Response Selector - Ordered rule table choosing the assistant's reply

Responsibilities:
- Evaluate response rules in fixed priority order; first hit wins
- Personalize template text with the stored first name
- Skip any candidate contained in a response from the recent-question window

Design principles:
- Stateless: reads the post-merge snapshot, never writes state
- Rules are methods named _rule_<name>; RULE_ORDER is the single source
  of precedence
- Every rule returns a complete response or None

Rule order:
1. milestone_transition   - a chain milestone was just completed
2. incident_probe         - incident disclosed, location known, no narrative yet
3. narrative_continuation - new detail after the narrative, then move on
4. complex_trauma         - entrapment / stalking / threats acknowledgement
5. minor_alone            - young person alone, narrative unknown
6. next_milestone         - first unmet milestone question (rotated variant)
7. risk_fallback          - (intent, risk) table, else generic support
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

from intake.contracts import ConversationSnapshot, TraumaIndicators
from intake.core.indicator_detector import detect_complex_trauma_type
from intake.core.question_selector import was_asked
from intake.utils.conversation_stages import ConversationStage
from intake.utils.field_schema import classify_field
from intake.utils.intent_templates import NARRATIVE_INTENTS, Intent
from intake.utils.response_templates import (
    ACKNOWLEDGEMENTS,
    COMPLETION_TEXT,
    DEFAULT_SUPPORTIVE_RESPONSE,
    RESPONSE_TABLE,
    TRANSITION_QUESTIONS,
    ResponseTemplateID,
    render,
)

logger = logging.getLogger(__name__)

# Milestones whose completion triggers an immediate follow-on question
TRANSITION_CHAIN = ['name', 'age', 'timing', 'location', 'narrative', 'evidence']

VERBAL_WORDS = re.compile(
    r"\b(?:said|say|saying|shout\w*|yell\w*|scream\w*|swore|swearing|called me|"
    r"comment\w*|whistl\w*|catcall\w*|insult\w*|remark\w*|names)\b"
)
VIOLENCE_WORDS = re.compile(
    r"\b(?:hit|punch\w*|kick\w*|slap\w*|push\w*|shov\w*|chok\w*|strangl\w*|"
    r"attack\w*|beat|beaten|hurt|grab\w*|threw|thrown|injur\w*|bruis\w*|bleed\w*)\b"
)

COMPLEX_ACKNOWLEDGEMENTS: Dict[str, ResponseTemplateID] = {
    'entrapment': ResponseTemplateID.COMPLEX_ENTRAPMENT,
    'stalking': ResponseTemplateID.COMPLEX_STALKING,
    'threats': ResponseTemplateID.COMPLEX_THREATS,
}


@dataclass(frozen=True)
class SelectedResponse:
    """
    Response chosen for a turn.

    Attributes:
        text: Text to show the user
        rule: Name of the rule that produced it (debug logging only)
    """
    text: str
    rule: str


class _Context:
    """Inputs shared by every rule for one turn"""

    def __init__(self, snapshot, new_fields, risk_level, indicators, intent, text):
        self.snapshot = snapshot
        self.new_fields = new_fields
        self.risk_level = risk_level
        self.indicators = indicators
        self.intent = intent
        self.text = (text or '').lower().replace('’', "'")
        self.name = snapshot.accumulated.get('first_name')
        self.newly_completed = {classify_field(f) for f in new_fields} - {None}

    def known(self, milestone: str) -> bool:
        return self.snapshot.progress.get(milestone, False)

    def narrative_known_before(self) -> bool:
        return self.known('narrative') and 'incident_narrative' not in self.new_fields

    def is_recent(self, text: str) -> bool:
        return was_asked(text, self.snapshot.recent_questions)


class ResponseSelector:
    """
    Chooses the response text for a processed turn.

    Usage:
        selector = ResponseSelector(QuestionSelector())
        selected = selector.select(snapshot, new_fields, 'low', indicators, intent, text)
    """

    RULE_ORDER = [
        'milestone_transition',
        'incident_probe',
        'narrative_continuation',
        'complex_trauma',
        'minor_alone',
        'next_milestone',
        'risk_fallback',
    ]

    def __init__(self, question_selector):
        """
        Args:
            question_selector: QuestionSelector used for unmet milestones
                               and variant rotation

        Raises:
            TypeError: If question_selector lacks the required methods
        """
        for method in ('first_unmet_milestone', 'choose_variant'):
            if not callable(getattr(question_selector, method, None)):
                raise TypeError(f"question_selector must have callable {method}() method")
        self.question_selector = question_selector
        self._rules = [(name, getattr(self, f"_rule_{name}")) for name in self.RULE_ORDER]

        logger.info("Response Selector initialized")

    # ========================
    # Public API
    # ========================

    def select(self, snapshot: ConversationSnapshot, new_fields: Dict[str, str],
               risk_level: str, indicators: TraumaIndicators, intent: str,
               text: str = '') -> SelectedResponse:
        """
        Choose the response for this turn

        Args:
            snapshot: Session state after this turn's merge
            new_fields: Fields merged this turn
            risk_level: 'low', 'medium' or 'high'
            indicators: Indicators for this utterance
            intent: Resolved intent
            text: Sanitized utterance (inspected, never logged)

        Returns:
            SelectedResponse
        """
        context = _Context(snapshot, new_fields, str(getattr(risk_level, 'value', risk_level)),
                           indicators, intent, text)
        for name, rule in self._rules:
            response = rule(context)
            if response:
                logger.debug(f"Response rule: {name}")
                return SelectedResponse(text=response, rule=name)

        # risk_fallback always answers; kept for subclasses that reorder rules
        return SelectedResponse(text=DEFAULT_SUPPORTIVE_RESPONSE, rule='default')

    # ========================
    # Rules
    # ========================

    def _rule_milestone_transition(self, ctx: _Context) -> Optional[str]:
        for i, milestone in enumerate(TRANSITION_CHAIN[:-1]):
            if milestone not in ctx.newly_completed:
                continue
            successor = TRANSITION_CHAIN[i + 1]
            if all(ctx.known(m) for m in TRANSITION_CHAIN[:i + 1]) and not ctx.known(successor):
                question = render(TRANSITION_QUESTIONS[successor], ctx.name)
                if not ctx.is_recent(question):
                    return question

        if 'contact' in ctx.newly_completed and ctx.snapshot.stage == ConversationStage.COMPLETE.value:
            if not ctx.is_recent(COMPLETION_TEXT):
                return COMPLETION_TEXT
        return None

    def _rule_incident_probe(self, ctx: _Context) -> Optional[str]:
        indicators = ctx.indicators
        disclosing = (indicators.has_incident or indicators.has_physical_contact
                      or indicators.has_threat or ctx.intent in NARRATIVE_INTENTS)
        if not disclosing or not ctx.known('location') or ctx.narrative_known_before():
            return None

        if indicators.has_physical_contact:
            template = ResponseTemplateID.PROBE_PHYSICAL
        elif VERBAL_WORDS.search(ctx.text):
            template = ResponseTemplateID.PROBE_VERBAL
        else:
            template = ResponseTemplateID.PROBE_GENERAL
        response = ACKNOWLEDGEMENTS[template]
        return None if ctx.is_recent(response) else response

    def _rule_narrative_continuation(self, ctx: _Context) -> Optional[str]:
        if ctx.intent != Intent.CONTINUE_INCIDENT_NARRATIVE.value or not ctx.narrative_known_before():
            return None

        if VIOLENCE_WORDS.search(ctx.text):
            template = ResponseTemplateID.CONTINUE_VIOLENCE
        elif ctx.indicators.has_threat or detect_complex_trauma_type(ctx.text) == 'threats':
            template = ResponseTemplateID.CONTINUE_THREATS
        else:
            template = ResponseTemplateID.CONTINUE_GENERAL

        recent = ctx.snapshot.recent_questions
        if not ctx.known('evidence'):
            question = self.question_selector.choose_variant('evidence', recent, ctx.name)
        else:
            milestone = self.question_selector.first_unmet_milestone(ctx.snapshot)
            if milestone is None:
                question = COMPLETION_TEXT
            else:
                question = self.question_selector.choose_variant(milestone, recent, ctx.name)

        # New detail is always acknowledged; choose_variant already rotated the question
        return f"{ACKNOWLEDGEMENTS[template]} {question}"

    def _rule_complex_trauma(self, ctx: _Context) -> Optional[str]:
        trauma_type = detect_complex_trauma_type(ctx.text)
        if trauma_type is None:
            return None
        response = ACKNOWLEDGEMENTS[COMPLEX_ACKNOWLEDGEMENTS[trauma_type]]
        return None if ctx.is_recent(response) else response

    def _rule_minor_alone(self, ctx: _Context) -> Optional[str]:
        fields = ctx.snapshot.accumulated
        age = fields.get('age')
        minor = fields.get('under18') == 'Yes' or (age is not None and str(age).isdigit() and int(age) < 18)
        alone = fields.get('vulnerability_context') == 'alone' or fields.get('alone_when_incident') == 'Yes'
        if not (minor and alone) or ctx.known('narrative'):
            return None

        if fields.get('disability') == 'Yes':
            details = (fields.get('health_issues_details') or '').lower()
            if 'wheelchair' in details:
                template = ResponseTemplateID.MINOR_ALONE_WHEELCHAIR
            else:
                template = ResponseTemplateID.MINOR_ALONE_DISABLED
        else:
            template = ResponseTemplateID.MINOR_ALONE
        response = ACKNOWLEDGEMENTS[template]
        return None if ctx.is_recent(response) else response

    def _rule_next_milestone(self, ctx: _Context) -> Optional[str]:
        milestone = self.question_selector.first_unmet_milestone(ctx.snapshot)
        if milestone is None:
            return None if ctx.is_recent(COMPLETION_TEXT) else COMPLETION_TEXT
        return self.question_selector.choose_variant(milestone, ctx.snapshot.recent_questions, ctx.name)

    def _rule_risk_fallback(self, ctx: _Context) -> Optional[str]:
        return RESPONSE_TABLE.get(ctx.intent, {}).get(ctx.risk_level, DEFAULT_SUPPORTIVE_RESPONSE)
