"""
Dialogue Manager - Per-turn orchestration of the intake pipeline

Responsibilities:
- Run one utterance through sanitize -> detect -> classify -> extract ->
  merge -> assess -> respond
- Hold the session lock for the whole turn
- Return a ProcessedTurn, falling back to a supportive message on failure
- Reset sessions and expose read-only snapshots

Design principles:
- Thin orchestration layer (business logic lives in the specialised modules)
- Collaborators are injected and interface-checked at construction
- State is merged only after classification and extraction succeed
- Logs metadata only: intent, rule, risk, confidence, stage, field and
  indicator names. Never user text or field values.
"""

import logging
from typing import Optional

from intake.config import EngineConfig
from intake.contracts import ConversationSnapshot, ProcessedTurn, TraumaIndicators
from intake.core.indicator_detector import active_indicators, detect_indicators
from intake.core.risk_assessor import RiskLevel, assess_risk
from intake.core.sentiment_scorer import score_sentiment
from intake.utils.helpers import calculate_confidence, generate_response_id
from intake.utils.intent_templates import Intent
from intake.utils.response_templates import FALLBACK_RESPONSE
from intake.utils.sanitizer import sanitize_input

logger = logging.getLogger(__name__)


class IntakeDialogueManager:
    """
    Orchestrates one conversational intake turn at a time

    Usage:
        store = SessionStore()
        questions = QuestionSelector()
        manager = IntakeDialogueManager(store, IntentClassifier(), SlotExtractor(),
                                        ResponseSelector(questions), questions)
        turn = manager.process(session_id, "Hi, I'm Dorothy")
    """

    def __init__(self, session_store, intent_classifier, slot_extractor,
                 response_selector, question_selector, config: Optional[EngineConfig] = None):
        """
        Initialize Dialogue Manager with collaborator instances

        Args:
            session_store: SessionStore owned by the caller
            intent_classifier: IntentClassifier instance (stateless)
            slot_extractor: SlotExtractor instance (stateless)
            response_selector: ResponseSelector instance (stateless)
            question_selector: QuestionSelector instance (stateless)
            config: EngineConfig (defaults to EngineConfig())

        Raises:
            TypeError: If any collaborator lacks its required method
        """
        self._validate_modules(session_store, intent_classifier, slot_extractor,
                               response_selector, question_selector)

        self.store = session_store
        self.classifier = intent_classifier
        self.extractor = slot_extractor
        self.responder = response_selector
        self.selector = question_selector
        self.config = config or EngineConfig()

        logger.info("Intake Dialogue Manager initialized")

    def _validate_modules(self, session_store, intent_classifier, slot_extractor,
                          response_selector, question_selector):
        """Validate module interfaces"""
        if not callable(getattr(session_store, 'get_or_create', None)):
            raise TypeError("session_store must have callable get_or_create() method")

        if not callable(getattr(intent_classifier, 'classify', None)):
            raise TypeError("intent_classifier must have callable classify() method")

        if not callable(getattr(slot_extractor, 'extract', None)):
            raise TypeError("slot_extractor must have callable extract() method")

        if not callable(getattr(response_selector, 'select', None)):
            raise TypeError("response_selector must have callable select() method")

        if not callable(getattr(question_selector, 'get_next_question', None)):
            raise TypeError("question_selector must have callable get_next_question() method")

    # ========================
    # Public API
    # ========================

    def process(self, session_id: str, utterance) -> ProcessedTurn:
        """
        Process one user utterance

        Never raises: any failure inside the pipeline is logged by
        exception type and answered with FALLBACK_RESPONSE.

        Args:
            session_id: Session identifier (created on first use)
            utterance: Raw user text

        Returns:
            ProcessedTurn
        """
        try:
            self.store.evict_expired()
        except Exception as e:
            logger.warning(f"Session eviction failed: {type(e).__name__}")

        state = self.store.get_or_create(session_id)
        with state.lock:
            try:
                return self._process_turn(state, utterance)
            except Exception as e:
                logger.error(f"Turn processing failed for session {session_id}: {type(e).__name__}")
                return self._fallback_turn(state)

    def reset_session(self, session_id: str) -> None:
        """Clear a session's state. Unknown ids are a no-op."""
        self.store.reset_session(session_id)

    def get_snapshot(self, session_id: str) -> Optional[ConversationSnapshot]:
        """Read-only view of a session, or None if it does not exist"""
        state = self.store.get(session_id)
        if state is None:
            return None
        with state.lock:
            return state.snapshot()

    # ========================
    # Pipeline
    # ========================

    def _process_turn(self, state, utterance) -> ProcessedTurn:
        text = sanitize_input(utterance)
        indicators = detect_indicators(text)
        sentiment = score_sentiment(text)

        before = state.snapshot()
        match = self.classifier.classify(text, indicators, before)
        extracted = self.extractor.extract(text, match.intent, indicators, before.accumulated)

        # Nothing is written to the session before this point
        merged = state.merge_fields(extracted)
        if indicators.has_complex_trauma:
            state.mark_complex_trauma()
        state.record_intent(match.intent)

        risk = assess_risk(indicators, match.intent, state.accumulated)

        after = state.snapshot()
        selected = self.responder.select(after, merged, risk.value, indicators, match.intent, text)
        state.record_question(selected.text)

        next_question = self.selector.get_next_question(state.snapshot())
        confidence = calculate_confidence(match.confidence, merged, text, self.config.max_confidence)
        state.touch()

        logger.info(
            f"Session {state.session_id} turn {state.turn_count}: intent={match.intent} "
            f"rule={match.rule} risk={risk.value} confidence={confidence:.2f} stage={state.stage} "
            f"response={selected.rule} fields={sorted(merged)} indicators={active_indicators(indicators)}"
        )

        return ProcessedTurn(
            sentiment=sentiment,
            intent=match.intent,
            extracted_fields=dict(merged),
            risk_level=risk.value,
            response=selected.text,
            indicators=indicators,
            confidence=confidence,
            response_id=generate_response_id(),
            next_question=next_question.question,
            progress=dict(state.progress),
            stage=state.stage,
        )

    def _fallback_turn(self, state) -> ProcessedTurn:
        """Neutral turn carrying the supportive fallback message"""
        return ProcessedTurn(
            sentiment=0.0,
            intent=Intent.GENERAL_CONVERSATION.value,
            extracted_fields={},
            risk_level=RiskLevel.LOW.value,
            response=FALLBACK_RESPONSE,
            indicators=TraumaIndicators(),
            confidence=0.0,
            response_id=generate_response_id(),
            next_question=None,
            progress=dict(state.progress),
            stage=state.stage,
        )
