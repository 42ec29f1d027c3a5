"""
Engine wiring.

Builds an IntakeDialogueManager with its collaborators so that every
caller (Flask app, console harness, tests) assembles the engine the same
way and owns its own SessionStore.

Usage:
    from intake.engine import build_dialogue_manager
    dm = build_dialogue_manager(EngineConfig.from_env())
"""

import logging

from intake.config import EngineConfig
from intake.core.dialogue_manager import IntakeDialogueManager
from intake.core.intent_classifier import EmbeddingSimilarity, IntentClassifier
from intake.core.question_selector import QuestionSelector
from intake.core.response_selector import ResponseSelector
from intake.core.slot_extractor import SlotExtractor
from intake.core.state_manager import SessionStore

logger = logging.getLogger(__name__)


def build_dialogue_manager(config=None, session_store=None, clock=None):
    """
    Wire up the engine

    Loads the sentence-embedding backend only when a model is configured;
    if it cannot be loaded the TF-IDF backend is used instead.

    Args:
        config: EngineConfig (defaults to EngineConfig())
        session_store: SessionStore to use (a new one is created if omitted)
        clock: Callable returning "now", shared by the store and extractor

    Returns:
        IntakeDialogueManager
    """
    config = config or EngineConfig()
    store = session_store or SessionStore(
        ttl_hours=config.session_ttl_hours,
        recent_capacity=config.recent_question_capacity,
        intent_capacity=config.previous_intent_capacity,
        clock=clock,
    )

    backend = None
    if config.embedding_model:
        try:
            # Heavy import (torch); only paid when embeddings are enabled
            from intake.utils.embedding_client import SentenceEmbeddingClient
            backend = EmbeddingSimilarity(SentenceEmbeddingClient(config.embedding_model))
        except Exception as e:
            logger.warning(f"Embedding backend unavailable, using TF-IDF: {type(e).__name__}")

    questions = QuestionSelector()
    return IntakeDialogueManager(
        session_store=store,
        intent_classifier=IntentClassifier(backend=backend, config=config),
        slot_extractor=SlotExtractor(clock=clock),
        response_selector=ResponseSelector(questions),
        question_selector=questions,
        config=config,
    )
