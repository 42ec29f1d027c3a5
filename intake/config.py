"""
Engine configuration.

EngineConfig holds the tunable constants of the dialogue engine. Risk
weights are deliberately not here; they live next to the scoring code
in intake.core.risk_assessor as one named constant set.

Usage:
    from intake.config import EngineConfig
    config = EngineConfig.from_env()
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunable engine constants.

    Attributes:
        similarity_threshold: Minimum similarity for a template match to be
                              accepted outright (0.0-1.0)
        context_confidence: Confidence reported for context-rule matches
        regex_confidence: Confidence reported for regex-rule matches
        default_confidence: Confidence of the general_conversation default
        recent_question_capacity: Size of the anti-repetition window
        previous_intent_capacity: Number of past intents kept per session
        session_ttl_hours: Idle time after which a session is evicted
        max_confidence: Cap for turn confidence
        embedding_model: Sentence-embedding model name, or None for TF-IDF only

    Raises:
        ValueError: If a threshold or capacity is out of range
    """
    similarity_threshold: float = 0.7
    context_confidence: float = 0.75
    regex_confidence: float = 0.7
    default_confidence: float = 0.5
    recent_question_capacity: int = 5
    previous_intent_capacity: int = 10
    session_ttl_hours: float = 24.0
    max_confidence: float = 0.95
    embedding_model: Optional[str] = None

    def __post_init__(self):
        for name in ('similarity_threshold', 'context_confidence', 'regex_confidence',
                     'default_confidence', 'max_confidence'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.recent_question_capacity < 1:
            raise ValueError(f"recent_question_capacity must be >= 1, got {self.recent_question_capacity}")
        if self.previous_intent_capacity < 1:
            raise ValueError(f"previous_intent_capacity must be >= 1, got {self.previous_intent_capacity}")
        if self.session_ttl_hours <= 0:
            raise ValueError(f"session_ttl_hours must be positive, got {self.session_ttl_hours}")

    @classmethod
    def from_env(cls, environ=None):
        """
        Build config from environment variables

        Reads INTAKE_SIMILARITY_THRESHOLD, INTAKE_SESSION_TTL_HOURS and
        INTAKE_EMBEDDING_MODEL. Unset variables keep the defaults.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            EngineConfig
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        if environ.get('INTAKE_SIMILARITY_THRESHOLD'):
            kwargs['similarity_threshold'] = float(environ['INTAKE_SIMILARITY_THRESHOLD'])
        if environ.get('INTAKE_SESSION_TTL_HOURS'):
            kwargs['session_ttl_hours'] = float(environ['INTAKE_SESSION_TTL_HOURS'])
        if environ.get('INTAKE_EMBEDDING_MODEL'):
            kwargs['embedding_model'] = environ['INTAKE_EMBEDDING_MODEL']
        return cls(**kwargs)
