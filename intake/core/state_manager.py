"""
State Manager - Per-session conversation state

Responsibilities:
- Hold accumulated report fields for one session (preserve-first merge)
- Track milestone progress, stage and recent questions
- Provide read-only snapshots to the rest of the pipeline
- Keep a registry of sessions safe for concurrent creation

Design principles:
- ConversationState is a dumb container: no extraction, no questioning
- Progress and stage are recomputed from accumulated fields after every merge
- Snapshots are deep copies; callers never hold a live reference
- No process-wide singletons: the SessionStore is created by the caller

API Philosophy:
- State Manager = dumb data container
- Dialogue Manager = smart coordinator (holds the session lock for a whole turn)
- Question Selector = stage and question logic
"""

import logging
import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from intake.contracts import ConversationSnapshot
from intake.core.question_selector import compute_stage, was_asked
from intake.utils.conversation_stages import VALID_STAGES, ConversationStage, stage_index
from intake.utils.field_schema import compute_progress, is_known_field

logger = logging.getLogger(__name__)


class ConversationState:
    """Conversation state for one session"""

    def __init__(self, session_id: str, recent_capacity: int = 5, intent_capacity: int = 10,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize empty session state

        Args:
            session_id: Session identifier
            recent_capacity: Size of the anti-repetition window
            intent_capacity: Number of past intents kept
            clock: Callable returning "now" (defaults to datetime.now)
        """
        self.session_id = session_id
        self._recent_capacity = recent_capacity
        self._intent_capacity = intent_capacity
        self._clock = clock or datetime.now

        # Held by the Dialogue Manager for the whole turn
        self.lock = threading.RLock()

        self.created_at = self._clock()
        self._init_fields()

    def _init_fields(self) -> None:
        self.accumulated: Dict[str, str] = {}
        self.progress: Dict[str, bool] = compute_progress({})
        self.stage: str = ConversationStage.INTRODUCTION.value
        self.recent_questions: deque = deque(maxlen=self._recent_capacity)
        self.previous_intents: deque = deque(maxlen=self._intent_capacity)
        self.complex_trauma_detected = False
        self.turn_count = 0
        self.last_active = self._clock()

    # ========================
    # Mutations
    # ========================

    def merge_fields(self, fields: Dict[str, str]) -> Dict[str, str]:
        """
        Merge extracted fields, keeping the first value ever stored

        Unknown field names are ignored with a warning. Progress and stage
        are recomputed afterwards.

        Args:
            fields: Fields extracted this turn

        Returns:
            Fields that were actually added (new keys only)
        """
        merged = {}
        for name, value in fields.items():
            if not is_known_field(name):
                logger.warning(f"Ignoring unknown field: {name}")
                continue
            if name in self.accumulated or value is None or value == '':
                continue
            self.accumulated[name] = value
            merged[name] = value

        if merged:
            self._recompute()
            logger.debug(f"Session {self.session_id}: merged {sorted(merged)}")
        return merged

    def _recompute(self) -> None:
        self.progress = compute_progress(self.accumulated)
        new_stage = compute_stage(self.progress)
        if new_stage not in VALID_STAGES:
            raise ValueError(f"Invalid stage computed: {new_stage}")
        # Progress flags only ever get set, so the stage cannot move backwards
        if stage_index(new_stage) < stage_index(self.stage):
            raise RuntimeError(f"Stage regression {self.stage} -> {new_stage}")
        if new_stage != self.stage:
            logger.debug(f"Session {self.session_id}: stage {self.stage} -> {new_stage}")
        self.stage = new_stage

    def record_question(self, text: str) -> None:
        """Append an emitted response to the bounded recent-question window"""
        if text:
            self.recent_questions.append(text)

    def has_asked_recently(self, text: str) -> bool:
        return was_asked(text, self.recent_questions)

    def record_intent(self, intent: str) -> None:
        self.previous_intents.append(intent)

    def mark_complex_trauma(self) -> None:
        """Sticky: never cleared except by reset()"""
        self.complex_trauma_detected = True

    def touch(self) -> None:
        """Count a processed turn and refresh the idle timer"""
        self.turn_count += 1
        self.last_active = self._clock()

    def reset(self) -> None:
        """Clear all session data, keeping the session id"""
        self._init_fields()
        logger.info(f"Session {self.session_id} reset")

    # ========================
    # Read access
    # ========================

    def snapshot(self) -> ConversationSnapshot:
        """Return a deep-copied, read-only view of this state"""
        return ConversationSnapshot(
            session_id=self.session_id,
            progress=dict(self.progress),
            stage=self.stage,
            accumulated=dict(self.accumulated),
            recent_questions=tuple(self.recent_questions),
            complex_trauma_detected=self.complex_trauma_detected,
            previous_intents=tuple(self.previous_intents),
            turn_count=self.turn_count,
        )

    def get_field(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.accumulated.get(name, default)

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.last_active > ttl


class SessionStore:
    """
    Registry of ConversationState objects keyed by session id.

    Creation is guarded by a registry lock so that simultaneous first
    messages for one id produce exactly one state.
    """

    def __init__(self, ttl_hours: float = 24.0, recent_capacity: int = 5,
                 intent_capacity: int = 10, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize empty store

        Args:
            ttl_hours: Idle time after which evict_expired() drops a session
            recent_capacity: Anti-repetition window for new sessions
            intent_capacity: Intent history length for new sessions
            clock: Callable returning "now" (defaults to datetime.now)
        """
        self.ttl = timedelta(hours=ttl_hours)
        self.recent_capacity = recent_capacity
        self.intent_capacity = intent_capacity
        self.clock = clock or datetime.now
        self._sessions: Dict[str, ConversationState] = {}
        self._registry_lock = threading.Lock()

        logger.info(f"Session store initialized (ttl={ttl_hours}h)")

    def get_or_create(self, session_id: str) -> ConversationState:
        """
        Return the session's state, creating it on first use

        Args:
            session_id: Session identifier

        Returns:
            ConversationState (the same object for every call with this id)
        """
        with self._registry_lock:
            state = self._sessions.get(session_id)
            if state is None:
                state = ConversationState(session_id, self.recent_capacity,
                                          self.intent_capacity, clock=self.clock)
                self._sessions[session_id] = state
                logger.info(f"Session {session_id} created")
            return state

    def get(self, session_id: str) -> Optional[ConversationState]:
        with self._registry_lock:
            return self._sessions.get(session_id)

    def reset_session(self, session_id: str) -> bool:
        """
        Reset a session's state

        Returns:
            True if the session existed. Unknown ids are a no-op.
        """
        state = self.get(session_id)
        if state is None:
            logger.debug(f"Reset requested for unknown session {session_id}")
            return False
        with state.lock:
            state.reset()
        return True

    def evict_expired(self) -> List[str]:
        """
        Drop sessions idle for longer than the TTL

        Returns:
            Ids of evicted sessions
        """
        now = self.clock()
        with self._registry_lock:
            expired = [sid for sid, state in self._sessions.items() if state.is_expired(now, self.ttl)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Evicted {len(expired)} idle session(s)")
        return expired

    def session_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._sessions)
