"""
Test State Manager - session state container and session registry

Run with: python3 tests/test_state_manager.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import threading
from datetime import datetime, timedelta

from intake.core.state_manager import ConversationState, SessionStore


class FakeClock:
    """Manually advanced clock"""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def test_preserve_first_merge():
    """Test the first stored value is never overwritten"""
    state = ConversationState("s1")

    merged = state.merge_fields({'first_name': 'Dorothy'})
    assert merged == {'first_name': 'Dorothy'}

    merged = state.merge_fields({'first_name': 'Sam', 'age': '15'})
    assert merged == {'age': '15'}, f"Got {merged}"
    assert state.get_field('first_name') == 'Dorothy'

    print("✓ Preserve-first merge test passed")


def test_unknown_and_empty_fields_ignored():
    """Test fields outside the report schema and empty values are dropped"""
    state = ConversationState("s1")
    merged = state.merge_fields({'favourite_colour': 'blue', 'email': ''})
    assert merged == {}
    assert state.accumulated == {}

    print("✓ Unknown field test passed")


def test_progress_and_stage():
    """Test progress flags and stage follow the accumulated fields"""
    state = ConversationState("s1")
    assert state.stage == 'introduction'
    assert not any(state.progress.values())

    state.merge_fields({'first_name': 'Dorothy'})
    assert state.progress['name'] is True
    assert state.stage == 'personal_info'

    state.merge_fields({'age': '15'})
    assert state.stage == 'incident_details'

    # Clock time alone does not satisfy timing
    state.merge_fields({'start_time': '20:30'})
    assert state.progress['timing'] is False

    state.merge_fields({'start_day': '14', 'town_city': 'Camden',
                        'incident_narrative': 'Physical contact occurred'})
    assert state.stage == 'evidence'

    print("✓ Progress and stage test passed")


def test_snapshot_is_a_copy():
    """Test mutating a snapshot never touches the session"""
    state = ConversationState("s1")
    state.merge_fields({'first_name': 'Dorothy'})
    snapshot = state.snapshot()

    snapshot.accumulated['first_name'] = 'Changed'
    snapshot.progress['age'] = True

    assert state.get_field('first_name') == 'Dorothy'
    assert state.progress['age'] is False

    print("✓ Snapshot copy test passed")


def test_recent_questions_bounded():
    """Test the anti-repetition window keeps only the newest entries"""
    state = ConversationState("s1", recent_capacity=5)
    for i in range(7):
        state.record_question(f"question {i}")

    recent = state.snapshot().recent_questions
    assert len(recent) == 5
    assert recent[0] == "question 2"
    assert recent[-1] == "question 6"
    assert state.has_asked_recently("question 6")
    assert not state.has_asked_recently("question 0")

    state.record_question("Thank you. Where did this happen?")
    assert state.has_asked_recently("Where did this happen?")

    print("✓ Recent question window test passed")


def test_complex_trauma_is_sticky():
    """Test the complex-trauma flag survives later turns but not reset"""
    state = ConversationState("s1")
    state.mark_complex_trauma()
    state.merge_fields({'first_name': 'Dorothy'})
    assert state.snapshot().complex_trauma_detected is True

    state.reset()
    assert state.complex_trauma_detected is False

    print("✓ Sticky complex trauma test passed")


def test_reset_clears_everything():
    """Test reset keeps the id and clears all data"""
    state = ConversationState("s1")
    state.merge_fields({'first_name': 'Dorothy', 'age': '15'})
    state.record_question("How old are you?")
    state.record_intent('provide_age')
    state.touch()

    state.reset()

    snapshot = state.snapshot()
    assert snapshot.session_id == "s1"
    assert snapshot.accumulated == {}
    assert snapshot.stage == 'introduction'
    assert snapshot.recent_questions == ()
    assert snapshot.previous_intents == ()
    assert snapshot.turn_count == 0

    print("✓ Reset test passed")


def test_stage_regression_rejected():
    """Test a computed stage earlier than the current one raises"""
    state = ConversationState("s1")
    state.stage = 'complete'

    try:
        state.merge_fields({'first_name': 'Dorothy'})
        assert False, "Should have raised RuntimeError"
    except RuntimeError as e:
        assert "regression" in str(e)

    print("✓ Stage regression test passed")


def test_store_returns_same_state():
    """Test get_or_create hands out one object per id"""
    store = SessionStore()
    first = store.get_or_create("a")
    second = store.get_or_create("a")
    other = store.get_or_create("b")

    assert first is second
    assert first is not other
    assert len(store) == 2
    assert sorted(store.session_ids()) == ["a", "b"]
    assert store.get("missing") is None

    print("✓ Store identity test passed")


def test_store_reset():
    """Test reset for known and unknown ids"""
    store = SessionStore()
    state = store.get_or_create("a")
    state.merge_fields({'first_name': 'Dorothy'})

    assert store.reset_session("a") is True
    assert state.accumulated == {}
    assert store.reset_session("unknown") is False

    print("✓ Store reset test passed")


def test_evict_expired():
    """Test idle sessions are evicted after the TTL"""
    clock = FakeClock(datetime(2024, 3, 15, 12, 0))
    store = SessionStore(ttl_hours=24, clock=clock)

    store.get_or_create("old")
    clock.advance(hours=20)
    store.get_or_create("new")
    clock.advance(hours=5)

    evicted = store.evict_expired()
    assert evicted == ["old"], f"Got {evicted}"
    assert store.session_ids() == ["new"]

    # Touching a session refreshes its idle timer
    store.get("new").touch()
    clock.advance(hours=23)
    assert store.evict_expired() == []

    print("✓ Eviction test passed")


def test_concurrent_creation():
    """Test simultaneous first messages for one id produce one state"""
    store = SessionStore()
    barrier = threading.Barrier(8)
    results = []
    results_lock = threading.Lock()

    def worker():
        barrier.wait()
        state = store.get_or_create("shared")
        with results_lock:
            results.append(state)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 8
    assert all(state is results[0] for state in results)
    assert len(store) == 1

    print("✓ Concurrent creation test passed")


if __name__ == '__main__':
    print("\n" + "="*60)
    print("TESTING STATE MANAGER")
    print("="*60 + "\n")

    test_preserve_first_merge()
    test_unknown_and_empty_fields_ignored()
    test_progress_and_stage()
    test_snapshot_is_a_copy()
    test_recent_questions_bounded()
    test_complex_trauma_is_sticky()
    test_reset_clears_everything()
    test_stage_regression_rejected()
    test_store_returns_same_state()
    test_store_reset()
    test_evict_expired()
    test_concurrent_creation()

    print("\n" + "="*60)
    print("ALL STATE MANAGER TESTS PASSED ✓")
    print("="*60 + "\n")
