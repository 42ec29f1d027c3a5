"""
Test engine configuration and helpers

Run with: python3 tests/test_config.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intake.config import EngineConfig
from intake.utils.helpers import calculate_confidence, generate_response_id, generate_session_id


def test_defaults():
    """Test default constants"""
    config = EngineConfig()
    assert config.similarity_threshold == 0.7
    assert config.recent_question_capacity == 5
    assert config.session_ttl_hours == 24.0
    assert config.max_confidence == 0.95
    assert config.embedding_model is None

    print("✓ Defaults test passed")


def test_from_env():
    """Test environment overrides and unset variables"""
    config = EngineConfig.from_env({
        'INTAKE_SIMILARITY_THRESHOLD': '0.8',
        'INTAKE_SESSION_TTL_HOURS': '2',
        'INTAKE_EMBEDDING_MODEL': 'some/model',
    })
    assert config.similarity_threshold == 0.8
    assert config.session_ttl_hours == 2.0
    assert config.embedding_model == 'some/model'

    assert EngineConfig.from_env({}) == EngineConfig()

    print("✓ Environment config test passed")


def test_invalid_values_rejected():
    """Test out-of-range thresholds and capacities raise ValueError"""
    for kwargs in ({'similarity_threshold': 1.5},
                   {'max_confidence': -0.1},
                   {'recent_question_capacity': 0},
                   {'session_ttl_hours': 0}):
        try:
            EngineConfig(**kwargs)
            assert False, f"Should have raised ValueError for {kwargs}"
        except ValueError:
            pass

    print("✓ Invalid config test passed")


def test_calculate_confidence():
    """Test field and pattern bonuses and the cap"""
    assert calculate_confidence(0.5, {'first_name': 'Dorothy'}, "my name is dorothy") == 0.65
    assert calculate_confidence(0.5, {}, "ok") == 0.5

    many = {f'field_{i}': 'x' for i in range(6)}
    assert calculate_confidence(0.9, many, "my name is dorothy and i'm 15") == 0.95

    print("✓ Confidence test passed")


def test_identifiers():
    """Test session and response id formats"""
    assert len(generate_session_id()) == 32
    assert len(generate_session_id(short=True)) == 8
    assert generate_response_id() != generate_response_id()

    print("✓ Identifier test passed")


if __name__ == '__main__':
    print("\n" + "="*60)
    print("TESTING CONFIG AND HELPERS")
    print("="*60 + "\n")

    test_defaults()
    test_from_env()
    test_invalid_values_rejected()
    test_calculate_confidence()
    test_identifiers()

    print("\n" + "="*60)
    print("ALL CONFIG TESTS PASSED ✓")
    print("="*60 + "\n")
