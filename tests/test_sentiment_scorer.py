"""
Test Sentiment Scorer - lexicon scoring and contextual penalties

Run with: python3 tests/test_sentiment_scorer.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intake.core.sentiment_scorer import score_sentiment, tokenize


def test_tokenize_strips_edge_punctuation():
    """Test tokens keep inner apostrophes but lose edge punctuation"""
    assert tokenize("I'm scared!!") == ["i'm", 'scared']
    assert tokenize("  (thanks)  ") == ['thanks']

    print("✓ Tokenize test passed")


def test_lexicon_weights():
    """Test positive, negative and high-intensity weights"""
    assert score_sentiment("I feel safe now, thanks") == 0.4
    assert score_sentiment("I was terrified") == -0.6
    assert score_sentiment("I'm scared and upset") == -0.8
    assert score_sentiment("the bus was late") == 0.0

    print("✓ Lexicon weight test passed")


def test_contextual_penalties():
    """Test alone, disability and minor penalties"""
    assert score_sentiment("I was alone") == -0.2
    assert score_sentiment("I use a wheelchair") == -0.1
    assert score_sentiment("I'm 15 and alone in a wheelchair") == -0.5

    print("✓ Contextual penalty test passed")


def test_clamped_range():
    """Test scores never leave [-1, 1]"""
    assert score_sentiment("terrified terrified terrified") == -1.0
    assert score_sentiment("safe safe safe safe safe safe safe") == 1.0

    samples = [
        "", "hello", "I was assaulted and I'm terrified and alone",
        "thank you so much, I feel better and safe", "he hit me, I'm scared",
    ]
    for text in samples:
        score = score_sentiment(text)
        assert -1.0 <= score <= 1.0, f"Score {score} out of range"

    print("✓ Range test passed")


def test_failure_returns_neutral():
    """Test internal failure returns 0.0 instead of raising"""
    assert score_sentiment(None) == 0.0
    assert score_sentiment(12) == 0.0

    print("✓ Failure fallback test passed")


if __name__ == '__main__':
    print("\n" + "="*60)
    print("TESTING SENTIMENT SCORER")
    print("="*60 + "\n")

    test_tokenize_strips_edge_punctuation()
    test_lexicon_weights()
    test_contextual_penalties()
    test_clamped_range()
    test_failure_returns_neutral()

    print("\n" + "="*60)
    print("ALL SENTIMENT SCORER TESTS PASSED ✓")
    print("="*60 + "\n")
