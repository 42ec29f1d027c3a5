"""
Test Time Resolver - relative phrases, explicit dates and clock times

Run with: python3 tests/test_time_resolver.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime

from intake.utils.time_resolver import resolve_clock_time, resolve_relative_time

# Friday 15 March 2024, midday
NOW = datetime(2024, 3, 15, 12, 0)


def _date(day, month, year=2024):
    return {'start_day': str(day), 'start_month': str(month), 'start_year': str(year)}


def test_relative_phrase_table():
    """Test the resolver against a table of phrases"""
    table = [
        ("yesterday", _date(14, 3)),
        ("day before yesterday", _date(13, 3)),
        ("last night", dict(_date(14, 3), start_time='20:00')),
        ("yesterday afternoon", dict(_date(14, 3), start_time='14:00')),
        ("this morning", dict(_date(15, 3), start_time='09:00')),
        ("earlier today", _date(15, 3)),
        ("last week", _date(8, 3)),
        ("a fortnight ago", _date(1, 3)),
        ("2 weeks ago", _date(1, 3)),
        ("a few days ago", _date(12, 3)),
        ("three days ago", _date(12, 3)),
        ("last month", _date(15, 2)),
        ("2 years ago", _date(15, 3, 2022)),
        ("last monday", _date(11, 3)),
        ("on friday", _date(8, 3)),
        ("the other day", _date(13, 3)),
    ]
    for phrase, expected in table:
        result = resolve_relative_time(phrase, NOW)
        assert result == expected, f"{phrase!r}: expected {expected}, got {result}"

    print("✓ Relative phrase table test passed")


def test_minutes_ago_stays_on_same_day():
    """Test small units are not mistaken for years"""
    result = resolve_relative_time("10 minutes ago", NOW)
    assert result == _date(15, 3), f"Got {result}"

    print("✓ Minutes ago test passed")


def test_month_arithmetic_clamps_day():
    """Test last month from the 31st lands on the last day of February"""
    result = resolve_relative_time("last month", datetime(2024, 3, 31, 10, 0))
    assert result == _date(29, 2), f"Got {result}"

    print("✓ Month clamp test passed")


def test_explicit_dates():
    """Test dd/mm/yyyy parsing and invalid dates"""
    assert resolve_relative_time("it was on 12/02/2024", NOW) == _date(12, 2)
    assert resolve_relative_time("31/02/2024", NOW) == {}

    print("✓ Explicit date test passed")


def test_clock_time_overrides_time_of_day():
    """Test an explicit clock time wins over the phrase's default"""
    result = resolve_relative_time("last night at 11pm", NOW)
    assert result == dict(_date(14, 3), start_time='23:00'), f"Got {result}"

    result = resolve_relative_time("yesterday around 14:00", NOW)
    assert result == dict(_date(14, 3), start_time='14:00'), f"Got {result}"

    print("✓ Clock override test passed")


def test_clock_time_alone_sets_only_time():
    """Test a bare clock time does not invent a date"""
    assert resolve_relative_time("at 8:30pm", NOW) == {'start_time': '20:30'}

    print("✓ Clock-only test passed")


def test_resolve_clock_time():
    """Test 12-hour edge cases and invalid times"""
    assert resolve_clock_time("12am") == '00:00'
    assert resolve_clock_time("12pm") == '12:00'
    assert resolve_clock_time("9.15 am") == '09:15'
    assert resolve_clock_time("13pm") is None
    assert resolve_clock_time("no time here") is None

    print("✓ Clock time test passed")


def test_unmatched_text():
    """Test text without timing yields nothing"""
    assert resolve_relative_time("hello there", NOW) == {}

    print("✓ Unmatched text test passed")


if __name__ == '__main__':
    print("\n" + "="*60)
    print("TESTING TIME RESOLVER")
    print("="*60 + "\n")

    test_relative_phrase_table()
    test_minutes_ago_stays_on_same_day()
    test_month_arithmetic_clamps_day()
    test_explicit_dates()
    test_clock_time_overrides_time_of_day()
    test_clock_time_alone_sets_only_time()
    test_resolve_clock_time()
    test_unmatched_text()

    print("\n" + "="*60)
    print("ALL TIME RESOLVER TESTS PASSED ✓")
    print("="*60 + "\n")
