"""
Relative Time Resolver - turns phrases like "yesterday" into calendar fields

Responsibilities:
- Resolve relative date phrases against an injected "now"
- Recognise explicit dd/mm/yyyy dates
- Convert explicit clock times to 24-hour HH:MM

Design principles:
- Pure function of (text, now); no system clock access
- Ordered phrase table, most specific phrase first
- Never guess: unmatched text yields no fields
"""

import calendar
import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from intake.utils.lexicons import WORD_NUMBERS

logger = logging.getLogger(__name__)

WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']

_NUMBER = r'(\d{1,3}|a couple of|couple of|a few|few|an|a|one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve)'


def _to_number(token: str) -> int:
    token = token.strip().lower()
    if token.isdigit():
        return int(token)
    return WORD_NUMBERS[token]


def _at(moment: datetime, hour: int, minute: int = 0) -> datetime:
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _shift_months(moment: datetime, months: int) -> datetime:
    """Calendar month arithmetic with the day clamped to the target month"""
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _shift_years(moment: datetime, years: int) -> datetime:
    year = moment.year - years
    day = min(moment.day, calendar.monthrange(year, moment.month)[1])
    return moment.replace(year=year, day=day)


def _weekday(now: datetime, match) -> datetime:
    target = WEEKDAYS.index(match.group(1))
    days_back = (now.weekday() - target) % 7 or 7
    return now - timedelta(days=days_back)


def _units_ago(now: datetime, match) -> datetime:
    amount = _to_number(match.group(1))
    unit = match.group(2)
    if unit.startswith('min'):
        return now - timedelta(minutes=amount)
    if unit.startswith('h'):
        return now - timedelta(hours=amount)
    if unit.startswith('d'):
        return now - timedelta(days=amount)
    if unit.startswith('w'):
        return now - timedelta(weeks=amount)
    if unit.startswith('mo'):
        return _shift_months(now, amount)
    return _shift_years(now, amount)


# (pattern, resolver, sets_time_of_day)
# Order matters: "day before yesterday" must win over "yesterday",
# "last night" over "last <weekday>", etc.
RELATIVE_PHRASES: List[Tuple[re.Pattern, Callable, bool]] = [
    (re.compile(r'\bday before yesterday\b'), lambda now, m: now - timedelta(days=2), False),
    (re.compile(r'\blast night\b'), lambda now, m: _at(now - timedelta(days=1), 20), True),
    (re.compile(r'\byesterday (?:morning)\b'), lambda now, m: _at(now - timedelta(days=1), 9), True),
    (re.compile(r'\byesterday (?:afternoon)\b'), lambda now, m: _at(now - timedelta(days=1), 14), True),
    (re.compile(r'\byesterday (?:evening)\b'), lambda now, m: _at(now - timedelta(days=1), 18), True),
    (re.compile(r'\byesterday\b'), lambda now, m: now - timedelta(days=1), False),
    (re.compile(r'\bthis morning\b'), lambda now, m: _at(now, 9), True),
    (re.compile(r'\bthis afternoon\b'), lambda now, m: _at(now, 14), True),
    (re.compile(r'\bthis evening\b'), lambda now, m: _at(now, 18), True),
    (re.compile(r'\btonight\b'), lambda now, m: _at(now, 20), True),
    (re.compile(r'\b(?:earlier today|today)\b'), lambda now, m: now, False),
    (re.compile(r'\blast week\b'), lambda now, m: now - timedelta(days=7), False),
    (re.compile(r'\b(?:a fortnight ago|fortnight ago|last fortnight)\b'), lambda now, m: now - timedelta(days=14), False),
    (re.compile(r'\blast month\b'), lambda now, m: _shift_months(now, 1), False),
    (re.compile(r'\blast year\b'), lambda now, m: _shift_years(now, 1), False),
    (re.compile(r'\b' + _NUMBER + r'\s+(minutes?|mins?|hours?|hrs?|days?|weeks?|months?|years?)\s+ago\b'), _units_ago, False),
    (re.compile(r'\b(?:last|on|this past|past)\s+(' + '|'.join(WEEKDAYS) + r')\b'), _weekday, False),
    (re.compile(r'\bthe other day\b'), lambda now, m: now - timedelta(days=2), False),
]

EXPLICIT_DATE = re.compile(r'\b(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})\b')

CLOCK_PATTERNS = [
    # 8:30pm, 8.30 pm, 8pm
    re.compile(r'\b(\d{1,2})(?:[:.](\d{2}))?\s*(am|pm|a\.m\.|p\.m\.)'),
    # 14:00, around 14:00
    re.compile(r'\b([01]?\d|2[0-3]):([0-5]\d)\b'),
]


def resolve_clock_time(text: str) -> Optional[str]:
    """
    Extract an explicit clock time as 24-hour HH:MM

    Args:
        text: Lower-cased utterance

    Returns:
        "HH:MM" or None if no clock time is present

    Examples:
        >>> resolve_clock_time("at 8:30pm")
        '20:30'
        >>> resolve_clock_time("around 14:00")
        '14:00'
    """
    for pattern in CLOCK_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        meridiem = match.group(3) if match.lastindex and match.lastindex >= 3 else None
        if meridiem:
            if hour < 1 or hour > 12:
                continue
            is_pm = meridiem.startswith('p')
            if hour == 12:
                hour = 12 if is_pm else 0
            elif is_pm:
                hour += 12
        if hour > 23 or minute > 59:
            continue
        return f"{hour:02d}:{minute:02d}"
    return None


def _resolve_explicit_date(text: str) -> Optional[datetime]:
    match = EXPLICIT_DATE.search(text)
    if not match:
        return None
    day, month, year = (int(group) for group in match.groups())
    try:
        return datetime(year, month, day)
    except ValueError:
        logger.debug("Explicit date pattern did not form a valid calendar date")
        return None


def resolve_relative_time(text: str, now: datetime) -> Dict[str, str]:
    """
    Resolve a timing phrase into report timing fields

    Day, month and year are unpadded integer strings. start_time is only
    set when the phrase implies a time of day or an explicit clock time
    is present; an explicit clock time always wins.

    Args:
        text: Utterance (any case)
        now: Reference moment for relative arithmetic

    Returns:
        Dict with start_day/start_month/start_year and optionally
        start_time. Empty dict if nothing matched.

    Examples:
        >>> resolve_relative_time("yesterday", datetime(2024, 3, 15, 12, 0))
        {'start_day': '14', 'start_month': '3', 'start_year': '2024'}

        >>> resolve_relative_time("last night at 11pm", datetime(2024, 3, 15, 12, 0))
        {'start_day': '14', 'start_month': '3', 'start_year': '2024', 'start_time': '23:00'}
    """
    lowered = text.lower()
    resolved: Optional[datetime] = None
    time_of_day: Optional[str] = None

    for pattern, resolver, sets_time in RELATIVE_PHRASES:
        match = pattern.search(lowered)
        if match:
            resolved = resolver(now, match)
            if sets_time:
                time_of_day = f"{resolved.hour:02d}:{resolved.minute:02d}"
            break

    if resolved is None:
        resolved = _resolve_explicit_date(lowered)

    result: Dict[str, str] = {}
    if resolved is not None:
        result['start_day'] = str(resolved.day)
        result['start_month'] = str(resolved.month)
        result['start_year'] = str(resolved.year)

    clock = resolve_clock_time(lowered)
    if clock:
        result['start_time'] = clock
    elif time_of_day and resolved is not None:
        result['start_time'] = time_of_day

    return result
