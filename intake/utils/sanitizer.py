"""
Input sanitizer - strips markup and script vectors from user text

Design principles:
- Pure and total: never raises, non-string input becomes ""
- Removal is repeated until the text stops changing, so stripping one
  pattern cannot assemble another (e.g. "<scr<script>ipt>")
- No logging (content must never reach the logs)
"""

import re

UNSAFE_PATTERNS = [
    re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE),
    re.compile(r'javascript\s*:', re.IGNORECASE),
    re.compile(r'vbscript\s*:', re.IGNORECASE),
    re.compile(r'data\s*:', re.IGNORECASE),
    re.compile(r'\bon\w+\s*=', re.IGNORECASE),
    re.compile(r'[<>]'),
]


def sanitize_input(text) -> str:
    """
    Remove script tags, unsafe URI schemes, inline handlers and angle brackets

    Args:
        text: Raw user input (any type)

    Returns:
        Sanitized, whitespace-trimmed string ("" for non-string input)

    Examples:
        >>> sanitize_input("<script>alert(1)</script>Hello")
        'Hello'

        >>> sanitize_input(None)
        ''
    """
    if not isinstance(text, str):
        return ""

    # Terminates: every pattern match is non-empty, so a changing pass shortens the text
    cleaned = text
    while True:
        previous = cleaned
        for pattern in UNSAFE_PATTERNS:
            cleaned = pattern.sub('', cleaned)
        if cleaned == previous:
            break

    return cleaned.strip()
