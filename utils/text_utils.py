"""
Text utilities for recipe card analysis.

Keyword matching is plain case-insensitive substring search over the
recognized text, so "Serves 4" matches "serves" and "1 cup" matches "cup".
"""
import re
from typing import Iterable, Optional

_DIGIT_PATTERN = re.compile(r'\d')


def contains_keyword(text: Optional[str], keywords: Iterable[str]) -> bool:
    """
    Check whether any keyword occurs in the text (case-insensitive).

    Args:
        text: Text to search
        keywords: Substrings to look for

    Returns:
        True if at least one keyword is a substring of the text
    """
    lowered = (text or "").lower()
    if not lowered:
        return False
    return any(keyword.lower() in lowered for keyword in keywords)


def contains_digit(text: Optional[str]) -> bool:
    """True if the text contains at least one decimal digit."""
    return bool(_DIGIT_PATTERN.search(text or ""))
