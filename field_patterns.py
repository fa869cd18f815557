"""
Ordered pattern matching shared by every text extractor

Patterns are always supplied most specific first and the first pattern that
matches anywhere wins, even when a later pattern would match earlier in the
text. Generic patterns are a last resort.
"""
import re
from typing import Iterable, Optional, Sequence


def extract(haystack: str, patterns: Iterable[str]) -> Optional[str]:
    """
    Return the first capture of the first pattern that matches

    Matching is case-insensitive. A pattern without a capturing group
    yields the whole match.

    Args:
        haystack: Text to search
        patterns: Regex patterns, most specific first

    Returns:
        Captured text or None
    """
    if not isinstance(haystack, str) or not haystack:
        return None

    for pattern in patterns:
        match = re.search(pattern, haystack, re.IGNORECASE)
        if match:
            if match.re.groups >= 1 and match.group(1) is not None:
                return match.group(1)
            return match.group(0)

    return None


def _keyword_index(tokens: Sequence[str], keyword: str) -> Optional[int]:
    """Index of the last token of the first token run that contains the keyword"""
    words = keyword.upper().split()
    if not words:
        return None

    upper_tokens = [token.upper() for token in tokens]
    span = len(words)

    for start in range(len(upper_tokens) - span + 1):
        window = upper_tokens[start:start + span]
        if span == 1:
            if words[0] in window[0]:
                return start
        elif window[:-1] == words[:-1] and words[-1] in window[-1]:
            return start + span - 1

    return None


def extract_after_keyword(lines: Iterable[str], keywords: Sequence[str], min_length: int = 3) -> Optional[str]:
    """
    Keyword-anchored extraction over individual lines

    For each line, in order, and each keyword, in order: when the line
    contains the keyword, the tokens after the keyword token are joined and
    returned. Results shorter than min_length are treated as noise and the
    scan continues.

    Args:
        lines: OCR lines
        keywords: Label keywords such as "NAME" or "GIVEN NAME"
        min_length: Minimum accepted result length

    Returns:
        Text following the keyword, or None
    """
    for line in lines:
        if not isinstance(line, str):
            continue

        upper_line = line.upper()
        tokens = line.split()

        for keyword in keywords:
            if keyword.upper() not in upper_line:
                continue

            index = _keyword_index(tokens, keyword)
            if index is None:
                continue

            value = ' '.join(tokens[index + 1:]).strip().lstrip(':-').strip()
            if value and len(value) >= min_length:
                return value

    return None


def find_line_with_keyword(lines: Iterable[str], keywords: Sequence[str]) -> Optional[str]:
    """Return the first line (trimmed) containing any keyword, case-insensitive"""
    for line in lines:
        if not isinstance(line, str):
            continue

        upper_line = line.upper()
        for keyword in keywords:
            if keyword.upper() in upper_line:
                return line.strip()

    return None


def first_line_match(lines: Iterable[str], pattern: str, min_length: int = 0) -> Optional[str]:
    """
    First match of a case-sensitive pattern in any single line

    Used for shape-based fallbacks (e.g. two capitalized words) where
    case carries the signal.
    """
    regex = re.compile(pattern)

    for line in lines:
        if not isinstance(line, str):
            continue

        match = regex.search(line)
        if match and len(match.group(0)) > min_length:
            return match.group(0)

    return None
