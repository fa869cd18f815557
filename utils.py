"""
Utility functions for text cleanup and MRZ arithmetic
"""


def clean_text(text: str) -> str:
    """
    Clean OCR text by collapsing runs of whitespace

    Args:
        text: Raw OCR text

    Returns:
        Cleaned text
    """
    # Replace multiple spaces with single space
    cleaned = ' '.join(text.split())
    return cleaned


def split_lines(text: str) -> list:
    """Split OCR text into trimmed, non-empty lines"""
    return [line.strip() for line in text.splitlines() if line.strip()]


def mrz_char_value(char: str) -> int:
    """Numeric value of an MRZ character for check digit weighting"""
    if char.isdigit():
        return int(char)
    if char == '<':
        return 0
    # A-Z: A=10, B=11, ..., Z=35
    return ord(char) - ord('A') + 10


def compute_mrz_check_digit(data: str) -> str:
    """Compute the ICAO 9303 7-3-1 check digit for a field"""
    weights = [7, 3, 1]
    total = 0

    for i, char in enumerate(data):
        total += mrz_char_value(char) * weights[i % 3]

    return str(total % 10)


def validate_mrz_checksum(data: str, check_digit: str) -> bool:
    """
    Validate MRZ checksum digit

    Args:
        data: Data string to validate
        check_digit: Expected check digit ('<' counts as 0)

    Returns:
        True if checksum is valid
    """
    if not data or not all(c.isdigit() or c == '<' or 'A' <= c <= 'Z' for c in data):
        return False

    expected = '0' if check_digit == '<' else check_digit
    return compute_mrz_check_digit(data) == expected

