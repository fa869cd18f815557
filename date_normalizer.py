"""
Date normalization for the textual date encodings found on identity documents

Three families are handled:
- delimited dates in OCR text, tried against an ordered list of strptime formats
- AAMVA fixed width codes (MMDDYYYY / MMDDYY)
- MRZ YYMMDD codes with a configurable century pivot
"""
from datetime import date, datetime
from typing import Iterable, Optional

from config import config


# Month first is tried before day first, so 03/04/2020 reads as March 4th.
# Both readings are valid for such values; the order decides.
TEXT_DATE_FORMATS = [
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%m/%d/%y",
    "%d/%m/%y",
    "%m-%d-%y",
    "%d-%m-%y",
]

INVOICE_DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%Y-%m-%d",
]


def parse_date(text: str, formats: Iterable[str]) -> Optional[date]:
    """
    Parse a date string using the first format that matches

    Args:
        text: Date string (e.g. "01/15/2000")
        formats: strptime formats, tried in order

    Returns:
        Calendar date, or None if no format yields a valid date
    """
    if not isinstance(text, str):
        return None

    candidate = text.strip()
    if not candidate:
        return None

    for fmt in formats:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue

    return None


def parse_fixed_width_date(text: str) -> Optional[date]:
    """
    Parse an AAMVA date element

    8 digits are MMDDYYYY, 6 digits are MMDDYY. Any other width is rejected.
    """
    if not isinstance(text, str):
        return None

    value = text.strip()
    if not value.isdigit():
        return None

    if len(value) == 8:
        return parse_date(value, ["%m%d%Y"])
    elif len(value) == 6:
        return parse_date(value, ["%m%d%y"])

    return None


def parse_mrz_date(text: str, pivot: Optional[int] = None) -> Optional[date]:
    """
    Convert MRZ date format (YYMMDD) to a calendar date

    Two digit years below the pivot are 20YY, the rest 19YY.

    Args:
        text: Date in YYMMDD format
        pivot: Century pivot, defaults to config.MRZ_CENTURY_PIVOT

    Returns:
        Calendar date or None
    """
    if not isinstance(text, str) or len(text) != 6 or not text.isdigit():
        return None

    if pivot is None:
        pivot = config.MRZ_CENTURY_PIVOT

    year = int(text[0:2])
    month = int(text[2:4])
    day = int(text[4:6])

    full_year = 2000 + year if year < pivot else 1900 + year

    try:
        return date(full_year, month, day)
    except ValueError:
        return None
