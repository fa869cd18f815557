"""
TD3 (passport) Machine Readable Zone parser

The MRZ lines arrive mixed in with every other OCR line of the page, so the
parser first picks out MRZ-looking candidates and then decodes fixed offsets.
"""
import re
from typing import List, Optional, Sequence

from config import config
from date_normalizer import parse_mrz_date
from models import MRZData
from sex_field_normalizer import normalize_sex_field
from td3_validation_check import td3_field


MRZ_CHARSET = re.compile(r'^[A-Z0-9<]+$')


def normalize_mrz_candidate(line: str) -> str:
    """
    Prepare an OCR line for MRZ matching

    Spaces are dropped, letters uppercased and every letter O becomes the
    digit 0. The O/0 swap is lossy: it fixes digits misread as letters in
    the numeric fields but also rewrites genuine O letters.
    """
    return line.replace(' ', '').upper().replace('O', '0')


def _letters_only(value: str) -> str:
    # Name and country fields never hold digits, so undo the O -> 0 swap there
    return value.replace('0', 'O')


def find_mrz_lines(lines: Sequence[str]) -> List[str]:
    """Normalized lines that look like MRZ text (long, MRZ charset only)"""
    candidates = []
    for line in lines:
        if not isinstance(line, str):
            continue
        normalized = normalize_mrz_candidate(line)
        if len(normalized) >= config.MRZ_MIN_CANDIDATE_LENGTH and MRZ_CHARSET.match(normalized):
            candidates.append(normalized)
    return candidates


def extract_passport_number(line2: str) -> Optional[str]:
    number = td3_field(line2, "line2", "passport_number").replace('<', '')
    return number or None


def extract_full_name(line1: str) -> Optional[str]:
    """
    Decode the name field: SURNAME<<GIVEN<NAMES<<<

    Returns "GIVEN NAMES SURNAME", or None when the '<<' separator is missing.
    """
    if len(line1) < config.TD3_LINE_LENGTH:
        return None

    name_section = _letters_only(line1[5:])
    components = name_section.split('<<')
    if len(components) < 2:
        return None

    surname = components[0].replace('<', ' ').strip()
    given_names = components[1].replace('<', ' ').strip()

    full_name = f"{given_names} {surname}".strip()
    return full_name or None


def extract_issuing_country(line1: str) -> Optional[str]:
    country = _letters_only(td3_field(line1, "line1", "issuing_country"))
    if not country or country == '<<<':
        return None
    return country


def extract_gender(line2: str):
    sex = td3_field(line2, "line2", "sex")
    if sex not in ('M', 'F'):
        return None
    return normalize_sex_field(sex)


def parse_mrz(lines: Sequence[str], verbose: bool = None) -> Optional[MRZData]:
    """
    Locate and decode a TD3 MRZ inside a list of OCR lines

    Args:
        lines: OCR lines in reading order
        verbose: Print progress

    Returns:
        MRZData, or None when no TD3 passport MRZ is present
    """
    if verbose is None:
        verbose = config.VERBOSE

    if not lines:
        return None

    mrz_lines = find_mrz_lines(lines)
    if verbose:
        print(f"  → MRZ candidate lines: {len(mrz_lines)}")

    if len(mrz_lines) < config.TD3_TOTAL_LINES:
        return None

    line1, line2 = mrz_lines[0], mrz_lines[1]

    if len(line1) < config.TD3_LINE_LENGTH or len(line2) < config.TD3_LINE_LENGTH:
        if verbose:
            print(f"  ⚠ MRZ lines too short: {len(line1)}/{len(line2)} (need {config.TD3_LINE_LENGTH})")
        return None

    if not line1.startswith('P<'):
        if verbose:
            print("  ⚠ First MRZ line is not a passport line (no 'P<')")
        return None

    country = extract_issuing_country(line1)

    data = MRZData(
        passport_number=extract_passport_number(line2),
        full_name=extract_full_name(line1),
        nationality=country,
        date_of_birth=parse_mrz_date(td3_field(line2, "line2", "birth_date")),
        gender=extract_gender(line2),
        expiration_date=parse_mrz_date(td3_field(line2, "line2", "expiry_date")),
        issuing_country=country,
    )

    if verbose:
        print("  ✓ TD3 MRZ decoded")

    return data
