"""
Heuristic field extraction from unstructured OCR lines

Used for driver's licenses and national IDs, and for passports when no
MRZ could be decoded. Regex patterns run against the joined text, keyword
lookups run line by line.
"""
from typing import List, Optional, Sequence

from config import config
from date_normalizer import TEXT_DATE_FORMATS, parse_date
from field_patterns import extract, extract_after_keyword, find_line_with_keyword, first_line_match
from models import DocumentType, Gender, PersonalDocument
from sex_field_normalizer import normalize_sex_field
from utils import clean_text


DATE_VALUE = r'([0-9]{1,2}[/-][0-9]{1,2}[/-][0-9]{2,4})'

# Labeled codes must contain a digit so "LICENSE CALIFORNIA" is not a number
LABELED_CODE = r'(?=[A-Z]*[0-9])([A-Z0-9]{8,20})'
LABELED_PASSPORT_CODE = r'(?=[A-Z]*[0-9])([A-Z0-9]{6,12})'

PASSPORT_NAME_KEYWORDS = ["NAME", "SURNAME", "GIVEN NAME", "HOLDER"]
ID_NAME_KEYWORDS = ["NAME", "NOME", "FULL NAME", "LASTNAME", "FIRST NAME", "LN", "FN"]

# Two capitalized words anywhere in a line. Also matches city names and
# headings such as "New York"; kept as the last resort for unlabeled names.
CAPITALIZED_NAME_PATTERN = r'[A-Z][a-z]+ [A-Z][a-z]+'

DATE_OF_BIRTH_PATTERNS = [
    r'DATE OF BIRTH[: ]*' + DATE_VALUE,
    r'DOB[: ]*' + DATE_VALUE,
    r'BIRTH[: ]*' + DATE_VALUE,
    r'BORN[: ]*' + DATE_VALUE,
    r'([0-9]{1,2}[/-][0-9]{1,2}[/-][0-9]{4})',
]

EXPIRATION_PATTERNS = [
    r'DATE OF EXPIRY[: ]*' + DATE_VALUE,
    r'EXPIRY[: ]*' + DATE_VALUE,
    r'EXPIRES[: ]*' + DATE_VALUE,
    r'EXP[: ]*' + DATE_VALUE,
    r'VALID UNTIL[: ]*' + DATE_VALUE,
]

LICENSE_NUMBER_PATTERNS = [
    r'DL[# ]*' + LABELED_CODE,
    r'LIC[# ]*' + LABELED_CODE,
    r'LICENSE[# ]*' + LABELED_CODE,
    r'([A-Z][0-9]{7,15})',
    r'([0-9]{8,15})',
]

ID_NUMBER_PATTERNS = [
    r'ID[# ]*' + LABELED_CODE,
    r'NUMBER[# ]*' + LABELED_CODE,
    r'([A-Z][0-9]{7,15})',
    r'([0-9]{8,15})',
]

PASSPORT_NUMBER_PATTERNS = [
    r'PASSPORT[# ]*' + LABELED_PASSPORT_CODE,
    r'NO[.: ]*' + LABELED_PASSPORT_CODE,
    r'NUMBER[.: ]*' + LABELED_PASSPORT_CODE,
    r'([A-Z][0-9]{8})',
    r'([0-9]{8,9})',
]

GENDER_PATTERNS = [
    r'SEX[: ]*([MF])',
    r'GENDER[: ]*([MF])',
    r'\b([MF])\b',
]

AUTHORITY_KEYWORDS = {
    DocumentType.DRIVERS_LICENSE: ["DMV", "DEPARTMENT", "MOTOR", "VEHICLE", "STATE"],
    DocumentType.NATIONAL_ID: ["GOVERNMENT", "MINISTRY", "DEPARTMENT", "STATE", "FEDERAL"],
    DocumentType.PASSPORT: ["AUTHORITY", "ISSUING", "GOVERNMENT", "REPUBLIC", "KINGDOM", "STATE"],
}

NATIONALITY_KEYWORDS = ["NATIONALITY", "CITIZEN", "COUNTRY OF BIRTH"]


def _join(lines: Sequence[str]) -> str:
    return ' '.join(line for line in lines if isinstance(line, str))


def extract_name(lines: Sequence[str], keywords: Sequence[str]) -> Optional[str]:
    """Labeled name first, then the first capitalized word pair longer than 4 chars"""
    name = extract_after_keyword(lines, keywords)
    if name:
        return name
    return first_line_match(lines, CAPITALIZED_NAME_PATTERN, min_length=4)


def extract_date(text: str, patterns: Sequence[str]):
    """Decode the date captured by the first matching pattern"""
    value = extract(text, patterns)
    if value is None:
        return None
    return parse_date(value, TEXT_DATE_FORMATS)


def extract_date_of_birth(text: str):
    return extract_date(text, DATE_OF_BIRTH_PATTERNS)


def extract_expiration_date(text: str):
    return extract_date(text, EXPIRATION_PATTERNS)


def extract_license_number(text: str) -> Optional[str]:
    return extract(text, LICENSE_NUMBER_PATTERNS)


def extract_id_number(text: str) -> Optional[str]:
    return extract(text, ID_NUMBER_PATTERNS)


def extract_passport_number(text: str) -> Optional[str]:
    return extract(text, PASSPORT_NUMBER_PATTERNS)


def extract_gender(text: str) -> Optional[Gender]:
    value = extract(text, GENDER_PATTERNS)
    return normalize_sex_field(value)


def extract_issuing_authority(lines: Sequence[str], document_type: DocumentType) -> Optional[str]:
    """The whole first line mentioning an authority keyword for this document type"""
    keywords = AUTHORITY_KEYWORDS.get(document_type, [])
    return find_line_with_keyword(lines, keywords)


def extract_nationality(lines: Sequence[str]) -> Optional[str]:
    return extract_after_keyword(lines, NATIONALITY_KEYWORDS, min_length=1)


def _clean_lines(lines) -> List[str]:
    if not lines or isinstance(lines, str):
        return []
    return [clean_text(line) for line in lines if isinstance(line, str) and line.strip()]


def parse_id(lines: Sequence[str], document_type: DocumentType, verbose: bool = None) -> Optional[PersonalDocument]:
    """
    Extract a driver's license or national ID from OCR lines

    Args:
        lines: OCR lines in reading order
        document_type: DRIVERS_LICENSE or NATIONAL_ID
        verbose: Print progress

    Returns:
        PersonalDocument, or None for other document types or when neither a
        name nor a document number was found
    """
    if verbose is None:
        verbose = config.VERBOSE

    if document_type == DocumentType.DRIVERS_LICENSE:
        number_extractor = extract_license_number
    elif document_type == DocumentType.NATIONAL_ID:
        number_extractor = extract_id_number
    else:
        return None

    lines = _clean_lines(lines)
    text = _join(lines)

    full_name = extract_name(lines, ID_NAME_KEYWORDS)
    document_number = number_extractor(text)

    if full_name is None and document_number is None:
        if verbose:
            print(f"  ✗ {document_type.value}: no name or document number found")
        return None

    if verbose:
        print(f"  ✓ {document_type.value} fields extracted from {len(lines)} lines")

    return PersonalDocument(
        document_type=document_type,
        full_name=full_name,
        date_of_birth=extract_date_of_birth(text),
        document_number=document_number,
        expiration_date=extract_expiration_date(text),
        issuing_authority=extract_issuing_authority(lines, document_type),
        gender=extract_gender(text),
    )


def parse_passport_text(lines: Sequence[str], verbose: bool = None) -> Optional[PersonalDocument]:
    """
    Extract passport fields from the printed (non-MRZ) text of the data page

    Returns:
        PersonalDocument, or None when neither a name nor a passport number was found
    """
    if verbose is None:
        verbose = config.VERBOSE

    lines = _clean_lines(lines)
    text = _join(lines)

    full_name = extract_name(lines, PASSPORT_NAME_KEYWORDS)
    document_number = extract_passport_number(text)

    if full_name is None and document_number is None:
        if verbose:
            print("  ✗ Passport text: no name or passport number found")
        return None

    if verbose:
        print(f"  ✓ Passport fields extracted from {len(lines)} lines")

    return PersonalDocument(
        document_type=DocumentType.PASSPORT,
        full_name=full_name,
        date_of_birth=extract_date_of_birth(text),
        document_number=document_number,
        expiration_date=extract_expiration_date(text),
        nationality=extract_nationality(lines),
        issuing_authority=extract_issuing_authority(lines, DocumentType.PASSPORT),
        gender=extract_gender(text),
    )
