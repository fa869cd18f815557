"""
AAMVA PDF417 driver's license barcode parser

The payload is line oriented: a header line starting with '@', then one
data element per line made of a 3 letter element code (DAQ, DBB, ...)
followed by its value.
"""
from typing import Dict, List, Optional

from config import config
from date_normalizer import parse_fixed_width_date
from models import DocumentType, Gender, PersonalDocument
from sex_field_normalizer import normalize_sex_field


AAMVA_ELEMENT_CODES = {
    "DCA": "Jurisdiction-specific vehicle class",
    "DCB": "Jurisdiction-specific restriction codes",
    "DCD": "Jurisdiction-specific endorsement codes",
    "DBA": "Document expiration date",
    "DCS": "Customer family name",
    "DAC": "Customer first name",
    "DAD": "Customer middle name",
    "DBD": "Document issue date",
    "DBB": "Date of birth",
    "DBC": "Physical description - sex",
    "DAY": "Physical description - eye color",
    "DAU": "Physical description - height",
    "DAG": "Address - street 1",
    "DAI": "Address - city",
    "DAJ": "Address - jurisdiction code",
    "DAK": "Address - postal code",
    "DAQ": "Customer ID number",
    "DCF": "Document discriminator",
    "DCG": "Country identification",
    "DDE": "Family name truncation",
    "DDF": "First name truncation",
    "DDG": "Middle name truncation",
}

NAME_ELEMENTS = ["DAC", "DAD", "DCS"]  # first, middle, last
ADDRESS_ELEMENTS = ["DAG", "DAI", "DAJ", "DAK"]  # street, city, state, zip


def _split_payload(payload) -> List[str]:
    if not isinstance(payload, str):
        return []
    return payload.splitlines()


def _has_header(lines: List[str]) -> bool:
    return len(lines) > 0 and lines[0].startswith("@")


def _element_lines(lines: List[str]) -> List[str]:
    return [line for line in lines if len(line) >= 3 and line.startswith("D")]


def parse_aamva_elements(payload: str) -> Dict[str, str]:
    """
    Build the element map of an AAMVA payload

    Every line starting with 'D' that is at least 3 characters long is keyed
    by its first 3 characters. Later duplicates overwrite earlier ones.
    Values are whitespace-stripped and elements with an empty value are left
    out, so a code is in the map only when it carries data.
    """
    elements = {}
    for line in _element_lines(_split_payload(payload)):
        value = line[3:].strip()
        if value:
            elements[line[:3]] = value
    return elements


def _element(elements: Dict[str, str], code: str) -> Optional[str]:
    value = elements.get(code)
    return value if value else None


def extract_full_name(elements: Dict[str, str]) -> Optional[str]:
    parts = [_element(elements, code) for code in NAME_ELEMENTS]
    parts = [part for part in parts if part]
    return ' '.join(parts) if parts else None


def extract_address(elements: Dict[str, str]) -> Optional[str]:
    parts = [_element(elements, code) for code in ADDRESS_ELEMENTS]
    parts = [part for part in parts if part]
    return ', '.join(parts) if parts else None


def extract_issuing_authority(elements: Dict[str, str]) -> str:
    jurisdiction = _element(elements, "DCG")
    if jurisdiction:
        return f"{config.DEFAULT_ISSUING_AUTHORITY} - {jurisdiction}"

    issuer = _element(elements, "DCA")
    if issuer:
        return issuer

    return config.DEFAULT_ISSUING_AUTHORITY


def extract_gender(elements: Dict[str, str]) -> Optional[Gender]:
    code = _element(elements, "DBC")
    if code is None:
        return None
    return normalize_sex_field(code, numeric_codes=True) or Gender.UNKNOWN


def parse_us_drivers_license(payload: str, verbose: bool = None) -> Optional[PersonalDocument]:
    """
    Decode a US driver's license PDF417 payload

    Args:
        payload: Raw barcode string, expected to start with '@'
        verbose: Print progress

    Returns:
        PersonalDocument, or None when the header is missing or neither a
        name nor a document number could be decoded
    """
    if verbose is None:
        verbose = config.VERBOSE

    lines = _split_payload(payload)
    if not _has_header(lines):
        if verbose:
            print("  ✗ AAMVA payload rejected: missing '@' header")
        return None

    elements = parse_aamva_elements(payload)
    if verbose:
        print(f"  → AAMVA elements found: {len(elements)}")

    full_name = extract_full_name(elements)
    document_number = _element(elements, "DAQ") or _element(elements, "DCF")

    if full_name is None and document_number is None:
        if verbose:
            print("  ✗ AAMVA payload has neither name nor document number")
        return None

    document = PersonalDocument(
        document_type=DocumentType.US_DRIVERS_LICENSE_BARCODE,
        full_name=full_name,
        date_of_birth=parse_fixed_width_date(elements.get("DBB", "")),
        document_number=document_number,
        expiration_date=parse_fixed_width_date(elements.get("DBA", "")),
        nationality=config.BARCODE_NATIONALITY,
        issuing_authority=extract_issuing_authority(elements),
        gender=extract_gender(elements),
        place_of_birth=extract_address(elements),
    )

    if verbose:
        print("  ✓ AAMVA barcode decoded")

    return document


def extract_all_fields(payload: str) -> Dict[str, str]:
    """
    Diagnostic dump of every element line

    Keys are "<code> (<description>)"; codes outside the known table are
    described as "Unknown field".
    """
    result = {}
    for line in _element_lines(_split_payload(payload)):
        code = line[:3]
        description = AAMVA_ELEMENT_CODES.get(code, "Unknown field")
        result[f"{code} ({description})"] = line[3:]
    return result


def is_well_formed_aamva(payload: str) -> bool:
    """True when the header is present and at least AAMVA_MIN_ELEMENTS element lines follow"""
    lines = _split_payload(payload)
    if not _has_header(lines):
        return False
    return len(_element_lines(lines)) >= config.AAMVA_MIN_ELEMENTS
