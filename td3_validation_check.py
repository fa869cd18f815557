"""
TD3 MRZ field layout for passport documents
Positions are inclusive (start, end) character offsets within each 44 char line
"""
import re


TD3_MRZ_RULES = {
    "line1": {
        "length": 44,
        "fields": {
            "document_type": {"pos": (0, 1), "chars": "A-Z<"},      # 'P<' for passport
            "issuing_country": {"pos": (2, 4), "chars": "A-Z<"},    # ISO 3166-1 alpha-3
            "name": {"pos": (5, 43), "chars": "A-Z<"},              # SURNAME<<GIVEN<NAMES
        },
    },
    "line2": {
        "length": 44,
        "fields": {
            "passport_number": {"pos": (0, 8), "chars": "A-Z0-9<"},
            "passport_number_check": {"pos": (9, 9), "chars": "0-9<"},
            "nationality": {"pos": (10, 12), "chars": "A-Z<"},
            "birth_date": {"pos": (13, 18), "chars": "0-9"},        # YYMMDD
            "birth_date_check": {"pos": (19, 19), "chars": "0-9"},
            "sex": {"pos": (20, 20), "chars": "MFX<"},
            "expiry_date": {"pos": (21, 26), "chars": "0-9"},       # YYMMDD
            "expiry_date_check": {"pos": (27, 27), "chars": "0-9"},
            "personal_number": {"pos": (28, 41), "chars": "A-Z0-9<"},
            "personal_number_check": {"pos": (42, 42), "chars": "0-9<"},
            "final_check": {"pos": (43, 43), "chars": "0-9"},       # composite over line 2
        },
    },
}


def td3_field(line: str, line_key: str, field_name: str) -> str:
    """
    Slice a TD3 field out of an MRZ line

    Returns an empty string when the line is too short to contain the field.
    """
    start, end = TD3_MRZ_RULES[line_key]["fields"][field_name]["pos"]
    if len(line) <= end:
        return ""
    return line[start:end + 1]


def td3_field_charset_ok(line: str, line_key: str, field_name: str) -> bool:
    """True when the field is present and only uses its allowed characters"""
    value = td3_field(line, line_key, field_name)
    allowed = TD3_MRZ_RULES[line_key]["fields"][field_name]["chars"]
    return bool(value) and re.fullmatch(f"[{allowed}]+", value) is not None
