"""
Individual field validation for TD3 MRZ passport lines
Diagnostic only: the MRZ parser never consults these results
"""
import re
from typing import Dict

from date_normalizer import parse_mrz_date
from td3_validation_check import TD3_MRZ_RULES, td3_field, td3_field_charset_ok
from utils import validate_mrz_checksum


def validate_passport_fields(line1: str, line2: str) -> Dict[str, str]:
    """
    Validate each field in a TD3 MRZ individually

    Args:
        line1: First MRZ line (44 characters)
        line2: Second MRZ line (44 characters)

    Returns:
        Dictionary with "Valid" or "Invalid" for each field and check digit:
        {
            "document_type": "Valid",
            "issuing_country": "Valid",
            "surname": "Valid",
            "given_names": "Valid",
            "passport_number": "Valid",
            "passport_number_check": "Valid",
            "nationality": "Valid",
            "date_of_birth": "Valid",
            "birth_date_check": "Invalid",
            "sex": "Valid",
            "expiry_date": "Valid",
            "expiry_date_check": "Valid",
            "personal_number": "Valid",
            "final_check": "Valid"
        }
    """
    result = {
        "document_type": "Invalid",
        "issuing_country": "Invalid",
        "surname": "Invalid",
        "given_names": "Invalid",
        "passport_number": "Invalid",
        "passport_number_check": "Invalid",
        "nationality": "Invalid",
        "date_of_birth": "Invalid",
        "birth_date_check": "Invalid",
        "sex": "Invalid",
        "expiry_date": "Invalid",
        "expiry_date_check": "Invalid",
        "personal_number": "Invalid",
        "final_check": "Invalid",
    }

    if not isinstance(line1, str) or not isinstance(line2, str):
        return result

    line1 = line1.strip().upper()
    line2 = line2.strip().upper()

    # Check line lengths
    if len(line1) != TD3_MRZ_RULES["line1"]["length"] or len(line2) != TD3_MRZ_RULES["line2"]["length"]:
        return result  # All fields remain Invalid

    result.update(_validate_line1_fields(line1))
    result.update(_validate_line2_fields(line2))

    return result


def _status(ok: bool) -> str:
    return "Valid" if ok else "Invalid"


def _validate_line1_fields(line1: str) -> Dict[str, str]:
    """Validate fields in Line 1 of TD3 MRZ"""
    result = {}

    result["document_type"] = _status(line1[0] == 'P' and re.match(r'^[A-Z<]$', line1[1]) is not None)

    country = td3_field(line1, "line1", "issuing_country")
    result["issuing_country"] = _status(re.match(r'^[A-Z]{3}$', country) is not None)

    surname_status, given_names_status = _validate_name_field(td3_field(line1, "line1", "name"))
    result["surname"] = surname_status
    result["given_names"] = given_names_status

    return result


def _validate_line2_fields(line2: str) -> Dict[str, str]:
    """Validate fields and check digits in Line 2 of TD3 MRZ"""
    result = {}

    number = td3_field(line2, "line2", "passport_number")
    result["passport_number"] = _status(re.match(r'^[A-Z0-9]+$', number.rstrip('<')) is not None)
    result["passport_number_check"] = _status(
        validate_mrz_checksum(number, td3_field(line2, "line2", "passport_number_check"))
    )

    nationality = td3_field(line2, "line2", "nationality")
    result["nationality"] = _status(re.match(r'^[A-Z]{3}$', nationality) is not None)

    birth_date = td3_field(line2, "line2", "birth_date")
    result["date_of_birth"] = _status(parse_mrz_date(birth_date) is not None)
    result["birth_date_check"] = _status(
        validate_mrz_checksum(birth_date, td3_field(line2, "line2", "birth_date_check"))
    )

    result["sex"] = _status(td3_field_charset_ok(line2, "line2", "sex"))

    expiry_date = td3_field(line2, "line2", "expiry_date")
    result["expiry_date"] = _status(parse_mrz_date(expiry_date) is not None)
    result["expiry_date_check"] = _status(
        validate_mrz_checksum(expiry_date, td3_field(line2, "line2", "expiry_date_check"))
    )

    # Optional field, all filler is fine
    result["personal_number"] = _status(td3_field_charset_ok(line2, "line2", "personal_number"))

    # Composite: number+check, birth date+check, expiry+check, personal number+check
    composite = line2[0:10] + line2[13:20] + line2[21:43]
    result["final_check"] = _status(validate_mrz_checksum(composite, td3_field(line2, "line2", "final_check")))

    return result


def _validate_name_field(name_field: str) -> tuple:
    """
    Validate the name field which contains surname and given names
    Format: SURNAME<<GIVEN<NAMES<<<<<<<<<<

    Returns:
        Tuple of (surname_status, given_names_status)
    """
    if '<<' not in name_field:
        return ("Invalid", "Invalid")

    surname_part, given_names_part = name_field.split('<<', 1)

    surname_status = _status(re.match(r'^[A-Z]+(<[A-Z]+)*$', surname_part) is not None)

    given_names_clean = given_names_part.rstrip('<')
    if not given_names_clean:
        # Some passports carry only a surname
        given_names_status = "Valid"
    else:
        given_names_status = _status(re.match(r'^[A-Z]+(<[A-Z]+)*$', given_names_clean) is not None)

    return (surname_status, given_names_status)
