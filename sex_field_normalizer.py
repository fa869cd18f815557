"""
Sex Field Normalizer
Converts the sex codes used by barcodes, MRZ and printed labels to Gender
"""
from typing import Optional

from models import Gender


MALE_VALUES = ['M', 'MALE', 'MAN', 'HOMME', 'MASCULINO']
FEMALE_VALUES = ['F', 'FEMALE', 'WOMAN', 'FEMME', 'FEMENINO']

# AAMVA DBC uses 1 = male, 2 = female, 9 = not specified
AAMVA_NUMERIC_CODES = {
    '1': Gender.MALE,
    '2': Gender.FEMALE,
}


def normalize_sex_field(sex_value, numeric_codes: bool = False) -> Optional[Gender]:
    """
    Normalize a raw sex value

    Args:
        sex_value: Raw value from a barcode element, MRZ or OCR text
        numeric_codes: Also accept the AAMVA numeric codes

    Returns:
        Gender.MALE, Gender.FEMALE, or None when the value is not recognised
    """
    if not sex_value:
        return None

    # Convert to string and clean
    sex_str = str(sex_value).strip().upper()

    if numeric_codes and sex_str in AAMVA_NUMERIC_CODES:
        return AAMVA_NUMERIC_CODES[sex_str]

    if sex_str in MALE_VALUES:
        return Gender.MALE
    elif sex_str in FEMALE_VALUES:
        return Gender.FEMALE

    return None
