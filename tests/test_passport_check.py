"""
Tests for TD3 per-field validation and ICAO check digits.
"""
from passport_check import validate_passport_fields
from td3_validation_check import td3_field, td3_field_charset_ok
from utils import compute_mrz_check_digit, validate_mrz_checksum

from conftest import MRZ_LINE1, MRZ_LINE2


class TestCheckDigits:

    def test_known_values(self):
        assert compute_mrz_check_digit("123456789") == "7"
        assert compute_mrz_check_digit("900115") == "8"
        assert compute_mrz_check_digit("290101") == "9"

    def test_letters_and_filler(self):
        # ICAO 9303 specimen: L898902C< -> 3
        assert validate_mrz_checksum("L898902C<", "3")

    def test_filler_check_digit_counts_as_zero(self):
        assert validate_mrz_checksum("<<<<<<<<<<<<<<", "<")
        assert validate_mrz_checksum("<<<<<<<<<<<<<<", "0")

    def test_rejects_invalid_characters(self):
        assert not validate_mrz_checksum("12a456", "0")
        assert not validate_mrz_checksum("", "0")


class TestValidatePassportFields:

    def test_all_fields_valid(self):
        result = validate_passport_fields(MRZ_LINE1, MRZ_LINE2)
        assert len(result) == 14
        assert all(status == "Valid" for status in result.values()), result

    def test_bad_document_number_check(self):
        line2 = MRZ_LINE2[:9] + "1" + MRZ_LINE2[10:]
        result = validate_passport_fields(MRZ_LINE1, line2)
        assert result["passport_number"] == "Valid"
        assert result["passport_number_check"] == "Invalid"
        assert result["final_check"] == "Invalid"

    def test_bad_birth_date(self):
        line2 = MRZ_LINE2[:13] + "901332" + MRZ_LINE2[19:]
        result = validate_passport_fields(MRZ_LINE1, line2)
        assert result["date_of_birth"] == "Invalid"
        assert result["birth_date_check"] == "Invalid"
        assert result["expiry_date"] == "Valid"

    def test_surname_only(self):
        line1 = "P<USADOE".ljust(44, "<")
        result = validate_passport_fields(line1, MRZ_LINE2)
        assert result["surname"] == "Valid"
        assert result["given_names"] == "Valid"

    def test_wrong_length_is_all_invalid(self):
        result = validate_passport_fields(MRZ_LINE1[:40], MRZ_LINE2)
        assert set(result.values()) == {"Invalid"}

    def test_non_string_input(self):
        result = validate_passport_fields(None, MRZ_LINE2)
        assert set(result.values()) == {"Invalid"}


class TestTD3Layout:

    def test_field_slices(self):
        assert td3_field(MRZ_LINE2, "line2", "birth_date") == "900115"
        assert td3_field(MRZ_LINE2[:20], "line2", "sex") == ""

    def test_field_charset(self):
        assert td3_field_charset_ok(MRZ_LINE2, "line2", "sex")
        assert td3_field_charset_ok(MRZ_LINE2[:20] + "X" + MRZ_LINE2[21:], "line2", "sex")
        assert not td3_field_charset_ok(MRZ_LINE2[:20] + "Q" + MRZ_LINE2[21:], "line2", "sex")
        assert td3_field_charset_ok(MRZ_LINE2, "line2", "personal_number")
