"""
Tests for the AAMVA PDF417 barcode parser.
"""
import itertools
import random
from datetime import date

import pytest

from aamva_parser import (
    extract_all_fields,
    is_well_formed_aamva,
    parse_aamva_elements,
    parse_us_drivers_license,
)
from models import DocumentType, Gender


def build_payload(elements):
    return "\n".join(["@", "ANSI 636014080102DL00410288ZC03290024DL"] + [code + value for code, value in elements])


FILLER = [("DBB", "01152000"), ("DBA", "01152030"), ("DAU", "070 IN"), ("DAY", "BRO"), ("DCA", "C")]
SIGNAL = [("DAC", "JOHN"), ("DAD", "Q"), ("DCS", "DOE"), ("DAQ", "D1"), ("DCF", "DF1")]
SIGNAL_SUBSETS = [combo for size in range(len(SIGNAL) + 1) for combo in itertools.combinations(SIGNAL, size)]


class TestParseUSDriversLicense:

    def test_full_payload(self, aamva_payload):
        document = parse_us_drivers_license(aamva_payload)

        assert document is not None
        assert document.document_type == DocumentType.US_DRIVERS_LICENSE_BARCODE
        assert document.full_name == "JANE MARIE SMITH"
        assert document.document_number == "D1234567"
        assert document.date_of_birth == date(2000, 1, 15)
        assert document.expiration_date == date(2030, 1, 15)
        assert document.gender == Gender.FEMALE
        assert document.issuing_authority == "Department of Motor Vehicles - USA"
        assert document.place_of_birth == "123 MAIN ST, SACRAMENTO, CA, 958220000"
        assert document.nationality == "United States"

    def test_name_order_without_middle(self):
        document = parse_us_drivers_license(build_payload([("DCS", "DOE"), ("DAC", "JOHN")]))
        assert document.full_name == "JOHN DOE"

    def test_document_number_falls_back_to_discriminator(self):
        document = parse_us_drivers_license(build_payload([("DCF", "9988776655")]))
        assert document.document_number == "9988776655"
        assert document.full_name is None

    def test_wrong_width_birth_date(self):
        document = parse_us_drivers_license(build_payload([("DAQ", "X1"), ("DBB", "01159")]))
        assert document is not None
        assert document.date_of_birth is None

    @pytest.mark.parametrize("code,expected", [
        ("1", Gender.MALE),
        ("M", Gender.MALE),
        ("2", Gender.FEMALE),
        ("F", Gender.FEMALE),
        ("9", Gender.UNKNOWN),
        ("X", Gender.UNKNOWN),
    ])
    def test_gender_codes(self, code, expected):
        document = parse_us_drivers_license(build_payload([("DAQ", "X1"), ("DBC", code)]))
        assert document.gender == expected

    def test_missing_gender(self):
        document = parse_us_drivers_license(build_payload([("DAQ", "X1")]))
        assert document.gender is None

    def test_issuing_authority_fallbacks(self):
        with_dca = parse_us_drivers_license(build_payload([("DAQ", "X1"), ("DCA", "D")]))
        assert with_dca.issuing_authority == "D"

        bare = parse_us_drivers_license(build_payload([("DAQ", "X1")]))
        assert bare.issuing_authority == "Department of Motor Vehicles"

    def test_duplicate_codes_last_wins(self):
        document = parse_us_drivers_license(build_payload([("DAQ", "FIRST1"), ("DAQ", "SECOND2")]))
        assert document.document_number == "SECOND2"

    def test_no_name_and_no_number(self):
        assert parse_us_drivers_license(build_payload(FILLER)) is None

    def test_empty_number_element_is_absent(self):
        payload = build_payload(FILLER + [("DAQ", "")])
        assert "DAQ" not in parse_aamva_elements(payload)
        assert parse_us_drivers_license(payload) is None

    def test_empty_element_next_to_a_name(self):
        document = parse_us_drivers_license(build_payload(FILLER + [("DAQ", "  "), ("DCS", "DOE")]))
        assert document.full_name == "DOE"
        assert document.document_number is None

    def test_carriage_return_line_endings(self):
        payload = "@\r\nDAQD7654321\r\nDCSROE\r\nDACRICHARD\r\n"
        document = parse_us_drivers_license(payload)
        assert document.full_name == "RICHARD ROE"
        assert document.document_number == "D7654321"


class TestSuccessGuardProperty:
    """Well-formed payloads decode iff a name or number element is present."""

    @pytest.mark.parametrize("subset", SIGNAL_SUBSETS)
    def test_guard(self, subset):
        payload = build_payload(FILLER + list(subset))
        assert is_well_formed_aamva(payload)
        document = parse_us_drivers_license(payload)
        assert (document is not None) == (len(subset) > 0)


class TestMalformedInput:

    def test_missing_header(self):
        assert parse_us_drivers_license("DAQD1234567\nDCSSMITH") is None

    def test_empty_and_non_string(self):
        assert parse_us_drivers_license("") is None
        assert parse_us_drivers_license(None) is None
        assert parse_us_drivers_license(b"@\nDAQ1") is None

    def test_random_garbage_never_raises(self):
        rng = random.Random(1234)
        for _ in range(200):
            garbage = bytes(rng.randrange(256) for _ in range(rng.randrange(1, 300)))
            text = garbage.decode("latin-1").lstrip("@")
            assert parse_us_drivers_license(text) is None


class TestDiagnostics:

    def test_element_map(self, aamva_payload):
        elements = parse_aamva_elements(aamva_payload)
        assert elements["DAQ"] == "D1234567"
        assert elements["DCG"] == "USA"
        assert "ANS" not in elements

    def test_extract_all_fields_labels_codes(self):
        fields = extract_all_fields(build_payload([("DAQ", "D1"), ("DZZ", "custom")]))
        assert fields["DAQ (Customer ID number)"] == "D1"
        assert fields["DZZ (Unknown field)"] == "custom"

    def test_well_formed_needs_five_elements(self):
        assert is_well_formed_aamva(build_payload(FILLER))
        assert not is_well_formed_aamva(build_payload(FILLER[:4]))
        assert not is_well_formed_aamva("DAQ1\nDAQ2\nDAQ3\nDAQ4\nDAQ5\nDAQ6")
