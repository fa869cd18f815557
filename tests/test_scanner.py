"""
Tests for document dispatch, the passport fallback chain and result scoring.
"""
import pytest

from models import DocumentProcessingError, DocumentProcessingResult, DocumentType, TextObservation
from scanner import (
    average_confidence,
    normalize_observations,
    parse_document,
    parse_passport,
    process_barcode,
    process_document,
    process_invoice,
)

from conftest import MRZ_LINE1, MRZ_LINE2


LICENSE_LINES = ["DEPARTMENT OF MOTOR VEHICLES", "DL D1234567", "NAME JANE DOE", "DOB 01/15/1990"]


class TestPassportFallback:

    def test_mrz_path(self, passport_ocr_lines):
        document = parse_passport(passport_ocr_lines)

        assert document.document_type == DocumentType.PASSPORT
        assert document.full_name == "JOHN DOE"
        assert document.document_number == "123456789"
        assert document.nationality == "USA"
        assert document.issuing_authority == "USA"

    def test_printed_text_when_no_mrz(self):
        document = parse_passport(["PASSPORT NO: X1234567", "SURNAME: ERIKSSON"])
        assert document.document_number == "X1234567"
        assert document.full_name == "ERIKSSON"

    def test_printed_text_when_mrz_is_empty(self):
        lines = [
            "PASSPORT NO: X1234567",
            "SURNAME: ERIKSSON",
            "P<USA" + "<" * 39,
            "<" * 10 + MRZ_LINE2[10:],
        ]
        document = parse_passport(lines)
        assert document.document_number == "X1234567"
        assert document.full_name == "ERIKSSON"

    def test_nothing_usable(self):
        assert parse_passport(["PASSPORT", "REPUBLIC OF UTOPIA"]) is None


class TestParseDocument:

    def test_dispatch_by_type(self):
        document = parse_document(LICENSE_LINES, DocumentType.DRIVERS_LICENSE)
        assert document.document_type == DocumentType.DRIVERS_LICENSE

    def test_dispatch_accepts_type_value(self):
        document = parse_document(LICENSE_LINES, "National ID")
        assert document.document_type == DocumentType.NATIONAL_ID

    def test_barcode_type_joins_lines(self, aamva_payload):
        document = parse_document(aamva_payload.split("\n"), DocumentType.US_DRIVERS_LICENSE_BARCODE)
        assert document.full_name == "JANE MARIE SMITH"


class TestProcessDocument:

    def test_successful_passport(self):
        result = process_document([(MRZ_LINE1, 0.9), (MRZ_LINE2, 0.8)], DocumentType.PASSPORT)

        assert result.document.full_name == "JOHN DOE"
        assert result.confidence == pytest.approx(0.85)
        assert result.errors == []
        assert result.is_successful
        assert result.processing_time >= 0

    def test_low_confidence_keeps_document(self):
        result = process_document([(line, 0.5) for line in LICENSE_LINES], DocumentType.DRIVERS_LICENSE)
        assert result.document is not None
        assert result.errors == []
        assert not result.is_successful

    def test_threshold_is_strict(self):
        result = process_document([("DL D1234567", 0.7)], DocumentType.DRIVERS_LICENSE)
        assert result.document is not None
        assert not result.is_successful

    def test_unparseable_text(self):
        result = process_document(["hello world"], DocumentType.DRIVERS_LICENSE)
        assert result.document is None
        assert result.errors == [DocumentProcessingError.INVALID_DOCUMENT_FORMAT]
        assert not result.is_successful

    def test_no_observations(self):
        result = process_document([], DocumentType.PASSPORT)
        assert result.errors == [DocumentProcessingError.DOCUMENT_NOT_DETECTED]

        blank = process_document(["   ", ""], DocumentType.PASSPORT)
        assert blank.errors == [DocumentProcessingError.DOCUMENT_NOT_DETECTED]

    def test_small_image(self):
        result = process_document(LICENSE_LINES, DocumentType.DRIVERS_LICENSE, image_size=(640, 480))
        assert result.errors == [DocumentProcessingError.LOW_IMAGE_QUALITY]
        assert result.document is None

    def test_minimum_image_size(self):
        result = process_document(LICENSE_LINES, DocumentType.DRIVERS_LICENSE, image_size=(800, 600))
        assert result.is_successful

    def test_unsupported_type(self):
        result = process_document(LICENSE_LINES, "Boarding Pass")
        assert result.errors == [DocumentProcessingError.UNSUPPORTED_DOCUMENT_TYPE]

    @pytest.mark.parametrize("observations", [
        [("DL D1234567", 1.5)],
        [("DL D1234567", -0.1)],
        [("DL D1234567", 0.9, "extra")],
        [42],
    ])
    def test_malformed_observations(self, observations):
        result = process_document(observations, DocumentType.DRIVERS_LICENSE)
        assert result.document is None
        assert result.errors == [DocumentProcessingError.TEXT_RECOGNITION_FAILED]
        assert not result.is_successful


class TestProcessBarcode:

    def test_decoded_payload(self, aamva_payload):
        result = process_barcode(aamva_payload)
        assert result.confidence == 1.0
        assert result.is_successful

    def test_garbage_payload(self):
        result = process_barcode("not a barcode")
        assert result.confidence == 0.0
        assert result.errors == [DocumentProcessingError.INVALID_DOCUMENT_FORMAT]

    def test_empty_payload(self):
        result = process_barcode("")
        assert result.errors == [DocumentProcessingError.DOCUMENT_NOT_DETECTED]


class TestHelpers:

    def test_normalize_observations(self):
        observations = normalize_observations([
            TextObservation(text="a", confidence=0.5),
            ("b", 0.25),
            "c",
        ])
        assert [o.text for o in observations] == ["a", "b", "c"]
        assert [o.confidence for o in observations] == [0.5, 0.25, 1.0]

    def test_average_confidence(self):
        assert average_confidence([]) == 0.0
        observations = normalize_observations([("a", 0.2), ("b", 0.4)])
        assert average_confidence(observations) == pytest.approx(0.3)

    def test_failure_result(self):
        result = DocumentProcessingResult.failure(DocumentProcessingError.TEXT_RECOGNITION_FAILED, processing_time=1.5)
        assert result.document is None
        assert result.processing_time == 1.5
        assert not result.is_successful

    def test_process_invoice(self):
        assert process_invoice("Total: $5.00").amount is not None


@pytest.mark.parametrize("document_type", list(DocumentType))
def test_date_and_sex_alone_are_not_a_document(document_type):
    assert parse_document(["DOB: 01/15/1990", "SEX: M"], document_type) is None
