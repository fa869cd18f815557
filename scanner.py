"""
Document dispatch with the MRZ -> printed text fallback chain
Turns OCR observations or a barcode payload into a DocumentProcessingResult
"""
import time
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from aamva_parser import parse_us_drivers_license
from config import config
from invoice_extractor import extract_invoice
from models import (
    DocumentProcessingError,
    DocumentProcessingResult,
    DocumentType,
    InvoiceData,
    PersonalDocument,
    TextObservation,
)
from mrz_parser import parse_mrz
from text_parser import parse_id, parse_passport_text


Observation = Union[TextObservation, Tuple[str, float], str]


def parse_passport(lines: Sequence[str], verbose: bool = None) -> Optional[PersonalDocument]:
    """
    Parse a passport page

    Flow:
    1. TD3 MRZ → decoded? Return
    2. Printed text heuristics on the same lines → found? Return
    3. None
    """
    if verbose is None:
        verbose = config.VERBOSE

    if verbose:
        print("\n🔍 STEP 1: MRZ Decoding")

    mrz_data = parse_mrz(lines, verbose=verbose)
    if mrz_data is not None and (mrz_data.full_name or mrz_data.passport_number):
        if verbose:
            print("✅ SUCCESS via MRZ")
        return PersonalDocument(
            document_type=DocumentType.PASSPORT,
            full_name=mrz_data.full_name,
            date_of_birth=mrz_data.date_of_birth,
            document_number=mrz_data.passport_number,
            expiration_date=mrz_data.expiration_date,
            nationality=mrz_data.nationality,
            issuing_authority=mrz_data.issuing_country,
            gender=mrz_data.gender,
        )

    if verbose:
        print("  ⚠ MRZ not usable, falling back to printed text")
        print("\n🔍 STEP 2: Printed Text Extraction")

    return parse_passport_text(lines, verbose=verbose)


def parse_document(lines: Sequence[str], document_type: DocumentType, verbose: bool = None) -> Optional[PersonalDocument]:
    """Route OCR lines to the parser for the document type"""
    document_type = DocumentType(document_type)

    if document_type == DocumentType.PASSPORT:
        return parse_passport(lines, verbose=verbose)
    elif document_type in (DocumentType.DRIVERS_LICENSE, DocumentType.NATIONAL_ID):
        return parse_id(lines, document_type, verbose=verbose)
    elif document_type.uses_barcode:
        return parse_us_drivers_license('\n'.join(lines), verbose=verbose)

    return None


def normalize_observations(observations: Iterable[Observation]) -> List[TextObservation]:
    """Accept TextObservation objects, (text, confidence) pairs or bare strings"""
    normalized = []
    for observation in observations or []:
        if isinstance(observation, TextObservation):
            normalized.append(observation)
        elif isinstance(observation, str):
            normalized.append(TextObservation(text=observation))
        else:
            text, confidence = observation
            normalized.append(TextObservation(text=text, confidence=confidence))
    return normalized


def average_confidence(observations: Sequence[TextObservation]) -> float:
    if not observations:
        return 0.0
    return sum(o.confidence for o in observations) / len(observations)


def is_image_quality_sufficient(width: int, height: int) -> bool:
    return width * height >= config.MIN_IMAGE_PIXELS


def process_document(
    observations: Iterable[Observation],
    document_type: DocumentType,
    image_size: Optional[Tuple[int, int]] = None,
    verbose: bool = None
) -> DocumentProcessingResult:
    """
    Parse OCR observations into a DocumentProcessingResult

    Args:
        observations: Recognized text regions in reading order
        document_type: Type of document on the image
        image_size: Optional (width, height) of the source image
        verbose: Print progress

    Returns:
        DocumentProcessingResult with the mean OCR confidence and any errors
    """
    if verbose is None:
        verbose = config.VERBOSE

    start_time = time.time()

    try:
        document_type = DocumentType(document_type)
    except ValueError:
        return DocumentProcessingResult.failure(
            DocumentProcessingError.UNSUPPORTED_DOCUMENT_TYPE,
            processing_time=time.time() - start_time
        )

    if verbose:
        print("\n" + "=" * 60)
        print(f"📄 DOCUMENT PARSER - {document_type.value}")
        print("=" * 60)

    if image_size is not None and not is_image_quality_sufficient(*image_size):
        if verbose:
            print(f"  ✗ Image too small: {image_size[0]}x{image_size[1]}")
        return DocumentProcessingResult.failure(
            DocumentProcessingError.LOW_IMAGE_QUALITY,
            processing_time=time.time() - start_time
        )

    # pydantic ValidationError is a ValueError; malformed tuples raise ValueError or TypeError
    try:
        observations = [o for o in normalize_observations(observations) if o.text.strip()]
    except (ValueError, TypeError) as e:
        if verbose:
            print(f"  ✗ Unusable text observations: {e}")
        return DocumentProcessingResult.failure(
            DocumentProcessingError.TEXT_RECOGNITION_FAILED,
            processing_time=time.time() - start_time
        )

    if not observations:
        if verbose:
            print("  ✗ No text observations")
        return DocumentProcessingResult.failure(
            DocumentProcessingError.DOCUMENT_NOT_DETECTED,
            processing_time=time.time() - start_time
        )

    lines = [o.text for o in observations]
    confidence = average_confidence(observations)
    document = parse_document(lines, document_type, verbose=verbose)

    result = DocumentProcessingResult(
        document=document,
        confidence=confidence,
        processing_time=time.time() - start_time,
        errors=[] if document is not None else [DocumentProcessingError.INVALID_DOCUMENT_FORMAT]
    )

    if verbose:
        print(f"  → Confidence: {confidence:.2f}, successful: {result.is_successful}")
        print(f"  → Total time: {result.processing_time:.2f}s")

    return result


def process_barcode(payload: str, verbose: bool = None) -> DocumentProcessingResult:
    """Parse a PDF417 payload; barcode decodes carry full confidence on success"""
    start_time = time.time()

    if not isinstance(payload, str) or not payload.strip():
        return DocumentProcessingResult.failure(
            DocumentProcessingError.DOCUMENT_NOT_DETECTED,
            processing_time=time.time() - start_time
        )

    document = parse_us_drivers_license(payload, verbose=verbose)

    return DocumentProcessingResult(
        document=document,
        confidence=1.0 if document is not None else 0.0,
        processing_time=time.time() - start_time,
        errors=[] if document is not None else [DocumentProcessingError.INVALID_DOCUMENT_FORMAT]
    )


def process_invoice(source: Union[str, Sequence[str]], verbose: bool = None) -> InvoiceData:
    return extract_invoice(source, verbose=verbose)
