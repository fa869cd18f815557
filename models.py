"""
Data models for decoded identity documents and invoices
"""
import datetime as dt
import json
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import config


class DocumentType(str, Enum):
    """Kinds of documents the parsers understand"""
    DRIVERS_LICENSE = "Driver's License"
    NATIONAL_ID = "National ID"
    PASSPORT = "Passport"
    US_DRIVERS_LICENSE_BARCODE = "US DL Code"

    @property
    def uses_barcode(self) -> bool:
        return self is DocumentType.US_DRIVERS_LICENSE_BARCODE


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"


class PersonalDocument(BaseModel):
    """
    Decoded identity document

    Every field except document_type is best-effort. Parsers only build one
    when at least full_name or document_number was found.
    """
    model_config = ConfigDict(frozen=True)

    document_type: DocumentType
    full_name: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    document_number: Optional[str] = None
    expiration_date: Optional[dt.date] = None
    nationality: Optional[str] = None
    issuing_authority: Optional[str] = None
    gender: Optional[Gender] = None
    place_of_birth: Optional[str] = None  # street address for barcode licenses

    @property
    def is_expired(self) -> bool:
        """True when expiration_date is present and already in the past"""
        if self.expiration_date is None:
            return False
        return self.expiration_date < dt.date.today()


class MRZData(BaseModel):
    """Fields decoded from a TD-3 machine readable zone"""
    model_config = ConfigDict(frozen=True)

    passport_number: Optional[str] = None
    full_name: Optional[str] = None
    nationality: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    gender: Optional[Gender] = None
    expiration_date: Optional[dt.date] = None
    issuing_country: Optional[str] = None


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
    amount: Optional[Decimal] = None


class InvoiceData(BaseModel):
    """
    Invoice fields extracted from OCR text

    total_amount is always recomputed from the line items and may disagree
    with the header amount; both are exposed so callers can flag it.
    """
    model_config = ConfigDict(frozen=True)

    vendor: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[dt.date] = None
    invoice_number: Optional[str] = None
    line_items: List[LineItem] = Field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.amount for item in self.line_items if item.amount is not None), Decimal("0"))

    @property
    def formatted_date(self) -> str:
        if self.date is None:
            return "N/A"
        return self.date.strftime("%b %d, %Y")

    @property
    def formatted_amount(self) -> str:
        if self.amount is None:
            return "N/A"
        return f"${self.amount:,.2f}"

    def to_json_string(self) -> str:
        payload = self.model_dump(mode="json")
        payload["total_amount"] = str(self.total_amount)
        return json.dumps(payload, indent=2)

    @classmethod
    def empty(cls) -> "InvoiceData":
        return cls()


class DocumentProcessingError(str, Enum):
    """Failure kinds surfaced next to a parse result"""
    DOCUMENT_NOT_DETECTED = "DocumentNotDetected"
    TEXT_RECOGNITION_FAILED = "TextRecognitionFailed"
    INVALID_DOCUMENT_FORMAT = "InvalidDocumentFormat"
    LOW_IMAGE_QUALITY = "LowImageQuality"
    UNSUPPORTED_DOCUMENT_TYPE = "UnsupportedDocumentType"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    DocumentProcessingError.DOCUMENT_NOT_DETECTED: "No document detected in the image",
    DocumentProcessingError.TEXT_RECOGNITION_FAILED: "Unable to recognize text from the document",
    DocumentProcessingError.INVALID_DOCUMENT_FORMAT: "Document format is not supported",
    DocumentProcessingError.LOW_IMAGE_QUALITY: "Image quality is too low for processing",
    DocumentProcessingError.UNSUPPORTED_DOCUMENT_TYPE: "This document type is not supported",
}


class TextObservation(BaseModel):
    """One recognized text region as delivered by the OCR engine"""
    text: str
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class DocumentProcessingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    document: Optional[PersonalDocument] = None
    confidence: float = 0.0
    processing_time: float = 0.0
    errors: List[DocumentProcessingError] = Field(default_factory=list)

    @property
    def is_successful(self) -> bool:
        return (
            self.document is not None
            and self.confidence > config.MIN_CONFIDENCE_THRESHOLD
            and not self.errors
        )

    @classmethod
    def failure(cls, error: DocumentProcessingError, processing_time: float = 0.0) -> "DocumentProcessingResult":
        """Result for a failure reported by the OCR or barcode collaborator"""
        return cls(document=None, confidence=0.0, processing_time=processing_time, errors=[error])
