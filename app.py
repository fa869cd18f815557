"""
FastAPI application for identity document and invoice parsing
"""
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from aamva_parser import extract_all_fields, is_well_formed_aamva
from config import config
from models import DocumentProcessingResult, DocumentType, TextObservation
from passport_check import validate_passport_fields
from scanner import process_barcode, process_document, process_invoice


# Initialize FastAPI app
app = FastAPI(
    title=config.API_TITLE,
    version=config.API_VERSION,
    description=config.API_DESCRIPTION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request models
class DocumentScanRequest(BaseModel):
    """Request model for OCR based document parsing"""
    document_type: DocumentType = Field(default=DocumentType.PASSPORT, description="Driver's License, National ID, Passport or US DL Code")
    observations: List[TextObservation] = Field(default_factory=list, description="Recognized text lines with OCR confidence (0..1)")


class BarcodeScanRequest(BaseModel):
    """Request model for PDF417 payloads"""
    payload: str = Field(..., description="Decoded PDF417 barcode string")


class MRZValidationRequest(BaseModel):
    line1: str = Field(..., description="First TD3 MRZ line (44 characters)")
    line2: str = Field(..., description="Second TD3 MRZ line (44 characters)")


class InvoiceScanRequest(BaseModel):
    """Request model for invoice text - either full text or its lines"""
    text: Optional[str] = Field(None, description="Full OCR text of the invoice")
    lines: Optional[List[str]] = Field(None, description="OCR lines of the invoice")

    @model_validator(mode="after")
    def check_source(self):
        if self.text is None and self.lines is None:
            raise ValueError('either "text" or "lines" is required')
        return self


# Response models
class ScanResponse(BaseModel):
    """Response model for document parsing"""
    success: bool
    document: Optional[Dict] = None
    confidence: float = 0.0
    processing_time: str = ""
    errors: List[str] = []
    error_messages: List[str] = []
    is_expired: Optional[bool] = None


class BarcodeFieldsResponse(BaseModel):
    well_formed: bool
    fields: Dict[str, str]


class MRZValidationResponse(BaseModel):
    all_valid: bool
    fields: Dict[str, str]


def build_scan_response(result: DocumentProcessingResult) -> ScanResponse:
    document = result.document
    return ScanResponse(
        success=result.is_successful,
        document=document.model_dump(mode="json") if document is not None else None,
        confidence=round(result.confidence, 4),
        processing_time=f"{result.processing_time:.3f}s",
        errors=[error.value for error in result.errors],
        error_messages=[error.message for error in result.errors],
        is_expired=document.is_expired if document is not None else None,
    )


def respond(response: ScanResponse):
    # Failed parses come back as 422 with the full body
    if not response.success:
        return JSONResponse(status_code=422, content=response.model_dump(mode="json"))
    return response


# API endpoints
@app.get("/")
async def root():
    """Service summary"""
    return {
        "message": config.API_TITLE,
        "version": config.API_VERSION,
        "supported_document_types": config.SUPPORTED_DOCUMENT_TYPES,
        "endpoints": {
            "scan_document": "/scan/document - POST OCR lines of a passport, driver's license or national ID",
            "scan_barcode": "/scan/barcode - POST a PDF417 driver's license payload",
            "scan_invoice": "/scan/invoice - POST invoice OCR text",
            "barcode_fields": "/barcode/fields - POST a PDF417 payload for a raw element dump",
            "mrz_validate": "/mrz/validate - POST two TD3 MRZ lines for check digit diagnostics",
            "health": "/health - GET endpoint to check API health",
            "docs": "/docs - Swagger UI documentation"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": config.API_TITLE,
        "version": config.API_VERSION
    }


@app.post("/scan/document", response_model=ScanResponse)
async def scan_document(request: DocumentScanRequest):
    """
    Parse OCR text of an identity document

    Passports are decoded from the MRZ when present, otherwise from the
    printed labels. Licenses and national IDs use the printed labels.

    Example:
        ```json
        {
            "document_type": "Passport",
            "observations": [
                {"text": "P<USADOE<<JOHN<<<<<<<<<<<<<<<<<<<<<<<<<<<<<<", "confidence": 0.93},
                {"text": "1234567897USA9001158M2901019<<<<<<<<<<<<<<04", "confidence": 0.91}
            ]
        }
        ```
    """
    try:
        result = process_document(request.observations, request.document_type)
        return respond(build_scan_response(result))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error processing document: {str(e)}"
        )


@app.post("/scan/barcode", response_model=ScanResponse)
async def scan_barcode(request: BarcodeScanRequest):
    """Decode an AAMVA PDF417 driver's license payload"""
    try:
        result = process_barcode(request.payload)
        return respond(build_scan_response(result))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error processing barcode: {str(e)}"
        )


@app.post("/scan/invoice")
async def scan_invoice(request: InvoiceScanRequest):
    """Extract vendor, amount, date, invoice number and line items"""
    try:
        source = request.text if request.text is not None else request.lines
        invoice = process_invoice(source)
        payload = invoice.model_dump(mode="json")
        payload["total_amount"] = str(invoice.total_amount)
        return payload
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Error processing invoice: {str(e)}"
        )


@app.post("/barcode/fields", response_model=BarcodeFieldsResponse)
async def barcode_fields(request: BarcodeScanRequest):
    """Raw element dump of a PDF417 payload, including unknown element codes"""
    return BarcodeFieldsResponse(
        well_formed=is_well_formed_aamva(request.payload),
        fields=extract_all_fields(request.payload)
    )


@app.post("/mrz/validate", response_model=MRZValidationResponse)
async def validate_mrz(request: MRZValidationRequest):
    """
    Per-field and check digit validation of a TD3 MRZ

    Diagnostic only, /scan/document does not reject documents on bad check digits.
    """
    fields = validate_passport_fields(request.line1, request.line2)
    return MRZValidationResponse(
        all_valid=all(status == "Valid" for status in fields.values()),
        fields=fields
    )


# Run the application
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
