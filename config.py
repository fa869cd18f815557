"""
Configuration settings for the Identity Document Parser
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name, "").strip().lower()
    if value in ["on", "true", "1", "enabled"]:
        return True
    if value in ["off", "false", "0", "disabled"]:
        return False
    return default


class Config:
    """Application configuration"""

    # API Settings
    API_TITLE = "Identity Document Parser API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = """
    Parses machine-readable identity documents and OCR text into structured records.

    Features:
    - AAMVA PDF417 driver's license barcode decoding
    - ICAO 9303 TD-3 passport MRZ decoding
    - Heuristic OCR text extraction for passports, driver's licenses and national IDs
    - Invoice field and line item extraction
    """

    # Document Types
    SUPPORTED_DOCUMENT_TYPES = ["Driver's License", "National ID", "Passport", "US DL Code"]

    # Processing Settings
    MIN_CONFIDENCE_THRESHOLD = float(os.getenv("MIN_CONFIDENCE_THRESHOLD", "0.7"))
    MIN_IMAGE_PIXELS = 800 * 600

    # MRZ Settings
    TD3_LINE_LENGTH = 44
    TD3_TOTAL_LINES = 2
    MRZ_MIN_CANDIDATE_LENGTH = 40
    MRZ_CENTURY_PIVOT = int(os.getenv("MRZ_CENTURY_PIVOT", "30"))  # YY < pivot -> 20YY

    # AAMVA Settings
    AAMVA_MIN_ELEMENTS = 5
    DEFAULT_ISSUING_AUTHORITY = "Department of Motor Vehicles"
    BARCODE_NATIONALITY = "United States"

    # Diagnostics
    VERBOSE = _env_flag("SCANNER_VERBOSE")


# Create global config instance
config = Config()
