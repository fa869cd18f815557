"""
Invoice field extraction from OCR text

Each line is inspected on its own. The vendor is the first line that looks
like a company name; amount, date and invoice number keep the last value
found, so a closing "Total:" line overrides prices seen earlier.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence, Union

from config import config
from date_normalizer import INVOICE_DATE_FORMATS, parse_date
from field_patterns import extract
from models import InvoiceData, LineItem
from utils import split_lines


VENDOR_KEYWORDS = ["company", "corp", "corporation", "inc", "llc", "ltd", "limited"]
VENDOR_NAME_PATTERN = re.compile(r'^[A-Z][a-zA-Z\s&]+$')

AMOUNT_PATTERNS = [
    r'\$[\d,]+\.?\d*',
    r'total:?\s*\$?[\d,]+\.?\d*',
    r'amount:?\s*\$?[\d,]+\.?\d*',
]

# A date never starts in the middle of a digit run, e.g. inside an ISO year
DATE_PATTERNS = [
    r'(?<!\d)\d{1,2}/\d{1,2}/\d{2,4}',
    r'(?<!\d)\d{1,2}-\d{1,2}-\d{2,4}',
    r'(?<!\d)\d{4}-\d{2}-\d{2}',
]

# Codes must contain a digit so "Invoice Date" does not yield "Date"
INVOICE_CODE = r'(?=[A-Z\-]*[0-9])([A-Z0-9\-]{3,})'

INVOICE_NUMBER_PATTERNS = [
    r'invoice\s*#?:?\s*' + INVOICE_CODE,
    r'inv\s*#?:?\s*' + INVOICE_CODE,
    r'#' + INVOICE_CODE,
]

# description, quantity, unit price, amount - all on one line
LINE_ITEM_PATTERN = re.compile(r'^(.+?)\s+(\d+)\s+\$?([\d,]+\.?\d*)\s+\$?([\d,]+\.?\d*)$')


def to_decimal(value: str) -> Optional[Decimal]:
    """Parse a money string after dropping everything but digits and dots"""
    if not isinstance(value, str):
        return None

    number_string = re.sub(r'[^\d.]', '', value)
    if not number_string:
        return None

    try:
        return Decimal(number_string)
    except InvalidOperation:
        return None


def is_likely_vendor_name(text: str) -> bool:
    if not (3 < len(text) < 100):
        return False

    lowercased = text.lower()
    if any(keyword in lowercased for keyword in VENDOR_KEYWORDS):
        return True

    return VENDOR_NAME_PATTERN.match(text) is not None


def extract_amount(text: str) -> Optional[Decimal]:
    match = extract(text, AMOUNT_PATTERNS)
    if match is None:
        return None
    return to_decimal(match)


def extract_date(text: str):
    """Try each date shape in turn; a shape whose match does not parse falls through"""
    for pattern in DATE_PATTERNS:
        match = re.search(pattern, text)
        if not match:
            continue
        parsed = parse_date(match.group(0), INVOICE_DATE_FORMATS)
        if parsed is not None:
            return parsed
    return None


def extract_invoice_number(text: str) -> Optional[str]:
    return extract(text, INVOICE_NUMBER_PATTERNS)


def extract_line_item(text: str) -> Optional[LineItem]:
    """
    Parse "Widget 3 $10.00 $30.00" style lines

    Multi-line items are not supported.
    """
    if not LINE_ITEM_PATTERN.match(text):
        return None

    tokens = text.split()
    if len(tokens) < 4:
        return None

    description = ' '.join(tokens[:-3])
    if not description:
        return None

    try:
        quantity = int(tokens[-3])
    except ValueError:
        quantity = None

    return LineItem(
        description=description,
        quantity=quantity,
        unit_price=to_decimal(tokens[-2]),
        amount=to_decimal(tokens[-1]),
    )


def extract_invoice(source: Union[str, Sequence[str]], verbose: bool = None) -> InvoiceData:
    """
    Extract invoice fields from OCR text

    Args:
        source: Full OCR text, or its lines
        verbose: Print progress

    Returns:
        InvoiceData; fields that were not found stay None
    """
    if verbose is None:
        verbose = config.VERBOSE

    if isinstance(source, str):
        lines = split_lines(source)
    elif source:
        lines = [line.strip() for line in source if isinstance(line, str) and line.strip()]
    else:
        lines = []

    vendor = None
    amount = None
    invoice_date = None
    invoice_number = None
    line_items = []

    for line in lines:
        if vendor is None and is_likely_vendor_name(line):
            vendor = line

        extracted_amount = extract_amount(line)
        if extracted_amount is not None:
            amount = extracted_amount

        extracted_date = extract_date(line)
        if extracted_date is not None:
            invoice_date = extracted_date

        extracted_number = extract_invoice_number(line)
        if extracted_number is not None:
            invoice_number = extracted_number

        line_item = extract_line_item(line)
        if line_item is not None:
            line_items.append(line_item)

    if verbose:
        print(f"  → Invoice lines scanned: {len(lines)}, line items: {len(line_items)}")

    return InvoiceData(
        vendor=vendor,
        amount=amount,
        date=invoice_date,
        invoice_number=invoice_number,
        line_items=line_items,
    )
