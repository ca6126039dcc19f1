"""Cell value normalization for spreadsheet rows.

Source sheets are maintained by hand, so every parser here is total: bad input
yields a safe default instead of an exception and one broken cell never fails
a whole ETL run.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser

from loan_status_engine.utils.date_utils import excel_serial_to_date

_CURRENCY_NOISE = re.compile(r"[$£€,\s]")
_LEADING_FLOAT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")

TRUE_VALUES = ("TRUE", "Yes")

# Fill-ins for date parts missing from free text; a part taken from either
# shows up as a difference between the two parses
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a spreadsheet number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_date(value: Any) -> Optional[date]:
    """
    Normalize a date cell.

    Accepts date/datetime objects, spreadsheet serial numbers and free text.
    Returns None for empty or unparseable input, and for text missing a year,
    month or day ("15", "March"): those are never completed from the clock.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return excel_serial_to_date(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text, default=_FILL_A).date()
            if parsed != date_parser.parse(text, default=_FILL_B).date():
                return None
            return parsed
        except (ValueError, OverflowError):
            return None
    return None


def format_iso(value: Optional[date]) -> Optional[str]:
    """Render a date as yyyy-mm-dd"""
    return value.isoformat() if value is not None else None


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a currency/number cell, e.g. '$1,234.50' -> 1234.5"""
    if _is_number(value):
        number = float(value)
        return number if math.isfinite(number) else default
    if isinstance(value, str):
        match = _LEADING_FLOAT.match(_CURRENCY_NOISE.sub("", value))
        if match:
            number = float(match.group(0))
            return number if math.isfinite(number) else default
    return default


def parse_int(value: Any, default: int = 0) -> int:
    """Parse an integer cell; numbers are truncated, strings read up to the first non-digit"""
    if _is_number(value):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(0))
    return default


def parse_bool(value: Any) -> bool:
    """True only for True, 1, 'TRUE' and 'Yes'"""
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return value == 1
    return value in TRUE_VALUES


def parse_text(value: Any, default: Optional[str] = "") -> Optional[str]:
    """Stripped string form of a cell, default when the cell is empty"""
    if value is None or isinstance(value, bool):
        return default
    if _is_number(value) and float(value).is_integer():
        # Identifiers typed as numbers come back from the workbook as floats
        value = int(value)
    text = str(value).strip()
    return text if text else default
