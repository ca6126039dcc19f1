"""Workbook extraction: spreadsheet bytes -> cell matrix of the first worksheet"""

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from loan_status_engine.domain.columns import DEFAULT_COLUMNS, LAYOUT_WIDTH, REQUIRED_HEADER_FIELDS, ColumnMap
from loan_status_engine.domain.exceptions import ParseError
from loan_status_engine.domain.models import RawRow

logger = logging.getLogger(__name__)

# Only the first rows are checked for width drift
WIDTH_CHECK_ROWS = 10


@dataclass
class LayoutReport:
    """Sanity checks on an extracted sheet; warnings never block processing"""

    warnings: List[str] = field(default_factory=list)
    total_rows: int = 0
    total_columns: int = 0
    empty_rows: int = 0


def read_workbook(data: bytes, width: int = LAYOUT_WIDTH) -> List[RawRow]:
    """
    Read the first worksheet into a list of rows, header first.

    Rows are padded with None up to ``width`` cells. Cached formula results are
    read, not formulas.

    Raises:
        ParseError: bytes are not a readable workbook, or the sheet is empty
    """
    try:
        workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ParseError(f"Unreadable workbook: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        rows = []
        for values in sheet.iter_rows(values_only=True):
            row = list(values or ())
            if len(row) < width:
                row.extend([None] * (width - len(row)))
            rows.append(tuple(row))
    except (KeyError, ValueError, IndexError) as e:
        raise ParseError(f"Unreadable worksheet: {e}") from e
    finally:
        workbook.close()

    if not rows:
        raise ParseError("Missing header row")

    return rows


def validate_layout(rows: Sequence[RawRow], columns: ColumnMap = DEFAULT_COLUMNS) -> LayoutReport:
    """
    Check an extracted sheet against the expected loan export layout.

    Raises:
        ParseError: no header row
    """
    if not rows or not any(cell is not None and cell != "" for cell in rows[0]):
        raise ParseError("Missing header row")

    header = rows[0]
    report = LayoutReport(total_rows=len(rows) - 1, total_columns=len(header))

    for field_name in REQUIRED_HEADER_FIELDS:
        index = getattr(columns, field_name)
        if index >= len(header) or header[index] in (None, ""):
            report.warnings.append(f"Missing expected column at index {index}: {field_name}")

    if len(rows) < 2:
        report.warnings.append("No data rows found (only headers)")

    report.empty_rows = sum(
        1 for row in rows[1:] if not row or all(cell is None or cell == "" for cell in row)
    )
    if report.empty_rows:
        report.warnings.append(f"Found {report.empty_rows} empty rows that will be skipped")

    inconsistent = sum(1 for row in rows[1 : WIDTH_CHECK_ROWS + 1] if len(row) != len(header))
    if inconsistent:
        report.warnings.append(f"{inconsistent} rows have different column counts than header")

    for warning in report.warnings:
        logger.warning(warning)

    return report
