"""
Header-indexed, type-coercing access to one sheet of an Excel workbook.

The sheet is read once, in full, when the reader is loaded. Row 0 holds the
column headings; rows 1..size()-1 hold data. Cells are addressed by data row
number and heading, so callers are unaffected by column reordering.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List, Sequence

import pandas as pd

from utils.log_context import LogContext
from utils.result import ErrorKind, Result

logger = logging.getLogger(__name__)

DECIMAL_ZERO = Decimal(0)

# Relative keywords pandas would turn into the current date
RELATIVE_DATE_WORDS = ("today", "now")


def _to_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)


def _trim_row(values: Sequence[Any]) -> List[str]:
    """Convert a row to text and drop its trailing empty cells."""
    row = [_to_text(value) for value in values]
    while row and row[-1] == "":
        row.pop()
    return row


def read_rows(file_path: str, sheet_name: str) -> Result[List[List[str]]]:
    """
    Read every row of a sheet as text.

    The workbook is opened and closed within this call, including when the
    sheet cannot be parsed. Rows keep their position in the sheet but lose
    trailing empty cells, so a data row may be shorter than the header row.

    Args:
        file_path: Path to the .xlsx file
        sheet_name: Name of the sheet to read

    Returns:
        Result containing the rows, or an IO error
    """
    try:
        logger.debug("Opening Excel file", extra={"file_path": file_path, "sheet_name": sheet_name})
        with pd.ExcelFile(file_path, engine="openpyxl") as workbook:
            df = workbook.parse(sheet_name, header=None, dtype=str, keep_default_na=False)
    except Exception as e:
        logger.error(
            "Failed to read Excel sheet",
            extra={
                "file_path": file_path,
                "sheet_name": sheet_name,
                "error": str(e),
                "error_type": type(e).__name__
            }
        )
        return Result.io_error(f"Failed to read sheet '{sheet_name}' from {file_path}: {str(e)}")

    return Result.ok([_trim_row(values) for values in df.itertuples(index=False, name=None)])


def parse_decimal(text: str) -> Result[Decimal]:
    """
    Parse a cell's text as a decimal amount.

    Commas are treated as thousands separators and removed first. An empty
    string is zero, not an error.
    """
    value = text.replace(",", "")
    if value == "":
        return Result.ok(DECIMAL_ZERO)
    try:
        amount = Decimal(value)
    except InvalidOperation:
        return Result.fail(f"can't convert {text} to decimal", ErrorKind.DECIMAL_PARSE)
    if not amount.is_finite():
        return Result.fail(f"can't convert {text} to decimal", ErrorKind.DECIMAL_PARSE)
    return Result.ok(amount)


def parse_date(text: str) -> Result[date]:
    """Parse a cell's text as a calendar date. Empty text is an error."""
    if text.strip().lower() in RELATIVE_DATE_WORDS:
        return Result.fail(f"invalid date '{text}'", ErrorKind.DATE_PARSE)
    try:
        timestamp = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError) as e:
        return Result.fail(f"invalid date '{text}': {str(e)}", ErrorKind.DATE_PARSE)
    if pd.isna(timestamp):
        return Result.fail(f"invalid date '{text}'", ErrorKind.DATE_PARSE)
    return Result.ok(timestamp.date())


class TabularReader:
    """
    Read-only snapshot of a sheet with typed cell accessors.

    Use TabularReader.load() to read a workbook or TabularReader.from_rows()
    to wrap a grid already in memory. Both refuse a grid with no rows.
    """

    def __init__(self, rows: Sequence[Sequence[str]]):
        self._rows = [list(row) for row in rows]
        self._headings = self._rows[0] if self._rows else []
        duplicates = sorted({h for h in self._headings if self._headings.count(h) > 1})
        if duplicates:
            logger.debug(f"Duplicate headings, first occurrence is used: {duplicates}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> Result["TabularReader"]:
        """
        Build a reader over an in-memory grid whose first row is the header.

        Args:
            rows: Grid of text cells

        Returns:
            Result containing the reader, or EMPTY_DATA when the grid has no rows
        """
        if len(rows) == 0:
            return Result.empty_data()
        return Result.ok(cls(rows))

    @classmethod
    def load(cls, file_path: str, sheet_name: str) -> Result["TabularReader"]:
        """
        Read a sheet from an Excel file.

        Args:
            file_path: Path to the .xlsx file
            sheet_name: Name of the sheet holding the header row and data

        Returns:
            Result containing the reader; IO when the file or sheet cannot be
            read, EMPTY_DATA when the sheet has no rows
        """
        with LogContext("sheet load", file_path=file_path, sheet_name=sheet_name) as ctx:
            rows_result = read_rows(file_path, sheet_name)
            result = rows_result.and_then(cls.from_rows)
            if result.is_failure():
                ctx.fail(result.error)
            else:
                logger.info(
                    "Loaded sheet",
                    extra={"file_path": file_path, "sheet_name": sheet_name, "row_count": result.data.size()}
                )
        return result

    @property
    def headings(self) -> List[str]:
        return list(self._headings)

    @property
    def rows(self) -> List[List[str]]:
        """Data rows (the header row excluded), as stored."""
        return [list(row) for row in self._rows[1:]]

    def size(self) -> int:
        """Number of rows in the sheet, including the header row."""
        return len(self._rows)

    def _column(self, heading: str) -> Result[int]:
        """Position of heading in the header row; first match wins."""
        if heading == "":
            return Result.heading_empty()
        for column, name in enumerate(self._headings):
            if name == heading:
                return Result.ok(column)
        return Result.heading_not_found(heading)

    def cell(self, row: int, heading: str) -> Result[str]:
        """
        Text of the cell at a data row under a heading, whitespace trimmed.

        Row 0 is the header and is never a valid data row. A cell past the
        end of a truncated row reads as empty text.
        """
        column_result = self._column(heading)
        if column_result.is_failure():
            return column_result
        if row < 1 or row >= self.size():
            return Result.invalid_row(row)

        values = self._rows[row]
        column = column_result.data
        if column >= len(values):
            return Result.ok("")
        return Result.ok(values[column].strip())

    def cell_decimal(self, row: int, heading: str) -> Result[Decimal]:
        """Cell as a Decimal; thousands separators ignored, empty reads as zero."""
        return self.cell(row, heading).and_then(parse_decimal)

    def cell_date(self, row: int, heading: str) -> Result[date]:
        """Cell as a date. An empty cell is a DATE_PARSE failure."""
        return self.cell(row, heading).and_then(parse_date)
