"""
Fail-fast helpers for laying out report cells by column letter and row number.

The TabularWriter methods return Results; these helpers are for report code
that treats any write failure as fatal and wants a one-line call per cell.
"""
import logging
from datetime import date
from decimal import Decimal

from tabular_writer import FormatIndex, TabularWriter
from utils.result import Result

logger = logging.getLogger(__name__)


def cell_name(column: str, row: int) -> str:
    """
    Compose a spreadsheet cell reference.

    Args:
        column: Column letters, e.g. "A" or "AB"
        row: 1-based row number

    Returns:
        str: The reference, e.g. "A1"
    """
    return f"{column}{row}"


def check(result: Result, message: str) -> None:
    """
    Raise if a write failed.

    Raises:
        ValueError: message followed by the Result's error
    """
    if result.is_failure():
        logger.error(f"{message}{result.error}", extra={"kind": result.kind.name})
        raise ValueError(f"{message}{result.error}")


def write_cell(writer: TabularWriter, column: str, row: int, value: str) -> None:
    cell = cell_name(column, row)
    check(writer.set_cell(cell, value), f"Error writing cell {cell}: ")


def write_cell_int(writer: TabularWriter, column: str, row: int, value: int) -> None:
    cell = cell_name(column, row)
    check(writer.set_cell_int(cell, value), f"Error writing cell {cell}: ")


def write_cell_float(writer: TabularWriter, column: str, row: int, value: float) -> None:
    cell = cell_name(column, row)
    check(writer.set_cell_float(cell, value), f"Error writing cell {cell}: ")


def write_cell_decimal(writer: TabularWriter, column: str, row: int, value: Decimal) -> None:
    """Write an amount with the Money format."""
    cell = cell_name(column, row)
    check(writer.set_cell_decimal(cell, value, FormatIndex.MONEY), f"Error writing cell {cell}: ")


def write_cell_date(writer: TabularWriter, column: str, row: int, value: date) -> None:
    cell = cell_name(column, row)
    check(writer.set_cell_date(cell, value), f"Error writing cell {cell}: ")
