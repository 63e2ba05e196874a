"""
Position-addressed writing of a new Excel workbook with number formats.

A TabularWriter is a view bound to one sheet of a shared WorkbookHandle.
add_sheet() returns further views over the same handle. The handle is only
written by save() and only released by close(); nothing is flushed when a
view is garbage collected.
"""
import logging
from datetime import date
from decimal import Decimal
from enum import IntEnum
from typing import Any, Optional, Union

import openpyxl
from openpyxl.styles.numbers import BUILTIN_FORMATS, FORMAT_GENERAL
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.utils.exceptions import CellCoordinatesException, IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from utils.log_context import LogContext
from utils.result import ErrorKind, Result

logger = logging.getLogger(__name__)

MIN_FORMAT_INDEX = 0
MAX_FORMAT_INDEX = 49


class FormatIndex(IntEnum):
    """Built-in Excel number formats used by the typed setters."""
    INTEGER = 1
    MONEY = 2
    PERCENT = 9
    DATE = 15


def number_format_code(index: Union[int, FormatIndex]) -> str:
    """Format code of a built-in format index; unassigned indices render as General."""
    return BUILTIN_FORMATS.get(int(index), FORMAT_GENERAL)


def find_sheet_title(workbook: openpyxl.Workbook, sheet_name: str) -> Optional[str]:
    """Title of the sheet whose name matches sheet_name ignoring case, or None."""
    for title in workbook.sheetnames:
        if title.lower() == sheet_name.lower():
            return title
    return None


class WorkbookHandle:
    """The workbook and output path shared by every view of one file."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.workbook = openpyxl.Workbook()
        self.closed = False


class TabularWriter:
    """
    Writes cells into one sheet of a workbook.

    Obtain a writer with TabularWriter.create(); a writer constructed without
    a handle (or whose handle was closed) answers every call with NIL_WRITER.
    """

    def __init__(self, handle: Optional[WorkbookHandle] = None, sheet_name: str = ""):
        self._handle = handle
        self.sheet_name = sheet_name

    @classmethod
    def create(cls, file_path: str, sheet_name: str) -> Result["TabularWriter"]:
        """
        Start a new workbook containing a single sheet.

        The workbook's default placeholder sheet is removed. Nothing is
        written to disk until save().

        Args:
            file_path: Where save() will write the workbook
            sheet_name: Name of the first sheet

        Returns:
            Result containing the writer bound to sheet_name
        """
        if file_path == "":
            return Result.invalid_argument("spreadsheet filename must not be an empty string")
        if sheet_name == "":
            return Result.invalid_argument("sheetname must not be an empty string")

        handle = WorkbookHandle(file_path)
        # Removed first so a name differing from it only in case is not de-duplicated
        handle.workbook.remove(handle.workbook.active)
        try:
            title = handle.workbook.create_sheet(sheet_name).title
        except ValueError as e:
            return Result.invalid_argument(f"invalid sheet name '{sheet_name}': {str(e)}")

        logger.debug("Created workbook", extra={"file_path": file_path, "sheet_name": sheet_name})
        return Result.ok(cls(handle, title))

    @property
    def handle(self) -> Optional[WorkbookHandle]:
        return self._handle

    @property
    def file_path(self) -> Optional[str]:
        return self._handle.file_path if self._handle is not None else None

    def _check_open(self) -> Result[None]:
        if self._handle is None:
            return Result.fail("spreadsheet writer has no workbook", ErrorKind.NIL_WRITER)
        if self._handle.closed:
            return Result.fail("spreadsheet writer is closed", ErrorKind.NIL_WRITER)
        return Result.ok(None)

    def _check_cell(self, cell: str) -> Result[None]:
        check = self._check_open()
        if check.is_failure():
            return check
        if cell == "":
            return Result.invalid_argument("cell name must not be empty")
        try:
            coordinate_from_string(cell)
        except CellCoordinatesException as e:
            return Result.invalid_argument(f"invalid cell name '{cell}': {str(e)}")
        return Result.ok(None)

    def add_sheet(self, sheet_name: str) -> Result["TabularWriter"]:
        """
        Add a sheet to the same workbook and return a view bound to it.

        The new view shares this writer's handle; saving or closing through
        either view affects both. Naming an existing sheet binds the view to
        that sheet.
        """
        check = self._check_open()
        if check.is_failure():
            return check
        if sheet_name == "":
            return Result.invalid_argument("sheetname must not be an empty string")

        workbook = self._handle.workbook
        title = find_sheet_title(workbook, sheet_name)
        if title is None:
            try:
                title = workbook.create_sheet(sheet_name).title
            except ValueError as e:
                return Result.invalid_argument(f"invalid sheet name '{sheet_name}': {str(e)}")
        return Result.ok(TabularWriter(self._handle, title))

    def _worksheet(self) -> Result[Worksheet]:
        try:
            return Result.ok(self._handle.workbook[self.sheet_name])
        except KeyError:
            return Result.invalid_argument(f"sheet '{self.sheet_name}' does not exist")

    def _store(self, cell: str, value: Any, as_text: bool = False) -> Result[None]:
        """Assign a value; as_text keeps strings such as "=A1" from becoming formulas."""
        sheet = self._worksheet()
        if sheet.is_failure():
            return sheet
        try:
            target = sheet.data[cell]
            target.value = value
            if as_text and isinstance(value, str):
                target.data_type = "s"
        except IllegalCharacterError as e:
            return Result.invalid_argument(f"illegal character in value for cell {cell}: {str(e)}")
        except (ValueError, TypeError) as e:
            return Result.fail(f"error setting cell {cell}: {str(e)}", ErrorKind.IO)
        return Result.ok(None)

    def set_cell(self, cell: str, value: str) -> Result[None]:
        """Store text in a cell."""
        return self._check_cell(cell).and_then(lambda _: self._store(cell, value, as_text=True))

    def set_cell_float(self, cell: str, value: float) -> Result[None]:
        return self._check_cell(cell).and_then(lambda _: self._store(cell, float(value)))

    def set_cell_int(self, cell: str, value: int) -> Result[None]:
        """Store an integer and give the cell the Integer format."""
        return (
            self._check_cell(cell)
            .and_then(lambda _: self._store(cell, int(value)))
            .and_then(lambda _: self.set_number_format(cell, FormatIndex.INTEGER))
        )

    def set_cell_decimal(self, cell: str, amount: Decimal, index: Union[int, FormatIndex]) -> Result[None]:
        """
        Store a decimal amount with the given number format.

        The format is applied first so a rejected format leaves the cell
        untouched. The amount is stored as its exact fixed-point text, never
        converted to float.
        """
        return (
            self._check_cell(cell)
            .and_then(lambda _: self.set_number_format(cell, index))
            .and_then(lambda _: self._store(cell, format(amount, "f"), as_text=True))
        )

    def set_cell_date(self, cell: str, value: date) -> Result[None]:
        """Store a date as ISO text with the Date format."""
        return (
            self._check_cell(cell)
            .and_then(lambda _: self.set_number_format(cell, FormatIndex.DATE))
            .and_then(lambda _: self._store(cell, value.isoformat(), as_text=True))
        )

    def set_number_format(self, cell: str, index: Union[int, FormatIndex]) -> Result[None]:
        """
        Apply a built-in number format to a single cell.

        Args:
            cell: Cell reference such as "B7"
            index: Built-in format index, 0 through 49

        Returns:
            Result with INVALID_FORMAT_INDEX when index is out of range
        """
        check = self._check_cell(cell)
        if check.is_failure():
            return check
        if int(index) < MIN_FORMAT_INDEX or int(index) > MAX_FORMAT_INDEX:
            return Result.fail(f"Invalid value for format index: {int(index)}", ErrorKind.INVALID_FORMAT_INDEX)

        sheet = self._worksheet()
        if sheet.is_failure():
            return sheet
        sheet.data[cell].number_format = number_format_code(index)
        return Result.ok(None)

    def save(self) -> Result[None]:
        """Write the workbook to the path given to create()."""
        check = self._check_open()
        if check.is_failure():
            return check

        file_path = self._handle.file_path
        with LogContext("workbook save", file_path=file_path) as ctx:
            try:
                self._handle.workbook.save(file_path)
            except Exception as e:
                ctx.fail(str(e))
                return Result.io_error(f"Failed to save spreadsheet {file_path}: {str(e)}")
        return Result.ok(None)

    def close(self) -> Result[None]:
        """Release the workbook. Every view sharing it becomes unusable."""
        check = self._check_open()
        if check.is_failure():
            return check
        try:
            self._handle.workbook.close()
        except Exception as e:
            return Result.io_error(f"Failed to close spreadsheet {self._handle.file_path}: {str(e)}")
        finally:
            self._handle.closed = True
        return Result.ok(None)
