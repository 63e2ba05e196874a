from datetime import date
from decimal import Decimal

import openpyxl
import pytest
from openpyxl.styles.numbers import BUILTIN_FORMATS

from tabular_reader import TabularReader
from tabular_writer import FormatIndex, TabularWriter, number_format_code
from utils.result import ErrorKind


@pytest.fixture
def output_path(tmp_path):
    return str(tmp_path / "test.xlsx")


@pytest.fixture
def writer(output_path):
    """
    Fixture providing a writer bound to sheet "Hello" of a new workbook.

    Returns:
        TabularWriter: Writer whose save() targets output_path
    """
    return TabularWriter.create(output_path, "Hello").unwrap_or_raise()


def sheet(writer):
    return writer.handle.workbook[writer.sheet_name]


class TestFormatIndex:
    """
    Tests for the built-in number format table.
    """

    def test_codes_match_builtin_table(self):
        assert FormatIndex.INTEGER == 1
        assert FormatIndex.MONEY == 2
        assert FormatIndex.PERCENT == 9
        assert FormatIndex.DATE == 15

    def test_format_codes(self):
        assert number_format_code(FormatIndex.INTEGER) == "0"
        assert number_format_code(FormatIndex.MONEY) == "0.00"
        assert number_format_code(FormatIndex.PERCENT) == "0%"
        assert number_format_code(FormatIndex.DATE) == BUILTIN_FORMATS[15]


class TestCreate:
    """
    Tests for starting a new workbook.
    """

    def test_placeholder_sheet_is_removed(self, writer):
        assert writer.handle.workbook.sheetnames == ["Hello"]
        assert writer.sheet_name == "Hello"

    def test_sheet_named_like_placeholder(self, output_path):
        writer = TabularWriter.create(output_path, "Sheet").unwrap_or_raise()

        assert writer.handle.workbook.sheetnames == ["Sheet"]

    def test_sheet_named_like_placeholder_in_other_case(self, output_path):
        writer = TabularWriter.create(output_path, "sheet").unwrap_or_raise()

        assert writer.handle.workbook.sheetnames == ["sheet"]
        assert writer.sheet_name == "sheet"
        assert writer.set_cell("A1", "x").is_success()
        assert sheet(writer)["A1"].value == "x"

    def test_empty_filename_is_invalid(self):
        result = TabularWriter.create("", "Hello")

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert "filename" in result.error

    def test_empty_sheet_name_is_invalid(self, output_path):
        result = TabularWriter.create(output_path, "")

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert "sheetname" in result.error

    def test_nothing_written_before_save(self, writer, tmp_path):
        assert list(tmp_path.iterdir()) == []


class TestSetCell:
    """
    Tests for the typed cell setters.
    """

    def test_set_cell(self, writer):
        assert writer.set_cell("A1", "Test Value").is_success()
        assert sheet(writer)["A1"].value == "Test Value"

    @pytest.mark.parametrize("cell", ["", "A0", "1A", "A1:B2", "ABCD1"], ids=["empty", "row-zero", "reversed", "range", "long-column"])
    def test_bad_cell_reference_is_invalid(self, writer, cell):
        """
        Anything other than a single A1-style reference is refused.

        Args:
            cell: Malformed reference
        """
        assert writer.set_cell(cell, "x").kind == ErrorKind.INVALID_ARGUMENT

    def test_text_starting_with_equals_is_not_a_formula(self, writer):
        assert writer.set_cell("A2", "=Acme").is_success()

        assert sheet(writer)["A2"].value == "=Acme"
        assert sheet(writer)["A2"].data_type == "s"

    def test_control_character_is_invalid(self, writer):
        result = writer.set_cell("A1", "a\x01b")

        assert result.kind == ErrorKind.INVALID_ARGUMENT
        assert "A1" in result.error

    def test_set_cell_int_applies_integer_format(self, writer):
        assert writer.set_cell_int("B2", 42).is_success()

        assert sheet(writer)["B2"].value == 42
        assert sheet(writer)["B2"].number_format == "0"

    def test_set_cell_float(self, writer):
        assert writer.set_cell_float("C3", 2.5).is_success()
        assert sheet(writer)["C3"].value == 2.5

    def test_set_cell_decimal_stores_exact_text(self, writer):
        amount = Decimal("12345678901234567890.123456789")

        assert writer.set_cell_decimal("D4", amount, FormatIndex.MONEY).is_success()

        assert sheet(writer)["D4"].value == "12345678901234567890.123456789"
        assert sheet(writer)["D4"].number_format == "0.00"

    def test_set_cell_decimal_uses_fixed_point(self, writer):
        writer.set_cell_decimal("D5", Decimal("1E+3"), FormatIndex.MONEY)

        assert sheet(writer)["D5"].value == "1000"

    def test_set_cell_decimal_bad_format_leaves_cell_untouched(self, writer):
        result = writer.set_cell_decimal("D6", Decimal("1.00"), 50)

        assert result.kind == ErrorKind.INVALID_FORMAT_INDEX
        assert sheet(writer)["D6"].value is None

    def test_set_cell_date(self, writer):
        assert writer.set_cell_date("E5", date(2024, 1, 5)).is_success()

        assert sheet(writer)["E5"].value == "2024-01-05"
        assert sheet(writer)["E5"].number_format == BUILTIN_FORMATS[15]


class TestSetNumberFormat:
    """
    Tests for applying built-in number formats.
    """

    @pytest.mark.parametrize("index", [-1, 50, 164])
    def test_out_of_range_index_fails(self, writer, index):
        result = writer.set_number_format("A1", index)

        assert result.kind == ErrorKind.INVALID_FORMAT_INDEX
        assert str(index) in result.error

    def test_money_format_is_applied(self, writer):
        assert writer.set_number_format("A1", 2).is_success()
        assert sheet(writer)["A1"].number_format == "0.00"

    def test_every_index_in_range_is_accepted(self, writer):
        for index in range(0, 50):
            assert writer.set_number_format("A1", index).is_success()

    def test_applies_to_single_cell(self, writer):
        writer.set_number_format("A1", FormatIndex.PERCENT)

        assert sheet(writer)["A1"].number_format == "0%"
        assert sheet(writer)["A2"].number_format == "General"


class TestAddSheet:
    """
    Tests for writer views over further sheets.
    """

    def test_view_shares_handle(self, writer):
        view = writer.add_sheet("Goodbye").unwrap_or_raise()

        assert view.handle is writer.handle
        assert view.sheet_name == "Goodbye"
        assert writer.handle.workbook.sheetnames == ["Hello", "Goodbye"]

    def test_empty_name_is_invalid(self, writer):
        assert writer.add_sheet("").kind == ErrorKind.INVALID_ARGUMENT

    def test_existing_name_binds_to_existing_sheet(self, writer):
        view = writer.add_sheet("Hello").unwrap_or_raise()

        assert writer.handle.workbook.sheetnames == ["Hello"]
        view.set_cell("A1", "same sheet")
        assert sheet(writer)["A1"].value == "same sheet"

    def test_name_differing_in_case_binds_to_existing_sheet(self, writer):
        view = writer.add_sheet("hello").unwrap_or_raise()

        assert view.sheet_name == "Hello"
        assert writer.handle.workbook.sheetnames == ["Hello"]
        assert view.set_cell("B1", "same sheet").is_success()
        assert sheet(writer)["B1"].value == "same sheet"

    def test_view_of_missing_sheet_is_invalid(self, writer):
        view = TabularWriter(writer.handle, "Missing")

        assert view.set_cell("A1", "x").kind == ErrorKind.INVALID_ARGUMENT
        assert view.set_number_format("A1", FormatIndex.MONEY).kind == ErrorKind.INVALID_ARGUMENT


class TestSaveAndClose:
    """
    Tests for persisting and releasing the workbook.
    """

    def test_sheets_persist(self, writer, output_path):
        """
        Writes through two views, saves, closes, and reopens the file.

        Args:
            writer: Fixture providing a writer on sheet "Hello"
            output_path: Path the writer saves to
        """
        assert writer.set_cell("A1", "Test Value").is_success()
        view = writer.add_sheet("Goodbye").unwrap_or_raise()
        assert view.set_cell("A1", "Another Value").is_success()
        assert view.save().is_success()
        assert view.close().is_success()

        wb = openpyxl.load_workbook(output_path)
        assert wb.sheetnames == ["Hello", "Goodbye"]
        assert wb["Hello"]["A1"].value == "Test Value"
        assert wb["Goodbye"]["A1"].value == "Another Value"
        wb.close()

        assert TabularReader.load(output_path, "Goodbye").data.headings == ["Another Value"]

    def test_decimal_round_trip(self, writer, output_path):
        writer.set_cell("A1", "Amount")
        writer.set_cell_decimal("A2", Decimal("1234.56"), FormatIndex.MONEY)
        writer.save()
        writer.close()

        reader = TabularReader.load(output_path, "Hello").unwrap_or_raise()
        assert reader.cell_decimal(1, "Amount").data == Decimal("1234.56")

    def test_date_round_trip(self, writer, output_path):
        writer.set_cell("A1", "Date")
        writer.set_cell_date("A2", date(2024, 1, 5))
        writer.save()
        writer.close()

        reader = TabularReader.load(output_path, "Hello").unwrap_or_raise()
        assert reader.cell_date(1, "Date").data == date(2024, 1, 5)

    def test_formula_like_text_round_trip(self, writer, output_path):
        writer.set_cell("A1", "Note")
        writer.set_cell("A2", "=Acme")
        writer.save()
        writer.close()

        reader = TabularReader.load(output_path, "Hello").unwrap_or_raise()
        assert reader.size() == 2
        assert reader.cell(1, "Note").data == "=Acme"

    def test_date_after_2262_round_trip(self, writer, output_path):
        writer.set_cell("A1", "Date")
        writer.set_cell_date("A2", date(2300, 6, 1))
        writer.save()
        writer.close()

        reader = TabularReader.load(output_path, "Hello").unwrap_or_raise()
        assert reader.cell_date(1, "Date").data == date(2300, 6, 1)

    def test_save_to_missing_directory_is_io_failure(self, tmp_path):
        writer = TabularWriter.create(str(tmp_path / "no" / "such" / "dir.xlsx"), "Hello").unwrap_or_raise()

        assert writer.save().kind == ErrorKind.IO

    def test_unconstructed_writer(self):
        writer = TabularWriter()

        assert writer.save().kind == ErrorKind.NIL_WRITER
        assert writer.close().kind == ErrorKind.NIL_WRITER
        assert writer.set_cell("A1", "x").kind == ErrorKind.NIL_WRITER
        assert writer.add_sheet("Next").kind == ErrorKind.NIL_WRITER

    def test_views_are_unusable_after_close(self, writer):
        view = writer.add_sheet("Goodbye").unwrap_or_raise()

        assert writer.close().is_success()

        assert writer.close().kind == ErrorKind.NIL_WRITER
        assert view.save().kind == ErrorKind.NIL_WRITER
        assert view.set_cell_int("A1", 1).kind == ErrorKind.NIL_WRITER
