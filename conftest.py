"""
Pytest configuration file.

This file is automatically loaded by pytest and provides global test configuration.
It ensures the project's source directory is added to the Python path so that
modules can be imported properly during test execution, and provides the
grids and workbooks shared by the test modules.
"""
import os
import sys

import openpyxl
import pytest

# Add the current directory to the Python path
# This ensures imports work correctly when running tests
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))


@pytest.fixture
def sample_rows():
    """
    Fixture providing a small transaction grid.

    The third data row is truncated: its trailing Amount cell is missing.

    Returns:
        list: Header row followed by data rows
    """
    return [
        ["Date", "Payee", "Type", "Amount"],
        ["2024-01-05", "  Acme ", "Payment", "1,000.00"],
        ["2024-02-10", "Globex", "Refund", ""],
        ["2024-03-15", "Initech", "Payment"],
    ]


@pytest.fixture
def workbook_path(tmp_path, sample_rows):
    """
    Fixture writing sample_rows to a real .xlsx file as text cells.

    Returns:
        str: Path to the workbook; the data sits on sheet "Worksheet"
    """
    path = tmp_path / "donations.xlsx"
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Worksheet"
    for row in sample_rows:
        ws.append(row)
    wb.create_sheet("Empty")
    wb.save(path)
    wb.close()
    return str(path)
