"""
Tabular Spreadsheet Access

Typed, header-indexed reading of Excel sheets and position-addressed writing
of new workbooks with number formats.

Key modules:
- tabular_reader.py: TabularReader and the decimal/date coercions
- tabular_writer.py: TabularWriter, WorkbookHandle and FormatIndex
- cell_support.py: cell reference composition and fail-fast write helpers
- main.py: FastAPI application exposing sheets and cells
- utils/result.py: Result pattern implementation for error handling
"""
