from fastapi import FastAPI, Query
import os
import logging
from datetime import datetime
from typing import List, Literal
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from openpyxl.utils import get_column_letter
from pydantic import BaseModel

from cell_support import cell_name
from tabular_reader import TabularReader
from tabular_writer import TabularWriter
from utils.result import Result


BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Logs and static files default to folders beside this module
LOG_DIR = os.environ.get("TABULAR_LOG_DIR", os.path.join(BASE_DIR, "logs"))
STATIC_DIR = os.environ.get("TABULAR_STATIC_DIR", os.path.join(BASE_DIR, "static"))

os.makedirs(LOG_DIR, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Add file handler to write logs to file
log_file_path = os.path.join(LOG_DIR, f"app_{datetime.now().strftime('%Y%m%d')}.log")
file_handler = logging.FileHandler(log_file_path)
file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
logging.getLogger().addHandler(file_handler)


def resolve_file_path(file_path: str) -> str:
    """
    Convert static_path references to actual file paths

    Args:
        file_path: The file path which may contain 'static_path/' prefix

    Returns:
        Resolved absolute file path
    """
    if file_path and file_path.startswith("static_path/"):
        relative_path = file_path.replace("static_path/", "", 1)
        return os.path.join(STATIC_DIR, relative_path)
    return file_path


class SheetResponse(BaseModel):
    """
    Contents of one sheet.

    Attributes:
        sheet_name: Sheet that was read
        headings: Header row
        rows: Data rows, each possibly shorter than the header row
        total_rows: Number of data rows
    """
    sheet_name: str
    headings: List[str]
    rows: List[List[str]]
    total_rows: int


class CellResponse(BaseModel):
    """
    A single typed cell.

    Attributes:
        row: Data row number (1 is the first row after the header)
        heading: Column heading
        kind: Coercion applied: text, decimal or date
        value: Canonical text of the coerced value
    """
    row: int
    heading: str
    kind: str
    value: str


class WriteRequest(BaseModel):
    file_path: str
    headings: List[str]
    rows: List[List[str]] = []


class WriteResponse(BaseModel):
    file_path: str
    sheet_name: str
    total_rows: int


app = FastAPI(
    title="Tabular Spreadsheet API",
    description="Typed, header-indexed access to Excel sheets",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(result: Result) -> JSONResponse:
    """Translate a failed Result into a JSON error body with its HTTP status."""
    logger.warning(f"Request failed: {result}")
    return JSONResponse(status_code=result.status_code.value, content=result.to_dict())


def write_sheet(file_path: str, sheet_name: str, headings: List[str], rows: List[List[str]]) -> Result[int]:
    """
    Write a header row and text data rows to a new workbook.

    Returns:
        Result containing the number of data rows written
    """
    created = TabularWriter.create(file_path, sheet_name)
    if created.is_failure():
        return created
    writer = created.data

    for row_index, values in enumerate([headings] + rows, start=1):
        for column_index, value in enumerate(values, start=1):
            result = writer.set_cell(cell_name(get_column_letter(column_index), row_index), value)
            if result.is_failure():
                writer.close()
                return result

    saved = writer.save()
    closed = writer.close()
    if saved.is_failure():
        return saved
    return closed.map(lambda _: len(rows))


@app.get("/sheets/{sheet_name}", tags=["Spreadsheet"], response_model=SheetResponse)
def get_sheet(sheet_name: str, file_path: str = Query(..., description="Workbook path, may start with static_path/")):
    """
    Read a sheet and return its header row and data rows.
    """
    result = TabularReader.load(resolve_file_path(file_path), sheet_name)
    if result.is_failure():
        return error_response(result)

    reader = result.data
    return SheetResponse(
        sheet_name=sheet_name,
        headings=reader.headings,
        rows=reader.rows,
        total_rows=reader.size() - 1
    )


@app.get("/sheets/{sheet_name}/cell", tags=["Spreadsheet"], response_model=CellResponse)
def get_cell(
    sheet_name: str,
    file_path: str = Query(...),
    row: int = Query(..., description="Data row number; row 1 is the first row after the header"),
    heading: str = Query(...),
    kind: Literal["text", "decimal", "date"] = "text",
):
    """
    Read one cell, coerced to text, decimal or date.

    Decimals are returned in fixed-point notation and dates in ISO format.
    """
    loaded = TabularReader.load(resolve_file_path(file_path), sheet_name)
    if loaded.is_failure():
        return error_response(loaded)
    reader = loaded.data

    if kind == "decimal":
        result = reader.cell_decimal(row, heading).map(lambda amount: format(amount, "f"))
    elif kind == "date":
        result = reader.cell_date(row, heading).map(lambda value: value.isoformat())
    else:
        result = reader.cell(row, heading)

    if result.is_failure():
        return error_response(result)
    return CellResponse(row=row, heading=heading, kind=kind, value=result.data)


@app.post("/sheets/{sheet_name}", tags=["Spreadsheet"], response_model=WriteResponse)
def post_sheet(sheet_name: str, request: WriteRequest):
    """
    Create a workbook holding one sheet with the given headings and rows.
    """
    file_path = resolve_file_path(request.file_path)
    logger.info(f"Writing {len(request.rows)} rows to {file_path} [{sheet_name}]")

    result = write_sheet(file_path, sheet_name, request.headings, request.rows)
    if result.is_failure():
        return error_response(result)
    return WriteResponse(file_path=file_path, sheet_name=sheet_name, total_rows=result.data)


# Run the application if executed directly
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Tabular Spreadsheet API in development mode.")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
