"""
Raw grid reading, header discovery and row normalization.

Deliverable spreadsheets often prepend title or metadata rows before the
real header, so the header row is located by keyword scanning over a
bounded window instead of being assumed to be the first row. Rows are
then paired positionally with the discovered headers and keyed by
canonical field name.
"""

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..config import HEADER_SCAN_ROWS
from ..errors import GridReadError
from ..model import CanonicalRow, Cell, HeaderMatch, RawGrid
from .fields import CanonicalField, resolve_positions

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = (".xlsx", ".xlsm", ".xls")
TAB_EXTENSIONS = (".tsv", ".tab")

_LEADING_FLOAT = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")
# "12,345" and "1,234.5": comma thousands separators before any decimal point
_GROUPED_NUMBER = re.compile(r"^\s*[-+]?\d{1,3}(?:,\d{3})+(?![\d,])")


@dataclass
class NormalizedTable:
    """Rows of a sheet keyed by canonical field name."""

    header: HeaderMatch
    columns: Dict[str, str] = field(default_factory=dict)
    rows: List[CanonicalRow] = field(default_factory=list)


# =============================================================================
# Cell helpers
# =============================================================================


def _clean_cell(value) -> Cell:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    # numpy scalars, timestamps and other workbook types
    if hasattr(value, "item"):
        try:
            return _clean_cell(value.item())
        except (TypeError, ValueError):
            pass
    return str(value)


def is_empty_cell(value: Cell) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_empty_row(row: Sequence[Cell]) -> bool:
    return all(is_empty_cell(cell) for cell in row)


def cell_text(value: Cell) -> str:
    """Render a cell as display text (integral floats without ``.0``)."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _ungroup(text: str) -> str:
    match = _GROUPED_NUMBER.match(text)
    if match:
        return match.group(0).replace(",", "") + text[match.end():]
    return text


def to_float(value: Cell) -> Optional[float]:
    """
    Parse a cell as a finite number.

    Text cells are parsed leniently from their leading numeric prefix
    ("0.01 *" -> 0.01) after removing thousands separators
    ("12,345" -> 12345).

    Returns:
        The parsed float, or None when the cell is not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_FLOAT.match(_ungroup(str(value)))
        if not match:
            return None
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_int(value: Cell) -> Optional[int]:
    """Parse a cell as an integer, truncating decimals ("12.7" -> 12, "12,345" -> 12345)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    match = _LEADING_INT.match(_ungroup(str(value)))
    if not match:
        return None
    return int(match.group(1))


# =============================================================================
# Grid readers
# =============================================================================


def _frame_to_grid(df: pd.DataFrame) -> RawGrid:
    return [[_clean_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]


def _detect_delimiter(text: str, filename: str) -> str:
    if filename.lower().endswith(TAB_EXTENSIONS):
        return "\t"
    sample = "\n".join(text.splitlines()[:HEADER_SCAN_ROWS])
    if sample.count("\t") > sample.count(","):
        return "\t"
    return ","


def read_excel_grid(data: bytes, filename: str = "") -> RawGrid:
    """Read the first sheet of a workbook as a raw grid (no header inference).

    The format is detected from the content: openpyxl reads .xlsx/.xlsm and
    xlrd reads legacy .xls workbooks.
    """
    try:
        with pd.ExcelFile(io.BytesIO(data)) as workbook:
            if not workbook.sheet_names:
                return []
            df = workbook.parse(workbook.sheet_names[0], header=None, dtype=object)
    except Exception as exc:
        raise GridReadError(f"Could not read workbook: {exc}", filename) from exc
    return _frame_to_grid(df)


def read_text_grid(data: bytes, filename: str = "", encoding: str = "utf-8") -> RawGrid:
    """
    Read delimited text as a raw grid.

    Title rows make exports ragged, so the widest row determines the
    column count and shorter rows are padded with empty cells. Blank
    lines are kept as empty rows so row indices match the file.
    """
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise GridReadError(f"Could not decode text as {encoding}: {exc}", filename) from exc

    text = text.lstrip("\ufeff")
    if not text.strip():
        return []

    sep = _detect_delimiter(text, filename)
    try:
        # quoted cells may contain the delimiter
        width = max(len(row) for row in csv.reader(io.StringIO(text), delimiter=sep) if row)
        df = pd.read_csv(
            io.StringIO(text),
            sep=sep,
            header=None,
            names=list(range(width)),
            dtype=object,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=False,
            engine="python",
        )
    except (csv.Error, pd.errors.ParserError, ValueError) as exc:
        raise GridReadError(f"Could not parse delimited text: {exc}", filename) from exc
    return _frame_to_grid(df)


def read_grid(data: bytes, filename: str, encoding: str = "utf-8") -> RawGrid:
    """
    Read an uploaded tabular file into a raw grid.

    Args:
        data: File contents
        filename: Original filename, used to pick the reader
        encoding: Encoding for delimited text

    Returns:
        List of rows, each a list of cells (str, number or None)
    """
    if filename.lower().endswith(EXCEL_EXTENSIONS):
        return read_excel_grid(data, filename)
    return read_text_grid(data, filename, encoding=encoding)


# =============================================================================
# Header discovery and normalization
# =============================================================================


def locate_header(
    grid: RawGrid,
    keywords: Sequence[str],
    scan_rows: int = HEADER_SCAN_ROWS,
) -> HeaderMatch:
    """
    Find the row most likely to be the header.

    Scans at most ``scan_rows`` rows; the first row whose lower-cased text
    contains at least one expected keyword wins. Falls back to row 0.

    Args:
        grid: Raw sheet rows
        keywords: Expected header keywords (matched as substrings)
        scan_rows: Size of the scan window

    Returns:
        HeaderMatch with the row index and stripped header strings
    """
    if not grid:
        return HeaderMatch(row_index=0, headers=[])

    lowered = [k.lower() for k in keywords]
    header_index = 0
    for index, row in enumerate(grid[:scan_rows]):
        row_text = " ".join(cell_text(cell) for cell in row).lower()
        if any(keyword in row_text for keyword in lowered):
            header_index = index
            break

    headers = [cell_text(cell) for cell in grid[header_index]]
    return HeaderMatch(row_index=header_index, headers=headers)


def normalize_table(
    grid: RawGrid,
    keywords: Sequence[str],
    fields: Sequence[CanonicalField],
) -> NormalizedTable:
    """
    Convert a raw grid into rows keyed by canonical field name.

    Empty rows are dropped; rows shorter than the header are padded with
    None for the missing positions.

    Args:
        grid: Raw sheet rows
        keywords: Expected header keywords for header discovery
        fields: Canonical field table used to resolve columns

    Returns:
        NormalizedTable with the header match, resolved columns and rows
    """
    header = locate_header(grid, keywords)
    if not header.headers:
        return NormalizedTable(header=header)

    positions = resolve_positions(header.headers, fields)
    columns = {name: header.headers[pos] for name, pos in positions.items()}

    rows: List[CanonicalRow] = []
    for raw_row in grid[header.row_index + 1:]:
        if not raw_row or is_empty_row(raw_row):
            continue
        rows.append({
            name: raw_row[pos] if pos < len(raw_row) else None
            for name, pos in positions.items()
        })

    logger.debug(
        "Header at row %d, %d data rows, columns %s",
        header.row_index, len(rows), columns,
    )
    return NormalizedTable(header=header, columns=columns, rows=rows)
