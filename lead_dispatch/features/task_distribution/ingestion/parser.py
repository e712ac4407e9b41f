"""
Record parser for uploaded lead files.

Reads a CSV or Excel file into an ordered list of raw records. The header
row defines the column names and every cell is read as text.
"""

from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import EmptyInputError, ParseError, UnsupportedFileTypeError
from ..domain.models import Record

logger = get_logger(__name__)


class FileFormat(str, Enum):
    DELIMITED_TEXT = "delimited-text"
    SPREADSHEET = "spreadsheet"


_FORMAT_BY_SUFFIX: dict[str, FileFormat] = {
    ".csv": FileFormat.DELIMITED_TEXT,
    ".xlsx": FileFormat.SPREADSHEET,
    ".xls": FileFormat.SPREADSHEET,
}

SUPPORTED_SUFFIXES = tuple(_FORMAT_BY_SUFFIX)


def detect_format(filename: str | Path) -> FileFormat:
    """Map a file name to its container format by extension."""
    suffix = Path(str(filename)).suffix.lower()
    try:
        return _FORMAT_BY_SUFFIX[suffix]
    except KeyError:
        raise UnsupportedFileTypeError(
            f"Unsupported file type '{suffix or filename}'. "
            f"Upload one of: {', '.join(SUPPORTED_SUFFIXES)}"
        ) from None


def parse_records(path: str | Path, file_format: FileFormat) -> list[Record]:
    """
    Read every data row of the file into a Record, preserving file order.

    Cell text is kept exactly as written (no stripping) so a rejected row can
    be reported back verbatim; only header names are trimmed. Empty CSV lines
    are skipped, and so are spreadsheet rows without any filled cell. A CSV
    line of bare delimiters such as ",," is a real row with empty fields.

    Raises:
        EmptyInputError: the file has no header or no content at all
        ParseError: the file cannot be decoded as the declared format, a row
            has more fields than the header, or a header name repeats
    """
    path_obj = Path(path)
    frame = _read_frame(path_obj, file_format)
    if frame.empty:
        raise EmptyInputError()

    rows = [
        [_cell_text(value) for value in values]
        for values in frame.itertuples(index=False, name=None)
    ]
    header, data_rows = rows[0], rows[1:]
    columns = _resolve_columns(header, data_rows)

    records: list[Record] = []
    for values in data_rows:
        if file_format is FileFormat.SPREADSHEET and not any(value.strip() for value in values):
            continue
        records.append({name: values[index] for index, name in columns})

    logger.info(
        "Upload parsed",
        file_format=file_format.value,
        columns=[name for _, name in columns],
        row_count=len(records),
    )
    return records


def _read_frame(path: Path, file_format: FileFormat) -> pd.DataFrame:
    # header=None keeps the header as row 0: pandas then never promotes a
    # surplus first column to an index and never renames duplicate names
    if file_format is FileFormat.DELIMITED_TEXT:
        try:
            return pd.read_csv(
                path,
                header=None,
                dtype=str,
                keep_default_na=False,
                encoding="utf-8-sig",
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError as exc:
            raise EmptyInputError() from exc
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise ParseError(f"Could not read CSV file: {exc}") from exc

    # Excel readers raise a wide range of types (BadZipFile, XLRDError,
    # KeyError on a malformed workbook); any of them means undecodable
    try:
        return pd.read_excel(path, sheet_name=0, header=None, dtype=str, keep_default_na=False)
    except ImportError:
        raise
    except Exception as exc:
        raise ParseError(f"Could not read spreadsheet: {exc}") from exc


def _resolve_columns(header: list[str], data_rows: list[list[str]]) -> list[tuple[int, str]]:
    """Pair each used column index with its header name."""
    columns: list[tuple[int, str]] = []
    seen: set[str] = set()

    for index, raw_name in enumerate(header):
        name = raw_name.strip()
        if not name:
            # a column without a header name must not carry data
            for line_number, values in enumerate(data_rows, start=2):
                if values[index].strip():
                    raise ParseError(f"Row {line_number} has more fields than the header")
            continue

        if name in seen:
            raise ParseError(f"Duplicate column '{name}' in header")
        seen.add(name)
        columns.append((index, name))

    if not columns:
        raise EmptyInputError()
    return columns


def _cell_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)


__all__ = ["FileFormat", "SUPPORTED_SUFFIXES", "detect_format", "parse_records"]
