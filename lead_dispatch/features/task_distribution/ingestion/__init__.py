"""File ingestion: transient uploads, parsing and row validation."""

from .parser import SUPPORTED_SUFFIXES, FileFormat, detect_format, parse_records
from .uploads import transient_upload
from .validator import REQUIRED_COLUMNS, validate_records

__all__ = [
    "FileFormat",
    "REQUIRED_COLUMNS",
    "SUPPORTED_SUFFIXES",
    "detect_format",
    "parse_records",
    "transient_upload",
    "validate_records",
]
