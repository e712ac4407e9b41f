"""Row validation: turns raw records into leads, all or nothing."""

from collections.abc import Sequence

from lead_dispatch.infrastructure.observability.logging import get_logger

from ..domain.errors import EmptyInputError, ValidationError
from ..domain.models import Record, ValidatedLead

logger = get_logger(__name__)

FIRST_NAME_COLUMN = "FirstName"
PHONE_COLUMN = "Phone"
NOTES_COLUMN = "Notes"
REQUIRED_COLUMNS = (FIRST_NAME_COLUMN, PHONE_COLUMN)


def _field(record: Record, column: str) -> str:
    value = record.get(column)
    if value is None:
        return ""
    return str(value).strip()


def is_valid_record(record: Record) -> bool:
    return all(_field(record, column) for column in REQUIRED_COLUMNS)


def validate_records(records: Sequence[Record]) -> list[ValidatedLead]:
    """
    Validate every record and convert it into a ValidatedLead.

    Column names are case-sensitive. A single bad row rejects the whole
    upload; the error lists every offending row in file order, with its
    cells exactly as parsed. Leads carry the values with surrounding
    whitespace removed.
    """
    if not records:
        raise EmptyInputError()

    invalid_rows = [dict(record) for record in records if not is_valid_record(record)]
    if invalid_rows:
        logger.warning(
            "Upload rejected by row validation",
            total_rows=len(records),
            invalid_rows=len(invalid_rows),
        )
        raise ValidationError(invalid_rows, REQUIRED_COLUMNS)

    return [
        ValidatedLead(
            first_name=_field(record, FIRST_NAME_COLUMN),
            phone=_field(record, PHONE_COLUMN),
            notes=_field(record, NOTES_COLUMN),
        )
        for record in records
    ]
