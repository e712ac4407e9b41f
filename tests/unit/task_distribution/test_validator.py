import pytest

from lead_dispatch.features.task_distribution.domain import (
    EmptyInputError,
    ValidatedLead,
    ValidationError,
)
from lead_dispatch.features.task_distribution.ingestion import validate_records


def test_valid_records_become_leads_in_order():
    records = [
        {"FirstName": "Ada", "Phone": "555-1111", "Notes": "call after 5"},
        {"FirstName": "Grace", "Phone": "555-2222", "Notes": ""},
    ]

    leads = validate_records(records)

    assert leads == [
        ValidatedLead(first_name="Ada", phone="555-1111", notes="call after 5"),
        ValidatedLead(first_name="Grace", phone="555-2222", notes=""),
    ]


def test_notes_column_is_optional():
    leads = validate_records([{"FirstName": "Ada", "Phone": "555-1111"}])

    assert leads[0].notes == ""


def test_one_bad_row_rejects_the_whole_batch():
    records = [
        {"FirstName": "Ada", "Phone": "555-1111", "Notes": ""},
        {"FirstName": "Grace", "Phone": "", "Notes": "no phone"},
        {"FirstName": "Alan", "Phone": "555-3333", "Notes": ""},
    ]

    with pytest.raises(ValidationError) as exc_info:
        validate_records(records)

    error = exc_info.value
    assert error.invalid_rows == [records[1]]
    assert error.status_code == 400
    payload = error.to_payload()
    assert "FirstName and Phone are required" in payload["message"]
    assert payload["invalidRows"] == [records[1]]


def test_whitespace_only_values_are_missing():
    with pytest.raises(ValidationError) as exc_info:
        validate_records([{"FirstName": "   ", "Phone": "555-1111"}])

    assert len(exc_info.value.invalid_rows) == 1


def test_column_names_are_case_sensitive():
    with pytest.raises(ValidationError):
        validate_records([{"firstname": "Ada", "phone": "555-1111"}])


def test_every_invalid_row_is_reported():
    records = [
        {"FirstName": "", "Phone": "555-1111"},
        {"FirstName": "Ada", "Phone": "555-2222"},
        {"Phone": "555-3333"},
    ]

    with pytest.raises(ValidationError) as exc_info:
        validate_records(records)

    assert exc_info.value.invalid_rows == [records[0], records[2]]


def test_empty_input_is_its_own_error():
    with pytest.raises(EmptyInputError):
        validate_records([])
