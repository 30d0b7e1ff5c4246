import pytest

from app.core.exceptions import ValidationError
from app.db.models.resource import ResourceStatus
from app.schemas.resources import SortField, SortOrder
from app.services.validation import validate_create, validate_id, validate_list_query, validate_update


def test_validate_create_normalizes_payload():
    data = validate_create({"name": "  Name ", "description": " d ", "category": " c ", "extra": "ignored"})

    assert data.name == "Name"
    assert data.description == "d"
    assert data.category == "c"
    assert data.status == ResourceStatus.ACTIVE
    assert not hasattr(data, "extra")


def test_validate_create_reports_first_failure():
    with pytest.raises(ValidationError) as exc:
        validate_create({"status": "bogus"})

    assert exc.value.message == "Name is required and must be a non-empty string"


def test_validate_create_rejects_null_description():
    with pytest.raises(ValidationError, match="Description must be a string"):
        validate_create({"name": "ok", "description": None})


def test_validate_create_length_limits_apply_after_trimming():
    data = validate_create({"name": " " + "x" * 255 + " "})
    assert len(data.name) == 255

    with pytest.raises(ValidationError, match="Description must be at most 1000 characters"):
        validate_create({"name": "ok", "description": "d" * 1001})


def test_validate_update_keeps_absent_fields_unset():
    data = validate_update({"category": "  books "})

    assert data.changes() == {"category": "books"}


def test_validate_update_returns_status_values():
    data = validate_update({"status": "archived"})

    assert data.changes() == {"status": "archived"}


def test_validate_update_requires_a_known_field():
    with pytest.raises(ValidationError, match="At least one field must be provided for update"):
        validate_update({})


def test_validate_update_rejects_non_object():
    with pytest.raises(ValidationError, match="Request body must be a JSON object"):
        validate_update("name=x")


@pytest.mark.parametrize("raw, expected", [("1", 1), ("42", 42), (7, 7)])
def test_validate_id_accepts_positive_integers(raw, expected):
    assert validate_id(raw) == expected


@pytest.mark.parametrize("raw", ["0", "-3", "1.5", "abc", "", " 1", None, True, 0])
def test_validate_id_rejects_everything_else(raw):
    with pytest.raises(ValidationError, match="Invalid resource ID"):
        validate_id(raw)


def test_validate_list_query_defaults():
    filters = validate_list_query({})

    assert filters.limit == 10
    assert filters.offset == 0
    assert filters.sort_by == SortField.ID
    assert filters.sort_order == SortOrder.ASC
    assert filters.category is None
    assert filters.status is None
    assert filters.search is None


def test_validate_list_query_normalizes_values():
    filters = validate_list_query(
        {"status": "inactive", "search": "  term ", "limit": "25", "offset": "5", "sortBy": "name", "sortOrder": "desc"}
    )

    assert filters.status == ResourceStatus.INACTIVE
    assert filters.search == "term"
    assert filters.limit == 25
    assert filters.offset == 5
    assert filters.sort_by == SortField.NAME
    assert filters.sort_order == SortOrder.DESC


def test_validate_list_query_treats_blank_filters_as_absent():
    filters = validate_list_query({"category": "", "status": "", "search": "   ", "sortBy": "", "sortOrder": ""})

    assert filters.category is None
    assert filters.status is None
    assert filters.search is None
    assert filters.sort_by == SortField.ID
    assert filters.sort_order == SortOrder.ASC


@pytest.mark.parametrize("limit", ["0", "101", "2.5", "", "many"])
def test_validate_list_query_rejects_bad_limit(limit):
    with pytest.raises(ValidationError, match="Limit must be a positive integer between 1 and 100"):
        validate_list_query({"limit": limit})


def test_validate_id_accepts_ids_beyond_integer_range():
    assert validate_id("99999999999999999999999") == 99999999999999999999999


def test_validate_list_query_accepts_largest_offset():
    assert validate_list_query({"offset": str(2**63 - 1)}).offset == 2**63 - 1


@pytest.mark.parametrize("offset", ["-1", "99999999999999999999999", str(2**63), "9" * 5000, "1.5", ""])
def test_validate_list_query_rejects_bad_offset(offset):
    with pytest.raises(ValidationError, match="Offset must be a non-negative integer"):
        validate_list_query({"offset": offset})


def test_validate_id_rejects_digit_strings_too_long_to_convert():
    with pytest.raises(ValidationError, match="Invalid resource ID"):
        validate_id("9" * 5000)
