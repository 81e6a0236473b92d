"""Record validation rules — pure functions, no database needed."""

import datetime as dt
from decimal import Decimal

import pytest

from debtbook.errors import ValidationError
from debtbook.services.record_rules import parse_amount, validate_record

TODAY = dt.date(2024, 6, 1)


def _fields(**overrides) -> dict:
    fields = {
        "name": "Alice",
        "contact": "555-1234",
        "total_amount": 1000,
        "remaining_amount": 400,
        "date": "2024-01-01",
    }
    fields.update(overrides)
    return fields


def test_valid_record_is_normalized():
    valid = validate_record(
        _fields(name="  Alice  ", contact=" 555-1234 "), today=TODAY
    )
    assert valid.name == "Alice"
    assert valid.contact == "555-1234"
    assert valid.total_amount == Decimal("1000.00")
    assert valid.remaining_amount == Decimal("400.00")
    assert valid.date == dt.date(2024, 1, 1)


@pytest.mark.parametrize(
    "total,remaining",
    [
        (0, 0),
        (100, 0),
        (100, 100),
        ("0.01", "0.01"),
        (10_000_000, 9_999_999.99),
        (10_000_000, 10_000_000),
    ],
)
def test_balance_invariant_accepts_remaining_up_to_total(total, remaining):
    valid = validate_record(
        _fields(total_amount=total, remaining_amount=remaining), today=TODAY
    )
    assert valid.remaining_amount <= valid.total_amount


@pytest.mark.parametrize(
    "total,remaining", [(0, "0.01"), (100, 100.01), (400, 1000)]
)
def test_balance_invariant_rejects_remaining_above_total(total, remaining):
    with pytest.raises(ValidationError, match="cannot be greater than total"):
        validate_record(
            _fields(total_amount=total, remaining_amount=remaining), today=TODAY
        )


@pytest.mark.parametrize("field", ["name", "contact"])
@pytest.mark.parametrize("value", [None, "", "   "])
def test_text_fields_are_required(field, value):
    with pytest.raises(ValidationError, match="is required"):
        validate_record(_fields(**{field: value}), today=TODAY)


def test_name_length_counts_trimmed_text():
    validate_record(_fields(name=" " + "x" * 100 + " "), today=TODAY)
    with pytest.raises(ValidationError, match="cannot exceed 100"):
        validate_record(_fields(name="x" * 101), today=TODAY)


def test_contact_max_length():
    validate_record(_fields(contact="1" * 20), today=TODAY)
    with pytest.raises(ValidationError, match="cannot exceed 20"):
        validate_record(_fields(contact="1" * 21), today=TODAY)


@pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", True, [], None])
def test_non_numeric_amount_is_a_validation_error(value):
    with pytest.raises(ValidationError):
        parse_amount(value, "Total amount")


def test_negative_amount_rejected():
    with pytest.raises(ValidationError, match="cannot be negative"):
        validate_record(_fields(total_amount=-1, remaining_amount=0), today=TODAY)


def test_amount_above_maximum_rejected():
    with pytest.raises(ValidationError, match="too large"):
        validate_record(
            _fields(total_amount="10000000.01", remaining_amount=0), today=TODAY
        )


def test_amount_with_sub_cent_precision_rejected():
    with pytest.raises(ValidationError, match="two decimal places"):
        parse_amount("10.005", "Total amount")


def test_float_amounts_do_not_drift():
    assert parse_amount(0.1, "x") + parse_amount(0.2, "x") == Decimal("0.30")


def test_date_today_is_allowed():
    assert validate_record(_fields(date=TODAY), today=TODAY).date == TODAY


def test_date_in_future_rejected():
    with pytest.raises(ValidationError, match="cannot be in the future"):
        validate_record(_fields(date="2024-06-02"), today=TODAY)


def test_date_accepts_iso_datetime_string():
    valid = validate_record(_fields(date="2024-01-01T10:30:00Z"), today=TODAY)
    assert valid.date == dt.date(2024, 1, 1)


@pytest.mark.parametrize("value", [None, "", "2024-13-01", "yesterday", 20240101])
def test_bad_dates_rejected(value):
    with pytest.raises(ValidationError):
        validate_record(_fields(date=value), today=TODAY)


def test_date_with_offset_is_taken_in_utc():
    # 23:30 in New York on Jan 1 is already Jan 2 in UTC.
    valid = validate_record(_fields(date="2024-01-01T23:30:00-05:00"), today=TODAY)
    assert valid.date == dt.date(2024, 1, 2)


def test_date_with_milliseconds_and_z_suffix():
    valid = validate_record(_fields(date="2024-01-01T10:30:00.000Z"), today=TODAY)
    assert valid.date == dt.date(2024, 1, 1)


def test_datetime_object_converted_to_utc_date():
    moment = dt.datetime(
        2024, 1, 1, 23, 30, tzinfo=dt.timezone(dt.timedelta(hours=-5))
    )
    assert validate_record(_fields(date=moment), today=TODAY).date == dt.date(2024, 1, 2)


@pytest.mark.parametrize(
    "value", ["2024-01-01garbage", "2024-01-01 junk", "2024-01-01T25:00:00Z"]
)
def test_date_with_trailing_garbage_rejected(value):
    with pytest.raises(ValidationError, match="valid calendar date"):
        validate_record(_fields(date=value), today=TODAY)


def test_offset_pushing_date_past_today_rejected():
    with pytest.raises(ValidationError, match="cannot be in the future"):
        validate_record(_fields(date="2024-06-01T23:00:00-05:00"), today=TODAY)
