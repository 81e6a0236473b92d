"""Record validation — pure functions, no database.

Learn: Every rule a record must satisfy lives here, including the
balance invariant (remaining_amount <= total_amount). RecordStore runs
validate_record() before it touches the session, so a rejected write
never leaves anything half-applied. Being pure, these rules are
unit-tested without a database.
"""

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from debtbook.errors import ValidationError

MAX_NAME_LENGTH = 100
MAX_CONTACT_LENGTH = 20
MAX_AMOUNT = Decimal("10000000")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class RecordFields:
    """The mutable fields of a Record, validated and normalized."""

    name: str
    contact: str
    total_amount: Decimal
    remaining_amount: Decimal
    date: dt.date


def _text(value: Any, label: str, max_length: int) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")
    return value


def parse_amount(value: Any, label: str) -> Decimal:
    """Parse a money amount. Floats go through str() to avoid binary noise."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} is required")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a number")
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    if amount > MAX_AMOUNT:
        raise ValidationError("Amount too large")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{label} cannot have more than two decimal places")
    return amount.quantize(CENT)


def _utc_date(moment: dt.datetime) -> dt.date:
    """Calendar date of a moment in UTC. Naive moments are taken as UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(dt.timezone.utc)
    return moment.date()


def parse_date(value: Any, today: dt.date) -> dt.date:
    """Accept a date, a datetime, or an ISO 8601 date/timestamp string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Date is required")
    if isinstance(value, dt.datetime):
        value = _utc_date(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            value = dt.date.fromisoformat(text)
        except ValueError:
            try:
                value = _utc_date(dt.datetime.fromisoformat(text))
            except ValueError:
                raise ValidationError("Date must be a valid calendar date")
    elif not isinstance(value, dt.date):
        raise ValidationError("Date must be a valid calendar date")

    if value > today:
        raise ValidationError("Date cannot be in the future")
    return value


def validate_record(fields: Mapping[str, Any], today: dt.date) -> RecordFields:
    """Validate raw record fields and return the normalized values.

    Raises ValidationError with a human-readable message on the first
    rule that fails.
    """
    name = _text(fields.get("name"), "Name", MAX_NAME_LENGTH)
    contact = _text(fields.get("contact"), "Contact", MAX_CONTACT_LENGTH)
    total = parse_amount(fields.get("total_amount"), "Total amount")
    remaining = parse_amount(fields.get("remaining_amount"), "Remaining amount")
    date = parse_date(fields.get("date"), today)

    if remaining > total:
        raise ValidationError(
            "Remaining amount cannot be greater than total amount"
        )

    return RecordFields(
        name=name,
        contact=contact,
        total_amount=total,
        remaining_amount=remaining,
        date=date,
    )
