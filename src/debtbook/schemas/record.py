"""Pydantic schemas for ledger records.

Learn: Pydantic v2 models validate request/response data. The input
model only checks shape (fields present, trimmed lengths, numbers that
parse); the ledger rules themselves live in services/record_rules.py.

The wire format is camelCase (totalAmount, remainingAmount, createdAt)
while Python attributes stay snake_case.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# Exact Decimal internally, a plain JSON number on the wire.
Amount = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class RecordWrite(BaseModel):
    """Body for create and update — update replaces every field."""

    name: str = Field(..., min_length=1, max_length=100)
    contact: str = Field(..., min_length=1, max_length=20)
    total_amount: Decimal = Field(..., alias="totalAmount")
    remaining_amount: Decimal = Field(..., alias="remainingAmount")
    # Plain dates or full ISO timestamps; record_rules turns either into a date.
    date: str | dt.date

    model_config = {"str_strip_whitespace": True, "populate_by_name": True}


class RecordRead(BaseModel):
    id: uuid.UUID
    name: str
    contact: str
    total_amount: Amount = Field(serialization_alias="totalAmount")
    remaining_amount: Amount = Field(serialization_alias="remainingAmount")
    date: dt.date
    owner_id: uuid.UUID = Field(serialization_alias="owner")
    created_at: dt.datetime = Field(serialization_alias="createdAt")
    updated_at: dt.datetime = Field(serialization_alias="updatedAt")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
