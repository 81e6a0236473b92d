"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror what is declared here.

Key concepts:
- UUID primary keys (record ids don't leak how many rows exist)
- Numeric(12, 2) amounts — exact decimals, no float drift
- CHECK constraints repeat the balance rules at the database level, so
  no row can ever hold remaining_amount > total_amount
"""

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    TypeDecorator,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

MAX_AMOUNT = 10_000_000


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that always comes back in UTC.

    Learn: SQLite drops tzinfo on the way in, so rows reloaded from it
    would be naive while freshly created objects are aware. Normalizing
    here means a timestamp serializes the same way whether it was just
    written or read back.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)


class User(Base):
    """A person keeping a ledger.

    Learn: Users are referenced by id everywhere else. The password is
    stored only as a bcrypt hash (see auth/password.py).
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime, default=utcnow
    )

    records: Mapped[list["Record"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )


class Record(Base):
    """A debt/credit entry: who, how much in total, how much is still open.

    Learn: owner_id is set once at creation and never reassigned. Every
    query in RecordStore filters on it.
    """

    __tablename__ = "records"
    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_records_total_nonnegative"),
        CheckConstraint(
            "remaining_amount >= 0", name="ck_records_remaining_nonnegative"
        ),
        CheckConstraint(
            f"total_amount <= {MAX_AMOUNT}", name="ck_records_total_max"
        ),
        CheckConstraint(
            "remaining_amount <= total_amount", name="ck_records_balance"
        ),
        Index("ix_records_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=new_uuid
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact: Mapped[str] = mapped_column(String(20), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    remaining_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # Python-side defaults: microsecond precision keeps newest-first stable.
    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime, default=utcnow
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="records")
