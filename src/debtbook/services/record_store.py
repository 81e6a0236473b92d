"""Record store — owner-scoped persistence for ledger records.

Learn: Two rules are enforced here and nowhere else:

1. Balance invariant — validate_record() runs before any change reaches
   the session, and the write is a single commit. A rejected create or
   update leaves the database exactly as it was.
2. Ownership — every lookup filters on owner_id. A record that belongs
   to another user raises NotFound, the same as one that never existed,
   so one user can't even learn that another user's record id is real.

The API layer only translates these outcomes into HTTP responses.
"""

import datetime as dt
import uuid
from typing import Any, Callable, Mapping, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.db.models import Record, utcnow
from debtbook.errors import InternalError, NotFound, ValidationError
from debtbook.services.record_rules import RecordFields, validate_record

logger = structlog.get_logger()


def _utc_today() -> dt.date:
    return utcnow().date()


class RecordStore:
    """Business logic for ledger records, always scoped to one owner."""

    def __init__(
        self,
        db: AsyncSession,
        today: Optional[Callable[[], dt.date]] = None,
    ):
        self.db = db
        self._today = today or _utc_today

    # ─── Reads ──────────────────────────────────────────

    async def list(self, owner_id: uuid.UUID) -> list[Record]:
        """All of the owner's records, newest first."""
        result = await self.db.execute(
            select(Record)
            .where(Record.owner_id == owner_id)
            .order_by(Record.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, owner_id: uuid.UUID, record_id: str | uuid.UUID) -> Record:
        """Fetch one record. Missing and foreign records both raise NotFound."""
        record_uuid = _parse_id(record_id)
        if record_uuid is None:
            raise NotFound("Record not found")

        result = await self.db.execute(
            select(Record).where(
                Record.id == record_uuid,
                Record.owner_id == owner_id,
            )
        )
        record = result.scalars().first()
        if record is None:
            raise NotFound("Record not found")
        return record

    # ─── Writes ─────────────────────────────────────────

    async def create(
        self, owner_id: uuid.UUID, fields: Mapping[str, Any]
    ) -> Record:
        valid = validate_record(fields, today=self._today())

        record = Record(owner_id=owner_id)
        _apply(record, valid)
        self.db.add(record)
        await self._commit("create")

        logger.info(
            "record.created", record_id=str(record.id), owner_id=str(owner_id)
        )
        return record

    async def update(
        self,
        owner_id: uuid.UUID,
        record_id: str | uuid.UUID,
        fields: Mapping[str, Any],
    ) -> Record:
        """Replace every mutable field of a record.

        The new values are validated as a whole before anything is
        assigned, so a failing update leaves the stored record untouched.
        """
        record = await self.get(owner_id, record_id)
        valid = validate_record(fields, today=self._today())

        _apply(record, valid)
        record.updated_at = utcnow()
        await self._commit("update")

        logger.info(
            "record.updated", record_id=str(record.id), owner_id=str(owner_id)
        )
        return record

    async def delete(self, owner_id: uuid.UUID, record_id: str | uuid.UUID) -> None:
        """Permanently remove a record. Deleting it again raises NotFound."""
        record = await self.get(owner_id, record_id)
        await self.db.delete(record)
        await self._commit("delete")

        logger.info(
            "record.deleted", record_id=str(record.id), owner_id=str(owner_id)
        )

    # ─── Internals ──────────────────────────────────────

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            # A database CHECK caught something validate_record() let through.
            await self.db.rollback()
            logger.warning("record.constraint_violation", operation=operation)
            raise ValidationError("Record violates ledger constraints")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("record.persistence_error", operation=operation)
            raise InternalError(f"Could not {operation} record")


def _apply(record: Record, valid: RecordFields) -> None:
    record.name = valid.name
    record.contact = valid.contact
    record.total_amount = valid.total_amount
    record.remaining_amount = valid.remaining_amount
    record.date = valid.date


def _parse_id(record_id: str | uuid.UUID) -> Optional[uuid.UUID]:
    if isinstance(record_id, uuid.UUID):
        return record_id
    try:
        return uuid.UUID(str(record_id))
    except ValueError:
        return None
