"""Record API routes — owner-scoped CRUD over ledger records.

Learn: Routes handle HTTP concerns only. The identity guard (mounted on
this router in api/__init__.py) resolves the caller; the request model
checks shape; RecordStore enforces the ledger rules and ownership. Here
we just translate store outcomes into status codes:

- ValidationError → 400
- NotFound        → 404 (also for other users' records)
- InternalError   → 500, generic message, details stay in the logs

Routes:
- GET    /records        → caller's records, newest first
- POST   /records        → create (201)
- GET    /records/:id    → one record
- PUT    /records/:id    → replace all mutable fields
- DELETE /records/:id    → delete permanently
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.auth.dependencies import get_current_user
from debtbook.db.engine import get_db
from debtbook.db.models import User
from debtbook.errors import InternalError, NotFound, ValidationError
from debtbook.schemas.record import MessageResponse, RecordRead, RecordWrite
from debtbook.services.record_store import RecordStore

router = APIRouter(prefix="/records")


def _store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


@router.get("", response_model=list[RecordRead])
async def list_records(
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(_store),
):
    return await store.list(user.id)


@router.post("", response_model=RecordRead, status_code=201)
async def create_record(
    body: RecordWrite,
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(_store),
):
    try:
        return await store.create(user.id, body.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InternalError:
        raise HTTPException(status_code=500, detail="Error creating record")


@router.get("/{record_id}", response_model=RecordRead)
async def get_record(
    record_id: str,
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(_store),
):
    try:
        return await store.get(user.id, record_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Record not found")


@router.put("/{record_id}", response_model=RecordRead)
async def update_record(
    record_id: str,
    body: RecordWrite,
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(_store),
):
    try:
        return await store.update(user.id, record_id, body.model_dump())
    except NotFound:
        raise HTTPException(status_code=404, detail="Record not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InternalError:
        raise HTTPException(status_code=500, detail="Error updating record")


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: str,
    user: User = Depends(get_current_user),
    store: RecordStore = Depends(_store),
):
    try:
        await store.delete(user.id, record_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="Record not found")
    except InternalError:
        raise HTTPException(status_code=500, detail="Error deleting record")
    return {"message": "Record deleted successfully"}
