"""Auth API — registration, login, current user.

Learn: Routes for the user side of authentication:
- POST /auth/register → create an account, returns a token right away
- POST /auth/login → username/password → token
- GET /auth/me → who does this token belong to

Both register and login answer with the same envelope:
{success: true, token, user: {id, username}}.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.auth.dependencies import get_current_user, get_token_service
from debtbook.auth.jwt import TokenService
from debtbook.db.engine import get_db
from debtbook.db.models import User
from debtbook.errors import ValidationError
from debtbook.services.user_service import UserService

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


class Credentials(BaseModel):
    # Optional so a missing field gets our 400 message, not a 422.
    username: Optional[str] = None
    password: Optional[str] = None


class UserInfo(BaseModel):
    id: str
    username: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserInfo


class MeResponse(BaseModel):
    success: bool = True
    user: UserInfo


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    return AuthResponse(
        token=tokens.issue(str(user.id)),
        user=UserInfo(id=str(user.id), username=user.username),
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Create a new user account and sign them in."""
    try:
        user = await UserService(db).register(body.username, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _auth_response(user, tokens)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(
    body: Credentials,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with username and password → bearer token."""
    if not body.username or not body.password:
        raise HTTPException(
            status_code=400, detail="Username and password are required"
        )

    user = await UserService(db).authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _auth_response(user, tokens)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=MeResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return MeResponse(user=UserInfo(id=str(user.id), username=user.username))
