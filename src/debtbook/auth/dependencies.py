"""FastAPI auth dependencies — the identity guard.

Learn: These are used as Depends() in route handlers and on whole
routers to extract and validate the current user from the request.

Flow: Authorization: Bearer <token> → TokenService.verify → user id →
User row. Any miss along the way is a 401 and no handler runs.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from debtbook.auth.jwt import TokenService
from debtbook.db.engine import get_db
from debtbook.db.models import User
from debtbook.errors import InvalidToken, Unauthorized
from debtbook.services.user_service import UserService

logger = structlog.get_logger()


def get_token_service(request: Request) -> TokenService:
    """The signer built for this app instance (see main.create_app)."""
    return request.app.state.tokens


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        raise Unauthorized("Not authorized, no token")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("Not authorized, malformed token")
    return token


async def resolve_identity(
    authorization: Optional[str],
    tokens: TokenService,
    users: UserService,
) -> User:
    """Turn an Authorization header into an existing User.

    Raises Unauthorized when the header is missing or malformed, the
    token doesn't verify, or the user it names no longer exists.
    """
    token = extract_bearer_token(authorization)
    try:
        user_id = tokens.verify(token)
    except InvalidToken as e:
        raise Unauthorized(f"Not authorized, {e}")

    user = await users.get(user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    return user


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract the current user (required — 401 if no valid identity)."""
    try:
        user = await resolve_identity(authorization, tokens, UserService(db))
    except Unauthorized as e:
        logger.info("auth.rejected", reason=str(e), path=request.url.path)
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = user
    return user
