"""
API dependencies for authentication and data access.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from adapters.database import create_postgrest_client
from core.domain import AuthSession, Profile
from core.interfaces.query import QueryClient
from core.security import TokenService
from infrastructure.config import get_settings
from infrastructure.database import SqlAlchemyQueryClient, async_session_maker

logger = logging.getLogger(__name__)
settings = get_settings()

token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    audience=settings.jwt_audience or None,
    access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
)


def get_access_token(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    Extract the caller's access token.

    Checks the Authorization header first (Bearer token), then falls back
    to the ``access_token`` cookie set by the browser auth flow.
    """
    token = None
    if authorization and authorization.startswith("Bearer "):
        parts = authorization.split(" ", 1)
        token = parts[1] if len(parts) > 1 and parts[1] else None

    if not token:
        token = request.cookies.get("access_token")

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_query_client(access_token: Annotated[str, Depends(get_access_token)]) -> QueryClient:
    """Query client for the configured backend, scoped to the caller."""
    if settings.query_backend == "rest":
        return create_postgrest_client(access_token=access_token)
    return SqlAlchemyQueryClient(async_session_maker)


async def get_current_session(
    access_token: Annotated[str, Depends(get_access_token)],
    client: Annotated[QueryClient, Depends(get_query_client)],
) -> AuthSession:
    """
    Resolve the caller's session: verified identity plus profile.

    A missing or unreadable profile still yields a session; views that
    need the profile decide how to respond.
    """
    payload = token_service.verify_access_token(access_token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await client.select("profiles").eq("id", payload.sub).execute()
    profile = None
    if not result.ok:
        logger.warning(
            "Profile lookup failed for %s: %s",
            payload.sub,
            result.error,
            extra={"user_id": payload.sub},
        )
    elif result.rows:
        profile = Profile.from_row(result.rows[0])

    return AuthSession(user_id=payload.sub, profile=profile)
