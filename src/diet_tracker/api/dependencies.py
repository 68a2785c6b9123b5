"""Request dependencies for authentication and local time."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from diet_tracker.config import resolve_timezone
from diet_tracker.domain.auth import AuthUser  # noqa: TC001
from diet_tracker.services.auth import AuthenticationError

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> AuthUser:
    """Resolve the bearer token into the current user."""
    container = get_container(request)
    token = _bearer_token(authorization)
    try:
        return container.auth_service.authenticate(token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


async def local_now(
    request: Request,
    x_timezone: str | None = Header(default=None),
) -> datetime:
    """Return the current time in the client's timezone."""
    container = get_container(request)
    tz = resolve_timezone(x_timezone, container.settings.default_timezone)
    return datetime.now(tz=tz)


def _bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
