"""Bearer-token authentication for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from feedbridge.domain.errors import UnauthenticatedError

if TYPE_CHECKING:
    from feedbridge.containers import AppContainer


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """Resolve the signed-in user or fail with 401."""
    container: AppContainer = request.app.state.container
    token = bearer_token(authorization)
    user_id = container.identity_provider.resolve_user_id(token) if token else None
    if not user_id:
        raise UnauthenticatedError
    return user_id
