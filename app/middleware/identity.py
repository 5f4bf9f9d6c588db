"""
Caller identity for user-data-service

The service sits behind a gateway that authenticates the user and forwards
the identity in plain headers. Nothing is verified here: ``x-user-id`` is
the partition key of every item the request touches.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.errors import Unauthorized

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"
USER_EMAIL_HEADER = "x-user-email"
ANONYMOUS_USER_ID = "anonymous"
UNKNOWN_EMAIL = "unknown"


@dataclass(frozen=True)
class UserIdentity:
    id: str
    email: str

    @property
    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS_USER_ID


def resolve_identity(headers) -> UserIdentity:
    """Missing or empty headers fall back to the anonymous/unknown sentinels"""
    return UserIdentity(
        id=headers.get(USER_ID_HEADER) or ANONYMOUS_USER_ID,
        email=headers.get(USER_EMAIL_HEADER) or UNKNOWN_EMAIL,
    )


class UserIdentityMiddleware(BaseHTTPMiddleware):
    """
    Resolves the caller once per request and stores it in request.state.user.

    Emits one log line per request with the method, path and identity.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        user = resolve_identity(request.headers)
        request.state.user = user

        logger.info(f"[user-data] Request from user {user.id} <{user.email}> ({request.method} {request.url.path})")

        return await call_next(request)


async def get_current_user(request: Request) -> UserIdentity:
    """
    Current caller, anonymous when no identity header was sent.

    Falls back to the headers when the middleware is not installed.
    """
    user = getattr(request.state, "user", None)
    if user is None:
        user = resolve_identity(request.headers)
    return user


async def require_identified_user(user: UserIdentity = Depends(get_current_user)) -> UserIdentity:
    """Rejects anonymous callers with 401"""
    if user.is_anonymous:
        raise Unauthorized()
    return user
