"""Header-based authentication.

The demo trusts the caller to name itself in the ``X-User-Id`` header.
Identity verification is left to whatever sits in front of the service.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from openfga_demo.core.logging import get_logger

logger = get_logger(__name__)

USER_ID_HEADER = b"x-user-id"


@dataclass
class AuthUser:
    """User information extracted from authentication."""

    user_id: str


class AuthenticationError(HTTPException):
    """Authentication failed."""

    def __init__(self, error: str, message: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(
            status_code=status_code,
            detail={"error": error, "message": message},
        )


def _raw_user_id(request: Request) -> bytes | None:
    # Starlette decodes headers as latin-1, so read the raw bytes to validate UTF-8
    for name, value in request.headers.raw:
        if name.lower() == USER_ID_HEADER:
            return value
    return None


async def get_auth_user(request: Request) -> AuthUser:
    """Extract the calling user from the X-User-Id header.

    Stores the user in request.state for the logging middleware.

    Raises:
        AuthenticationError: 401 when the header is missing, 400 when it is
            blank or not valid UTF-8.
    """
    raw = _raw_user_id(request)
    if raw is None:
        raise AuthenticationError(
            "Missing authentication",
            "X-User-Id header is required",
        )

    try:
        user_id = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise AuthenticationError(
            "Invalid header format",
            "X-User-Id header must be valid UTF-8",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not user_id.strip():
        raise AuthenticationError(
            "Invalid user ID",
            "X-User-Id header cannot be empty",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    logger.info("Authenticated user", user_id=user_id)
    user = AuthUser(user_id=user_id)
    request.state.user = user
    return user


RequireUser = Annotated[AuthUser, Depends(get_auth_user)]
