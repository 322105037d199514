"""FastAPI dependencies for API routes.

This module re-exports commonly used dependencies for cleaner imports in routes.
"""

from typing import Annotated

from fastapi import Depends, Request

from openfga_demo.core.auth import AuthUser, RequireUser, get_auth_user

__all__ = [
    "AuthUser",
    "get_auth_user",
    "RequireUser",
    "RequestID",
]


async def get_request_id(request: Request) -> str:
    """Get request ID from request state."""
    return getattr(request.state, "request_id", "unknown")


RequestID = Annotated[str, Depends(get_request_id)]
