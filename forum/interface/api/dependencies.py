"""Request identity."""

from typing import Annotated
from uuid import UUID

from fastapi import Header, HTTPException, status


def _parse_user_id(x_user_id: str | None) -> str | None:
    if not x_user_id:
        return None
    try:
        return str(UUID(x_user_id))
    except ValueError:
        return None


def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """User ID forwarded by the upstream identity layer.

    Raises:
        HTTPException: 401 if the header is missing or not a UUID
    """
    user_id = _parse_user_id(x_user_id)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Valid X-User-Id header required",
        )
    return user_id


def get_optional_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str | None:
    """User ID if the caller sent a valid header, for personalized reads."""
    return _parse_user_id(x_user_id)
