from typing import Annotated

from fastapi import Depends, Header

from app.domain.exceptions import UnauthorizedError


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    """Authenticated user id, set by the gateway in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError("Not authenticated")
    return x_user_id.strip()


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
