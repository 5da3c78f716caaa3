"""Identity dependency for API routes.

Credentials are verified upstream by the session provider, which forwards
the authenticated user id in ``X-User-Id``. Routes trust that id as-is.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header

from core.exceptions import AuthenticationError

USER_ID_HEADER = "X-User-Id"


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        msg = "Not authorized to access this route"
        raise AuthenticationError(msg, {"header": USER_ID_HEADER})
    return user_id
