"""
FastAPI Dependencies

Caller identity for user-scoped endpoints.

Authentication happens upstream: the gateway verifies the user and forwards
their id in the X-User-Id header. Every subject, session, deck and card
query is scoped to that id.
"""

from fastapi import Header, HTTPException, status


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str:
    """
    Resolve the calling user's id from the X-User-Id header.

    Returns:
        str: The user id, stripped of surrounding whitespace

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id
