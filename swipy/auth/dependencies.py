from __future__ import annotations

from fastapi import HTTPException, Request


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_self(user: dict, user_id: str) -> None:
    """Raise 403 when the logged-in user acts on someone else's data."""
    if user.get("id") != user_id:
        raise HTTPException(status_code=403, detail="Not authorized to access this user's data")
