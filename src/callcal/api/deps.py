"""FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Cookie, Depends, Header, HTTPException, Request, status

from callcal.core.exceptions import AuthenticationError
from callcal.core.security import verify_access_token
from callcal.services.attendance import AttendanceService

AUTH_COOKIE = "auth_token"


# Attendance service dependency
def get_service(request: Request) -> AttendanceService:
    """Get the attendance service attached to the application."""
    return request.app.state.service


Service = Annotated[AttendanceService, Depends(get_service)]


# Authentication dependency
async def get_current_member_id(
    authorization: Optional[str] = Header(default=None),
    auth_token: Optional[str] = Cookie(default=None),
) -> int:
    """Get the authenticated member id from a bearer token or the auth cookie."""
    token = None
    if authorization:
        if not authorization.startswith("Bearer "):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authorization header format",
                headers={"WWW-Authenticate": "Bearer"},
            )
        token = authorization[7:]  # Remove "Bearer " prefix
    elif auth_token:
        token = auth_token

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return verify_access_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentMemberID = Annotated[int, Depends(get_current_member_id)]
