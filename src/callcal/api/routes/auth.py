"""Authentication endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel
import structlog

from callcal.api.deps import AUTH_COOKIE, CurrentMemberID, Service
from callcal.core.security import create_access_token, hash_password, verify_password

logger = structlog.get_logger()
router = APIRouter()


class LoginRequest(BaseModel):
    """Login request."""

    uin: int
    password: str


class TokenResponse(BaseModel):
    """Token response schema."""

    ok: bool = True
    access_token: str
    token_type: str = "bearer"


class ResetPasswordRequest(BaseModel):
    """Password change request."""

    old_password: str
    new_password: str


@router.post("/login")
async def login(payload: LoginRequest, response: Response, service: Service) -> TokenResponse:
    """Exchange a member's uin and password for an access token.

    The token is also set as an HttpOnly cookie.
    """
    found = await service.find_by_external_uin(payload.uin)
    if found is None or not verify_password(payload.password, found[1]):
        logger.info("Login rejected", uin=payload.uin)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid credentials",
        )

    member_id = found[0]
    token = create_access_token(member_id)
    response.set_cookie(AUTH_COOKIE, token, httponly=True, path="/", samesite="lax")
    logger.info("Member logged in", member_id=member_id)
    return TokenResponse(access_token=token)


@router.post("/logout")
async def logout(response: Response) -> dict:
    """Clear the auth cookie."""
    response.delete_cookie(AUTH_COOKIE, path="/", httponly=True, samesite="lax")
    return {"ok": True}


@router.post("/reset-password")
async def reset_password(
    payload: ResetPasswordRequest,
    member_id: CurrentMemberID,
    service: Service,
) -> dict:
    """Change the current member's password after checking the old one."""
    credential = await service.get_credential(member_id)
    if not verify_password(payload.old_password, credential):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="old password mismatch",
        )

    await service.set_credential(member_id, hash_password(payload.new_password))
    return {"ok": True}
