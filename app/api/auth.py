"""Password reset endpoints."""
from fastapi import APIRouter, HTTPException

from app.schemas.auth import PasswordResetRequest, PasswordResult, PasswordUpdateRequest
from app.services.auth_client import auth_client

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/password-reset", response_model=PasswordResult)
async def request_password_reset(payload: PasswordResetRequest):
    """Send a password recovery email through the auth provider."""
    result = await auth_client.request_password_reset(payload.email)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    return result


@router.post("/password-update", response_model=PasswordResult)
async def update_password(payload: PasswordUpdateRequest):
    """
    Set a new password from a recovery link.

    On success the client should redirect after the returned delay.
    """
    result = await auth_client.update_password(
        payload.access_token, payload.password, payload.confirm_password
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    return result
