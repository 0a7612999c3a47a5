"""Authentication API endpoints."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user
from src.models.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    ProfileResponse,
    RefreshRequest,
    RefreshResponse,
    UpdateProfileRequest,
)
from src.models.base import MessageResponse
from src.models.user import User
from src.services.credential_service import CredentialService


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(request: LoginRequest) -> LoginResponse:
    """Login with email and password.

    Args:
        request: Login credentials

    Returns:
        LoginResponse with the user and a fresh token pair

    Raises:
        Unauthorized: "Invalid credentials" for unknown email or wrong password
    """
    user, access_token, refresh_token = await CredentialService().login(
        request.email, request.password
    )
    return LoginResponse(user=user, access_token=access_token, refresh_token=refresh_token)


@router.post("/refresh")
async def refresh(request: RefreshRequest) -> RefreshResponse:
    """Exchange the current refresh token for a new access token.

    Only the refresh token stored by the most recent login is accepted.
    """
    access_token = await CredentialService().refresh(request.refresh_token)
    return RefreshResponse(access_token=access_token)


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(user=current_user)


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)) -> MessageResponse:
    """Invalidate the stored refresh token.

    Access tokens already issued stay valid until they expire.
    """
    await CredentialService().logout(current_user.id)
    return MessageResponse(message="Logged out successfully")


@router.put("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
) -> ProfileResponse:
    user = await CredentialService().update_profile(
        current_user.id, name=request.name, email=request.email
    )
    return ProfileResponse(message="Profile updated successfully", user=user)


@router.put("/password")
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Change the password. Every session must log in again afterwards.

    Raises:
        Unauthorized: "Invalid current password"
    """
    await CredentialService().change_password(
        current_user.id, request.current_password, request.new_password
    )
    return MessageResponse(message="Password changed successfully")
