from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from quotebook.api.v1.schemas.auth import (
    AuthResponse,
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
)
from quotebook.core.schemas.auth import AuthUser
from quotebook.core.services.auth_service import AuthService
from quotebook.dependencies import (
    get_auth_service,
    get_current_user,
)
from quotebook.utils.logging import get_logger

logger = get_logger(__name__)

# Configure router with authentication-specific settings
router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
    }
)


@router.post("/signup", response_model=AuthResponse)
async def sign_up_with_password(
    payload: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Sign up with email and password.

    Clients check ``GET /quotes/local/status`` afterwards to offer copying
    this device's quotes to the cloud via ``POST /quotes/migrate``.
    """
    try:
        return await auth_service.sign_up(payload)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except Exception as err:
        logger.error("Unexpected error during signup", extra={"error": str(err)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from err


@router.post("/signin", response_model=AuthResponse)
async def sign_in_with_password(
    payload: SignInRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Sign in with email and password."""
    try:
        return await auth_service.sign_in(payload)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except Exception as err:
        logger.error("Unexpected error during signin", extra={"error": str(err)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from err


@router.post("/signout")
async def sign_out(
    current_user: AuthUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Sign out the current user and clear this device's quotes."""
    result = await auth_service.sign_out(current_user)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=result
    )


@router.post("/password-reset")
async def reset_password(
    payload: PasswordResetRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Send a password reset email."""
    try:
        return await auth_service.reset_password(payload.email)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err


@router.get("/validate")
async def validate_token(current_user: AuthUser = Depends(get_current_user)):
    """Validate the current user's token and return user info."""
    return {
        "id": current_user.id,
        "email": current_user.email,
        "role": current_user.role,
    }
