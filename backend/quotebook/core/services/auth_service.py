from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from quotebook.api.v1.schemas.auth import AuthResponse, SignInRequest, SignUpRequest
from quotebook.utils.logging import get_logger

if TYPE_CHECKING:
    from quotebook.core.repositories.local_quote_repository import LocalQuoteRepository
    from quotebook.core.schemas.auth import AuthUser


logger = get_logger(__name__)


def _backend_message(err: Exception) -> str:
    """Return the backend's own error message, shown to users as-is."""
    message = getattr(err, "message", None) or str(err)
    return message or "Authentication failed"


class AuthService:
    """Authentication service handling business logic for auth operations.

    Error messages from Supabase auth are passed through verbatim as
    ``ValueError`` so the UI can display them.
    """

    def __init__(self, supabase_client: Any | None, local_repo: LocalQuoteRepository):
        self.supabase = supabase_client
        self._local = local_repo

    def _require_backend(self) -> None:
        if self.supabase is None:
            raise ValueError("Authentication is not configured on this server")

    @staticmethod
    def _session_response(resp: Any) -> AuthResponse:
        user_payload = {
            "id": str(resp.user.id),
            "email": resp.user.email or "",
        }
        return AuthResponse(
            access_token=resp.session.access_token,
            token_type="bearer",
            expires_in=resp.session.expires_in,
            refresh_token=resp.session.refresh_token,
            user=user_payload,
        )

    async def sign_up(self, payload: SignUpRequest) -> AuthResponse:
        """Handle user signup with business logic."""
        self._require_backend()

        email = payload.email.lower().strip()
        password = payload.password

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_up({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            logger.warning(
                "Sign up failed",
                extra={"email": email, "error_type": type(err).__name__},
            )
            raise ValueError(_backend_message(err)) from err

        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Account created but session not established. Please confirm your email or sign in.")

        logger.info("User signed up successfully", extra={"user_id": str(resp.user.id)})
        return self._session_response(resp)

    async def sign_in(self, payload: SignInRequest) -> AuthResponse:
        """Handle user signin with business logic."""
        self._require_backend()

        email = payload.email.lower().strip()
        password = payload.password

        try:
            resp = await asyncio.to_thread(
                lambda: self.supabase.auth.sign_in_with_password({
                    "email": email,
                    "password": password,
                })
            )
        except Exception as err:
            logger.warning(
                "Sign in failed",
                extra={"email": email, "error_type": type(err).__name__},
            )
            raise ValueError(_backend_message(err)) from err

        if not resp.user or not getattr(resp, "session", None):
            raise ValueError("Invalid email or password")

        logger.info("User signed in successfully", extra={"user_id": str(resp.user.id)})
        return self._session_response(resp)

    async def sign_out(self, current_user: AuthUser) -> dict[str, str]:
        """Sign out and wipe this device's quote storage."""
        self._local.clear()
        if self.supabase is not None:
            try:
                await asyncio.to_thread(lambda: self.supabase.auth.sign_out())
            except Exception as err:
                logger.warning("Sign out failed", extra={"error": str(err), "user_id": str(current_user.id)})
        logger.info("User signed out successfully", extra={"user_id": str(current_user.id)})
        return {"message": "Signed out successfully"}

    async def reset_password(self, email: str) -> dict[str, str]:
        """Send a password reset email."""
        self._require_backend()
        normalized = email.lower().strip()
        try:
            await asyncio.to_thread(lambda: self.supabase.auth.reset_password_for_email(normalized))
        except Exception as err:
            logger.warning("Password reset failed", extra={"error_type": type(err).__name__})
            raise ValueError(_backend_message(err)) from err
        return {"message": "Password reset email sent"}
