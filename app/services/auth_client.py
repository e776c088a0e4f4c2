"""Auth provider client for the password reset flow.

Accounts live in an external auth provider. This module only validates the
form input and forwards the reset and update calls.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.schemas.auth import PasswordResult

logger = logging.getLogger(__name__)


class AuthClient:
    """Client for the auth provider's recovery endpoints."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the auth client."""
        self.base_url = settings.AUTH_BASE_URL.rstrip("/")
        self.api_key = settings.AUTH_API_KEY
        self._transport = transport

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if self.api_key:
            headers["apikey"] = self.api_key
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _make_request(
        self,
        method: str,
        url: str,
        json_data: Optional[Dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> httpx.Response:
        """Make a single HTTP request (no retries)."""
        logger.info(f"Making {method} request to {url}")

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.request(
                method=method,
                url=url,
                json=json_data,
                headers=self._headers(access_token),
                timeout=30.0,
            )
            response.raise_for_status()
            return response

    async def request_password_reset(self, email: str) -> PasswordResult:
        """
        Ask the provider to send a password recovery email.

        Args:
            email: Account email

        Returns:
            PasswordResult with success flag
        """
        email = (email or "").strip()
        if not email:
            return PasswordResult(success=False, error="Email is required")

        try:
            await self._make_request("POST", f"{self.base_url}/recover", {"email": email})
            return PasswordResult(success=True)
        except Exception as e:
            logger.error(f"Password reset request failed for {email}: {e}")
            return PasswordResult(success=False, error="Could not send the reset email. Try again.")

    async def update_password(
        self, access_token: str, password: str, confirm_password: str
    ) -> PasswordResult:
        """
        Set a new password for the account behind the recovery token.

        Args:
            access_token: Token from the recovery link
            password: New password
            confirm_password: Repeated new password

        Returns:
            PasswordResult; on success it carries the redirect target and delay
        """
        if len(password or "") < settings.PASSWORD_MIN_LENGTH:
            return PasswordResult(
                success=False,
                error=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            )

        if password != confirm_password:
            return PasswordResult(success=False, error="Passwords do not match")

        try:
            await self._make_request(
                "PUT",
                f"{self.base_url}/user",
                {"password": password},
                access_token=access_token,
            )
        except Exception as e:
            logger.error(f"Password update error: {e}")
            return PasswordResult(success=False, error="Could not update the password. Try again.")

        return PasswordResult(
            success=True,
            redirect_to=settings.PASSWORD_RESET_REDIRECT_TO,
            redirect_after_seconds=settings.PASSWORD_RESET_REDIRECT_SECONDS,
        )


# Singleton instance
auth_client = AuthClient()
