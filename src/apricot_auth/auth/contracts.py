"""Contracts and shared types for the apricot-auth provider stack."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import ConfigDict

from apricot_auth.models import AuthBaseModel


class ProviderError(Exception):
    """Standardized provider error with HTTP-style status information."""

    def __init__(self, error: str, description: str | None = None, status_code: int = 400):
        super().__init__(description or error)
        self.error = error
        self.description = description
        self.status_code = status_code


class TokenSet(AuthBaseModel):
    """Tokens returned by a code exchange or refresh.

    Ownership passes to the caller; adapters never persist tokens.
    """

    access_token: str
    refresh_token: str | None = None
    access_token_expires_at: datetime | None = None
    scopes: list[str] | None = None
    token_type: str | None = None
    raw: dict[str, Any] | None = None


class NormalizedUser(AuthBaseModel):
    """Framework-facing user shape shared by all providers.

    Providers add their own derived fields; custom fields produced by a
    configured profile mapping are kept as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    name: str
    email: str | None = None
    email_verified: bool = False
    image: str | None = None


class UserInfoResult(AuthBaseModel):
    """Normalized user plus the provider's raw profile."""

    user: NormalizedUser
    data: dict[str, Any]


@runtime_checkable
class OAuthProvider(Protocol):
    """Interface every social-login provider must implement."""

    id: str
    name: str

    def create_authorization_url(
        self,
        *,
        state: str,
        redirect_uri: str | None = None,
        code_verifier: str | None = None,
    ) -> str:
        """Build the URL the end user is redirected to for login."""

    async def validate_authorization_code(
        self,
        *,
        code: str,
        code_verifier: str | None = None,
        redirect_uri: str | None = None,
    ) -> TokenSet:
        """Exchange an authorization code for provider tokens."""

    async def refresh_access_token(self, refresh_token: str) -> TokenSet:
        """Obtain fresh tokens using a refresh token."""

    async def get_user_info(self, *, access_token: str) -> UserInfoResult | None:
        """Fetch and normalize the user behind an access token.

        Returns None when the provider cannot supply a user.
        """


__all__ = [
    "NormalizedUser",
    "OAuthProvider",
    "ProviderError",
    "TokenSet",
    "UserInfoResult",
]
