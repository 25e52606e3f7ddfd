"""Wild Apricot OAuth provider for social login."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from apricot_auth.http import create_http_client

from .. import oauth2
from ..contracts import NormalizedUser, OAuthProvider, ProviderError, TokenSet, UserInfoResult
from ..models import WildApricotAuthConfigModel, WildApricotProfile

logger = logging.getLogger(__name__)

DEFAULT_SITE_URL = "https://www.wildapricot.org"
OAUTH_URL = "https://oauth.wildapricot.org"
API_URL = "https://api.wildapricot.org"

DEFAULT_SCOPES = ("contacts_me",)
ACTIVE_MEMBERSHIP_STATUSES = frozenset({"Active", "PendingRenewal", "PendingLevelChange"})
NO_MEMBERSHIP = "NoMembership"

REFRESH_FAILED_MESSAGE = "Failed to refresh access token"


def is_active_member(status: str | None) -> bool:
    """Whether a Wild Apricot membership status counts as an active member."""
    return status in ACTIVE_MEMBERSHIP_STATUSES


class WildApricotUser(NormalizedUser):
    """Normalized user with Wild Apricot membership fields."""

    email_verified: bool = True
    membership_status: str = NO_MEMBERSHIP
    membership_level: str | None = None
    is_active_member: bool = False
    is_admin: bool = False


class WildApricotProviderAdapter(OAuthProvider):
    """Wild Apricot OAuth provider that uses real HTTP calls."""

    id = "wildapricot"
    name = "Wild Apricot"

    def __init__(self, config: WildApricotAuthConfigModel):
        self.config = config
        if config.site_name:
            self.site_url = f"https://{config.site_name}.wildapricot.org"
        else:
            self.site_url = DEFAULT_SITE_URL
        self.authorization_endpoint = f"{self.site_url}/sys/login/OAuthLogin"
        self.token_endpoint = f"{OAUTH_URL}/auth/token"
        self.profile_url = f"{API_URL}/v2.1/accounts/{config.account_id}/contacts/me"

    @property
    def scopes(self) -> list[str]:
        if self.config.scopes is not None:
            return list(self.config.scopes)
        return list(DEFAULT_SCOPES)

    def _resolve_redirect_uri(self, redirect_uri: str | None) -> str:
        resolved = redirect_uri or self.config.redirect_uri
        if not resolved:
            raise ValueError("No redirect URI given and none configured for Wild Apricot")
        return resolved

    def create_authorization_url(
        self,
        *,
        state: str,
        redirect_uri: str | None = None,
        code_verifier: str | None = None,
    ) -> str:
        return oauth2.create_authorization_url(
            client_id=self.config.client_id,
            authorization_endpoint=self.authorization_endpoint,
            redirect_uri=self._resolve_redirect_uri(redirect_uri),
            state=state,
            scopes=self.scopes,
            code_verifier=code_verifier,
        )

    async def validate_authorization_code(
        self,
        *,
        code: str,
        code_verifier: str | None = None,
        redirect_uri: str | None = None,
    ) -> TokenSet:
        return await oauth2.validate_authorization_code(
            code=code,
            code_verifier=code_verifier,
            redirect_uri=self._resolve_redirect_uri(redirect_uri),
            token_endpoint=self.token_endpoint,
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            authentication="basic",
        )

    async def refresh_access_token(self, refresh_token: str) -> TokenSet:
        """Refresh tokens at the Wild Apricot token endpoint.

        Every failure surfaces as the same `bad_request` error; the upstream
        detail is only logged.
        """
        try:
            async with create_http_client() as client:
                resp = await client.post(
                    self.token_endpoint,
                    data={"grant_type": "refresh_token", "refresh_token": refresh_token},
                    headers={
                        "Content-Type": "application/x-www-form-urlencoded",
                        "Accept": "application/json",
                        "Authorization": oauth2.basic_auth_header(
                            self.config.client_id, self.config.client_secret
                        ),
                    },
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "Wild Apricot token endpoint unreachable",
                extra={"provider": self.id, "endpoint": "token", "error": str(exc)},
            )
            raise ProviderError("bad_request", REFRESH_FAILED_MESSAGE, status_code=400) from exc

        try:
            token, raw = oauth2.parse_token_response(resp, context="refresh_token")
        except ProviderError as exc:
            raise ProviderError("bad_request", REFRESH_FAILED_MESSAGE, status_code=400) from exc

        if not token.access_token:
            logger.warning(
                "Wild Apricot refresh response had no access_token",
                extra={"provider": self.id, "endpoint": "token", "status_code": resp.status_code},
            )
            raise ProviderError("bad_request", REFRESH_FAILED_MESSAGE, status_code=400)

        try:
            return oauth2.to_token_set(token, raw)
        except ProviderError as exc:
            logger.warning(
                "Wild Apricot refresh response could not be mapped",
                extra={"provider": self.id, "endpoint": "token", "status_code": resp.status_code},
            )
            raise ProviderError("bad_request", REFRESH_FAILED_MESSAGE, status_code=400) from exc

    async def get_user_info(self, *, access_token: str) -> UserInfoResult | None:
        profile_data = await self._fetch_profile(access_token)
        if not profile_data:
            return None

        try:
            profile = WildApricotProfile.model_validate(profile_data)
        except ValidationError:
            logger.warning(
                "Wild Apricot profile could not be parsed",
                extra={"provider": self.id, "endpoint": "contacts/me"},
            )
            return None

        return UserInfoResult(user=self.map_profile(profile, profile_data), data=profile_data)

    def map_profile(
        self, profile: WildApricotProfile, profile_data: Mapping[str, Any]
    ) -> WildApricotUser:
        """Normalize a profile, applying the configured mapping over the defaults.

        The mapping receives the raw `contacts/me` record. Its values are stored
        as returned, without validation against the default field types.
        """
        fields: dict[str, Any] = {
            "id": str(profile.id),
            "name": " ".join(part for part in (profile.first_name, profile.last_name) if part),
            "email": profile.email,
            "email_verified": True,
            "image": None,
            "membership_status": profile.status or NO_MEMBERSHIP,
            "membership_level": (
                profile.membership_level.name if profile.membership_level is not None else None
            ),
            "is_active_member": is_active_member(profile.status),
            "is_admin": profile.is_account_administrator,
        }

        mapper = self.config.map_profile_to_user
        if mapper is not None:
            fields.update(mapper(profile_data) or {})

        return WildApricotUser.model_construct(**fields)

    async def _fetch_profile(self, access_token: str) -> dict[str, Any] | None:
        try:
            async with create_http_client() as client:
                resp = await client.get(
                    self.profile_url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "Wild Apricot contacts/me request failed",
                extra={"provider": self.id, "endpoint": "contacts/me", "error": str(exc)},
            )
            return None

        if not 200 <= resp.status_code < 300:
            logger.warning(
                "Wild Apricot contacts/me returned non-success status",
                extra={
                    "provider": self.id,
                    "endpoint": "contacts/me",
                    "status_code": resp.status_code,
                },
            )
            return None

        try:
            payload = resp.json()
        except Exception:
            logger.warning(
                "Wild Apricot contacts/me returned invalid JSON",
                extra={
                    "provider": self.id,
                    "endpoint": "contacts/me",
                    "status_code": resp.status_code,
                },
            )
            return None

        if not isinstance(payload, dict):
            return None
        return payload
