"""Shared OAuth2 helpers used by provider adapters.

Providers build their authorization URLs and perform the authorization-code
exchange through these helpers so that PKCE, client authentication and token
response parsing behave identically across providers.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, Literal
from urllib.parse import urlencode

import httpx
from pydantic import ConfigDict, ValidationError

from apricot_auth.http import create_http_client
from apricot_auth.models import AuthBaseModel

from .contracts import ProviderError, TokenSet

logger = logging.getLogger(__name__)

ClientAuthentication = Literal["basic", "post"]


class _TokenResponse(AuthBaseModel):
    """Token endpoint response (successful or error)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: float | None = None
    scope: str | None = None
    token_type: str | None = None

    error: str | None = None
    error_description: str | None = None


def generate_code_challenge(code_verifier: str) -> str:
    """Return the S256 PKCE challenge for a code verifier."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def basic_auth_header(client_id: str, client_secret: str) -> str:
    """Build an HTTP Basic `Authorization` header value for client credentials."""
    credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
    return f"Basic {credentials}"


def create_authorization_url(
    *,
    client_id: str,
    authorization_endpoint: str,
    redirect_uri: str,
    state: str,
    scopes: Sequence[str],
    code_verifier: str | None = None,
    extra_params: Mapping[str, str] | None = None,
    scope_joiner: str = " ",
) -> str:
    """Construct an authorization-code flow URL.

    Args:
        client_id: OAuth client identifier registered with the provider
        authorization_endpoint: Provider login endpoint
        redirect_uri: Callback URL the provider redirects back to
        state: Opaque state token, validated by the caller on callback
        scopes: Scopes to request, joined in order
        code_verifier: PKCE verifier; adds an S256 challenge when given
        extra_params: Provider-specific query parameters
        scope_joiner: Separator used to join scopes

    Returns:
        The full authorization URL
    """
    params: list[tuple[str, str]] = [
        ("response_type", "code"),
        ("client_id", client_id),
        ("state", state),
        ("scope", scope_joiner.join(scopes)),
        ("redirect_uri", redirect_uri),
    ]
    if code_verifier:
        params.append(("code_challenge_method", "S256"))
        params.append(("code_challenge", generate_code_challenge(code_verifier)))
    if extra_params:
        params.extend(extra_params.items())
    return f"{authorization_endpoint}?{urlencode(params)}"


def token_set_from_response(payload: Mapping[str, Any]) -> TokenSet:
    """Map a successful token endpoint JSON body to a `TokenSet`.

    `expires_in` is relative to the time of this call; an absent or zero
    value yields no expiry.
    """
    token = _TokenResponse.model_validate(payload)
    if not token.access_token:
        raise ProviderError("invalid_grant", "No access_token in response", status_code=400)
    return to_token_set(token, dict(payload))


def to_token_set(token: _TokenResponse, raw: dict[str, Any]) -> TokenSet:
    """Build a `TokenSet` from a token already checked by `parse_token_response`.

    Raises:
        ProviderError: If `expires_in` is too large to represent as a timestamp.
    """
    expires_at = None
    if token.expires_in is not None and token.expires_in > 0:
        try:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=token.expires_in)
        except OverflowError as exc:
            raise ProviderError(
                "invalid_grant", "Invalid token response payload", status_code=400
            ) from exc
    scopes = token.scope.split(" ") if token.scope is not None else None
    return TokenSet(
        access_token=token.access_token or "",
        refresh_token=token.refresh_token,
        access_token_expires_at=expires_at,
        scopes=scopes,
        token_type=token.token_type,
        raw=raw,
    )


async def validate_authorization_code(
    *,
    code: str,
    redirect_uri: str,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    code_verifier: str | None = None,
    authentication: ClientAuthentication = "post",
) -> TokenSet:
    """Exchange an authorization code at the provider's token endpoint.

    Raises:
        ProviderError: If the request fails or the response carries no token.
    """
    payload: dict[str, str] = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
    }
    if code_verifier:
        payload["code_verifier"] = code_verifier

    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "Accept": "application/json",
    }
    if authentication == "basic":
        headers["Authorization"] = basic_auth_header(client_id, client_secret)
    else:
        payload["client_id"] = client_id
        payload["client_secret"] = client_secret

    try:
        async with create_http_client() as client:
            resp = await client.post(token_endpoint, data=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning(
            "Token endpoint request failed",
            extra={"endpoint": "token", "context": "exchange_code", "error": str(exc)},
        )
        raise ProviderError("invalid_grant", "Token request failed", status_code=502) from exc

    token, raw = parse_token_response(resp, context="exchange_code")
    if not token.access_token:
        raise ProviderError("invalid_grant", "No access_token in response", status_code=400)
    return to_token_set(token, raw)


def parse_token_response(resp: Any, *, context: str) -> tuple[_TokenResponse, dict[str, Any]]:
    """Validate a token endpoint response.

    Returns the parsed token alongside the verbatim JSON body.

    Raises:
        ProviderError: On a non-2xx status, invalid JSON, or an OAuth `error` field.
    """
    if not 200 <= resp.status_code < 300:
        error_code = _try_extract_oauth_error_code(resp)
        logger.warning(
            "Token endpoint returned non-success status",
            extra={
                "endpoint": "token",
                "context": context,
                "status_code": resp.status_code,
                "provider_error": error_code,
            },
        )
        raise ProviderError(
            error_code or "invalid_grant",
            "Token request failed",
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
    except Exception as exc:
        logger.warning(
            "Token endpoint returned invalid JSON",
            extra={"endpoint": "token", "context": context, "status_code": resp.status_code},
        )
        raise ProviderError(
            "invalid_grant",
            "Invalid token response payload",
            status_code=resp.status_code,
        ) from exc

    if not isinstance(data, dict):
        raise ProviderError(
            "invalid_grant",
            "Invalid token response payload",
            status_code=resp.status_code,
        )

    try:
        token = _TokenResponse.model_validate(data)
    except ValidationError as exc:
        raise ProviderError(
            "invalid_grant",
            "Invalid token response payload",
            status_code=resp.status_code,
        ) from exc

    if token.error is not None:
        logger.warning(
            "Token endpoint returned OAuth error",
            extra={
                "endpoint": "token",
                "context": context,
                "status_code": resp.status_code,
                "provider_error": token.error,
            },
        )
        raise ProviderError(token.error, "Token request failed", status_code=resp.status_code)

    return token, data


def _try_extract_oauth_error_code(resp: Any) -> str | None:
    """Best-effort extraction of OAuth `error` code from a response."""
    try:
        payload = resp.json()
    except Exception:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    return error if isinstance(error, str) and error else None


__all__ = [
    "basic_auth_header",
    "create_authorization_url",
    "generate_code_challenge",
    "parse_token_response",
    "to_token_set",
    "token_set_from_response",
    "validate_authorization_code",
]
