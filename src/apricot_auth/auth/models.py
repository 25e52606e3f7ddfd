"""Pydantic models for provider configuration and upstream payloads.

## Security-relevant configuration fields

- `redirect_uri`: affects redirect binding and open-redirect risk.
- `scopes`: affect what the provider grants on the member's contact record.
- `client_secret`: sent to the token endpoint only, never logged.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_pascal

from apricot_auth.models import AuthBaseModel


class WildApricotMembershipLevel(AuthBaseModel):
    """Membership level attached to a Wild Apricot contact."""

    model_config = ConfigDict(
        extra="allow", frozen=True, alias_generator=to_pascal, populate_by_name=True
    )

    id: int | None = None
    name: str | None = None


class WildApricotProfile(AuthBaseModel):
    """Raw `contacts/me` record, exposed with snake_case attribute names.

    Upstream keys are PascalCase (`FirstName`, `IsAccountAdministrator`).
    Unknown keys are preserved as extras.
    """

    model_config = ConfigDict(
        extra="allow", frozen=True, alias_generator=to_pascal, populate_by_name=True
    )

    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    status: str | None = None
    membership_level: WildApricotMembershipLevel | None = None
    is_account_administrator: bool = False
    administrative_role_types: list[str] = Field(default_factory=list)

    @field_validator("is_account_administrator", "administrative_role_types", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # The API sends explicit nulls for contacts without admin roles.
        if value is None:
            return False if info.field_name == "is_account_administrator" else []
        return value


# Receives the raw PascalCase `contacts/me` record.
ProfileMapper = Callable[[Mapping[str, Any]], Mapping[str, Any]]


class WildApricotAuthConfigModel(AuthBaseModel):
    """Wild Apricot OAuth provider configuration.

    `site_name` selects the association's own login host
    (`https://{site_name}.wildapricot.org`); without it the public
    www host is used. `account_id` is required for profile lookups.
    """

    client_id: str
    client_secret: str
    site_name: str | None = None
    account_id: str = Field(min_length=1)
    redirect_uri: str | None = None
    scopes: list[str] | None = None
    # Called with the raw profile dict; returned keys override the default user fields.
    map_profile_to_user: ProfileMapper | None = Field(default=None, exclude=True)

    @field_validator("account_id", mode="before")
    @classmethod
    def _coerce_account_id(cls, value: Any) -> Any:
        # YAML may yield a bare integer account id.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
