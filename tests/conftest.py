"""
Global pytest configuration and fixtures.
"""

import logging
from collections.abc import Iterator
from typing import Any

import pytest

from apricot_auth.auth.models import WildApricotAuthConfigModel


@pytest.fixture
def wildapricot_config() -> WildApricotAuthConfigModel:
    return WildApricotAuthConfigModel(
        client_id="cid",
        client_secret="secret",
        site_name="myassociation",
        account_id="123456",
        redirect_uri="https://app.example.com/auth/callback/wildapricot",
    )


@pytest.fixture
def wildapricot_profile() -> dict[str, Any]:
    """A `contacts/me` payload as returned by the Wild Apricot API."""
    return {
        "Id": 98765,
        "Url": "https://api.wildapricot.org/v2.1/accounts/123456/contacts/98765",
        "FirstName": "Ada",
        "LastName": "Lovelace",
        "Email": "ada@example.org",
        "DisplayName": "Lovelace, Ada",
        "Organization": "Analytical Engines",
        "Status": "Active",
        "MembershipLevel": {
            "Id": 42,
            "Url": "https://api.wildapricot.org/v2.1/accounts/123456/MembershipLevels/42",
            "Name": "Gold",
        },
        "IsAccountAdministrator": True,
        "AdministrativeRoleTypes": ["AccountAdministrator"],
    }


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests from reading a developer's real config file."""
    monkeypatch.delenv("APRICOT_AUTH_CONFIG", raising=False)
    monkeypatch.delenv("APRICOT_AUTH_DEBUG", raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[logging.Logger]:
    """CLI commands reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
