import pytest

from apricot_auth.auth import registry
from apricot_auth.auth.contracts import OAuthProvider
from apricot_auth.auth.models import WildApricotAuthConfigModel
from apricot_auth.auth.providers.wildapricot import WildApricotProviderAdapter


def test_wildapricot_is_registered() -> None:
    assert "wildapricot" in registry.get_provider_ids()


def test_create_provider_from_model(wildapricot_config: WildApricotAuthConfigModel) -> None:
    provider = registry.create_provider("wildapricot", wildapricot_config)
    assert isinstance(provider, WildApricotProviderAdapter)
    assert provider.config is wildapricot_config


def test_create_provider_from_mapping() -> None:
    provider = registry.create_provider(
        "wildapricot",
        {"client_id": "cid", "client_secret": "secret", "account_id": 123456},
    )
    assert isinstance(provider, OAuthProvider)
    assert provider.name == "Wild Apricot"


def test_create_unknown_provider_fails() -> None:
    with pytest.raises(ValueError, match="Unsupported provider"):
        registry.create_provider("nope", {})


def test_duplicate_registration_requires_replace() -> None:
    with pytest.raises(ValueError, match="already registered"):
        registry.register_provider("wildapricot", lambda config: config)


def test_register_and_dispatch_custom_provider(
    wildapricot_config: WildApricotAuthConfigModel,
) -> None:
    class _Tenant(WildApricotProviderAdapter):
        id = "wildapricot-tenant"

    registry.register_provider("wildapricot-tenant", _Tenant)
    try:
        provider = registry.create_provider("wildapricot-tenant", wildapricot_config)
        assert provider.id == "wildapricot-tenant"
        registry.register_provider("wildapricot-tenant", _Tenant, replace=True)
    finally:
        registry.unregister_provider("wildapricot-tenant")
    assert "wildapricot-tenant" not in registry.get_provider_ids()
