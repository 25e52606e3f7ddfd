"""String-keyed registry of social-login providers.

The framework looks providers up by id and talks to them through the
`OAuthProvider` protocol only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .contracts import OAuthProvider
from .models import WildApricotAuthConfigModel
from .providers.wildapricot import WildApricotProviderAdapter

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Any], OAuthProvider]

_factories: dict[str, ProviderFactory] = {}


def register_provider(provider_id: str, factory: ProviderFactory, *, replace: bool = False) -> None:
    """Register a factory that builds a provider from its configuration.

    Raises:
        ValueError: If the id is already registered and `replace` is False.
    """
    if provider_id in _factories and not replace:
        raise ValueError(f"Provider already registered: {provider_id}")
    _factories[provider_id] = factory
    logger.debug("Registered OAuth provider %s", provider_id)


def unregister_provider(provider_id: str) -> None:
    _factories.pop(provider_id, None)


def get_provider_ids() -> list[str]:
    return sorted(_factories)


def create_provider(provider_id: str, config: Any) -> OAuthProvider:
    """Build the provider registered under `provider_id`.

    Raises:
        ValueError: If no provider is registered under that id.
    """
    factory = _factories.get(provider_id)
    if factory is None:
        raise ValueError(f"Unsupported provider: {provider_id}")
    return factory(config)


def _create_wildapricot(config: Any) -> OAuthProvider:
    if not isinstance(config, WildApricotAuthConfigModel):
        config = WildApricotAuthConfigModel.model_validate(config)
    return WildApricotProviderAdapter(config)


register_provider(WildApricotProviderAdapter.id, _create_wildapricot)
