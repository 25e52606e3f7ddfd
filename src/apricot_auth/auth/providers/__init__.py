"""OAuth provider implementations.

This module contains concrete implementations of social-login providers.
"""

from .wildapricot import WildApricotProviderAdapter, WildApricotUser

__all__ = [
    "WildApricotProviderAdapter",
    "WildApricotUser",
]
