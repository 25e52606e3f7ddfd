"""apricot-auth - social-login providers and shared OAuth2 helpers.

## Key Components

- `OAuthProvider`: Protocol every provider implements
- `WildApricotProviderAdapter`: Wild Apricot login, token refresh and profile lookup
- `create_provider()`: Build a provider by id from its configuration
- `ProviderError`: Error raised by provider operations

## Quick Example

```python
from apricot_auth.auth import WildApricotAuthConfigModel, create_provider

provider = create_provider(
    "wildapricot",
    WildApricotAuthConfigModel(
        client_id="your-client-id",
        client_secret="your-secret",
        site_name="myassociation",
        account_id="123456",
        redirect_uri="https://example.com/auth/callback/wildapricot",
    ),
)
url = provider.create_authorization_url(state="opaque-state")
```
"""

from .contracts import NormalizedUser, OAuthProvider, ProviderError, TokenSet, UserInfoResult
from .models import WildApricotAuthConfigModel, WildApricotMembershipLevel, WildApricotProfile
from .providers import WildApricotProviderAdapter, WildApricotUser
from .registry import create_provider, get_provider_ids, register_provider, unregister_provider

__all__ = [
    "NormalizedUser",
    "OAuthProvider",
    "ProviderError",
    "TokenSet",
    "UserInfoResult",
    "WildApricotAuthConfigModel",
    "WildApricotMembershipLevel",
    "WildApricotProfile",
    "WildApricotProviderAdapter",
    "WildApricotUser",
    "create_provider",
    "get_provider_ids",
    "register_provider",
    "unregister_provider",
]
