"""HTTP client factory shared by every outbound provider call."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_TIMEOUT = 30.0


def create_http_client(
    headers: dict[str, str] | None = None,
    timeout: httpx.Timeout | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the package defaults.

    Redirects are followed and a 30 second timeout applies unless overridden.
    Callers use the client as an async context manager for a single request.
    """
    return httpx.AsyncClient(
        headers=headers,
        timeout=timeout if timeout is not None else httpx.Timeout(DEFAULT_TIMEOUT),
        follow_redirects=True,
        **kwargs,
    )
