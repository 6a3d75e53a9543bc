from typing import Any, AsyncIterator

import httpx


def new_http_client(**kwargs: Any) -> httpx.AsyncClient:
    """Outbound client for both relays: redirects followed, no timeout."""
    return httpx.AsyncClient(timeout=None, follow_redirects=True, **kwargs)


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI dependency: one outbound client per request."""
    async with new_http_client() as client:
        yield client
