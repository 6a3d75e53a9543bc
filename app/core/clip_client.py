from typing import Any, Optional

import httpx

from app.config import CLIP_SERVER_URL, DOWNLOAD_URL_SCHEME, logger
from app.core.http_client import new_http_client


async def request_clip(
    tweet_url: str,
    start: str,
    end: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """Ask the clipping server for a clip and return its JSON reply as-is.

    Transport and decode errors propagate to the caller.
    """
    payload = {"tweetUrl": tweet_url, "start": start, "end": end}
    endpoint = f"{CLIP_SERVER_URL}/clip"
    logger.info("Requesting clip from %s for %s (start=%r, end=%r)", endpoint, tweet_url, start, end)

    if client is None:
        async with new_http_client() as own_client:
            response = await own_client.post(endpoint, json=payload)
    else:
        response = await client.post(endpoint, json=payload)

    logger.debug("Clipping server answered %d", response.status_code)
    return response.json()


def to_absolute_url(download_url: str) -> str:
    # Assumes the server returns "host:path" with no scheme.
    return f"{DOWNLOAD_URL_SCHEME}{download_url}"
