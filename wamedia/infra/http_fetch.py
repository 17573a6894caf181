"""Retrieval of encrypted media bytes.

Relay hosts usually refuse cross-origin requests, so deployments point
`proxy_url` at a trusted backend that performs the GET on their behalf. The
fetched bytes are handed to the decryptor untouched.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from wamedia.core.errors import MediaFetchError
from wamedia.defaults.config import DEFAULT_DECRYPT_CONFIG

logger = logging.getLogger(__name__)


class MediaFetcher:
    def __init__(
        self,
        proxy_url: Optional[str] = None,
        timeout: float = DEFAULT_DECRYPT_CONFIG["fetch_timeout"],
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.proxy_url = proxy_url
        self.http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    def build_request(self, url: str) -> tuple[str, dict[str, str]]:
        if self.proxy_url:
            return self.proxy_url, {"url": url}
        return url, {}

    async def fetch(self, url: str) -> bytes:
        """GET the encrypted blob and return its raw bytes."""
        target, params = self.build_request(url)
        try:
            res = await self.http.get(target, params=params or None)
        except httpx.HTTPError as exc:
            raise MediaFetchError(f"failed to download encrypted media: {exc}") from exc
        if res.is_error:
            raise MediaFetchError(
                f"failed to download encrypted media: HTTP {res.status_code}",
                status_code=res.status_code,
            )
        logger.debug("fetched %d encrypted bytes", len(res.content))
        return res.content

    async def aclose(self) -> None:
        await self.http.aclose()


def fetcher_from_env() -> MediaFetcher:
    return MediaFetcher(
        proxy_url=os.getenv("WAMEDIA_PROXY_URL") or DEFAULT_DECRYPT_CONFIG["proxy_url"],
        timeout=float(os.getenv("WAMEDIA_FETCH_TIMEOUT", str(DEFAULT_DECRYPT_CONFIG["fetch_timeout"]))),
    )
