import asyncio
import logging
import os
import sys

# Add wamedia to path so we can run directly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wamedia.client.media import MediaClient
from wamedia.infra.http_fetch import fetcher_from_env

logging.basicConfig(level=logging.INFO)

# A media part as it appears in an incoming message payload.
MESSAGE = {
    "imageMessage": {
        "url": os.getenv("WAMEDIA_EXAMPLE_URL", "https://mmg.whatsapp.net/v/t62.7118-24/example.enc"),
        "mimetype": "image/jpeg",
        "mediaKey": os.getenv("WAMEDIA_EXAMPLE_KEY", ""),
        "fileEncSha256": os.getenv("WAMEDIA_EXAMPLE_ENC_SHA256"),
    }
}


async def main():
    # Set WAMEDIA_PROXY_URL to a backend that can reach the media host.
    async with MediaClient(fetcher=fetcher_from_env()) as client:
        media = await client.decrypt_message(MESSAGE)
    print(f"{media.content_type}: {len(media)} bytes, mac {media.status.value}")
    print(media.data_uri[:80] + "...")


if __name__ == "__main__":
    asyncio.run(main())
