from __future__ import annotations

import base64
import hashlib
from typing import Callable

import httpx
import pytest

from wamedia.client.media import MediaClient, find_media_part
from wamedia.core.entities import MediaKind
from wamedia.core.errors import InvalidMediaKeyError, InvalidMediaPartError, MediaFetchError
from wamedia.infra.http_fetch import MediaFetcher, fetcher_from_env

Encrypt = Callable[[bytes, bytes, str], bytes]


def _fetcher(handler: Callable[[httpx.Request], httpx.Response], proxy_url: str | None = None) -> MediaFetcher:
    return MediaFetcher(proxy_url=proxy_url, http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_fetch_returns_raw_bytes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"\x00\x01enc")

    fetcher = _fetcher(handler)
    assert await fetcher.fetch("https://mmg.whatsapp.net/v/t62/abc.enc") == b"\x00\x01enc"
    assert str(seen[0].url) == "https://mmg.whatsapp.net/v/t62/abc.enc"
    await fetcher.aclose()


@pytest.mark.asyncio
async def test_fetch_routes_through_proxy() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"enc")

    fetcher = _fetcher(handler, proxy_url="https://proxy.internal/media")
    await fetcher.fetch("https://mmg.whatsapp.net/v/t62/abc.enc?oh=1")
    assert seen[0].url.host == "proxy.internal"
    assert seen[0].url.params["url"] == "https://mmg.whatsapp.net/v/t62/abc.enc?oh=1"
    await fetcher.aclose()


@pytest.mark.asyncio
async def test_fetch_http_error_status() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(403))
    with pytest.raises(MediaFetchError) as exc_info:
        await fetcher.fetch("https://mmg.whatsapp.net/x.enc")
    assert exc_info.value.status_code == 403
    await fetcher.aclose()


@pytest.mark.asyncio
async def test_fetch_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("blocked", request=request)

    fetcher = _fetcher(handler)
    with pytest.raises(MediaFetchError) as exc_info:
        await fetcher.fetch("https://mmg.whatsapp.net/x.enc")
    assert exc_info.value.status_code is None
    await fetcher.aclose()


@pytest.mark.asyncio
async def test_fetcher_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAMEDIA_PROXY_URL", "https://proxy.internal/media")
    monkeypatch.setenv("WAMEDIA_FETCH_TIMEOUT", "5")
    fetcher = fetcher_from_env()
    assert fetcher.proxy_url == "https://proxy.internal/media"
    assert fetcher.http.timeout.read == 5.0
    await fetcher.aclose()


@pytest.mark.asyncio
async def test_decrypt_message_part(encrypt: Encrypt, media_key: bytes, media_key_b64: str) -> None:
    blob = encrypt(b"voice note", media_key, "audio")
    fetcher = _fetcher(lambda request: httpx.Response(200, content=blob))
    part = {
        "url": "https://mmg.whatsapp.net/v/t62/voice.enc",
        "mediaKey": media_key_b64,
        "mimetype": "audio/ogg; codecs=opus",
        "fileEncSha256": base64.b64encode(hashlib.sha256(blob).digest()).decode(),
    }
    async with MediaClient(fetcher=fetcher) as client:
        result = await client.decrypt_message_part(part)
    assert result.data == b"voice note"
    assert result.verified_mac is True
    assert result.enc_sha256_verified is True
    assert result.kind is MediaKind.AUDIO


@pytest.mark.asyncio
async def test_decrypt_message_part_uses_direct_path(encrypt: Encrypt, media_key: bytes) -> None:
    blob = encrypt(b"doc", media_key, "document")
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=blob)

    async with MediaClient(fetcher=_fetcher(handler)) as client:
        result = await client.decrypt_message_part({"directPath": "/v/t62/doc.enc", "mediaKey": media_key})
    assert seen == ["https://mmg.whatsapp.net/v/t62/doc.enc"]
    assert result.data == b"doc"


@pytest.mark.asyncio
async def test_decrypt_message_part_requires_url_and_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no fetch expected")

    async with MediaClient(fetcher=_fetcher(handler)) as client:
        with pytest.raises(InvalidMediaPartError):
            await client.decrypt_message_part({"mediaKey": "AAAA"})
        with pytest.raises(InvalidMediaPartError):
            await client.decrypt_message_part({"url": "https://mmg.whatsapp.net/x.enc"})


@pytest.mark.asyncio
async def test_decrypt_message_infers_sticker_kind(encrypt: Encrypt, media_key: bytes, media_key_b64: str) -> None:
    blob = encrypt(b"RIFFWEBP", media_key, "sticker")
    message = {
        "stickerMessage": {
            "url": "https://mmg.whatsapp.net/v/t62/s.enc",
            "mediaKey": media_key_b64,
            "mimetype": "image/webp",
        }
    }
    async with MediaClient(fetcher=_fetcher(lambda request: httpx.Response(200, content=blob))) as client:
        result = await client.decrypt_message(message)
    assert result.kind is MediaKind.STICKER
    assert result.data == b"RIFFWEBP"


def test_find_media_part_unwraps_document_with_caption() -> None:
    inner = {"url": "u", "mediaKey": "k", "mimetype": "image/png"}
    kind, part = find_media_part({"documentWithCaptionMessage": {"message": {"documentMessage": inner}}})
    assert kind is MediaKind.DOCUMENT
    assert part is inner


def test_find_media_part_without_media() -> None:
    with pytest.raises(InvalidMediaPartError):
        find_media_part({"conversation": "hello"})


@pytest.mark.asyncio
async def test_decrypt_message_part_with_serialised_buffer_key(encrypt: Encrypt, media_key: bytes) -> None:
    blob = encrypt(b"png bytes", media_key, "image")
    part = {
        "url": "https://mmg.whatsapp.net/v/t62/p.enc",
        "mediaKey": {"type": "Buffer", "data": list(media_key)},
        "mimetype": "image/png",
    }
    async with MediaClient(fetcher=_fetcher(lambda request: httpx.Response(200, content=blob))) as client:
        result = await client.decrypt_message_part(part)
    assert result.data == b"png bytes"
    assert result.verified_mac is True


@pytest.mark.asyncio
async def test_decrypt_message_part_unsupported_key_is_typed(encrypt: Encrypt, media_key: bytes) -> None:
    blob = encrypt(b"png bytes", media_key, "image")
    part = {"url": "https://mmg.whatsapp.net/v/t62/p.enc", "mediaKey": {"type": "Buffer", "data": "??"}}
    async with MediaClient(fetcher=_fetcher(lambda request: httpx.Response(200, content=blob))) as client:
        with pytest.raises(InvalidMediaKeyError):
            await client.decrypt_message_part(part)
