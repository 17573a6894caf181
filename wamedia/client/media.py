from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from wamedia.core.entities import DecryptedMedia, DerivedKeySet, MediaKind
from wamedia.core.errors import InvalidMediaPartError, MacMismatchError, MacMismatchWarning
from wamedia.defaults.config import MEDIA_HOST, MESSAGE_TYPE_KINDS, DecryptOptions
from wamedia.infra.http_fetch import MediaFetcher
from wamedia.utils.crypto import aes_cbc_decrypt, ensure_block_aligned, wipe
from wamedia.utils.data_uri import assemble_result
from wamedia.utils.integrity import verify_enc_sha256, verify_media_mac
from wamedia.utils.media_utils import (
    KindLike,
    decode_media_key,
    derive_media_keys,
    kind_from_message_type,
    resolve_media_kind,
    split_encrypted_blob,
)

logger = logging.getLogger(__name__)

MediaKeyLike = Union[str, bytes, bytearray, Sequence[int], Mapping[str, Any]]


class MediaDecryptor:
    """Stateless decryption of `.enc` media blobs.

    Each call derives fresh keys, checks the 10-byte MAC, decrypts with
    AES-256-CBC and returns a `DecryptedMedia`. Nothing is kept between calls,
    so one instance can be shared across threads.
    """

    def __init__(self, options: Optional[DecryptOptions] = None) -> None:
        self.options = options or DecryptOptions()

    def decrypt_bytes(
        self,
        encrypted: bytes,
        media_key: MediaKeyLike,
        content_type: Optional[str] = None,
        *,
        kind: Optional[KindLike] = None,
        enc_sha256: Union[str, bytes, None] = None,
    ) -> DecryptedMedia:
        body, tag = split_encrypted_blob(encrypted)
        raw_key = decode_media_key(media_key)
        keys: Optional[DerivedKeySet] = None
        try:
            enc_ok = verify_enc_sha256(encrypted, enc_sha256) if self.options.verify_enc_sha256 else None
            media_kind = resolve_media_kind(content_type, kind)
            keys = derive_media_keys(raw_key, media_kind)

            ensure_block_aligned(body)
            verified = verify_media_mac(keys.iv, body, keys.mac_key, tag)
            if not verified:
                if self.options.strict_mac:
                    raise MacMismatchError(f"media mac mismatch for {media_kind.value} media")
                logger.warning(
                    "media mac mismatch; decrypting anyway",
                    extra={
                        "event": "media_mac_mismatch",
                        "media_kind": media_kind.value,
                        "warning": MacMismatchWarning.__name__,
                    },
                )

            plaintext = aes_cbc_decrypt(body, keys.cipher_key, keys.iv)
        finally:
            if self.options.wipe_keys:
                wipe(raw_key)
                if keys is not None:
                    keys.wipe()

        return assemble_result(
            plaintext,
            content_type,
            verified,
            kind=media_kind,
            enc_sha256_verified=enc_ok,
            default_content_type=self.options.default_content_type,
        )


def decrypt_media(
    encrypted: bytes,
    media_key: MediaKeyLike,
    content_type: Optional[str] = None,
    *,
    kind: Optional[KindLike] = None,
    enc_sha256: Union[str, bytes, None] = None,
    options: Optional[DecryptOptions] = None,
) -> DecryptedMedia:
    """Decrypt one encrypted media blob. See `MediaDecryptor.decrypt_bytes`."""
    return MediaDecryptor(options).decrypt_bytes(
        encrypted,
        media_key,
        content_type,
        kind=kind,
        enc_sha256=enc_sha256,
    )


def find_media_part(message: Mapping[str, Any]) -> tuple[MediaKind, Mapping[str, Any]]:
    """Return the first media sub-message of a message payload and its kind."""
    for message_type in MESSAGE_TYPE_KINDS:
        part = message.get(message_type)
        if not isinstance(part, Mapping):
            continue
        # documentWithCaptionMessage wraps the real document one level down
        nested = part.get("message")
        if isinstance(nested, Mapping):
            return find_media_part(nested)
        return kind_from_message_type(message_type), part
    raise InvalidMediaPartError("message has no media part")


class MediaClient:
    """Fetches encrypted media through a `MediaFetcher` and decrypts it."""

    def __init__(
        self,
        fetcher: Optional[MediaFetcher] = None,
        decryptor: Optional[MediaDecryptor] = None,
    ) -> None:
        self.fetcher = fetcher or MediaFetcher()
        self.decryptor = decryptor or MediaDecryptor()

    async def __aenter__(self) -> "MediaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.fetcher.aclose()

    async def decrypt_message_part(
        self,
        part: Mapping[str, Any],
        *,
        kind: Optional[KindLike] = None,
    ) -> DecryptedMedia:
        url = part.get("url")
        if not url and part.get("directPath"):
            url = f"{MEDIA_HOST}{part['directPath']}"
        media_key = part.get("mediaKey")
        if not url or not media_key:
            raise InvalidMediaPartError("media part is missing url/mediaKey")

        encrypted = await self.fetcher.fetch(url)
        return self.decryptor.decrypt_bytes(
            encrypted,
            media_key,
            part.get("mimetype"),
            kind=kind,
            enc_sha256=part.get("fileEncSha256"),
        )

    async def decrypt_message(self, message: Mapping[str, Any]) -> DecryptedMedia:
        kind, part = find_media_part(message)
        return await self.decrypt_message_part(part, kind=kind)
