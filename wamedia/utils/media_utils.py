"""Media kind resolution and media key derivation helpers."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping, Optional, Sequence, Union

from wamedia.core.entities import DerivedKeySet, MediaKind
from wamedia.core.errors import (
    InvalidKeyLengthError,
    InvalidMediaKeyError,
    MalformedBlobError,
    UnknownMediaKindError,
)
from wamedia.defaults.config import (
    EXPANDED_KEY_LENGTH,
    HKDF_SALT,
    MEDIA_KEY_INFO,
    MEDIA_KEY_LENGTH,
    MEDIA_KEY_SLICES,
    MEDIA_MAC_LENGTH,
    MESSAGE_TYPE_KINDS,
    MIME_PREFIX_KINDS,
)
from wamedia.utils.crypto import hkdf

KindLike = Union[MediaKind, str]


def resolve_media_kind(content_type: Optional[str] = None, kind: Optional[KindLike] = None) -> MediaKind:
    """Pick the media kind used to select the HKDF info string.

    An explicit `kind` always wins; stickers are never inferred from a MIME type.
    Unknown or missing content types resolve to `MediaKind.DOCUMENT`.
    """
    if kind is not None:
        if isinstance(kind, MediaKind):
            return kind
        try:
            return MediaKind(kind.lower())
        except ValueError as exc:
            raise UnknownMediaKindError(kind) from exc
    if not content_type:
        return MediaKind.DOCUMENT
    primary = content_type.split(";", 1)[0].strip().lower().split("/", 1)[0]
    return MIME_PREFIX_KINDS.get(primary, MediaKind.DOCUMENT)


def kind_from_message_type(message_type: str) -> MediaKind:
    """Map a message node key such as `imageMessage` to its media kind."""
    return MESSAGE_TYPE_KINDS.get(message_type, MediaKind.DOCUMENT)


def media_key_info(kind: MediaKind) -> bytes:
    return MEDIA_KEY_INFO[kind]


def decode_b64(value: str) -> bytes:
    """Decode standard or urlsafe base64, tolerating missing padding."""
    text = value.strip()
    text += "=" * (-len(text) % 4)
    return base64.b64decode(text, altchars=b"-_", validate=True)


def _bytes_from_ints(values: Sequence[Any]) -> Optional[bytearray]:
    if not values:
        return None
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            return None
    return bytearray(values)


def _bytes_from_numeric_record(record: Mapping[Any, Any]) -> Optional[bytearray]:
    """`{"0": 12, "1": 250, ...}` as produced by JSON-serialising a Uint8Array."""
    try:
        indexed = {int(key): value for key, value in record.items()}
    except (TypeError, ValueError):
        return None
    if sorted(indexed) != list(range(len(indexed))):
        return None
    return _bytes_from_ints([indexed[i] for i in range(len(indexed))])


def _try_b64(value: str) -> Optional[bytearray]:
    try:
        return bytearray(decode_b64(value))
    except (binascii.Error, ValueError):
        return None


def normalize_media_key(media_key: Any) -> bytearray:
    """Coerce the shapes a mediaKey arrives in to raw bytes.

    Accepts base64 strings, bytes-likes, lists of ints, serialised Node
    buffers (`{"type": "Buffer", "data": [...]}`), `{"data": "<b64>"}`,
    `{"base64": "<b64>"}` and numeric-index records.
    """
    if media_key is None:
        raise InvalidMediaKeyError("media key is missing")
    if isinstance(media_key, str):
        if not media_key.strip():
            raise InvalidMediaKeyError("media key is empty")
        raw = _try_b64(media_key)
        if raw is None:
            raise InvalidMediaKeyError("media key is not valid base64")
        return raw
    if isinstance(media_key, (bytes, bytearray, memoryview)):
        return bytearray(media_key)
    if isinstance(media_key, (list, tuple)):
        raw = _bytes_from_ints(media_key)
        if raw is not None:
            return raw
    elif isinstance(media_key, Mapping):
        data = media_key.get("data")
        candidates = []
        if isinstance(data, (list, tuple)):
            candidates.append(_bytes_from_ints(data))
        elif isinstance(data, Mapping):
            candidates.append(_bytes_from_numeric_record(data))
        elif isinstance(data, str):
            candidates.append(_try_b64(data))
        if isinstance(media_key.get("base64"), str):
            candidates.append(_try_b64(media_key["base64"]))
        candidates.append(_bytes_from_numeric_record(media_key))
        for raw in candidates:
            if raw is not None:
                return raw
    raise InvalidMediaKeyError(f"unsupported media key format: {type(media_key).__name__}")


def decode_media_key(media_key: Any) -> bytearray:
    """Return the raw 32-byte media key as a mutable buffer."""
    raw = normalize_media_key(media_key)
    if len(raw) != MEDIA_KEY_LENGTH:
        raise InvalidKeyLengthError(len(raw))
    return raw


def expand_media_key(media_key: bytes, kind: MediaKind) -> bytes:
    if len(media_key) != MEDIA_KEY_LENGTH:
        raise InvalidKeyLengthError(len(media_key))
    return hkdf(media_key, EXPANDED_KEY_LENGTH, HKDF_SALT, media_key_info(kind))


def split_media_keys(expanded: bytes) -> DerivedKeySet:
    if len(expanded) != EXPANDED_KEY_LENGTH:
        raise ValueError(f"expanded media key must be {EXPANDED_KEY_LENGTH} bytes")
    parts = {name: bytearray(expanded[start:end]) for name, (start, end) in MEDIA_KEY_SLICES.items()}
    return DerivedKeySet(**parts)


def derive_media_keys(media_key: bytes, kind: MediaKind) -> DerivedKeySet:
    return split_media_keys(expand_media_key(media_key, kind))


def split_encrypted_blob(encrypted: bytes) -> tuple[bytes, bytes]:
    """Split `body || mac` into its ciphertext body and 10-byte tag."""
    if len(encrypted) <= MEDIA_MAC_LENGTH:
        raise MalformedBlobError(
            f"encrypted media must be longer than {MEDIA_MAC_LENGTH} bytes, got {len(encrypted)}"
        )
    return bytes(encrypted[:-MEDIA_MAC_LENGTH]), bytes(encrypted[-MEDIA_MAC_LENGTH:])
