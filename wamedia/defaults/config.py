"""Default media crypto constants and decryption settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from wamedia.core.entities import MediaKind

MEDIA_KEY_LENGTH = 32
EXPANDED_KEY_LENGTH = 112
MEDIA_MAC_LENGTH = 10
AES_BLOCK_SIZE = 16
HKDF_SALT = bytes(32)

# Offsets inside the 112-byte expansion: iv | cipher_key | mac_key | ref_key
MEDIA_KEY_SLICES = {
    "iv": (0, 16),
    "cipher_key": (16, 48),
    "mac_key": (48, 80),
    "ref_key": (80, 112),
}

MEDIA_KEY_INFO: dict[MediaKind, bytes] = {
    MediaKind.IMAGE: b"WhatsApp Image Keys",
    MediaKind.STICKER: b"WhatsApp Image Keys",
    MediaKind.VIDEO: b"WhatsApp Video Keys",
    MediaKind.AUDIO: b"WhatsApp Audio Keys",
    MediaKind.DOCUMENT: b"WhatsApp Document Keys",
}

MIME_PREFIX_KINDS: dict[str, MediaKind] = {
    "image": MediaKind.IMAGE,
    "video": MediaKind.VIDEO,
    "audio": MediaKind.AUDIO,
}

MESSAGE_TYPE_KINDS: dict[str, MediaKind] = {
    "imageMessage": MediaKind.IMAGE,
    "stickerMessage": MediaKind.STICKER,
    "videoMessage": MediaKind.VIDEO,
    "ptvMessage": MediaKind.VIDEO,
    "audioMessage": MediaKind.AUDIO,
    "pttMessage": MediaKind.AUDIO,
    "documentMessage": MediaKind.DOCUMENT,
    "documentWithCaptionMessage": MediaKind.DOCUMENT,
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MEDIA_HOST = "https://mmg.whatsapp.net"

DEFAULT_DECRYPT_CONFIG = {
    "strict_mac": True,
    "verify_enc_sha256": True,
    "wipe_keys": True,
    "default_content_type": DEFAULT_CONTENT_TYPE,
    "fetch_timeout": 30.0,
    "proxy_url": None,
}

_FALSE_VALUES = {"0", "false", "False", "no", "off"}


@dataclass
class DecryptOptions:
    strict_mac: bool = DEFAULT_DECRYPT_CONFIG["strict_mac"]
    verify_enc_sha256: bool = DEFAULT_DECRYPT_CONFIG["verify_enc_sha256"]
    wipe_keys: bool = DEFAULT_DECRYPT_CONFIG["wipe_keys"]
    default_content_type: str = DEFAULT_DECRYPT_CONFIG["default_content_type"]


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value not in _FALSE_VALUES


def options_from_env() -> DecryptOptions:
    defaults = DecryptOptions()
    return DecryptOptions(
        strict_mac=_env_flag("WAMEDIA_STRICT_MAC", defaults.strict_mac),
        verify_enc_sha256=_env_flag("WAMEDIA_VERIFY_ENC_SHA256", defaults.verify_enc_sha256),
        wipe_keys=_env_flag("WAMEDIA_WIPE_KEYS", defaults.wipe_keys),
        default_content_type=os.getenv("WAMEDIA_DEFAULT_CONTENT_TYPE", defaults.default_content_type),
    )
