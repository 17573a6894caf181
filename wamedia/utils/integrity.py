"""Media MAC and fileEncSha256 checks."""

from __future__ import annotations

import binascii
import logging
from typing import Optional, Union

from wamedia.core.errors import DigestMismatchWarning
from wamedia.defaults.config import MEDIA_MAC_LENGTH
from wamedia.utils.crypto import constant_time_equal, hmac_sha256, sha256
from wamedia.utils.media_utils import decode_b64

logger = logging.getLogger(__name__)


def compute_media_mac(iv: bytes, ciphertext: bytes, mac_key: bytes) -> bytes:
    """First 10 bytes of HMAC-SHA256(mac_key, iv || ciphertext)."""
    return hmac_sha256(mac_key, bytes(iv) + ciphertext)[:MEDIA_MAC_LENGTH]


def verify_media_mac(iv: bytes, ciphertext: bytes, mac_key: bytes, tag: bytes) -> bool:
    if len(tag) != MEDIA_MAC_LENGTH:
        return False
    return constant_time_equal(compute_media_mac(iv, ciphertext, mac_key), tag)


def verify_enc_sha256(encrypted: bytes, expected: Union[str, bytes, None]) -> Optional[bool]:
    """Compare sha256(encrypted) against the advertised fileEncSha256.

    Returns None when nothing was supplied. A mismatch is only logged.
    """
    if expected is None or expected == "" or expected == b"":
        return None
    if isinstance(expected, str):
        try:
            expected_raw = decode_b64(expected)
        except (binascii.Error, ValueError):
            logger.warning(
                "fileEncSha256 is not valid base64; skipping digest check",
                extra={"event": "enc_sha256_invalid", "warning": DigestMismatchWarning.__name__},
            )
            return False
    else:
        expected_raw = bytes(expected)

    ok = constant_time_equal(sha256(bytes(encrypted)), expected_raw)
    if not ok:
        logger.warning(
            "fileEncSha256 does not match encrypted media; continuing",
            extra={"event": "enc_sha256_mismatch", "warning": DigestMismatchWarning.__name__},
        )
    return ok
