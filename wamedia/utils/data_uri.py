"""Data URI assembly for decrypted media."""

from __future__ import annotations

import base64
from typing import Optional

from wamedia.core.entities import DecryptedMedia, MediaKind
from wamedia.defaults.config import DEFAULT_CONTENT_TYPE


def build_data_uri(data: bytes, content_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{payload}"


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Inverse of `build_data_uri`: returns (content_type, payload bytes)."""
    if not uri.startswith("data:"):
        raise ValueError("not a data uri")
    header, sep, payload = uri[5:].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("data uri is not base64 encoded")
    return header[: -len(";base64")], base64.b64decode(payload)


def assemble_result(
    data: bytes,
    content_type: Optional[str],
    verified_mac: bool,
    *,
    kind: MediaKind = MediaKind.DOCUMENT,
    enc_sha256_verified: Optional[bool] = None,
    default_content_type: str = DEFAULT_CONTENT_TYPE,
) -> DecryptedMedia:
    mime = content_type or default_content_type
    return DecryptedMedia(
        data=bytes(data),
        content_type=mime,
        verified_mac=verified_mac,
        data_uri=build_data_uri(data, mime),
        kind=kind,
        enc_sha256_verified=enc_sha256_verified,
    )
