from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"


class MediaStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


@dataclass
class DerivedKeySet:
    """The four slices of one 112-byte HKDF expansion.

    Buffers are mutable so callers can zero them once decryption is done.
    """

    iv: bytearray
    cipher_key: bytearray
    mac_key: bytearray
    ref_key: bytearray

    def wipe(self) -> None:
        for item in fields(self):
            buf = getattr(self, item.name)
            buf[:] = bytes(len(buf))

    @property
    def wiped(self) -> bool:
        return all(not any(getattr(self, item.name)) for item in fields(self))


@dataclass(frozen=True)
class DecryptedMedia:
    data: bytes
    content_type: str
    verified_mac: bool
    data_uri: str
    kind: MediaKind = MediaKind.DOCUMENT
    enc_sha256_verified: Optional[bool] = None

    @property
    def status(self) -> MediaStatus:
        return MediaStatus.VERIFIED if self.verified_mac else MediaStatus.UNVERIFIED

    def __len__(self) -> int:
        return len(self.data)
