"""Error taxonomy for media decryption."""

from __future__ import annotations

from typing import Optional


class WamediaError(Exception):
    """Base exception for wamedia."""
    pass


class MalformedBlobError(WamediaError):
    """Raised when an encrypted blob is too short to hold a ciphertext and its tag."""
    pass


class InvalidMediaKeyError(WamediaError):
    """Raised when the media key cannot be decoded."""
    pass


class InvalidKeyLengthError(InvalidMediaKeyError):
    """Raised when the decoded media key is not 32 bytes."""
    def __init__(self, length: int):
        super().__init__(f"media key must be 32 bytes, got {length}")
        self.length = length


class UnknownMediaKindError(WamediaError, ValueError):
    """Raised when an explicit media kind is not one of `MediaKind`."""
    def __init__(self, kind: str):
        super().__init__(f"unknown media kind {kind!r}")
        self.kind = kind


class CipherDecryptionError(WamediaError):
    """Raised on block alignment or padding failures during AES-CBC decryption."""
    pass


class MacMismatchError(WamediaError):
    """Raised in strict mode when the 10-byte media MAC does not match."""
    def __init__(self, reason: str = "media mac mismatch"):
        super().__init__(reason)
        self.reason = reason


class InvalidMediaPartError(WamediaError):
    """Raised when a message media part lacks the fields needed to decrypt it."""
    pass


class MediaFetchError(WamediaError):
    """Raised when the encrypted bytes cannot be retrieved."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DigestMismatchWarning(UserWarning):
    """fileEncSha256 disagrees with the downloaded blob. Logged, never raised."""


class MacMismatchWarning(UserWarning):
    """Media MAC disagreement tolerated in lenient mode. Logged, never raised."""
