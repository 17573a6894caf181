"""Decryption of WhatsApp encrypted media blobs."""

__version__ = "0.1.0"

__all__ = [
    "MediaDecryptor",
    "MediaClient",
    "decrypt_media",
    "DecryptedMedia",
    "MediaKind",
    "MediaStatus",
    "DecryptOptions",
    "WamediaError",
    "MalformedBlobError",
    "InvalidKeyLengthError",
    "CipherDecryptionError",
    "MacMismatchError",
    "UnknownMediaKindError",
]


def __getattr__(name: str) -> object:
    """Lazy exports so `import wamedia` does not pull in httpx."""
    if name in {"MediaDecryptor", "MediaClient", "decrypt_media"}:
        from .client.media import MediaClient, MediaDecryptor, decrypt_media

        return {
            "MediaDecryptor": MediaDecryptor,
            "MediaClient": MediaClient,
            "decrypt_media": decrypt_media,
        }[name]

    if name in {"DecryptedMedia", "MediaKind", "MediaStatus"}:
        from .core.entities import DecryptedMedia, MediaKind, MediaStatus

        return {"DecryptedMedia": DecryptedMedia, "MediaKind": MediaKind, "MediaStatus": MediaStatus}[name]

    if name == "DecryptOptions":
        from .defaults.config import DecryptOptions

        return DecryptOptions

    if name in {
        "WamediaError",
        "MalformedBlobError",
        "InvalidKeyLengthError",
        "CipherDecryptionError",
        "MacMismatchError",
        "UnknownMediaKindError",
    }:
        from .core import errors

        return getattr(errors, name)

    raise AttributeError(f"module 'wamedia' has no attribute {name!r}")
