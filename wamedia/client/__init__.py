"""Client package public exports."""

from .media import MediaClient, MediaDecryptor, decrypt_media

__all__ = ["MediaClient", "MediaDecryptor", "decrypt_media"]
