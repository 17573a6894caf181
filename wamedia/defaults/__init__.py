"""Default constants and configuration values for wamedia."""

from .config import DEFAULT_DECRYPT_CONFIG, MEDIA_KEY_INFO, DecryptOptions, options_from_env

__all__ = ["DEFAULT_DECRYPT_CONFIG", "MEDIA_KEY_INFO", "DecryptOptions", "options_from_env"]
