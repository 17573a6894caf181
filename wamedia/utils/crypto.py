"""Crypto wrappers and helpers backed by the `cryptography` package."""
from __future__ import annotations

import hashlib
import hmac

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from wamedia.core.errors import CipherDecryptionError
from wamedia.defaults.config import AES_BLOCK_SIZE


def hkdf(input_key: bytes, length: int, salt: bytes, info: bytes) -> bytes:
    """HKDF-SHA256."""
    return HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=bytes(salt),
        info=bytes(info),
    ).derive(bytes(input_key))

def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """HMAC-SHA256."""
    return hmac.new(bytes(key), data, hashlib.sha256).digest()

def sha256(data: bytes) -> bytes:
    """SHA256 digest."""
    return hashlib.sha256(data).digest()

def constant_time_equal(left: bytes, right: bytes) -> bool:
    return hmac.compare_digest(bytes(left), bytes(right))

def ensure_block_aligned(ciphertext: bytes) -> None:
    """Reject ciphertext that cannot be AES-CBC output."""
    if not ciphertext or len(ciphertext) % AES_BLOCK_SIZE:
        raise CipherDecryptionError(
            f"ciphertext length {len(ciphertext)} is not a positive multiple of {AES_BLOCK_SIZE}"
        )

def aes_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """AES-256-CBC decryption with PKCS#7 padding removal."""
    ensure_block_aligned(ciphertext)
    try:
        decryptor = Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv))).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise CipherDecryptionError(f"aes-cbc decryption failed: {exc}") from exc

def wipe(buffer: bytearray) -> None:
    """Zero a mutable buffer in place."""
    buffer[:] = bytes(len(buffer))
