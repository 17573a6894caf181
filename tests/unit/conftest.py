from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Callable

import pytest
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

INFO_STRINGS = {
    "image": b"WhatsApp Image Keys",
    "sticker": b"WhatsApp Image Keys",
    "video": b"WhatsApp Video Keys",
    "audio": b"WhatsApp Audio Keys",
    "document": b"WhatsApp Document Keys",
}


def expand_reference(media_key: bytes, kind: str) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=112, salt=bytes(32), info=INFO_STRINGS[kind]).derive(media_key)


def encrypt_reference(plaintext: bytes, media_key: bytes, kind: str) -> bytes:
    """Sender-side `.enc` construction: AES-256-CBC(plaintext) || HMAC[:10]."""
    expanded = expand_reference(media_key, kind)
    iv, cipher_key, mac_key = expanded[:16], expanded[16:48], expanded[48:80]
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(cipher_key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    mac = hmac.new(mac_key, iv + ciphertext, hashlib.sha256).digest()[:10]
    return ciphertext + mac


@pytest.fixture
def media_key() -> bytes:
    return bytes(range(32))


@pytest.fixture
def media_key_b64(media_key: bytes) -> str:
    return base64.b64encode(media_key).decode()


@pytest.fixture
def encrypt() -> Callable[[bytes, bytes, str], bytes]:
    return encrypt_reference


@pytest.fixture
def expand() -> Callable[[bytes, str], bytes]:
    return expand_reference
