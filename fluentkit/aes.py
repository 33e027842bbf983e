"""AES-128-CBC encryption of text, with base64 for the cipher text."""

from __future__ import annotations

import base64
import re

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

__all__ = ["AesEncryptor"]

_BLOCK_BITS = 128
_KEY_BYTES = 16


def _material(value: str | None, fallback: str | None, what: str) -> bytes:
    chosen = value if value is not None else fallback
    if chosen is None:
        raise ValueError(f"no {what} given")
    raw = chosen.encode("utf-8")
    if len(raw) != _KEY_BYTES:
        raise ValueError(f"{what} must be {_KEY_BYTES} bytes, got {len(raw)}")
    return raw


def _lenient_b64decode(text: str) -> bytes:
    cleaned = re.sub(r"[^A-Za-z0-9+/]", "", text)
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned)


class AesEncryptor:
    """Encrypts and decrypts text with AES-128 in CBC mode and PKCS#7 padding.

    The key and IV are 16-byte strings; those given to the constructor are
    used when a call does not pass its own.
    """

    def __init__(self, key: str | None = None, iv: str | None = None) -> None:
        self._key = key
        self._iv = iv

    def _cipher(self, key: str | None, iv: str | None) -> Cipher:
        key_bytes = _material(key, self._key, "key")
        iv_bytes = _material(iv, self._iv, "iv")
        return Cipher(algorithms.AES(key_bytes), modes.CBC(iv_bytes))

    def encrypt(self, data: str, key: str | None = None, iv: str | None = None) -> str:
        """Return the base64 cipher text of ``data``."""
        cipher = self._cipher(key, iv)
        padder = padding.PKCS7(_BLOCK_BITS).padder()
        padded = padder.update(data.encode("utf-8")) + padder.finalize()
        encryptor = cipher.encryptor()
        cipher_text = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(cipher_text).decode("ascii")

    def decrypt(self, data: str, key: str | None = None, iv: str | None = None) -> str:
        """Return the plain text of base64 ``data``, with outer whitespace removed."""
        cipher = self._cipher(key, iv)
        cipher_text = _lenient_b64decode(data)
        if len(cipher_text) % (_BLOCK_BITS // 8):
            raise ValueError("cipher text is not a whole number of blocks")
        decryptor = cipher.decryptor()
        padded = decryptor.update(cipher_text) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        plain = unpadder.update(padded) + unpadder.finalize()
        text = plain.split(b"\x00", 1)[0].decode("utf-8", errors="replace")
        return text.strip()