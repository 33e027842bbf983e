import base64

import pytest

from fluentkit.aes import AesEncryptor

KEY = ("secret" * 3)[:16]
IV = "0123456789abcdef"
OTHER_IV = "fedcba9876543210"


def test_round_trip_with_explicit_key_and_iv():
    aes = AesEncryptor()
    cipher_text = aes.encrypt("hello world", KEY, IV)
    assert aes.decrypt(cipher_text, KEY, IV) == "hello world"


def test_round_trip_unicode_with_constructor_defaults():
    aes = AesEncryptor(KEY, IV)
    assert aes.decrypt(aes.encrypt("你好，世界")) == "你好，世界"


def test_cipher_text_is_whole_blocks_with_padding():
    aes = AesEncryptor(KEY, IV)
    assert len(base64.b64decode(aes.encrypt("a"))) == 16
    assert len(base64.b64decode(aes.encrypt("x" * 16))) == 32
    assert len(base64.b64decode(aes.encrypt(""))) == 16


def test_encryption_is_deterministic_and_depends_on_iv():
    aes = AesEncryptor(KEY, IV)
    assert aes.encrypt("data") == aes.encrypt("data")
    assert aes.encrypt("data") != aes.encrypt("data", iv=OTHER_IV)


def test_decrypt_trims_whitespace():
    aes = AesEncryptor(KEY, IV)
    assert aes.decrypt(aes.encrypt("  padded text \n")) == "padded text"


def test_wrong_key_length_raises():
    with pytest.raises(ValueError):
        AesEncryptor().encrypt("data", "short", IV)


def test_missing_key_raises():
    with pytest.raises(ValueError):
        AesEncryptor(iv=IV).encrypt("data")


def test_truncated_cipher_text_raises():
    aes = AesEncryptor(KEY, IV)
    raw = base64.b64decode(aes.encrypt("some longer text here"))
    broken = base64.b64encode(raw[:-3]).decode("ascii")
    with pytest.raises(ValueError):
        aes.decrypt(broken)